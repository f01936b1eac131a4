"""Application settings.

All values come from the environment (or a local ``.env`` file).  Backends
are optional: a probe is only attempted when its required settings are set.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration for the test application."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # -- server --------------------------------------------------------------

    BIND_HOST: str = "0.0.0.0"
    BIND_PORT: int = 8080
    PING_RESPONSE: str = "pong\n"
    CONNECT_URL: str = "https://google.com"
    GRACEFUL_SHUTDOWN_WAIT: int = 0
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    VERSION: str = "dev"
    REVISION: str = "unknown"

    # -- Google Cloud Storage ------------------------------------------------

    BUCKET_NAME: str = ""
    BUCKET_OBJECT_NAME: str = "test"
    GCP_TEAM_PROJECT_ID: Optional[str] = None

    # -- Ceph / RGW (S3 compatible) ------------------------------------------

    RGW_HOST: str = ""
    RGW_BUCKET_NAME: str = ""
    RGW_REGION: str = "us-east-1"
    RGW_ACCESS_KEY: str = ""
    RGW_SECRET_KEY: str = ""
    RGW_OBJECT_NAME: str = "test"

    # -- PostgreSQL ----------------------------------------------------------

    DB_HOST: str = ""
    DB_PORT: int = 5432
    DB_NAME: str = "sqldatabase"
    DB_USER: str = "sqluser"
    DB_PASSWORD: str = ""
    DB_MAX_RETRY_SECONDS: int = 120
    DB_RETRY_INTERVAL_SECONDS: int = 10

    # -- BigQuery ------------------------------------------------------------

    BIGQUERY_PROJECT_ID: Optional[str] = None
    BIGQUERY_DATASET: str = ""
    BIGQUERY_TABLE: str = ""

    # -- Kafka ---------------------------------------------------------------

    KAFKA_BROKERS: str = ""
    KAFKA_CA_PATH: Optional[str] = None
    KAFKA_CERTIFICATE_PATH: Optional[str] = None
    KAFKA_PRIVATE_KEY_PATH: Optional[str] = None

    # -- probe timing (seconds) ----------------------------------------------

    PROBE_TEST_TIMEOUT: float = 10.0
    INIT_MAX_RETRY_SECONDS: int = 30
    INIT_RETRY_INTERVAL_SECONDS: int = 2

    # Unix timestamp (seconds) at which the deploy pipeline started.
    DEPLOY_START_TIMESTAMP: Optional[float] = None

    @property
    def kafka_broker_list(self) -> list[str]:
        """Configured Kafka broker addresses, with blanks removed."""
        return [b.strip() for b in self.KAFKA_BROKERS.split(",") if b.strip()]


settings = Settings()
