"""Run the test application: ``python -m testapp``."""

import uvicorn

from testapp.core.config import settings
from testapp.main import create_app


def main() -> None:
    uvicorn.run(
        create_app(settings),
        host=settings.BIND_HOST,
        port=settings.BIND_PORT,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
