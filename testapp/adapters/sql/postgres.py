"""PostgreSQL pool construction for the database probe."""

import asyncpg


async def create_postgres_pool(
    *,
    host: str,
    port: int,
    user: str,
    password: str,
    database: str,
    timeout: float = 10.0,
) -> asyncpg.Pool:
    """Open a small asyncpg pool.

    Connects eagerly, so an unreachable server raises here. TLS is left to
    the platform's database proxy, matching ``sslmode=disable``.
    """
    return await asyncpg.create_pool(
        host=host,
        port=port,
        user=user,
        password=password,
        database=database,
        min_size=1,
        max_size=4,
        timeout=timeout,
        command_timeout=timeout,
        ssl=False,
    )
