from __future__ import annotations

import logging

from psycopg_pool import AsyncConnectionPool

logger = logging.getLogger(__name__)

# One live passcode per identity; the request log is append-only and pruned by time.
SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS passcodes (
        identity  text PRIMARY KEY,
        code      text NOT NULL,
        issued_at timestamptz NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS request_log (
        id       bigserial PRIMARY KEY,
        identity text NOT NULL,
        at       timestamptz NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS ix_request_log_identity_at ON request_log (identity, at)",
    "CREATE INDEX IF NOT EXISTS ix_request_log_at ON request_log (at)",
)


async def ensure_schema(pool: AsyncConnectionPool) -> None:
    """Create both relations if they are missing. Safe to run on every start."""
    async with pool.connection() as conn:
        async with conn.transaction():
            async with conn.cursor() as cur:
                for statement in SCHEMA_STATEMENTS:
                    await cur.execute(statement)
    logger.info("schema ensured", extra={"tables": ["passcodes", "request_log"]})
