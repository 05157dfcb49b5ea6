"""
Maintenance steps that normally run as side effects of live traffic.

    python -m passreset.maintenance init-db
    python -m passreset.maintenance purge
    python -m passreset.maintenance purge-identity <email>
"""

from __future__ import annotations

import asyncio
import sys

from passreset.application.passcode_manager import PasscodeManager
from passreset.application.rate_limiter import RateLimiter
from passreset.domain.services import normalize_identity
from passreset.infrastructure.db.pool import close_pool, open_pool
from passreset.infrastructure.db.schema import ensure_schema
from passreset.infrastructure.db.uow import PgUnitOfWork
from passreset.logging import setup_logging
from passreset.settings import Settings, get_settings

USAGE = "usage: python -m passreset.maintenance [init-db|purge|purge-identity <email>]"


class _NoDelivery:
    async def deliver(self, identity: str, code: str) -> None:
        raise RuntimeError("maintenance never issues passcodes")


async def cmd_init_db(settings: Settings) -> int:
    pool = await open_pool(settings.database_url)
    try:
        await ensure_schema(pool)
    finally:
        await close_pool()
    print("schema ready")
    return 0


async def cmd_purge(settings: Settings) -> int:
    pool = await open_pool(settings.database_url)
    try:
        manager = PasscodeManager(
            PgUnitOfWork(pool),
            _NoDelivery(),
            expiry=settings.token_expiry,
            cleanup_horizon=settings.request_log_cleanup,
        )
        removed = await manager.purge_request_log()
    finally:
        await close_pool()
    print(f"removed {removed} request log row(s)")
    return 0


async def cmd_purge_identity(settings: Settings, identity: str) -> int:
    pool = await open_pool(settings.database_url)
    try:
        limiter = RateLimiter(
            PgUnitOfWork(pool),
            window=settings.backoff_window,
            threshold=settings.backoff_threshold_count,
        )
        removed = await limiter.purge_identity(identity)
    finally:
        await close_pool()
    print(f"removed {removed} request log row(s) for {identity}")
    return 0


def main(argv: list[str]) -> int:
    if len(argv) < 2:
        print(USAGE, file=sys.stderr)
        return 2

    settings = get_settings()
    setup_logging(settings.log_level)

    cmd = argv[1]
    if cmd == "init-db":
        return asyncio.run(cmd_init_db(settings))
    if cmd == "purge":
        return asyncio.run(cmd_purge(settings))
    if cmd == "purge-identity":
        identity = normalize_identity(argv[2]) if len(argv) > 2 else None
        if not identity:
            print(USAGE, file=sys.stderr)
            return 2
        return asyncio.run(cmd_purge_identity(settings, identity))
    print(f"unknown command: {cmd}", file=sys.stderr)
    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
