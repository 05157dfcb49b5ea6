from datetime import datetime, timedelta, timezone

import psycopg
import pytest

from passreset.application.passcode_manager import PasscodeManager
from passreset.application.rate_limiter import RateLimiter
from passreset.domain.entities import Gate, Verification
from passreset.infrastructure.db.passcodes_repo import PgPasscodeRepository
from passreset.infrastructure.db.request_log_repo import PgRequestLogRepository
from passreset.infrastructure.db.uow import PgUnitOfWork
from tests.fakes import FakeClock, FakeNotifier

pytestmark = [pytest.mark.integration, pytest.mark.usefixtures("clean_tables")]

T0 = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_passcode_repo_insert_find_delete(pool):
    async with pool.connection() as conn:
        repo = PgPasscodeRepository(conn)

        stored = await repo.insert("a@x.com", "12345", T0)
        assert stored.identity == "a@x.com"
        assert stored.issued_at == T0

        assert await repo.find_matching("a@x.com", "12345") == stored
        assert await repo.find_matching("a@x.com", "54321") is None
        assert await repo.get_for("a@x.com") == stored

        # identity is the natural key
        with pytest.raises(psycopg.errors.UniqueViolation):
            await repo.insert("a@x.com", "99999", T0)
        await conn.rollback()

        await repo.insert("a@x.com", "12345", T0)
        await repo.delete_for("a@x.com")
        assert await repo.get_for("a@x.com") is None


@pytest.mark.asyncio
async def test_request_log_repo_counts_and_purges(pool):
    async with pool.connection() as conn:
        repo = PgRequestLogRepository(conn)
        await repo.append("a@x.com", T0 - timedelta(hours=2))
        await repo.append("a@x.com", T0)
        await repo.append("b@x.com", T0 - timedelta(hours=2))

        assert await repo.count_for("a@x.com") == 2
        assert await repo.purge_identity_before("a@x.com", T0 - timedelta(hours=1)) == 1
        assert await repo.count_for("a@x.com") == 1
        assert await repo.count_for("b@x.com") == 1

        assert await repo.purge_before(T0 - timedelta(hours=1)) == 1
        assert await repo.count_for("b@x.com") == 0


@pytest.mark.asyncio
async def test_issue_and_verify_through_unit_of_work(pool):
    clock = FakeClock(T0)
    notifier = FakeNotifier()
    uow = PgUnitOfWork(pool)
    limiter = RateLimiter(uow, window=timedelta(minutes=60), threshold=3, clock=clock)
    manager = PasscodeManager(
        uow,
        notifier,
        expiry=timedelta(minutes=5),
        cleanup_horizon=timedelta(hours=1),
        clock=clock,
    )

    assert await limiter.check_and_log("a@x.com") is Gate.CLEAR
    first = await manager.issue("a@x.com")
    second = await manager.issue("a@x.com")

    async with pool.connection() as conn:
        row = await (
            await conn.execute(
                "SELECT COUNT(*) FROM passcodes WHERE identity = %s", ("a@x.com",)
            )
        ).fetchone()
    assert row[0] == 1
    assert await manager.verify("a@x.com", second.code) is Verification.VALID
    if first.code != second.code:
        assert await manager.verify("a@x.com", first.code) is Verification.NOT_FOUND

    clock.advance(minutes=5, seconds=1)
    assert await manager.verify("a@x.com", second.code) is Verification.EXPIRED


@pytest.mark.asyncio
async def test_uncommitted_work_is_rolled_back(pool):
    uow = PgUnitOfWork(pool)

    with pytest.raises(RuntimeError):
        async with uow as tx:
            await tx.request_log.append("a@x.com", T0)
            raise RuntimeError("abort")

    async with uow as tx:
        assert await tx.request_log.count_for("a@x.com") == 0
