"""Shared test fixtures for the FundLink API test suite.

The matching core talks to storage only through its ports, so most tests run
against the in-memory adapters in ``tests.factories``. Tests of the SQLAlchemy
adapters take the ``db`` fixture, which needs a reachable PostgreSQL at
``DATABASE_URL`` and is skipped without one.
"""

import uuid
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from tests.factories import (
    ADMIN_ID,
    FOUNDER_ID,
    OTHER_FOUNDER_ID,
    FakeClock,
    InMemoryDirectory,
    InMemoryFundingRequestStore,
    InMemoryMatchStore,
    RecordingSink,
    investor_id,
    make_founder,
    make_investor,
)
import fundlink.models  # noqa: F401  registers every table on Base.metadata
from fundlink.auth.dependencies import get_current_user
from fundlink.core.config import settings
from fundlink.core.database import Base
from fundlink.main import app
from fundlink.models.enums import UserRole
from fundlink.modules.matching.policy import AllotmentPolicy
from fundlink.modules.matching.router import get_matching_deps
from fundlink.modules.matching.service import MatchingDeps
from fundlink.schemas.auth import CurrentUser

# Dedicated engine for test fixtures; NullPool avoids asyncpg cross-task issues
_test_engine = create_async_engine(
    settings.DATABASE_URL,
    poolclass=NullPool,
    connect_args={"timeout": 5},
)


# ── Fixtures ─────────────────────────────────────────────────────────────────


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession]:
    """Provide a DB session on a fresh schema that rolls back after each test."""
    try:
        conn = await _test_engine.connect()
    except (OSError, SQLAlchemyError) as e:
        pytest.skip(f"PostgreSQL not reachable at DATABASE_URL: {e}")
    trans = await conn.begin()
    await conn.run_sync(Base.metadata.create_all)
    session = AsyncSession(
        bind=conn, expire_on_commit=False, join_transaction_mode="create_savepoint"
    )
    try:
        yield session
    finally:
        await session.close()
        await trans.rollback()
        await conn.close()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def policy() -> AllotmentPolicy:
    return AllotmentPolicy()


@pytest.fixture
def directory() -> InMemoryDirectory:
    d = InMemoryDirectory()
    d.add_founder(make_founder())
    d.add_founder(make_founder(OTHER_FOUNDER_ID, industry="Healthcare"))
    for n in range(1, 9):
        d.add_investor(make_investor(n))
    d.add_investor(make_investor(99, verified=False))
    return d


@pytest.fixture
def match_store(directory: InMemoryDirectory, clock: FakeClock) -> InMemoryMatchStore:
    return InMemoryMatchStore(directory, clock)


@pytest.fixture
def funding_requests(clock: FakeClock) -> InMemoryFundingRequestStore:
    return InMemoryFundingRequestStore(clock)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def deps(
    directory: InMemoryDirectory,
    match_store: InMemoryMatchStore,
    funding_requests: InMemoryFundingRequestStore,
    sink: RecordingSink,
    policy: AllotmentPolicy,
    clock: FakeClock,
) -> MatchingDeps:
    return MatchingDeps(
        directory=directory,
        matches=match_store,
        funding_requests=funding_requests,
        sink=sink,
        policy=policy,
        now=clock,
    )


class ActingUser:
    """Switches the user the API client is authenticated as."""

    def __init__(self) -> None:
        self.current = CurrentUser(user_id=FOUNDER_ID, role=UserRole.FOUNDER)

    def founder(self, founder_id: uuid.UUID = FOUNDER_ID) -> None:
        self.current = CurrentUser(user_id=founder_id, role=UserRole.FOUNDER)

    def admin(self) -> None:
        self.current = CurrentUser(user_id=ADMIN_ID, role=UserRole.ADMIN)

    def investor(self, n: int = 1) -> None:
        self.current = CurrentUser(user_id=investor_id(n), role=UserRole.INVESTOR)


@pytest.fixture
def acting() -> ActingUser:
    return ActingUser()


@pytest.fixture
async def client(deps: MatchingDeps, acting: ActingUser) -> AsyncGenerator[AsyncClient]:
    app.dependency_overrides[get_current_user] = lambda: acting.current
    app.dependency_overrides[get_matching_deps] = lambda: deps
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.pop(get_current_user, None)
    app.dependency_overrides.pop(get_matching_deps, None)
