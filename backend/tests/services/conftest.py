"""Service test fixtures: async DB, FastAPI test client and a seeded academy.

Invariants:
    - Every test gets a fresh in-memory SQLite database with foreign keys on
    - get_db dependency overridden to use the test DB
    - Identity resolved by a StaticIdentityProvider ("user-1") unless a test
      overrides it
    - db_manager patched so the readiness probe checks the test DB

Design Decisions:
    - SQLite in-memory: fast, no external dependency; FOR UPDATE is a no-op there,
      so concurrency tests interleave separate sessions sequentially
    - Seed fixtures go through the services, not raw inserts, so they exercise
      the same invariants as the API
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from tkd_core.api.deps import get_identity_provider
from tkd_core.core.person_profile import PersonProfile
from tkd_core.db.base import Base
from tkd_core.infrastructure.database import (
    DatabaseSessionManager, enable_sqlite_foreign_keys, get_db,
)
from tkd_core.infrastructure.identity import StaticIdentityProvider
import tkd_core.infrastructure.database as db_module
from tkd_core.main import app
from tkd_core.services.person_registry import PersonRegistry
from tkd_core.services.rank_ladder import RankLadder


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB and identity dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_provider] = (
        lambda: StaticIdentityProvider("user-1")
    )

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# ─── Seed data ───────────────────────────────────────────────────

BIRTH_DATE = datetime(2000, 5, 17, tzinfo=timezone.utc)


def make_profile(first_name: str = "Ana", last_name: str = "Silva") -> PersonProfile:
    return PersonProfile(
        first_name=first_name, last_name=last_name,
        birth_date=BIRTH_DATE, height=170, weight=65,
    )


@pytest.fixture
def profile_factory():
    return make_profile


@pytest.fixture
async def ladder(test_db):
    """White -> Yellow ladder; White requires Kicks at level 3."""
    ranks = RankLadder(test_db)
    white = await ranks.add_rank("White")
    yellow = await ranks.add_rank("Yellow", predecessor="White")
    kicks = await ranks.add_requirement(white, "Kicks", 3)
    return {"white": white, "yellow": yellow, "kicks": kicks}


@pytest.fixture
async def coach(test_db, ladder):
    return await PersonRegistry(test_db).register_person(
        "coach-user", make_profile("Carlos", "Mendes"), ladder["yellow"], is_coach=True,
    )


@pytest.fixture
async def student(test_db, ladder):
    return await PersonRegistry(test_db).register_person(
        "student-user", make_profile(), ladder["white"],
    )
