"""
Shared fixtures for judging tests.

Each test gets its own SQLite file so that separate sessions (and the API
client) see the same data.
"""
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hatchjudge.database import create_engine_for_url
from hatchjudge.orm.base import Base
from hatchjudge.services.locks import lock_registry


@pytest.fixture(autouse=True)
def reset_lock_registry():
    """Locks bind to the running loop; every test starts with a clean registry."""
    lock_registry.reset()
    yield
    lock_registry.reset()


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_engine_for_url(f"sqlite+aiosqlite:///{tmp_path / 'judging.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
