import os

# Settings are read at import time
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["AUTO_CREATE_TABLES"] = "false"

from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.common import get_current_user
from app.database import Base
from app.init_db import get_db
from app.main import app as api
from app.models import CounselingCategory, CounselingMessage, CounselingSession
from app.schemas.counseling import MessageType, SessionStatus
from app.services.category_service import seed_default_categories

USER_ID = "8b0f8c1e-3c51-4f37-9d0c-6a4f2f0e9a11"
OTHER_USER_ID = "f3a1d2b4-77e0-4c3f-8a55-1d9e6b2c4d22"


def at(minute: int, hour: int = 10) -> datetime:
    """Fixed UTC timestamp on 2025-01-01, for ordering tests."""
    return datetime(2025, 1, 1, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def current_user():
    # Tests switch users by changing "uid"
    return {"uid": USER_ID, "email": "user@example.com", "name": "Test User"}


@pytest.fixture
async def client(session_factory, current_user):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_current_user():
        return current_user

    api.dependency_overrides[get_db] = override_get_db
    api.dependency_overrides[get_current_user] = override_get_current_user
    async with AsyncClient(transport=ASGITransport(app=api), base_url="http://test") as ac:
        yield ac
    api.dependency_overrides.clear()


@pytest.fixture
def insert(session_factory):
    """Persist rows in their own committed transaction."""
    async def _insert(*rows):
        async with session_factory() as session:
            session.add_all(rows)
            await session.commit()
        return rows[0] if len(rows) == 1 else rows
    return _insert


@pytest.fixture
async def default_categories(session_factory):
    """Seed the built-in categories; returns name -> id."""
    async with session_factory() as session:
        await seed_default_categories(session)
        result = await session.execute(
            select(CounselingCategory).where(CounselingCategory.is_custom.is_(False))
        )
        return {c.name: c.id for c in result.scalars().all()}


@pytest.fixture
def make_session(default_categories):
    def _make(**overrides):
        values = {
            "user_id": USER_ID,
            "category_id": default_categories["Career"],
            "title": "Session",
            "status": SessionStatus.active,
            "initial_responses": {},
            "session_meta": {"messageCount": 0},
            "created_at": at(0),
            "last_activity_at": at(0),
            "updated_at": at(0),
        }
        values.update(overrides)
        return CounselingSession(**values)
    return _make


@pytest.fixture
def make_message():
    def _make(session_id: str, created_at: datetime, **overrides):
        values = {
            "session_id": session_id,
            "sender_id": USER_ID,
            "content": f"message at {created_at.isoformat()}",
            "message_type": MessageType.text,
            "is_bookmarked": False,
            "created_at": created_at,
        }
        values.update(overrides)
        return CounselingMessage(**values)
    return _make
