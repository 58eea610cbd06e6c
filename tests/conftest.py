"""
Test Configuration and Fixtures
Provides shared test setup for all test cases
"""
import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
import pytest_asyncio
from unittest.mock import patch
from httpx import AsyncClient, ASGITransport
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from lynix.main import app
from lynix.database.connection import Base
from lynix.models.user import User
from lynix.models.voice_room import VoiceRoom
from lynix.services.voice_server_service import DEFAULT_ROOMS
from lynix.utils import security
from lynix.utils.security import create_access_token

# Every module that opens its own sessions
SESSION_MODULES = [
    "lynix.database.connection",
    "lynix.services.user_service",
    "lynix.services.chat_service",
    "lynix.services.call_service",
    "lynix.services.voice_server_service",
    "lynix.services.note_service",
    "lynix.services.contact_service",
    "lynix.services.local_mail_service",
]

# bcrypt is slow; hashes made here never leave the test run
FAST_PWD_CONTEXT = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


@pytest.fixture(autouse=True)
def fast_password_hashing():
    with patch.object(security, "pwd_context", FAST_PWD_CONTEXT):
        yield


@pytest_asyncio.fixture(scope="function")
async def session_factory(tmp_path):
    """Fresh SQLite file database per test, with the voice rooms seeded"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'lynix_test.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        session.add_all([VoiceRoom(id=room_id, name=name) for room_id, name in DEFAULT_ROOMS])
        await session.commit()

    yield factory

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory):
    """Session for seeding rows directly"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(session_factory):
    """Create test HTTP client bound to the per-test database"""
    patches = [
        patch(f"{module_name}.AsyncSessionLocal", session_factory)
        for module_name in SESSION_MODULES
    ]
    for p in patches:
        p.start()

    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        for p in patches:
            p.stop()


@pytest_asyncio.fixture(scope="function")
async def make_user(db_session):
    """Factory inserting a user row; returns the User"""
    async def _make_user(username: str, password: str = "Secret123!", role: str = "standard", **fields):
        user = User(
            id=username.lower(),
            username=username,
            password_hash=security.get_password_hash(password),
            role=role,
            plan={"name": "Basic", "cost": "$5", "details": "Starter"},
            billing={"status": "On Time"},
            **fields
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    """Build a bearer header for a user id without going through login"""
    def _auth_headers(user_id: str) -> dict:
        token = create_access_token(data={"sub": user_id, "type": "user"})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest_asyncio.fixture(scope="function")
async def alice(make_user):
    return await make_user("Alice", chat_enabled=True, ai_enabled=True, localmail_enabled=True)


@pytest_asyncio.fixture(scope="function")
async def bob(make_user):
    return await make_user("Bob", chat_enabled=True, localmail_enabled=True)


@pytest_asyncio.fixture(scope="function")
async def admin(make_user):
    return await make_user("Root", password="AdminPass123!", role="admin")
