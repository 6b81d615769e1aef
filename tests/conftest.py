import os

# Settings are read at import time, so the test environment is fixed first.
os.environ["APP_ENV"] = "test"
os.environ["BCRYPT_WORK_FACTOR"] = "4"
os.environ["LOG_JSON"] = "false"
os.environ["REGISTRATION_ENABLED"] = "true"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./soon-test.db")

import httpx
import pytest
import pytest_asyncio

from soon_auth.core.application import create_application
from soon_auth.domain.services.auth.activity import ActivityLogger
from soon_auth.domain.services.auth.session import SessionIssuer
from soon_auth.infrastructure.database.database import (
    create_db_and_tables,
    create_engine,
    create_session_factory,
)
from soon_auth.infrastructure.dependency_injection.auth_dependencies import (
    build_auth_facade,
    get_auth_facade,
)
from soon_auth.infrastructure.repositories.activity_log_repository import ActivityLogRepository
from soon_auth.infrastructure.repositories.user_repository import UserRepository
from tests.utils.fakes import FakeIdentityProvider, RecordingCookieTransport


@pytest_asyncio.fixture
async def engine(tmp_path):
    """A fresh SQLite database file per test."""
    db_engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'soon.db'}")
    await create_db_and_tables(db_engine)
    yield db_engine
    await db_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def user_repository(session_factory):
    return UserRepository(session_factory)


@pytest.fixture
def activity_repository(session_factory):
    return ActivityLogRepository(session_factory)


@pytest.fixture
def activity_logger(activity_repository):
    return ActivityLogger(activity_repository)


@pytest.fixture
def session_issuer(session_factory):
    return SessionIssuer(session_factory)


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture
def cookies():
    return RecordingCookieTransport()


@pytest.fixture
def facade(session_factory, identity_provider):
    return build_auth_facade(session_factory, identity_provider, registration_enabled=True)


@pytest.fixture
def closed_facade(session_factory, identity_provider):
    """Facade with self-registration switched off."""
    return build_auth_facade(session_factory, identity_provider, registration_enabled=False)


@pytest.fixture
def app(engine, facade):
    application = create_application(engine)
    application.state.db_engine = engine
    application.dependency_overrides[get_auth_facade] = lambda: facade
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
