"""Shared test fixtures and configuration."""
import os

# Settings are read at import time
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["WEEKLY_REPORT_JOB_ENABLED"] = "false"
os.environ.pop("SMTP_HOST", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wellpulse.api.deps import get_db, get_notification_queue, get_resolver
from wellpulse.core.config import DispatchConfig, NotificationConfig, VerificationConfig
from wellpulse.core.rate_limit import limiter
from wellpulse.core.security import create_access_token
from wellpulse.db.base import Base
from wellpulse.main import app
from tests.utils import FakeQueue, RecordingNotifier, StubResolver


SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(autouse=True)
def disable_rate_limiting_for_tests(request):
    """Turn the limiter off except for tests marked ``rate_limit``."""
    limiter.reset()
    limiter.enabled = "rate_limit" in request.keywords
    yield
    limiter.enabled = True
    limiter.reset()


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh database for each test."""
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Create a new database session for a test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def verification_config():
    return VerificationConfig()


@pytest.fixture
def dispatch_config():
    return DispatchConfig()


@pytest.fixture
def notification_config():
    return NotificationConfig()


@pytest.fixture
def resolver():
    return StubResolver()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def queue():
    return FakeQueue()


@pytest.fixture(scope="function")
def client(db_session, resolver, queue):
    """Test client on the test database, with stubbed DNS and email queue."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_resolver] = lambda: resolver
    app.dependency_overrides[get_notification_queue] = lambda: queue
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_token():
    """Generate a valid admin JWT token."""
    return create_access_token({"is_admin": True})


@pytest.fixture
def admin_client(client, admin_token):
    """Create a test client with admin cookie already set."""
    client.cookies.set("admin_token", admin_token)
    return client
