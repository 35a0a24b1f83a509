"""
Shared test fixtures
"""

import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Settings are frozen at import, so test values must be in place first
os.environ.setdefault("ADMIN_TOKEN", "test-admin-token")
os.environ.setdefault("WEBHOOK_SECRET", "test-webhook-secret")
os.environ["USE_FIREBASE"] = "false"
os.environ.pop("SMTP_HOST", None)

from wedding_rsvp.core.db import Base  # noqa: E402
from wedding_rsvp.services.notifications import NotificationResult  # noqa: E402
from wedding_rsvp.services.repositories import SqlGuestRepo  # noqa: E402

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_wedding_rsvp.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingNotifier:
    """Notification sink that remembers what it was asked to send"""

    def __init__(self, fail: bool = False, raise_error: bool = False):
        self.sent = []
        self.fail = fail
        self.raise_error = raise_error

    async def notify(self, event, payload):
        if self.raise_error:
            raise RuntimeError("SMTP server unreachable")
        if self.fail:
            return NotificationResult(success=False, error="rejected")
        self.sent.append((event, payload))
        return NotificationResult(success=True)


@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def repo(db_session):
    return SqlGuestRepo(db_session)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_guest(repo):
    """Factory adding a guest straight through the repository"""
    counter = iter(range(1000))

    def _make(name="Carrie Brown", plus_one_allowed=False, code=None, **kwargs):
        code = code or f"TST{next(counter):03d}"
        return repo.create(name=name, code=code, plus_one_allowed=plus_one_allowed, **kwargs)

    return _make
