"""Pytest fixtures for async FastAPI testing.

Points the app at a throwaway SQLite database, creates a clean schema for
the session and empties every table after each test. Provides an
`AsyncClient` bound to the app plus small factories for users and tokens.
"""
import os
import tempfile
import uuid

import pytest

# Must be set before any `app.*` import so Settings picks them up
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(
    tempfile.gettempdir(), f"snappie-test-{os.getpid()}.db"
)
os.environ["REGISTRATION_API_KEY"] = "test-registration-key"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["LEGACY_JWT_ENABLED"] = "True"
os.environ["BACKEND_CORS_ORIGINS"] = ""

API = "/api/v1"
REGISTRATION_KEY = "test-registration-key"


@pytest.fixture(scope="session")
def prepare_database():
    """Create clean schema for the test session."""
    from app.core.database import engine, Base

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    yield

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def clean_tables(prepare_database):
    yield
    from app.core.database import engine, Base

    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def db_session(prepare_database):
    """Yield a SQLAlchemy session for direct DB access in tests."""
    from app.core.database import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
async def async_client(prepare_database):
    """Provide an httpx AsyncClient configured with the FastAPI app."""
    from httpx import ASGITransport, AsyncClient
    from app.main import create_app

    app = create_app()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


@pytest.fixture
def registration_headers():
    return {"Authorization": f"Bearer {REGISTRATION_KEY}"}


@pytest.fixture
def make_user(db_session):
    """Insert a user directly, bypassing the registration gate."""
    from app.core.constants import default_additional_info
    from app.models.user import User

    def _make_user(**overrides):
        suffix = uuid.uuid4().hex[:8]
        fields = {
            "name": "Test User",
            "username": f"user_{suffix}",
            "email": f"user-{suffix}@example.com",
            "image_url": "https://example.com/avatar.png",
            "additional_info": default_additional_info(),
            "is_active": True,
        }
        fields.update(overrides)
        user = User(**fields)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def issue_token(db_session):
    """Issue a session token for a user; returns (plain_token, record)."""
    from app.services.token_service import TokenService

    def _issue(user, now=None):
        return TokenService.create_token(db_session, user, now=now)

    return _issue


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
