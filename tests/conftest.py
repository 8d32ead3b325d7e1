import pytest
from fastapi.testclient import TestClient

from notes_api.config import Settings
from notes_api.core.security import create_access_token
from notes_api.database import Database
from notes_api.main import create_app
from notes_api.models import Note, User
from notes_api.schemas.auth import Identity
from notes_api.seed import DEFAULT_PASSWORD, seed_database

TEST_SECRET = "test-secret-not-for-production"

ACME_ADMIN = "admin@acme.test"
ACME_MEMBER = "user@acme.test"
GLOBEX_ADMIN = "admin@globex.test"
GLOBEX_MEMBER = "user@globex.test"


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        JWT_SECRET=TEST_SECRET,
        REDIS_URL=None,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def database(settings):
    db = Database(settings.DATABASE_URL)
    yield db
    db.dispose()


@pytest.fixture
def app(settings, database):
    return create_app(settings, database)


@pytest.fixture
def client(app):
    # Entering the client runs the lifespan, which creates the tables
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def db_session(client, database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def tenants(db_session):
    """Acme and Globex on the free plan, each with an admin and a member."""
    return seed_database(db_session)


@pytest.fixture
def password():
    return DEFAULT_PASSWORD


@pytest.fixture
def make_token(settings):
    def _make(user, **claim_overrides):
        claims = Identity(user_id=user.id, role=user.role, tenant_id=user.tenant_id).to_claims()
        claims.update(claim_overrides)
        return create_access_token(claims, settings.JWT_SECRET, settings.JWT_ALGORITHM)
    return _make


@pytest.fixture
def auth_headers(tenants, db_session, make_token):
    """auth_headers(email) -> Authorization header for that seeded user."""
    def _headers(email):
        user = db_session.query(User).filter(User.email == email).one()
        return {"Authorization": f"Bearer {make_token(user)}"}
    return _headers


@pytest.fixture
def add_notes(db_session):
    """Insert notes straight into the database for a seeded user."""
    def _add(email, count):
        user = db_session.query(User).filter(User.email == email).one()
        notes = [
            Note(title=f"Seeded {i}", content=f"Body {i}", user_id=user.id, tenant_id=user.tenant_id)
            for i in range(count)
        ]
        db_session.add_all(notes)
        db_session.commit()
        return notes
    return _add
