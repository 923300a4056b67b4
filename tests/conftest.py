"""Shared test fixtures for tokengate."""

import pytest

from tokengate.auth import schemas
from tokengate.auth.context import EXTENSION_KEY
from tokengate.config import Settings
from tokengate.db import get_core, init_db
from tokengate.main import create_app

TEST_SECRET = "test-secret-key-0123456789abcdefghijkl"
API_PREFIX = "/api/users"


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a fresh temp-file database.

    bcrypt work factor 4 keeps hashing fast in tests.
    """
    return Settings(
        environment="development",
        database_path=str(tmp_path / "tokengate-test.db"),
        api_prefix=API_PREFIX,
        jwt_secret_key=TEST_SECRET,
        jwt_expiry_seconds=3600,
        bcrypt_work_factor=4,
    )


@pytest.fixture
def app(test_settings):
    """Flask application built from the test settings."""
    application = create_app(test_settings)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    """Create test client for API testing."""
    with app.test_client() as client:
        yield client


@pytest.fixture
def auth(app):
    """The application's AuthContext (hasher, issuer, verifier, service)."""
    return app.extensions[EXTENSION_KEY]


@pytest.fixture
def core(test_settings):
    """Autocommit Core on an initialized temp database."""
    init_db(test_settings.database_path)
    db = get_core(test_settings.database_path)
    yield db
    db.close()


@pytest.fixture
def test_user(auth, core):
    """Register a test user through the service.

    Returns a tuple of (user, password) where user is the UserResponse schema
    and password is the plain text password.
    """
    password = "TestPass123"
    user = auth.service.register(core, schemas.UserCreate(name="testuser", password=password))
    return user, password


@pytest.fixture
def jwt_token(auth, test_user):
    """Bearer token for the test user."""
    user, _password = test_user
    return auth.issuer.issue_for_user(user)


@pytest.fixture
def auth_headers(jwt_token):
    """Get authentication headers with JWT token."""
    return {"Authorization": f"Bearer {jwt_token}"}
