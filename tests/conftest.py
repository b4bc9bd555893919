import fakeredis
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.database import Database
from app.core.security import UserRole
from app.main import create_app
from tests.utils import create_day_slots, create_user, login


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        SECRET_KEY="test-secret-key",
        RATE_LIMIT_ENABLED=False,
        BCRYPT_ROUNDS=4,
        ALLOWED_HOSTS=["testserver"],
    )


@pytest.fixture
def app(settings):
    application = create_app(settings)
    application.state.redis = fakeredis.FakeRedis(decode_responses=True)
    return application


@pytest.fixture
def client(app):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client


@pytest.fixture
def database(client, app):
    """The application's database, with tables created by startup."""
    return app.state.database


@pytest.fixture
def standalone_database(settings):
    """A database without an application, for service-level tests."""
    database = Database.from_settings(settings)
    database.create_all()
    yield database
    database.drop_all()
    database.dispose()


@pytest.fixture
def day_slots(database):
    return create_day_slots(database)


@pytest.fixture
def patient_token(client, database):
    create_user(database, "patient@example.com", name="Pat Patient")
    return login(client, "patient@example.com")


@pytest.fixture
def admin_token(client, database):
    create_user(database, "admin@example.com", role=UserRole.ADMIN, name="Ada Admin")
    return login(client, "admin@example.com")
