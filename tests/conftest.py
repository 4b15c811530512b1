import os
import tempfile

# Set environment variables BEFORE any imports that might use settings
# Use a temporary directory for test database to avoid permission issues
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_optical_ims.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["SECRET_KEY"] = "test-secret-key-min-32-characters-long-for-testing"
os.environ["ALGORITHM"] = "HS256"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["FIRST_ADMIN_EMAIL"] = "admin@example.com"
os.environ["FIRST_ADMIN_PASSWORD"] = "AdminTest123!"
os.environ["FIRST_ADMIN_NAME"] = "Test Admin"
os.environ["FRONTEND_URL"] = "http://localhost:3000"

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_email_sender
from app.core.config import Settings
from app.db.base import create_session_factory
from app.db.models.user import User as UserModel
from app.domain.access import Role
from app.errors import DeliveryError
from app.main import app
from app.repositories.user import get_user_by_email
from app.services.email import EmailSender


class FakeEmailSender(EmailSender):
    """Records outgoing mail instead of talking to an SMTP relay."""

    def __init__(self):
        self.sent: list[dict] = []
        self.fail = False

    async def send(self, to_address: str, subject: str, html_body: str) -> None:
        if self.fail:
            raise DeliveryError("SMTP relay unavailable")
        self.sent.append({"to": to_address, "subject": subject, "html": html_body})


@pytest.fixture(scope="function")
def settings() -> Settings:
    return Settings()


@pytest.fixture(scope="function")
def db_session(tmp_path):
    """Create a fresh database for each test and run migrations."""
    test_db_url = f"sqlite:///{tmp_path / 'test.db'}"

    # Run Alembic migrations to set up the database schema and seed data
    alembic_cfg = Config("alembic.ini")
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    session_factory = create_session_factory(test_db_url)
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
        session_factory.kw["bind"].dispose()


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


@pytest.fixture(scope="function")
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture(scope="function")
def client(db_session, email_sender):
    """Create a test client with database and email dependency overrides."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_sender] = lambda: email_sender

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def admin_user(db: Session, settings: Settings) -> dict:
    """The admin user created by the first migration."""
    user = get_user_by_email(db, settings.first_admin_email)
    if not user:
        raise RuntimeError("Admin user not found. Check migration 001.")

    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "password": settings.first_admin_password,  # Plaintext password from env
        "role": user.role,
    }


@pytest.fixture(scope="function")
def admin_token(admin_user: dict) -> str:
    return app.state.token_service.issue(admin_user["id"])


def _create_test_user(
    db: Session,
    email: str,
    password: str,
    name: str = "Test User",
    role: Role = Role.SALE,
    is_active: bool = True,
) -> dict:
    user = UserModel(
        email=email,
        name=name,
        password_hash=app.state.password_hasher.hash(password),
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "password": password,
        "role": user.role,
    }


@pytest.fixture(scope="function")
def sale_user_dict(db: Session) -> dict:
    """Create a sales user for testing."""
    return _create_test_user(
        db, email="sales@example.com", password="SalesPass123!", name="Sales Person"
    )


@pytest.fixture(scope="function")
def sale_token(sale_user_dict: dict) -> str:
    return app.state.token_service.issue(sale_user_dict["id"])


@pytest.fixture(scope="function")
def brand(client, admin_token: str) -> dict:
    response = client.post(
        "/api/v1/brands",
        json={"name": "Ray-Ban", "image_url": "https://cdn.example.com/rayban.png"},
        headers={"Authorization": f"Bearer {admin_token}"},
    )
    assert response.status_code == 201
    return response.json()["data"]


@pytest.fixture(scope="function")
def user_factory(db: Session):
    """Create extra users: ``user_factory(email, password, role=..., is_active=...)``."""

    def factory(email: str, password: str = "UserPass123!", **kwargs) -> dict:
        return _create_test_user(db, email=email, password=password, **kwargs)

    return factory


@pytest.fixture(scope="function")
def token_for():
    """Issue an access token for an arbitrary user id."""
    return app.state.token_service.issue
