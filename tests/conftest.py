"""Shared fixtures: a fresh SQLite database per test plus user/category/listing factories."""

import os

os.environ["JWT_SECRET"] = "test-secret-key"
os.environ["SEED_DEFAULT_ADMIN"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_FILE_PATH"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from artisan_admin.core.config import settings
from artisan_admin.core.security import create_admin_token, create_artisan_token, hash_password
from artisan_admin.db.database import get_db, init_db
from artisan_admin.main import app
from artisan_admin.models.category import CategoryType
from artisan_admin.models.listing import ListingKind, ListingStatus
from artisan_admin.models.user import UserRole
from artisan_admin.repositories.category_repository import CategoryRepository
from artisan_admin.repositories.listing_repository import repository_for
from artisan_admin.repositories.user_repository import UserRepository
from artisan_admin.services.category_service import slugify

DEFAULT_PASSWORD = "password123"


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    """Point the app at an empty database file for every test."""
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    init_db()
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user():
    def _make_user(
        email: str,
        role: UserRole = UserRole.CUSTOMER,
        password: str = DEFAULT_PASSWORD,
        is_active: bool = True,
        name: str = "Test User",
    ):
        with get_db() as conn:
            return UserRepository(conn).create(
                email=email,
                hashed_password=hash_password(password),
                role=role,
                name=name,
                is_active=is_active,
            )
    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user("admin@example.com", role=UserRole.ADMIN, name="Ada Admin")


@pytest.fixture
def artisan(make_user):
    return make_user("kofi@example.com", role=UserRole.ARTISAN, name="Kofi Mensah")


@pytest.fixture
def other_artisan(make_user):
    return make_user("ama@example.com", role=UserRole.ARTISAN, name="Ama Owusu")


@pytest.fixture
def admin_client(admin):
    """A client carrying a valid admin session cookie."""
    token = create_admin_token(admin.id, admin.email, admin.role.value)
    return TestClient(app, cookies={settings.ADMIN_COOKIE_NAME: token})


def bearer_for(user) -> dict:
    token = create_artisan_token(user.id, user.email, user.role.value, user.name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def artisan_headers(artisan):
    return bearer_for(artisan)


@pytest.fixture
def make_category():
    def _make_category(name: str, category_type: CategoryType = CategoryType.PRODUCT, parent_id=None):
        with get_db() as conn:
            return CategoryRepository(conn).create(
                name=name,
                slug=slugify(name),
                category_type=category_type,
                parent_id=parent_id,
            )
    return _make_category


@pytest.fixture
def make_listing():
    """Insert a listing directly, bypassing the API's status defaults."""

    def _make_listing(
        kind: ListingKind,
        artisan,
        category,
        status: ListingStatus = ListingStatus.ACTIVE,
        title: str = "Carved stool",
        **extra,
    ):
        fields = dict(
            title=title,
            description=f"{title} description",
            status=status,
            artisan_id=artisan.id,
            category_id=category.id,
        )
        if kind == ListingKind.PRODUCT:
            fields.update(price=120.0)
        elif kind == ListingKind.SERVICE:
            fields.update(price=50.0)
        else:
            fields.update(price=200.0, currency="GHS", duration="2 days", location="Kumasi")
        fields.update(extra)
        with get_db() as conn:
            return repository_for(kind, conn).create(**fields)
    return _make_listing
