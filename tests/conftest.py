import os
import uuid
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "anon-test-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"

from dutyfree.database import get_session  # noqa: E402
from dutyfree.main import app  # noqa: E402
from dutyfree.models.product import Product  # noqa: E402
from dutyfree.models.user import Profile, UserRole  # noqa: E402

JWT_SECRET = "test-jwt-secret"
API = "/api/v1"

USER_ID = "11111111-1111-4111-8111-111111111111"
ADMIN_ID = "22222222-2222-4222-8222-222222222222"


def make_token(sub: str, email: str | None = None) -> str:
    claims = {"sub": sub, "aud": "authenticated"}
    if email:
        claims["email"] = email
    return jwt.encode(claims, JWT_SECRET, algorithm="HS256")


def auth_headers(sub: str, email: str | None = None) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(sub, email)}"}


def create_product(db: Session, **overrides) -> Product:
    fields = {
        "name": "Samsung 55\" QLED",
        "description": "4K smart TV",
        "category": "TVs",
        "image_url": "https://cdn.example.com/tv.png",
        "rating": 4.5,
        "reviews_count": 12,
        "in_stock": True,
        "is_visible": True,
        "display_order": 0,
    }
    fields.update(overrides)
    product = Product(**fields)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def user_headers() -> dict[str, str]:
    return auth_headers(USER_ID, "shopper@example.com")


@pytest.fixture()
def admin_headers(db_session: Session) -> dict[str, str]:
    admin_id = uuid.UUID(ADMIN_ID)
    db_session.add(Profile(id=admin_id, email="admin@example.com"))
    db_session.add(UserRole(user_id=admin_id, role="admin"))
    db_session.commit()
    return auth_headers(ADMIN_ID, "admin@example.com")


@pytest.fixture()
def product(db_session: Session) -> Product:
    return create_product(db_session)
