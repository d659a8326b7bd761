import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import stockflow.models  # noqa: F401
from stockflow.auth.security import create_access_token, get_password_hash
from stockflow.database.base import Base
from stockflow.database.config import get_db
from stockflow.main import app
from stockflow.models.user import User, UserRole, DEFAULT_STAFF_PERMISSIONS


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make_user(username, password="secret123", role=UserRole.STAFF, permissions=None, name=None):
        if role == UserRole.STAFF and permissions is None:
            permissions = list(DEFAULT_STAFF_PERMISSIONS)
        user = User(
            username=username,
            password_hash=get_password_hash(password),
            name=name or username.title(),
            role=role,
            permissions=None if role == UserRole.ADMIN else permissions,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': user.id})}"}


@pytest.fixture
def admin(make_user):
    return make_user("admin", password="admin-pass", role=UserRole.ADMIN, name="Administrator")


@pytest.fixture
def staff(make_user):
    return make_user("sarah", name="Sarah")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def staff_headers(staff):
    return auth_headers(staff)


@pytest.fixture
def headers_for():
    return auth_headers
