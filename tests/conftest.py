import os

os.environ.setdefault("PROJECT_NAME", "node-pairing-test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.pop("GOOGLE_CLIENT_ID", None)
os.environ.pop("GOOGLE_CLIENT_SECRET", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.api import deps
from app.core.security import create_access_token
from app.main import app
from app.models import node, pairing  # noqa: F401
from app.models.user import User


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session):
    def get_session_override():
        return session

    app.dependency_overrides[deps.get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="create_user")
def create_user_fixture(session):
    def create_user(email="test@example.com"):
        user = User(email=email)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return create_user


@pytest.fixture(name="auth_headers")
def auth_headers_fixture():
    def get_auth_headers(user_id):
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return get_auth_headers
