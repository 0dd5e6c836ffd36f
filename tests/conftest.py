"""Shared fixtures for the drive API tests."""

import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="drive-uploads-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from drive_api import auth, config, users
from drive_api.database import Base, get_db
from drive_api.main import app


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
def db(engine):
    """Session bound to a fresh in-memory database."""
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    target = tmp_path / "uploads"
    target.mkdir()
    monkeypatch.setattr(config, "UPLOAD_DIR", str(target))
    return target


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    """Capture password reset emails instead of talking to SMTP."""
    sent = []
    monkeypatch.setattr(
        "drive_api.mailer.send_password_reset",
        lambda email, link: sent.append((email, link)),
    )
    return sent


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def user(db):
    return users.register_user(db, "owner@example.com", "testpass123", "Owner")


@pytest.fixture
def other_user(db):
    return users.register_user(db, "other@example.com", "testpass123", "Other")


def bearer(user):
    return {"Authorization": f"Bearer {auth.create_access_token(user.id)}"}


@pytest.fixture
def auth_headers(user):
    return bearer(user)


@pytest.fixture
def other_headers(other_user):
    return bearer(other_user)


@pytest.fixture
def headers_for():
    return bearer
