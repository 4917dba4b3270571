"""
Test configuration for the clinic auth backend.
"""
import os

# Settings are read at import time, so the environment must be ready first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "clinic-auth-test-secret-0123456789"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clinic_auth.database import Base, get_db
from clinic_auth.main import app
from clinic_auth.auth.models import User, AdministrativeProfile
from clinic_auth.core.security import hash_password
from clinic_auth.core.sessions import SessionStore, get_session_store

# Test database URL
TEST_DATABASE_URL = "sqlite://"

ADMIN_USERNAME = "admin@clinica.test"
ADMIN_PASSWORD = "admin-pass-123"

# Create test database engine
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session factory
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def session_store():
    """A fresh session store per test."""
    return SessionStore()


@pytest.fixture(scope="function")
def client(db, session_store):
    """
    Create a test client with a test database session.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_store] = lambda: session_store

    with TestClient(app) as client:
        yield client

    app.dependency_overrides = {}


@pytest.fixture
def admin_user(db):
    """An Administrativo account created directly in the database."""
    user = User.from_profile(ADMIN_USERNAME, hash_password(ADMIN_PASSWORD), AdministrativeProfile())
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_headers(client, admin_user):
    """Bearer headers for the Administrativo account."""
    response = client.post(
        "/api/v1/auth/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    # Drop the session cookie so only the bearer token authenticates
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def paciente_payload():
    return {
        "username": "ana@example.com",
        "password": "ana-pass-123",
        "DNI": "30111222",
        "Nombre": "Ana",
        "Apellido": "Gomez",
        "Edad": 34,
        "Sexo": "F",
        "ObraSocial": "OSDE",
        "NroAfiliado": "A-991",
    }


@pytest.fixture
def fk_db():
    """
    A database session that enforces foreign keys, as server databases do.
    """
    fk_engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(fk_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=fk_engine)
    db = sessionmaker(autocommit=False, autoflush=False, bind=fk_engine)()
    try:
        yield db
    finally:
        db.close()
        fk_engine.dispose()
