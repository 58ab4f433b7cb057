"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from ezdocs.config import Settings
from ezdocs.database import Database
from ezdocs.main import create_app


@pytest.fixture(scope="function")
def database():
    """Create a fresh in-memory database for each test."""
    # One shared connection so every session sees the same in-memory database
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database = Database(engine=engine)
    database.create_all()

    yield database

    database.dispose()


@pytest.fixture(scope="function")
def test_db(database):
    """Session on the test database."""
    db = database.session()

    yield db

    db.close()


@pytest.fixture
def test_settings():
    return Settings(APP_ENV="test", RUN_MIGRATIONS=False, APP_VERSION="0.1.0-test")


@pytest.fixture
def client(database, test_settings):
    """Test client over an app bound to the test database."""
    app = create_app(settings=test_settings, database=database)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def make_document(client):
    """Factory creating a document through the API; returns its data."""

    def factory(**overrides):
        payload = {"title": "Test paper", "type": "paper"}
        payload.update(overrides)
        response = client.post("/api/documents", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return factory


@pytest.fixture
def make_person(client):
    """Factory creating a person through the API; returns its data."""

    def factory(**overrides):
        payload = {"last_name": "Tanaka", "first_name": "Taro"}
        payload.update(overrides)
        response = client.post("/api/persons", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return factory
