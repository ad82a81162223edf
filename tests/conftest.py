import pytest
from fastapi.testclient import TestClient

from ehealth.core.config import Settings
from ehealth.main import create_app
from ehealth.models.doctor import Doctor

@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        TESTING=True,
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        SESSION_BACKEND="memory",
        SESSION_SECRET="test-secret",
    )

@pytest.fixture
def app(test_settings):
    return create_app(test_settings)

@pytest.fixture
def client(app):
    with TestClient(app, base_url="http://testserver", follow_redirects=False) as test_client:
        yield test_client

@pytest.fixture
def db_session(app, client):
    # Depends on client so the startup hook has created the tables
    db = app.state.session_factory()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def doctors(db_session):
    seeded = [
        Doctor(name="Dr. Grace Hopper", specialty="Cardiology"),
        Doctor(name="Dr. Alan Turing", specialty="Neurology"),
    ]
    db_session.add_all(seeded)
    db_session.commit()
    return [doctor.id for doctor in seeded]

