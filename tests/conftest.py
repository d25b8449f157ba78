"""Общие фикстуры: изолированная SQLite в памяти на каждый тест."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

from tesuto.crud.user import upsert_user_by_email
from tesuto.db import make_engine, init_db, get_session
from tesuto.main import app


@pytest.fixture
def engine():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def tutor(session):
    return upsert_user_by_email(session, email="tutor@example.com", name="Test Tutor")


@pytest.fixture
def api_tutor(client):
    """Репетитор, созданный через API"""
    response = client.post("/users/auth", json={"email": "api.tutor@example.com", "name": "Api Tutor"})
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def api_subject(client, api_tutor):
    response = client.post(
        "/subjects",
        json={"name": "Chemistry", "tutorId": api_tutor["id"], "topics": ["Atoms", "Bonds"]},
    )
    assert response.status_code == 200
    return response.json()
