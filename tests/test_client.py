"""Tests for TesutoClient against the real app."""
import pytest
import requests

from tesuto.client import TesutoClient, ApiError


@pytest.fixture
def api(client):
    # TestClient умеет тот же request(method, url, json=..., params=...) что и requests.Session
    return TesutoClient(base_url="http://testserver", session=client)


@pytest.fixture
def tutor(api):
    return api.auth_user(email="client@example.com", name="Client Tutor")


def test_auth_and_fetch_user(api, tutor):
    assert tutor.role.value == "TUTOR"
    fetched = api.get_user(tutor.id)
    assert fetched.email == "client@example.com"
    assert fetched.counts.subjects == 0
    assert [u.id for u in api.list_users()] == [tutor.id]


def test_subject_lifecycle(api, tutor):
    subject = api.create_subject(name="Chemistry", tutor_id=tutor.id, topics=["Atoms", "Bonds"])
    assert [t.order for t in subject.topics] == [0, 1]

    topic = api.add_topic(subject.id, "Reactions")
    assert topic.order == 2

    updated = api.update_subject(subject.id, description="Matter")
    assert updated.description == "Matter"

    assert api.delete_topic(subject.id, topic.id).success
    listed = api.list_subjects(tutor_id=tutor.id)
    assert [s.name for s in listed] == ["Chemistry"]
    assert len(listed[0].topics) == 2

    assert api.delete_subject(subject.id).success
    assert api.list_subjects() == []


def test_assignment_lifecycle(api, tutor):
    subject = api.create_subject(name="Math", tutor_id=tutor.id)
    assignment = api.create_assignment(
        title="Quadratics",
        tutor_id=tutor.id,
        subject_id=subject.id,
        due_date="2030-06-01",
        problems=[{"question": "x² = 4"}],
    )
    assert assignment.due_date.year == 2030

    assert api.add_problems(assignment.id, [{"question": "x² = 9", "difficulty": "HARD"}]).count == 1

    updated = api.update_assignment(assignment.id, status="ACTIVE")
    assert updated.status.value == "ACTIVE"
    assert [p.order for p in updated.problems] == [0, 1]

    active = api.list_assignments(tutor_id=tutor.id, status="ACTIVE")
    assert [a.id for a in active] == [assignment.id]
    assert active[0].counts.problems == 2
    assert api.list_assignments(status="DRAFT") == []

    assert api.delete_assignment(assignment.id).success


def test_error_carries_server_message(api):
    with pytest.raises(ApiError) as exc_info:
        api.get_assignment("missing")
    assert exc_info.value.message == "Assignment not found"
    assert exc_info.value.status_code == 404


class _FakeResponse:
    def __init__(self, status_code, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("No JSON object could be decoded")
        return self._body


class _FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.response


def test_generic_message_when_body_is_not_json():
    api = TesutoClient(base_url="http://api", session=_FakeSession(_FakeResponse(502, text="Bad gateway")))
    with pytest.raises(ApiError) as exc_info:
        api.list_users()
    assert exc_info.value.message == "API Error: 502"


def test_request_shape():
    session = _FakeSession(_FakeResponse(200, []))
    api = TesutoClient(base_url="http://api/", session=session)

    api.list_assignments(subject_id="s1")

    method, url, kwargs = session.calls[0]
    assert (method, url) == ("GET", "http://api/assignments")
    assert kwargs["params"] == {"subjectId": "s1"}
    assert kwargs["headers"]["Content-Type"] == "application/json"


def test_network_error_becomes_api_error():
    session = _FakeSession(error=requests.exceptions.ConnectionError("refused"))
    api = TesutoClient(base_url="http://api", session=session)
    with pytest.raises(ApiError) as exc_info:
        api.get_user("u1")
    assert exc_info.value.status_code is None
    assert "Network error" in exc_info.value.message
