"""Tests for the terminal dashboard commands."""
from datetime import datetime

import pytest
from typer.testing import CliRunner

from tesuto.client import ApiError
from tesuto.dashboard.cli import app, DashboardState
from tesuto.dashboard.session import SessionContext
from tesuto.generation import CannedProblemGenerator
from tesuto.models import Role, AssignmentStatus, Difficulty
from tesuto.schemas import (
    UserRead, UserWithCounts, UserCounts, SubjectListItem, SubjectDetail, SubjectRead, SubjectSummary, SubjectCounts, TopicRead,
    AssignmentListItem, AssignmentDetail, AssignmentCounts, ProblemRead, SuccessResponse, CountResponse,
)

runner = CliRunner()
NOW = datetime(2025, 1, 1)


def _topic(name, order):
    return TopicRead(id=f"t{order}", name=name, order=order, subject_id="s1")


def _subject_detail(topics):
    return SubjectDetail(id="s1", name="Math", tutor_id="u-1", created_at=NOW, updated_at=NOW, topics=topics)


def _assignment_item(title, status):
    return AssignmentListItem(
        id=f"a-{title}", title=title, status=status, tutor_id="u-1", subject_id="s1",
        created_at=NOW, updated_at=NOW,
        subject=SubjectSummary(id="s1", name="Math"),
        counts=AssignmentCounts(problems=2),
    )


class FakeClient:
    def __init__(self):
        self.calls = []
        self.topics = [_topic("Algebra", 0)]
        self.fail_with = None

    def _record(self, method, *args, **kwargs):
        self.calls.append((method, args, kwargs))
        if self.fail_with:
            raise self.fail_with

    def auth_user(self, email, name, avatar=None, role=None):
        self._record("auth_user", email=email)
        return UserRead(id="u-1", email=email, name=name, avatar=avatar, role=Role.TUTOR,
                        created_at=NOW, updated_at=NOW)

    def list_users(self):
        self._record("list_users")
        return [
            UserWithCounts(id="u-1", email="sarah@example.com", name="Sarah Tutor", role=Role.TUTOR,
                           created_at=NOW, updated_at=NOW),
            UserWithCounts(id="u-2", email="alex@example.com", name="Alex Student", role=Role.STUDENT,
                           created_at=NOW, updated_at=NOW, counts=UserCounts(assignments=3)),
            UserWithCounts(id="u-3", email="maria@example.com", name="Maria Student", role=Role.STUDENT,
                           created_at=NOW, updated_at=NOW),
        ]

    def list_subjects(self, tutor_id=None):
        self._record("list_subjects", tutor_id=tutor_id)
        return [
            SubjectListItem(id="s1", name="Math", description="Numbers", tutor_id="u-1",
                            created_at=NOW, updated_at=NOW, topics=self.topics,
                            counts=SubjectCounts(assignments=1)),
            SubjectListItem(id="s2", name="Physics", tutor_id="u-1", created_at=NOW, updated_at=NOW),
        ]

    def get_subject(self, subject_id):
        self._record("get_subject", subject_id)
        return _subject_detail(self.topics)

    def create_subject(self, **kwargs):
        self._record("create_subject", **kwargs)
        return SubjectRead(id="s3", name=kwargs["name"], tutor_id=kwargs["tutor_id"],
                           created_at=NOW, updated_at=NOW)

    def delete_subject(self, subject_id):
        self._record("delete_subject", subject_id)
        return SuccessResponse()

    def add_topic(self, subject_id, name):
        self._record("add_topic", subject_id, name)
        topic = _topic(name, len(self.topics))
        self.topics = self.topics + [topic]
        return topic

    def delete_topic(self, subject_id, topic_id):
        self._record("delete_topic", subject_id, topic_id)
        return SuccessResponse()

    def list_assignments(self, tutor_id=None, subject_id=None, status=None):
        self._record("list_assignments", tutor_id=tutor_id, subject_id=subject_id, status=status)
        items = [_assignment_item("Quadratics", AssignmentStatus.ACTIVE),
                 _assignment_item("Vectors", AssignmentStatus.DRAFT)]
        return [a for a in items if status is None or a.status.value == status]

    def get_assignment(self, assignment_id):
        self._record("get_assignment", assignment_id)
        return AssignmentDetail(
            id=assignment_id, title="Quadratics", status=AssignmentStatus.ACTIVE, tutor_id="u-1",
            subject_id="s1", created_at=NOW, updated_at=NOW,
            problems=[ProblemRead(id="p1", question="x² = 4", answer="±2", difficulty=Difficulty.EASY,
                                  order=0, assignment_id=assignment_id)],
        )

    def create_assignment(self, **kwargs):
        self._record("create_assignment", **kwargs)
        return AssignmentDetail(id="a-new", title=kwargs["title"], status=AssignmentStatus.DRAFT,
                                tutor_id=kwargs["tutor_id"], subject_id=kwargs["subject_id"],
                                created_at=NOW, updated_at=NOW)

    def update_assignment(self, assignment_id, **fields):
        self._record("update_assignment", assignment_id, **fields)
        return AssignmentDetail(id=assignment_id, title="Quadratics", status=AssignmentStatus(fields["status"]),
                                tutor_id="u-1", subject_id="s1", created_at=NOW, updated_at=NOW)

    def delete_assignment(self, assignment_id):
        self._record("delete_assignment", assignment_id)
        return SuccessResponse()

    def add_problems(self, assignment_id, problems):
        self._record("add_problems", assignment_id, problems)
        return CountResponse(count=len(problems))


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def state(tmp_path, fake_client):
    session = SessionContext.load(tmp_path / "session.json")
    return DashboardState(client=fake_client, session=session, generator=CannedProblemGenerator(delay=0))


@pytest.fixture
def logged_in(state):
    state.session.login(state.client)
    state.client.calls.clear()
    return state


def invoke(state, *args):
    return runner.invoke(app, list(args), obj=state)


def _call_names(client):
    return [name for name, _, _ in client.calls]


class TestSessionCommands:

    def test_login(self, state):
        result = invoke(state, "login", "--email", "ana@example.com", "--name", "Ana")
        assert result.exit_code == 0
        assert "Signed in as Ana" in result.output
        assert state.session.is_authenticated

    def test_login_offline_fallback(self, state, fake_client):
        fake_client.fail_with = ApiError("Network error: refused")
        result = invoke(state, "login")
        assert result.exit_code == 0
        assert "local identity" in result.output
        assert state.session.offline

    def test_login_no_offline_fails(self, state, fake_client):
        fake_client.fail_with = ApiError("Service down", 503)
        result = invoke(state, "login", "--no-offline")
        assert result.exit_code == 1
        assert "Login failed" in result.output

    def test_whoami_and_logout(self, logged_in):
        result = invoke(logged_in, "whoami")
        assert result.exit_code == 0
        assert "Sarah Johnson" in result.output

        assert invoke(logged_in, "logout").exit_code == 0
        assert invoke(logged_in, "whoami").exit_code == 1

    def test_commands_require_login(self, state):
        result = invoke(state, "subjects", "list")
        assert result.exit_code == 1
        assert "Not logged in" in result.output


class TestStudents:

    def test_lists_only_students(self, logged_in, fake_client):
        result = invoke(logged_in, "students")
        assert result.exit_code == 0
        assert "Alex Student" in result.output
        assert "Maria Student" in result.output
        assert "Sarah Tutor" not in result.output
        assert _call_names(fake_client) == ["list_users"]

    def test_search(self, logged_in):
        result = invoke(logged_in, "students", "--search", "maria")
        assert result.exit_code == 0
        assert "Maria Student" in result.output
        assert "Alex Student" not in result.output

    def test_no_match(self, logged_in):
        result = invoke(logged_in, "students", "--search", "nobody")
        assert "No students found" in result.output

    def test_requires_login(self, state):
        assert invoke(state, "students").exit_code == 1


class TestDashboard:

    def test_overview(self, logged_in, fake_client):
        result = invoke(logged_in, "dashboard")
        assert result.exit_code == 0
        assert "Subjects: 2" in result.output
        assert "Assignments: 2" in result.output
        assert "Quadratics" in result.output

    def test_api_error_is_reported(self, logged_in, fake_client):
        fake_client.fail_with = ApiError("API Error: 500", 500)
        result = invoke(logged_in, "dashboard")
        assert result.exit_code == 1
        assert "API Error: 500" in result.output


class TestSubjectCommands:

    def test_list_with_search(self, logged_in, fake_client):
        result = invoke(logged_in, "subjects", "list", "--search", "phys")
        assert result.exit_code == 0
        assert "Physics" in result.output
        assert "Math" not in result.output
        assert fake_client.calls[0][2] == {"tutor_id": "u-1"}

    def test_create_with_topics(self, logged_in, fake_client):
        result = invoke(logged_in, "subjects", "create", "Chemistry", "-t", "Atoms", "-t", "Bonds")
        assert result.exit_code == 0
        _, _, kwargs = fake_client.calls[0]
        assert kwargs["name"] == "Chemistry"
        assert kwargs["topics"] == ["Atoms", "Bonds"]
        assert "Created subject Chemistry" in result.output
        assert kwargs["tutor_id"] == "u-1"

    def test_add_topic_refetches(self, logged_in, fake_client):
        result = invoke(logged_in, "subjects", "add-topic", "s1", "Geometry")
        assert result.exit_code == 0
        assert _call_names(fake_client) == ["add_topic", "get_subject"]
        assert "2. Geometry" in result.output

    def test_remove_topic(self, logged_in, fake_client):
        result = invoke(logged_in, "subjects", "remove-topic", "s1", "t0")
        assert result.exit_code == 0
        assert _call_names(fake_client) == ["delete_topic", "get_subject"]

    def test_delete_asks_for_confirmation(self, logged_in, fake_client):
        result = runner.invoke(app, ["subjects", "delete", "s1"], obj=logged_in, input="n\n")
        assert result.exit_code != 0
        assert "delete_subject" not in _call_names(fake_client)

        result = invoke(logged_in, "subjects", "delete", "s1", "--yes")
        assert result.exit_code == 0
        assert "delete_subject" in _call_names(fake_client)


class TestAssignmentCommands:

    def test_list_by_status(self, logged_in, fake_client):
        result = invoke(logged_in, "assignments", "list", "--status", "ACTIVE")
        assert result.exit_code == 0
        assert "Quadratics" in result.output
        assert "Vectors" not in result.output
        assert fake_client.calls[0][2]["status"] == "ACTIVE"

    def test_show_with_answers(self, logged_in):
        result = invoke(logged_in, "assignments", "show", "a1", "--answers")
        assert result.exit_code == 0
        assert "x² = 4" in result.output
        assert "±2" in result.output

    def test_create(self, logged_in, fake_client):
        result = invoke(logged_in, "assignments", "create", "Homework 1", "--subject", "s1", "--due", "2030-01-01")
        assert result.exit_code == 0
        _, _, kwargs = fake_client.calls[0]
        assert kwargs["due_date"] == "2030-01-01"
        assert kwargs["subject_id"] == "s1"

    def test_set_status(self, logged_in, fake_client):
        result = invoke(logged_in, "assignments", "set-status", "a1", "completed")
        assert result.exit_code == 0
        assert fake_client.calls[0][2] == {"status": "COMPLETED"}

    def test_not_found_is_reported(self, logged_in, fake_client):
        fake_client.fail_with = ApiError("Assignment not found", 404)
        result = invoke(logged_in, "assignments", "delete", "missing", "--yes")
        assert result.exit_code == 1
        assert "Assignment not found" in result.output


class TestGenerate:

    def test_generate_and_save(self, logged_in, fake_client):
        result = invoke(logged_in, "generate", "math", "--count", "2", "--save-to", "a1")
        assert result.exit_code == 0
        assert "quadratic" in result.output
        name, args, _ = fake_client.calls[0]
        assert name == "add_problems"
        assert args[0] == "a1"
        assert len(args[1]) == 2
        assert "Added 2 problems" in result.output

    def test_generate_unknown_subject(self, logged_in):
        result = invoke(logged_in, "generate", "history")
        assert result.exit_code == 1
        assert "failed" in result.output

    def test_generate_filters_by_difficulty(self, logged_in):
        result = invoke(logged_in, "generate", "physics", "--difficulty", "HARD")
        assert result.exit_code == 0
        assert "focal length" in result.output

    def test_generate_rejects_unknown_difficulty(self, logged_in):
        result = invoke(logged_in, "generate", "math", "--difficulty", "hrad")
        assert result.exit_code == 2
