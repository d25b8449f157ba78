from sqlmodel import select

from tesuto.models import Subject, User
from tesuto.seed import seed_all


def test_seed_is_idempotent(session):
    first = seed_all(session)
    second = seed_all(session)

    assert first["created_subjects"] == ["Mathematics", "Physics"]
    assert second["created_subjects"] == []
    assert second["tutor_id"] == first["tutor_id"]
    assert len(session.exec(select(User)).all()) == 1

    math = session.get(Subject, "math-default")
    assert [t.order for t in math.topics] == [0, 1, 2, 3, 4]
    assert math.topics[0].name == "Algebra"
