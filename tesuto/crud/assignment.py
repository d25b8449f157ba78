from sqlmodel import select, Session, func
from typing import Optional, List, Dict, Any
from datetime import datetime
import logging

from ..models import Assignment, AssignmentStatus, Problem, Difficulty
from .base import commit

logger = logging.getLogger(__name__)


def _build_problems(problems: List[Dict[str, Any]], start: int = 0) -> List[Problem]:
    return [
        Problem(
            question=problem["question"],
            answer=problem.get("answer"),
            difficulty=problem.get("difficulty") or Difficulty.MEDIUM,
            order=start + index,
            topic_id=problem.get("topic_id"),
        )
        for index, problem in enumerate(problems)
    ]


def list_assignments(
        session: Session,
        tutor_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        status: Optional[AssignmentStatus] = None
):
    statement = select(Assignment)

    if tutor_id:
        statement = statement.where(Assignment.tutor_id == tutor_id)
    if subject_id:
        statement = statement.where(Assignment.subject_id == subject_id)
    if status:
        statement = statement.where(Assignment.status == status)

    statement = statement.order_by(Assignment.created_at.desc())
    return session.exec(statement).all()


def get_assignment_by_id(session: Session, assignment_id: str):
    return session.get(Assignment, assignment_id)


def create_assignment(session: Session, assignment_data: Dict[str, Any]) -> Assignment:
    data = dict(assignment_data)
    problems = data.pop("problems", None) or []
    if not data.get("status"):
        data["status"] = AssignmentStatus.DRAFT

    assignment = Assignment(**data)
    assignment.problems = _build_problems(problems)

    session.add(assignment)
    commit(session)
    session.refresh(assignment)
    logger.info(f"Created assignment {assignment.id} with {len(problems)} problems")
    return assignment


def update_assignment(
        session: Session,
        assignment_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        due_date: Optional[datetime] = None,
        status: Optional[AssignmentStatus] = None
):
    assignment = get_assignment_by_id(session, assignment_id)
    if not assignment:
        return None
    if title is not None:
        assignment.title = title
    if description is not None:
        assignment.description = description
    if due_date is not None:
        assignment.due_date = due_date
    # переходы статуса не ограничены
    if status is not None:
        assignment.status = status
    session.add(assignment)
    commit(session)
    session.refresh(assignment)
    logger.info(f"Updated assignment {assignment_id}")
    return assignment


def delete_assignment(session: Session, assignment_id: str) -> bool:
    assignment = get_assignment_by_id(session, assignment_id)
    if not assignment:
        return False
    session.delete(assignment)
    commit(session)
    logger.info(f"Deleted assignment {assignment_id}")
    return True


def count_problems(session: Session, assignment_id: str) -> int:
    statement = select(func.count(Problem.id)).where(Problem.assignment_id == assignment_id)
    return session.exec(statement).one()


def add_problems(session: Session, assignment_id: str, problems: List[Dict[str, Any]]) -> Optional[int]:
    """Дописывает задачи в конец задания, возвращает число добавленных"""
    if not get_assignment_by_id(session, assignment_id):
        return None

    new_problems = _build_problems(problems, start=count_problems(session, assignment_id))
    for problem in new_problems:
        problem.assignment_id = assignment_id
        session.add(problem)
    commit(session)
    logger.info(f"Appended {len(new_problems)} problems to assignment {assignment_id}")
    return len(new_problems)
