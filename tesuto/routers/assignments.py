from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from typing import List, Optional
from ..db import get_session
from ..crud.assignment import (
    list_assignments, get_assignment_by_id, create_assignment as crud_create_assignment,
    update_assignment, delete_assignment, add_problems
)
from ..exceptions import NotFoundError, ValidationError
from ..models import Assignment, AssignmentStatus
from ..schemas import (
    AssignmentCreate, AssignmentUpdate, ProblemsAppend,
    AssignmentListItem, AssignmentCounts, AssignmentDetail, SuccessResponse, CountResponse
)

router = APIRouter(prefix="/assignments", tags=["assignments"])


def _status_filter(value: Optional[str]) -> Optional[AssignmentStatus]:
    # пустой параметр означает "без фильтра"
    if not value:
        return None
    try:
        return AssignmentStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in AssignmentStatus)
        raise ValidationError(f"status must be one of {allowed}", details={"status": value})


def _list_item(assignment: Assignment) -> AssignmentListItem:
    item = AssignmentListItem.model_validate(assignment)
    item.counts = AssignmentCounts(problems=len(assignment.problems))
    return item


@router.get("", response_model=List[AssignmentListItem])
def list_assignments_endpoint(
        tutor_id: Optional[str] = Query(None, alias="tutorId"),
        subject_id: Optional[str] = Query(None, alias="subjectId"),
        status: Optional[str] = Query(None),
        session: Session = Depends(get_session)
):
    assignments = list_assignments(
        session, tutor_id=tutor_id, subject_id=subject_id, status=_status_filter(status)
    )
    return [_list_item(a) for a in assignments]


@router.get("/{assignment_id}", response_model=AssignmentDetail)
def get_assignment_endpoint(assignment_id: str, session: Session = Depends(get_session)):
    assignment = get_assignment_by_id(session, assignment_id)
    if not assignment:
        raise NotFoundError("Assignment not found")
    return AssignmentDetail.model_validate(assignment)


# Создание задания вместе с задачами
@router.post("", response_model=AssignmentDetail)
def create_assignment(payload: AssignmentCreate, session: Session = Depends(get_session)):
    assignment = crud_create_assignment(session, payload.model_dump())
    return AssignmentDetail.model_validate(assignment)


@router.put("/{assignment_id}", response_model=AssignmentDetail)
def update_assignment_endpoint(
        assignment_id: str,
        payload: AssignmentUpdate,
        session: Session = Depends(get_session)
):
    assignment = update_assignment(
        session,
        assignment_id,
        title=payload.title,
        description=payload.description,
        due_date=payload.due_date,
        status=payload.status
    )
    if not assignment:
        raise NotFoundError("Assignment not found")
    return AssignmentDetail.model_validate(assignment)


@router.delete("/{assignment_id}", response_model=SuccessResponse)
def delete_assignment_endpoint(assignment_id: str, session: Session = Depends(get_session)):
    if not delete_assignment(session, assignment_id):
        raise NotFoundError("Assignment not found")
    return SuccessResponse()


@router.post("/{assignment_id}/problems", response_model=CountResponse)
def add_problems_endpoint(
        assignment_id: str,
        payload: ProblemsAppend,
        session: Session = Depends(get_session)
):
    count = add_problems(session, assignment_id, [p.model_dump() for p in payload.problems])
    if count is None:
        raise NotFoundError("Assignment not found")
    return CountResponse(count=count)
