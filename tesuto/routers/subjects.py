from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from typing import List, Optional
from ..db import get_session
from ..crud.subject import (
    list_subjects, get_subject_by_id, create_subject, update_subject, delete_subject,
    add_topic, delete_topic
)
from ..exceptions import NotFoundError
from ..models import Subject
from ..schemas import (
    SubjectCreate, SubjectUpdate, TopicCreate,
    SubjectRead, SubjectListItem, SubjectCounts, SubjectDetail, TopicRead, SuccessResponse
)

router = APIRouter(prefix="/subjects", tags=["subjects"])


def _list_item(subject: Subject) -> SubjectListItem:
    item = SubjectListItem.model_validate(subject)
    item.counts = SubjectCounts(assignments=len(subject.assignments))
    return item


# Список предметов, опционально только одного репетитора
@router.get("", response_model=List[SubjectListItem])
def list_subjects_endpoint(
        tutor_id: Optional[str] = Query(None, alias="tutorId"),
        session: Session = Depends(get_session)
):
    return [_list_item(s) for s in list_subjects(session, tutor_id=tutor_id)]


@router.get("/{subject_id}", response_model=SubjectDetail)
def get_subject_endpoint(subject_id: str, session: Session = Depends(get_session)):
    subject = get_subject_by_id(session, subject_id)
    if not subject:
        raise NotFoundError("Subject not found")
    return SubjectDetail.model_validate(subject)


@router.post("", response_model=SubjectRead)
def create_subject_endpoint(payload: SubjectCreate, session: Session = Depends(get_session)):
    subject = create_subject(
        session,
        name=payload.name,
        tutor_id=payload.tutor_id,
        description=payload.description,
        icon=payload.icon,
        color=payload.color,
        topics=payload.topics
    )
    return SubjectRead.model_validate(subject)


@router.put("/{subject_id}", response_model=SubjectRead)
def update_subject_endpoint(subject_id: str, payload: SubjectUpdate, session: Session = Depends(get_session)):
    subject = update_subject(
        session,
        subject_id,
        name=payload.name,
        description=payload.description,
        icon=payload.icon,
        color=payload.color
    )
    if not subject:
        raise NotFoundError("Subject not found")
    return SubjectRead.model_validate(subject)


# Удаление каскадом убирает темы, задания и их задачи
@router.delete("/{subject_id}", response_model=SuccessResponse)
def delete_subject_endpoint(subject_id: str, session: Session = Depends(get_session)):
    if not delete_subject(session, subject_id):
        raise NotFoundError("Subject not found")
    return SuccessResponse()


@router.post("/{subject_id}/topics", response_model=TopicRead)
def add_topic_endpoint(subject_id: str, payload: TopicCreate, session: Session = Depends(get_session)):
    topic = add_topic(session, subject_id, payload.name)
    if not topic:
        raise NotFoundError("Subject not found")
    return TopicRead.model_validate(topic)


@router.delete("/{subject_id}/topics/{topic_id}", response_model=SuccessResponse)
def delete_topic_endpoint(subject_id: str, topic_id: str, session: Session = Depends(get_session)):
    if not delete_topic(session, subject_id, topic_id):
        raise NotFoundError("Topic not found")
    return SuccessResponse()
