from sqlmodel import select, Session, func
from typing import Optional, List
import logging

from ..models import Subject, Topic
from .base import commit

logger = logging.getLogger(__name__)


def list_subjects(session: Session, tutor_id: Optional[str] = None):
    statement = select(Subject)
    # пустой tutorId означает "без фильтра"
    if tutor_id:
        statement = statement.where(Subject.tutor_id == tutor_id)
    statement = statement.order_by(Subject.created_at.desc())
    return session.exec(statement).all()


def get_subject_by_id(session: Session, subject_id: str):
    return session.get(Subject, subject_id)


def create_subject(
        session: Session,
        name: str,
        tutor_id: str,
        description: Optional[str] = None,
        icon: Optional[str] = None,
        color: Optional[str] = None,
        topics: Optional[List[str]] = None,
        subject_id: Optional[str] = None
) -> Subject:
    subject = Subject(name=name, tutor_id=tutor_id, description=description, icon=icon, color=color)
    if subject_id is not None:
        subject.id = subject_id

    # Предмет и темы сохраняются одним коммитом
    for index, topic_name in enumerate(topics or []):
        subject.topics.append(Topic(name=topic_name, order=index))

    session.add(subject)
    commit(session)
    session.refresh(subject)
    logger.info(f"Created subject {subject.id} with {len(topics or [])} topics")
    return subject


def update_subject(
        session: Session,
        subject_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        icon: Optional[str] = None,
        color: Optional[str] = None
):
    subject = get_subject_by_id(session, subject_id)
    if not subject:
        return None
    if name is not None:
        subject.name = name
    if description is not None:
        subject.description = description
    if icon is not None:
        subject.icon = icon
    if color is not None:
        subject.color = color
    session.add(subject)
    commit(session)
    session.refresh(subject)
    logger.info(f"Updated subject {subject_id}")
    return subject


def delete_subject(session: Session, subject_id: str) -> bool:
    subject = get_subject_by_id(session, subject_id)
    if not subject:
        return False
    session.delete(subject)
    commit(session)
    logger.info(f"Deleted subject {subject_id}")
    return True


def count_topics(session: Session, subject_id: str) -> int:
    statement = select(func.count(Topic.id)).where(Topic.subject_id == subject_id)
    return session.exec(statement).one()


def add_topic(session: Session, subject_id: str, name: str) -> Optional[Topic]:
    """Добавляет тему в конец списка: order = текущее число тем предмета"""
    if not get_subject_by_id(session, subject_id):
        return None

    topic = Topic(name=name, order=count_topics(session, subject_id), subject_id=subject_id)
    session.add(topic)
    commit(session)
    session.refresh(topic)
    logger.info(f"Added topic {topic.id} to subject {subject_id} at position {topic.order}")
    return topic


def delete_topic(session: Session, subject_id: str, topic_id: str) -> bool:
    topic = session.get(Topic, topic_id)
    if not topic or topic.subject_id != subject_id:
        return False
    session.delete(topic)
    commit(session)
    logger.info(f"Deleted topic {topic_id} from subject {subject_id}")
    return True
