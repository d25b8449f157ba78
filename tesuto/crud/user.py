from sqlmodel import select, Session
from typing import Optional
import logging

from ..models import User, Role
from .base import commit

logger = logging.getLogger(__name__)


def list_users(session: Session):
    statement = select(User).order_by(User.created_at.desc())
    return session.exec(statement).all()


def get_user_by_email(session: Session, email: str):
    statement = select(User).where(User.email == email)
    result = session.exec(statement).first()
    return result


def get_user_by_id(session: Session, user_id: str):
    return session.get(User, user_id)


def upsert_user_by_email(
        session: Session,
        email: str,
        name: str,
        avatar: Optional[str] = None,
        role: Role = Role.TUTOR
) -> User:
    """Находит пользователя по email или создаёт нового. Существующего не изменяет."""
    user = get_user_by_email(session, email)
    if user:
        return user

    user = User(email=email, name=name, avatar=avatar, role=role)
    session.add(user)
    commit(session)
    session.refresh(user)
    logger.info(f"Created user {user.id} <{email}>")
    return user
