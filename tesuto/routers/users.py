from fastapi import APIRouter, Depends
from sqlmodel import Session
from typing import List
from ..db import get_session
from ..crud.user import list_users, get_user_by_id, upsert_user_by_email
from ..exceptions import NotFoundError
from ..models import User
from ..schemas import UserAuth, UserRead, UserWithCounts, UserCounts

router = APIRouter(prefix="/users", tags=["users"])


def _with_counts(user: User) -> UserWithCounts:
    item = UserWithCounts.model_validate(user)
    item.counts = UserCounts(subjects=len(user.subjects), assignments=len(user.assignments))
    return item


# Вход без пароля: найти или создать пользователя по email
@router.post("/auth", response_model=UserRead)
def auth_user(payload: UserAuth, session: Session = Depends(get_session)):
    user = upsert_user_by_email(
        session,
        email=payload.email,
        name=payload.name,
        avatar=payload.avatar,
        role=payload.role
    )
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UserWithCounts)
def get_user(user_id: str, session: Session = Depends(get_session)):
    user = get_user_by_id(session, user_id)
    if not user:
        raise NotFoundError("User not found")
    return _with_counts(user)


@router.get("", response_model=List[UserWithCounts])
def list_users_endpoint(session: Session = Depends(get_session)):
    return [_with_counts(u) for u in list_users(session)]
