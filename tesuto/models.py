from typing import Optional, List
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4


def new_id() -> str:
    return uuid4().hex


# отметки времени всегда с tzinfo (UTC)
def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    TUTOR = "TUTOR"
    STUDENT = "STUDENT"
    ADMIN = "ADMIN"


class AssignmentStatus(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    ARCHIVED = "ARCHIVED"


class Difficulty(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class User(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    email: str = Field(index=True, nullable=False, unique=True)
    name: str = Field(nullable=False)
    avatar: Optional[str] = None
    role: Role = Field(default=Role.TUTOR)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow}
    )

    subjects: List["Subject"] = Relationship(back_populates="tutor")
    assignments: List["Assignment"] = Relationship(back_populates="tutor")


class Subject(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    tutor_id: str = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow}
    )

    tutor: Optional[User] = Relationship(back_populates="subjects")
    topics: List["Topic"] = Relationship(
        back_populates="subject",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "Topic.order"}
    )
    assignments: List["Assignment"] = Relationship(
        back_populates="subject",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "Assignment.created_at.desc()"
        }
    )


class Topic(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    order: int = Field(default=0)
    subject_id: str = Field(foreign_key="subject.id", index=True, ondelete="CASCADE")

    subject: Optional[Subject] = Relationship(back_populates="topics")
    # без каскада: при удалении темы у задач обнуляется topic_id
    problems: List["Problem"] = Relationship(back_populates="topic")


class Assignment(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    status: AssignmentStatus = Field(default=AssignmentStatus.DRAFT, index=True)
    tutor_id: str = Field(foreign_key="user.id", index=True)
    subject_id: str = Field(foreign_key="subject.id", index=True, ondelete="CASCADE")
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow}
    )

    tutor: Optional[User] = Relationship(back_populates="assignments")
    subject: Optional[Subject] = Relationship(back_populates="assignments")
    problems: List["Problem"] = Relationship(
        back_populates="assignment",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "Problem.order"}
    )


class Problem(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    question: str
    answer: Optional[str] = None
    difficulty: Difficulty = Field(default=Difficulty.MEDIUM)
    order: int = Field(default=0)
    topic_id: Optional[str] = Field(default=None, foreign_key="topic.id", ondelete="SET NULL")
    assignment_id: str = Field(foreign_key="assignment.id", index=True, ondelete="CASCADE")

    assignment: Optional[Assignment] = Relationship(back_populates="problems")
    topic: Optional[Topic] = Relationship(back_populates="problems")
