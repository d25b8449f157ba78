from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Any, Annotated
from datetime import datetime, timezone

from .models import Role, AssignmentStatus, Difficulty

NonEmptyStr = Annotated[str, Field(min_length=1)]


class CamelModel(BaseModel):
    # Наружу поля уходят в camelCase (tutorId, dueDate, createdAt)
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def parse_due_date(value: Any) -> Optional[datetime]:
    """Разбирает дату в ISO-8601 (дата или дата-время) в datetime с tzinfo UTC"""
    if value is None or isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"dueDate must be an ISO-8601 date, got {value!r}")
    else:
        raise ValueError("dueDate must be a string")

    if parsed is None:
        return None
    # дата без смещения считается UTC
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# ========== REQUESTS ==========

class UserAuth(CamelModel):
    email: EmailStr
    name: NonEmptyStr
    avatar: Optional[str] = None
    role: Role = Role.TUTOR


class SubjectCreate(CamelModel):
    name: NonEmptyStr
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    tutor_id: NonEmptyStr
    topics: Optional[List[NonEmptyStr]] = None


class SubjectUpdate(CamelModel):
    name: Optional[NonEmptyStr] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None


class TopicCreate(CamelModel):
    name: NonEmptyStr


class ProblemCreate(CamelModel):
    # пустой вопрос допустим: min_length только у имён и заголовков
    question: str
    answer: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    topic_id: Optional[str] = None


class AssignmentCreate(CamelModel):
    title: NonEmptyStr
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    status: Optional[AssignmentStatus] = None
    tutor_id: NonEmptyStr
    subject_id: NonEmptyStr
    problems: Optional[List[ProblemCreate]] = None

    @field_validator("due_date", mode="before")
    @classmethod
    def check_due_date(cls, value):
        return parse_due_date(value)


class AssignmentUpdate(CamelModel):
    title: Optional[NonEmptyStr] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    status: Optional[AssignmentStatus] = None

    @field_validator("due_date", mode="before")
    @classmethod
    def check_due_date(cls, value):
        return parse_due_date(value)


class ProblemsAppend(CamelModel):
    problems: List[ProblemCreate]


# ========== RESPONSES ==========

class UserCounts(CamelModel):
    subjects: int = 0
    assignments: int = 0


class UserRead(CamelModel):
    id: str
    email: str
    name: str
    avatar: Optional[str] = None
    role: Role
    created_at: datetime
    updated_at: datetime


class UserWithCounts(UserRead):
    counts: UserCounts = Field(default_factory=UserCounts, alias="_count")


class TopicRead(CamelModel):
    id: str
    name: str
    order: int
    subject_id: str


class ProblemRead(CamelModel):
    id: str
    question: str
    answer: Optional[str] = None
    difficulty: Difficulty
    order: int
    topic_id: Optional[str] = None
    assignment_id: str


class SubjectSummary(CamelModel):
    id: str
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None


class SubjectBase(SubjectSummary):
    description: Optional[str] = None
    tutor_id: str
    created_at: datetime
    updated_at: datetime


class SubjectRead(SubjectBase):
    topics: List[TopicRead] = []


class SubjectCounts(CamelModel):
    assignments: int = 0


class SubjectListItem(SubjectRead):
    counts: SubjectCounts = Field(default_factory=SubjectCounts, alias="_count")


class AssignmentRead(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    status: AssignmentStatus
    tutor_id: str
    subject_id: str
    created_at: datetime
    updated_at: datetime


class SubjectDetail(SubjectRead):
    assignments: List[AssignmentRead] = []


class AssignmentCounts(CamelModel):
    problems: int = 0


class AssignmentListItem(AssignmentRead):
    subject: Optional[SubjectSummary] = None
    counts: AssignmentCounts = Field(default_factory=AssignmentCounts, alias="_count")


class AssignmentDetail(AssignmentRead):
    subject: Optional[SubjectBase] = None
    problems: List[ProblemRead] = []


class SuccessResponse(BaseModel):
    success: bool = True


class CountResponse(BaseModel):
    count: int
