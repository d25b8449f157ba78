import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel

from .config import API_URL, API_TIMEOUT
from .schemas import (
    UserRead, UserWithCounts, SubjectRead, SubjectListItem, SubjectDetail, TopicRead,
    AssignmentListItem, AssignmentDetail, SuccessResponse, CountResponse
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


class TesutoClient:
    """HTTP-клиент Tesuto API: один запрос на вызов, ответы разбираются в схемы"""

    def __init__(self, base_url: str = API_URL, session=None, timeout: float = API_TIMEOUT):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout
        self.headers = {"Content-Type": "application/json"}

    def _request(self, method: str, endpoint: str, body: Any = None, params: Optional[Dict[str, Any]] = None):
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.request(
                method,
                url,
                json=body,
                params=_drop_none(params) if params else None,
                headers=self.headers,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error calling {method} {url}: {e}")
            raise ApiError(f"Network error: {e}")

        if not 200 <= response.status_code < 300:
            try:
                message = response.json().get("error")
            except (ValueError, AttributeError):
                message = None
            logger.warning(f"{method} {url} returned {response.status_code}: {message}")
            raise ApiError(message or f"API Error: {response.status_code}", status_code=response.status_code)

        return response.json()

    def _parse(self, model: Type[ModelT], data: Any) -> ModelT:
        return model.model_validate(data)

    def _parse_list(self, model: Type[ModelT], data: Any) -> List[ModelT]:
        return [model.model_validate(item) for item in data]

    # ========== USERS ==========
    def auth_user(self, email: str, name: str, avatar: Optional[str] = None, role: Optional[str] = None) -> UserRead:
        body = _drop_none({"email": email, "name": name, "avatar": avatar, "role": role})
        return self._parse(UserRead, self._request("POST", "/users/auth", body))

    def get_user(self, user_id: str) -> UserWithCounts:
        return self._parse(UserWithCounts, self._request("GET", f"/users/{user_id}"))

    def list_users(self) -> List[UserWithCounts]:
        return self._parse_list(UserWithCounts, self._request("GET", "/users"))

    # ========== SUBJECTS ==========
    def list_subjects(self, tutor_id: Optional[str] = None) -> List[SubjectListItem]:
        data = self._request("GET", "/subjects", params={"tutorId": tutor_id})
        return self._parse_list(SubjectListItem, data)

    def get_subject(self, subject_id: str) -> SubjectDetail:
        return self._parse(SubjectDetail, self._request("GET", f"/subjects/{subject_id}"))

    def create_subject(
            self,
            name: str,
            tutor_id: str,
            description: Optional[str] = None,
            icon: Optional[str] = None,
            color: Optional[str] = None,
            topics: Optional[List[str]] = None
    ) -> SubjectRead:
        body = _drop_none({
            "name": name,
            "tutorId": tutor_id,
            "description": description,
            "icon": icon,
            "color": color,
            "topics": topics,
        })
        return self._parse(SubjectRead, self._request("POST", "/subjects", body))

    def update_subject(self, subject_id: str, **fields) -> SubjectRead:
        body = _drop_none({key: fields.get(key) for key in ("name", "description", "icon", "color")})
        return self._parse(SubjectRead, self._request("PUT", f"/subjects/{subject_id}", body))

    def delete_subject(self, subject_id: str) -> SuccessResponse:
        return self._parse(SuccessResponse, self._request("DELETE", f"/subjects/{subject_id}"))

    def add_topic(self, subject_id: str, name: str) -> TopicRead:
        return self._parse(TopicRead, self._request("POST", f"/subjects/{subject_id}/topics", {"name": name}))

    def delete_topic(self, subject_id: str, topic_id: str) -> SuccessResponse:
        data = self._request("DELETE", f"/subjects/{subject_id}/topics/{topic_id}")
        return self._parse(SuccessResponse, data)

    # ========== ASSIGNMENTS ==========
    def list_assignments(
            self,
            tutor_id: Optional[str] = None,
            subject_id: Optional[str] = None,
            status: Optional[str] = None
    ) -> List[AssignmentListItem]:
        params = {"tutorId": tutor_id, "subjectId": subject_id, "status": status}
        return self._parse_list(AssignmentListItem, self._request("GET", "/assignments", params=params))

    def get_assignment(self, assignment_id: str) -> AssignmentDetail:
        return self._parse(AssignmentDetail, self._request("GET", f"/assignments/{assignment_id}"))

    def create_assignment(
            self,
            title: str,
            tutor_id: str,
            subject_id: str,
            description: Optional[str] = None,
            due_date: Optional[str] = None,
            status: Optional[str] = None,
            problems: Optional[List[Dict[str, Any]]] = None
    ) -> AssignmentDetail:
        body = _drop_none({
            "title": title,
            "tutorId": tutor_id,
            "subjectId": subject_id,
            "description": description,
            "dueDate": due_date,
            "status": status,
            "problems": problems,
        })
        return self._parse(AssignmentDetail, self._request("POST", "/assignments", body))

    def update_assignment(self, assignment_id: str, **fields) -> AssignmentDetail:
        body = _drop_none({
            "title": fields.get("title"),
            "description": fields.get("description"),
            "dueDate": fields.get("due_date"),
            "status": fields.get("status"),
        })
        return self._parse(AssignmentDetail, self._request("PUT", f"/assignments/{assignment_id}", body))

    def delete_assignment(self, assignment_id: str) -> SuccessResponse:
        return self._parse(SuccessResponse, self._request("DELETE", f"/assignments/{assignment_id}"))

    def add_problems(self, assignment_id: str, problems: List[Dict[str, Any]]) -> CountResponse:
        data = self._request("POST", f"/assignments/{assignment_id}/problems", {"problems": problems})
        return self._parse(CountResponse, data)
