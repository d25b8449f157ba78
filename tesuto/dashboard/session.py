"""Сессия пользователя панели.

Явный объект сессии с переходами
ANONYMOUS -> AUTHENTICATING -> AUTHENTICATED | FAILED.
Вошедший пользователь сохраняется в JSON-файл и восстанавливается при запуске.
"""
import json
import logging
from dataclasses import dataclass, asdict
from enum import Enum
from pathlib import Path
from typing import Optional

from ..client import ApiError

logger = logging.getLogger(__name__)

DEFAULT_EMAIL = "sarah.johnson@tesuto.edu"
DEFAULT_NAME = "Sarah Johnson"
DEFAULT_AVATAR = "https://api.dicebear.com/7.x/avataaars/svg?seed=Sarah"


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class NotAuthenticatedError(Exception):
    pass


@dataclass
class SessionUser:
    id: str
    name: str
    email: str
    avatar: Optional[str] = None
    role: str = "TUTOR"

    @classmethod
    def from_dict(cls, data: dict) -> "SessionUser":
        return cls(
            id=data["id"],
            name=data["name"],
            email=data["email"],
            avatar=data.get("avatar"),
            role=data.get("role", "TUTOR"),
        )


def mock_identity(email: str, name: str, avatar: Optional[str]) -> SessionUser:
    """Локальная личность на случай недоступного backend"""
    return SessionUser(id="tutor-001", name=name, email=email, avatar=avatar, role="TUTOR")


class SessionContext:
    def __init__(self, storage_path: Path):
        self.storage_path = Path(storage_path)
        self.state = SessionState.ANONYMOUS
        self.user: Optional[SessionUser] = None
        self.error: Optional[str] = None
        self.offline = False

    @classmethod
    def load(cls, storage_path: Path) -> "SessionContext":
        context = cls(storage_path)
        if not context.storage_path.exists():
            return context
        try:
            data = json.loads(context.storage_path.read_text(encoding="utf-8"))
            context.user = SessionUser.from_dict(data)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable session file {context.storage_path}: {e}")
            return context
        context.state = SessionState.AUTHENTICATED
        return context

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED and self.user is not None

    def require_user(self) -> SessionUser:
        if not self.is_authenticated:
            raise NotAuthenticatedError("Not logged in. Run 'tesuto login' first.")
        return self.user

    def login(
            self,
            client,
            email: str = DEFAULT_EMAIL,
            name: str = DEFAULT_NAME,
            avatar: Optional[str] = DEFAULT_AVATAR,
            allow_offline: bool = True
    ) -> SessionUser:
        self.state = SessionState.AUTHENTICATING
        self.error = None
        self.offline = False
        try:
            user = client.auth_user(email=email, name=name, avatar=avatar)
            self.user = SessionUser(
                id=user.id,
                name=user.name,
                email=user.email,
                avatar=user.avatar,
                role=user.role.value
            )
        except ApiError as e:
            self.error = e.message
            if not allow_offline:
                self.user = None
                self.state = SessionState.FAILED
                logger.warning(f"Login failed for {email}: {e.message}")
                raise
            logger.warning(f"Login via API failed ({e.message}), using local identity")
            self.user = mock_identity(email, name, avatar)
            self.offline = True

        self.state = SessionState.AUTHENTICATED
        self._save()
        return self.user

    def logout(self) -> None:
        self.user = None
        self.error = None
        self.offline = False
        self.state = SessionState.ANONYMOUS
        if self.storage_path.exists():
            self.storage_path.unlink()

    def _save(self) -> None:
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        self.storage_path.write_text(json.dumps(asdict(self.user)), encoding="utf-8")
