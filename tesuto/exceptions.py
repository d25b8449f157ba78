from typing import Optional, Dict, Any, List
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)


class ErrorCode:
    # Ресурсы (2000-2999)
    NOT_FOUND = "RES_2001"
    ALREADY_EXISTS = "RES_2002"
    VALIDATION_ERROR = "RES_2003"

    # Системные ошибки (9000-9999)
    INTERNAL_ERROR = "SYS_9001"
    DATABASE_ERROR = "SYS_9003"


class TesutoError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        content = {"error": self.message, "code": self.error_code}
        if self.details:
            content["details"] = self.details
        return content


class ValidationError(TesutoError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = ErrorCode.VALIDATION_ERROR


class NotFoundError(TesutoError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = ErrorCode.NOT_FOUND


class StoreError(TesutoError):
    """Сбой хранилища: нет соединения, ошибка драйвера и т.п."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = ErrorCode.DATABASE_ERROR


class ConstraintError(StoreError):
    """Нарушение внешнего ключа или уникальности"""
    status_code = status.HTTP_409_CONFLICT
    error_code = ErrorCode.ALREADY_EXISTS


def _describe_validation_errors(errors: List[Dict[str, Any]]) -> str:
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


async def tesuto_error_handler(request: Request, exc: TesutoError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = _describe_validation_errors(errors)
    logger.warning(f"Validation failed on {request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": message,
            "code": ErrorCode.VALIDATION_ERROR,
            "details": [
                {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg")}
                for err in errors
            ],
        },
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(TesutoError, tesuto_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
