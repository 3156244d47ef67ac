"""
Domain errors and their JSON rendering.

Every user-facing failure leaves the API as ``{"success": false, "message": ...}``
with an appropriate status code. Database failures are translated here too so
route handlers never build error payloads by hand.
"""
import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import exc as sa_exc

from personnel_directory.core.config import settings

logger = logging.getLogger(__name__)

TOO_MANY_CONNECTIONS = "TOO_MANY_CONNECTIONS"

# Driver messages that mean the server refused a new connection
_CONNECTION_LIMIT_MARKERS = (
    "too many connections",  # MySQL 1040
    "too many clients",  # PostgreSQL 53300
    "remaining connection slots are reserved",
)


class DirectoryError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, *, code: str | None = None, **extra: Any):
        super().__init__(message)
        self.message = message
        self.code = code
        self.extra = extra

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": False, "message": self.message}
        if self.code:
            payload["code"] = self.code
        payload.update(self.extra)
        return payload


class NotFoundError(DirectoryError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(DirectoryError):
    status_code = status.HTTP_409_CONFLICT


def is_connection_exhausted(err: sa_exc.SQLAlchemyError) -> bool:
    if isinstance(err, sa_exc.TimeoutError):
        # QueuePool limit reached while waiting for a checkout
        return True
    if isinstance(err, sa_exc.OperationalError):
        text = str(err.orig if err.orig is not None else err).lower()
        return any(marker in text for marker in _CONNECTION_LIMIT_MARKERS)
    return False


def _with_detail(payload: dict[str, Any], err: Exception) -> dict[str, Any]:
    if settings.is_development:
        payload["error"] = str(err)
    return payload


async def directory_error_handler(request: Request, err: DirectoryError) -> JSONResponse:
    return JSONResponse(status_code=err.status_code, content=err.to_payload())


async def http_error_handler(request: Request, err: HTTPException) -> JSONResponse:
    if isinstance(err.detail, dict):
        content = {"success": False, **err.detail}
    else:
        content = {"success": False, "message": str(err.detail)}
    return JSONResponse(status_code=err.status_code, content=content, headers=err.headers)


async def database_error_handler(request: Request, err: sa_exc.SQLAlchemyError) -> JSONResponse:
    if is_connection_exhausted(err):
        logger.error("Database connection limit reached on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=_with_detail(
                {
                    "success": False,
                    "message": "Database connection limit reached. Please try again later.",
                    "code": TOO_MANY_CONNECTIONS,
                },
                err,
            ),
        )

    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_with_detail({"success": False, "message": "Database error occurred"}, err),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DirectoryError, directory_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(sa_exc.SQLAlchemyError, database_error_handler)
