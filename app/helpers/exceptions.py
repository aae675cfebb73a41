# app/helpers/exceptions.py
"""
Clinic error taxonomy and the handlers that render it.

Services raise these (they are HTTPExceptions, so FastAPI already knows how
to stop a request with them); the handlers below put every failure into the
same {success, message, code, errors?} envelope the success paths use.
"""
import logging
from typing import Any, List, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.appconfig import settings

logger = logging.getLogger(__name__)


class ClinicError(HTTPException):
    """Base class for expected, request-terminating failures."""

    code: str = "error"
    status_code_default: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, errors: Optional[List[Any]] = None, headers: Optional[dict] = None):
        super().__init__(status_code=self.status_code_default, detail=message, headers=headers)
        self.message = message
        self.errors = errors


class ValidationError(ClinicError):
    code = "validation_error"
    status_code_default = status.HTTP_400_BAD_REQUEST


class NotFoundError(ClinicError):
    code = "not_found"
    status_code_default = status.HTTP_404_NOT_FOUND


class ConflictError(ClinicError):
    code = "conflict"
    status_code_default = status.HTTP_409_CONFLICT


class InvalidStateError(ClinicError):
    code = "invalid_state"
    status_code_default = status.HTTP_400_BAD_REQUEST


class CapacityExceededError(ClinicError):
    code = "capacity_exceeded"
    status_code_default = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(ClinicError):
    code = "unauthorized"
    status_code_default = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(ClinicError):
    code = "forbidden"
    status_code_default = status.HTTP_403_FORBIDDEN


_STATUS_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
}


def _envelope(message: str, code: str, errors: Optional[List[Any]] = None) -> dict:
    body = {"success": False, "message": message, "code": code}
    if errors:
        body["errors"] = errors
    return body


# ============================================================
# ✅ Register Exception Handlers
# ============================================================
def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ClinicError)
    async def handle_clinic_error(request: Request, exc: ClinicError):
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(_envelope(exc.message, exc.code, exc.errors)),
            headers=exc.headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
            message = "Route not found"
        return JSONResponse(
            status_code=exc.status_code,
            content=_envelope(message, _STATUS_CODES.get(exc.status_code, "error")),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg"),
            }
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=jsonable_encoder(_envelope("Validation errors", ValidationError.code, errors)),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        body = _envelope("Something went wrong!", "internal_error")
        body["error"] = str(exc) if settings.is_development else "Internal server error"
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)
