"""
Error taxonomy for the collaboration service.

Every error is an ``HTTPException`` so FastAPI maps it to a status code on its
own; ``error_response_handler`` renders the JSON envelope used by all error
responses:

    {"error": {"code": "...", "message": "...", "status": 409, ...extra}}
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

log = structlog.get_logger()


class AppError(HTTPException):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, *, status_code: Optional[int] = None, **extra: Any):
        super().__init__(status_code=status_code or type(self).status_code, detail=message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "status": self.status_code,
            **self.extra,
        }


# ---------------------------------------------------------------------------
# 400: rejected before any write
# ---------------------------------------------------------------------------

class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"


class EmptyCandidateSetError(ValidationError):
    code = "EMPTY_CANDIDATE_SET"


class SameProjectError(ValidationError):
    code = "SAME_PROJECT"


class ContactMismatchError(ValidationError):
    code = "CONTACT_COMPANY_MISMATCH"


# ---------------------------------------------------------------------------
# 404
# ---------------------------------------------------------------------------

class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"


class SourceEmptyError(NotFoundError):
    code = "SOURCE_EMPTY"


# ---------------------------------------------------------------------------
# 409: nothing written
# ---------------------------------------------------------------------------

class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"


class AllDuplicatesError(ConflictError):
    code = "ALL_DUPLICATES"


# ---------------------------------------------------------------------------
# 500
# ---------------------------------------------------------------------------

class PersistenceError(AppError):
    status_code = 500
    code = "PERSISTENCE_ERROR"


async def error_response_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request-schema violations as VALIDATION_ERROR in the common envelope."""
    details = [
        {
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    log.warning(
        "http.validation_error",
        method=request.method,
        path=request.url.path,
        errors=details,
    )
    return await error_response_handler(
        request, ValidationError("Request validation failed", details=details)
    )
