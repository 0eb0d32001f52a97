"""
hatchjudge/errors.py
Centralized API error handling.

ERROR RESPONSE STRUCTURE:
{
    "success": false,
    "error": "ErrorType",
    "message": "Human-readable description",
    "code": "UNIQUE_ERROR_CODE",
    "details": {} (optional)
}

HTTP STATUS CODE DISCIPLINE:
- 200: Successful, valid request
- 400: Invalid input (score, count, deliverables)
- 401: Authentication missing or expired
- 403: Caller is not an admin of the hackathon
- 404: Hackathon, phase, team or submission does not exist
- 409: Request conflicts with current state (eliminate all, phase closed)
- 422: Validation error (Pydantic)
- 429: Rate limit exceeded
- 503: Storage unavailable
- 500: NEVER caused by user input (internal only)
"""

import logging
from typing import Optional, Dict, Any

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from hatchjudge.engine.errors import (
    CannotEliminateAll,
    HackathonNotFound,
    InvalidCount,
    InvalidScore,
    InvalidSubmission,
    JudgingError,
    PhaseNotActive,
    PhaseNotFound,
    StaleSnapshot,
    StorageFailure,
    SubmissionNotFound,
    TeamNotFound,
)

logger = logging.getLogger(__name__)


class ErrorCode:
    """Unique error codes for machine-readable error handling"""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_SCORE = "INVALID_SCORE"
    INVALID_COUNT = "INVALID_COUNT"
    INVALID_SUBMISSION = "INVALID_SUBMISSION"

    AUTH_REQUIRED = "AUTH_REQUIRED"
    AUTH_INVALID = "AUTH_INVALID"

    FORBIDDEN = "FORBIDDEN"
    NOT_HACKATHON_ADMIN = "NOT_HACKATHON_ADMIN"

    NOT_FOUND = "NOT_FOUND"
    HACKATHON_NOT_FOUND = "HACKATHON_NOT_FOUND"
    PHASE_NOT_FOUND = "PHASE_NOT_FOUND"
    TEAM_NOT_FOUND = "TEAM_NOT_FOUND"
    SUBMISSION_NOT_FOUND = "SUBMISSION_NOT_FOUND"

    CANNOT_ELIMINATE_ALL = "CANNOT_ELIMINATE_ALL"
    PHASE_NOT_ACTIVE = "PHASE_NOT_ACTIVE"
    STALE_SNAPSHOT = "STALE_SNAPSHOT"

    RATE_LIMITED = "RATE_LIMITED"

    INTERNAL_ERROR = "INTERNAL_ERROR"
    STORAGE_FAILURE = "STORAGE_FAILURE"


class ErrorResponse(BaseModel):
    """Standard error response model"""
    success: bool = False
    error: str
    message: str
    code: str
    details: Optional[Dict[str, Any]] = None


class APIError(Exception):
    """Base API exception with consistent structure"""

    def __init__(
        self,
        status_code: int,
        error: str,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.error = error
        self.message = message
        self.code = code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "success": False,
            "error": self.error,
            "message": self.message,
            "code": self.code
        }
        if self.details:
            result["details"] = self.details
        return result

    def to_response(self) -> JSONResponse:
        """Convert to FastAPI JSONResponse"""
        return JSONResponse(status_code=self.status_code, content=self.to_dict())


class BadRequestError(APIError):
    """400 Bad Request - Invalid input"""
    def __init__(self, message: str, code: str = ErrorCode.INVALID_INPUT, details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error="Bad Request",
            message=message,
            code=code,
            details=details
        )


class UnauthorizedError(APIError):
    """401 Unauthorized - Authentication required"""
    def __init__(self, message: str = "Authentication required", code: str = ErrorCode.AUTH_REQUIRED):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error="Unauthorized",
            message=message,
            code=code
        )


class ForbiddenError(APIError):
    """403 Forbidden - Access denied"""
    def __init__(self, message: str, code: str = ErrorCode.FORBIDDEN, details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            error="Forbidden",
            message=message,
            code=code,
            details=details
        )


class NotFoundError(APIError):
    """404 Not Found - Resource does not exist"""
    def __init__(self, message: str, code: str = ErrorCode.NOT_FOUND):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error="Not Found",
            message=message,
            code=code
        )


class ConflictError(APIError):
    """409 Conflict - Request is valid but not allowed in the current state"""
    def __init__(self, message: str, code: str, details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error="Conflict",
            message=message,
            code=code,
            details=details
        )


class ServiceUnavailableError(APIError):
    """503 Service Unavailable - Storage could not complete the request"""
    def __init__(self, message: str = "Storage is unavailable. Please try again later."):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error="Service Unavailable",
            message=message,
            code=ErrorCode.STORAGE_FAILURE
        )


_NOT_FOUND_ERRORS = (HackathonNotFound, PhaseNotFound, TeamNotFound, SubmissionNotFound)
_BAD_REQUEST_ERRORS = (InvalidScore, InvalidCount, InvalidSubmission)
_CONFLICT_ERRORS = (CannotEliminateAll, PhaseNotActive, StaleSnapshot)


def judging_error_to_api_error(error: JudgingError) -> APIError:
    """Map an engine error onto the HTTP error contract."""
    if isinstance(error, _BAD_REQUEST_ERRORS):
        return BadRequestError(error.message, code=error.code)
    if isinstance(error, _NOT_FOUND_ERRORS):
        return NotFoundError(error.message, code=error.code)
    if isinstance(error, CannotEliminateAll):
        return ConflictError(
            error.message,
            code=error.code,
            details={"count": error.count, "team_count": error.team_count},
        )
    if isinstance(error, _CONFLICT_ERRORS):
        return ConflictError(error.message, code=error.code)
    if isinstance(error, StorageFailure):
        # The cause is logged by the store; never echoed to the client
        return ServiceUnavailableError()

    logger.error(f"Unmapped judging error {type(error).__name__}: {error.message}")
    return APIError(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error="Internal Error",
        message="An internal error occurred",
        code=ErrorCode.INTERNAL_ERROR,
    )
