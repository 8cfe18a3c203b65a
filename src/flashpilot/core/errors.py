"""Custom exceptions and error response schemas."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Standardized error response."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict[str, Any]] = Field(None, description="Additional context")


class AppError(Exception):
    """Base exception for all app-level errors."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self) -> ErrorDetail:
        """Convert to API response schema."""
        return ErrorDetail(
            code=self.code,
            message=self.message,
            details=self.details if self.details else None,
        )


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=422,
            details=details,
        )


class InvalidMessageLevelError(ValidationError):
    """Raised when a flash message level name is not recognized."""

    def __init__(self, level: str):
        super().__init__(
            message=f"Unknown message level: {level!r}",
            details={"level": level},
        )


class SessionStoreError(AppError):
    """Raised when the session backend cannot store a record."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="SESSION_STORE_ERROR",
            message=message,
            status_code=500,
            details=details,
        )


class MessagesNotLoadedError(AppError):
    """Raised when messages are requested outside the messages middleware."""

    def __init__(self):
        super().__init__(
            code="MESSAGES_NOT_LOADED",
            message="Flash messages are not available; is MessagesManagerMiddleware installed?",
            status_code=500,
        )
