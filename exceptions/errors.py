"""
Custom exception classes for the application.

Every error carries a stable code, an HTTP status and a details dict, and
serializes to the standard API error body via to_dict().
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "SCHEMA_FIELD_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


# ===================
# SCHEMA ERRORS
# ===================

class SchemaFieldNotFoundError(NotFoundError):
    """Unknown trade schema field key."""

    def __init__(self, key: str):
        super().__init__(
            resource="Schema field",
            identifier=key,
            code="SCHEMA_FIELD_NOT_FOUND"
        )


# ===================
# CSV IMPORT ERRORS
# ===================

class TradeCsvParseError(ValidationError):
    """Trade CSV could not be read, or the column mapping is unusable."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="TRADE_CSV_PARSE_ERROR",
            message=message,
            details=details
        )


class UploadTooLargeError(AppError):
    """Uploaded file exceeds the configured size limit (413)."""

    def __init__(self, size: int, limit: int):
        super().__init__(
            code="UPLOAD_TOO_LARGE",
            message=f"File is {size} bytes; the limit is {limit} bytes",
            status_code=413,
            details={"size": size, "limit": limit}
        )
