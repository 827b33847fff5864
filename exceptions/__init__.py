"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,

    # Schema
    SchemaFieldNotFoundError,

    # CSV import
    TradeCsvParseError,
    UploadTooLargeError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",

    # Schema
    "SchemaFieldNotFoundError",

    # CSV import
    "TradeCsvParseError",
    "UploadTooLargeError",
]
