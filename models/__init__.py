"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema, FrozenSchema
from models.column_match import (
    ValueType,
    SchemaField,
    ColumnMatch,
    FieldMatch,
    ColumnSuggestion,
    ColumnMatchResult,
    SchemaFieldListResponse,
    MatchHeadersRequest,
    MatchHeadersResponse,
    MatchColumnsRequest,
    MatchColumnsResponse,
)

__all__ = [
    # Base
    "BaseSchema",
    "FrozenSchema",

    # Column matching
    "ValueType",
    "SchemaField",
    "ColumnMatch",
    "FieldMatch",
    "ColumnSuggestion",
    "ColumnMatchResult",
    "SchemaFieldListResponse",
    "MatchHeadersRequest",
    "MatchHeadersResponse",
    "MatchColumnsRequest",
    "MatchColumnsResponse",
]
