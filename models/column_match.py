"""
Column matching models.

Shapes shared by the schema registry, the header matcher and the
value-pattern matcher. All confidences are on a 0-1 scale.
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import Field

from models.base import BaseSchema, FrozenSchema


class ValueType(str, Enum):
    """Kind of value a canonical trade field stores."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"


class SchemaField(FrozenSchema):
    """Canonical trade attribute that a CSV column can be mapped onto."""

    key: str = Field(..., description="Stable identifier used as the mapping target")
    label: str = Field(..., description="Human-readable name")
    synonyms: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Alternate header spellings, abbreviations and translations"
    )
    required: bool = False
    value_type: ValueType
    description: str = ""


class ColumnMatch(BaseSchema):
    """Header-matcher verdict for one CSV header."""

    csv_header: str
    db_field: Optional[str] = None
    score: float = Field(0.0, ge=0.0, le=1.0, description="Confidence 0-1")
    label: str = "Ignore"
    required: bool = False
    value_type: Optional[ValueType] = None


class FieldMatch(BaseSchema):
    """Accepted mapping of one CSV column to a canonical field."""

    field: str
    confidence: float = Field(ge=0.0, le=1.0, description="Confidence 0-1")
    source: Literal["value", "header"] = "value"


class ColumnSuggestion(BaseSchema):
    """Hint for the user about a column the matcher could not settle alone."""

    csv_column: str = Field(description="Column name, or candidate names joined with ' / '")
    candidate_columns: list[str] = Field(default_factory=list)
    possible_fields: list[str] = Field(default_factory=list)
    reason: str


class ColumnMatchResult(BaseSchema):
    """
    Aggregate result of matching one CSV file.

    Built fresh for every import attempt and never persisted.
    """

    matches: dict[str, FieldMatch] = Field(default_factory=dict)
    unmapped_columns: list[str] = Field(default_factory=list)
    missing_required: list[str] = Field(default_factory=list)
    suggestions: list[ColumnSuggestion] = Field(default_factory=list)

    @property
    def field_mapping(self) -> dict[str, str]:
        """CSV header -> canonical field key, ready for the row parser."""
        return {header: match.field for header, match in self.matches.items()}

    @property
    def needs_review(self) -> bool:
        """True when the user (or a fallback service) still has work to do."""
        return bool(self.missing_required or self.suggestions)


# ===================
# API REQUEST / RESPONSE
# ===================

class SchemaFieldListResponse(BaseSchema):
    """Schema registry listing."""

    data: list[SchemaField]
    total: int


class MatchHeadersRequest(BaseSchema):
    """Header-only matching request."""

    headers: list[str] = Field(default_factory=list)
    threshold: Optional[float] = Field(None, ge=0.0, le=1.0)


class MatchHeadersResponse(BaseSchema):
    """Header-only matching response."""

    matches: list[ColumnMatch]
    field_mapping: dict[str, str]


class MatchColumnsRequest(BaseSchema):
    """
    Value-based matching request.

    Either pre-extracted `column_samples` or raw `rows` (header -> cell) may be
    sent; samples are derived from rows when both are present.
    """

    column_samples: dict[str, list[str]] = Field(default_factory=dict)
    rows: Optional[list[dict[str, Optional[str]]]] = None
    min_confidence: Optional[float] = Field(None, ge=0.0, le=1.0)
    max_samples: Optional[int] = Field(None, ge=1, le=1000)
    include_optional: bool = True


class MatchColumnsResponse(BaseSchema):
    """Value-based matching response with derived fields materialized."""

    matches: dict[str, FieldMatch] = Field(default_factory=dict)
    unmapped_columns: list[str] = Field(default_factory=list)
    missing_required: list[str] = Field(default_factory=list)
    suggestions: list[ColumnSuggestion] = Field(default_factory=list)
    field_mapping: dict[str, str] = Field(default_factory=dict)
    needs_review: bool = False

    @classmethod
    def from_result(cls, result: ColumnMatchResult) -> "MatchColumnsResponse":
        """Copy a result and materialize its derived properties."""
        return cls(
            matches=result.matches,
            unmapped_columns=result.unmapped_columns,
            missing_required=result.missing_required,
            suggestions=result.suggestions,
            field_mapping=result.field_mapping,
            needs_review=result.needs_review,
        )
