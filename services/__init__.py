"""
Business logic services.

Header matching, value-pattern scoring and column assignment.
"""

from services.header_matcher_service import (
    match_headers,
    score_field,
    score_synonym,
    to_field_mapping,
)
from services.value_pattern_service import score_column, DETECTORS
from services.column_matcher_service import (
    ColumnMatcherService,
    get_column_matcher_service,
    extract_column_samples,
    match_csv_columns,
    match_csv_rows,
)

__all__ = [
    "match_headers",
    "score_field",
    "score_synonym",
    "to_field_mapping",
    "score_column",
    "DETECTORS",
    "ColumnMatcherService",
    "get_column_matcher_service",
    "extract_column_samples",
    "match_csv_columns",
    "match_csv_rows",
]
