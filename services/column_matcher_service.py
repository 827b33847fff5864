"""
CSV column matcher.

Maps the columns of an arbitrary trade journal export onto canonical trade
fields with zero AI calls. Runs as the fast first pass of an import; the
caller decides whether to fall back to an AI service for whatever is left in
`missing_required` or `suggestions`.

Pipeline:
1. Sample up to N non-empty values per column.
2. Score every (column, required field) pair from the values, plus a small
   bonus when the header contains a hint word.
3. Greedy one-to-one assignment, best score first.
4. Leftover columns are matched to optional fields by header text.
5. Diagnostics: combined date/time columns and ambiguous required fields.

Usage:
    result = match_csv_columns(column_samples)
    # or, from parsed rows:
    result = match_csv_rows(rows)
"""

from typing import Any, Mapping, Optional

import structlog

from config.settings import Settings, get_settings
from config.trade_schema import OPTIONAL_FIELDS, REQUIRED_FIELDS, get_schema_field
from models.column_match import ColumnMatchResult, ColumnSuggestion, FieldMatch
from services.header_matcher_service import HEADER_MATCH_THRESHOLD, score_field
from services.value_pattern_service import (
    HEADER_HINT_BONUS,
    header_hint,
    is_combined_datetime,
    score_column,
)
from utils.text_utils import clean_cell

logger = structlog.get_logger(__name__)

# Minimum composite score (0-1) for a value-based match
MIN_CONFIDENCE = 0.25

# Default number of non-empty samples inspected per column
MAX_SAMPLES = 20

# Most candidate columns listed in one ambiguity suggestion
MAX_SUGGESTED_CANDIDATES = 3

COMBINED_DATETIME_REASON = (
    "Column contains both date and time values; "
    "consider splitting it into separate date and time columns"
)


def extract_column_samples(
    rows: list[Mapping[str, Any]],
    max_samples: int = MAX_SAMPLES,
) -> dict[str, list[str]]:
    """
    Extract up to `max_samples` non-empty cleaned values per column.

    Column order follows first appearance across rows, so a column that is
    empty everywhere still shows up with an empty sample list.
    """
    samples: dict[str, list[str]] = {}
    for row in rows:
        for column, value in row.items():
            column_samples = samples.setdefault(column, [])
            if len(column_samples) >= max_samples:
                continue
            cleaned = clean_cell(value)
            if cleaned:
                column_samples.append(cleaned)
    return samples


def _greedy_assign(
    triples: list[tuple[str, str, float]],
    min_score: float,
    claimed_columns: set[str],
    claimed_fields: set[str],
) -> list[tuple[str, str, float]]:
    """
    Claim (column, field) pairs best score first, each side at most once.

    `triples` must already be sorted by descending score. The claimed sets are
    updated in place.
    """
    accepted = []
    for column, field, score in triples:
        if column in claimed_columns or field in claimed_fields:
            continue
        if score < min_score:
            continue
        accepted.append((column, field, score))
        claimed_columns.add(column)
        claimed_fields.add(field)
    return accepted


def _ambiguity_suggestions(
    missing_required: list[str],
    triples: list[tuple[str, str, float]],
    unmapped_columns: list[str],
) -> list[ColumnSuggestion]:
    """One suggestion per missing field that several unmapped columns could fill."""
    unmapped = set(unmapped_columns)
    suggestions = []
    for field in missing_required:
        candidates = []
        for column, candidate_field, score in triples:
            if candidate_field == field and column in unmapped and column not in candidates:
                candidates.append(column)
        candidates = candidates[:MAX_SUGGESTED_CANDIDATES]
        if len(candidates) > 1:
            suggestions.append(ColumnSuggestion(
                csv_column=" / ".join(candidates),
                candidate_columns=candidates,
                possible_fields=[field],
                reason=f'Multiple columns are possible matches for "{field}"; please select one manually',
            ))
    return suggestions


def match_csv_columns(
    column_samples: Mapping[str, list[str]],
    min_confidence: float = MIN_CONFIDENCE,
    *,
    header_threshold: float = HEADER_MATCH_THRESHOLD,
    header_hint_bonus: float = HEADER_HINT_BONUS,
    include_optional: bool = True,
    market_band: Optional[tuple[int, int]] = None,
) -> ColumnMatchResult:
    """
    Match CSV columns to trade fields from their sample values.

    Args:
        column_samples: CSV header → sample cell values
        min_confidence: Minimum value-based score (0-1) for required fields
        header_threshold: Minimum header similarity (0-1) for optional fields
        header_hint_bonus: Bonus for a header containing a field hint word
        include_optional: Also map leftover columns to optional fields by header
        market_band: (min, max) normalized symbol length for market detection

    Returns:
        ColumnMatchResult. Empty input gives no matches and every required
        field missing; this function does not raise on bad input.
    """
    columns = list(column_samples.keys())

    # 1. Score every (column x required field) pair
    triples: list[tuple[str, str, float]] = []
    for column in columns:
        samples = column_samples[column] or []
        for field in REQUIRED_FIELDS:
            value_score = score_column(samples, field, market_band=market_band)
            if value_score <= 0:
                continue
            bonus = header_hint(column, field, header_hint_bonus)
            triples.append((column, field, min(1.0, value_score + bonus)))

    # 2. Combined date+time columns
    suggestions: list[ColumnSuggestion] = []
    for column in columns:
        if is_combined_datetime(column_samples[column] or []):
            suggestions.append(ColumnSuggestion(
                csv_column=column,
                candidate_columns=[column],
                possible_fields=["trade_date", "trade_time"],
                reason=COMBINED_DATETIME_REASON,
            ))

    # 3. Greedy assignment, highest composite score first
    triples.sort(key=lambda triple: triple[2], reverse=True)
    claimed_columns: set[str] = set()
    claimed_fields: set[str] = set()
    matches: dict[str, FieldMatch] = {}

    for column, field, score in _greedy_assign(triples, min_confidence, claimed_columns, claimed_fields):
        matches[column] = FieldMatch(field=field, confidence=round(score, 2), source="value")

    # 4. Optional fields by header text, leftover columns only
    if include_optional:
        header_triples: list[tuple[str, str, float]] = []
        for column in columns:
            if column in claimed_columns:
                continue
            for field in OPTIONAL_FIELDS:
                score = score_field(column, get_schema_field(field)) / 100
                if score > 0:
                    header_triples.append((column, field, score))
        header_triples.sort(key=lambda triple: triple[2], reverse=True)

        for column, field, score in _greedy_assign(header_triples, header_threshold, claimed_columns, claimed_fields):
            matches[column] = FieldMatch(field=field, confidence=round(score, 2), source="header")

    # 5. Classify what is left
    unmapped_columns = [c for c in columns if c not in matches]
    matched_fields = {m.field for m in matches.values()}
    missing_required = [f for f in REQUIRED_FIELDS if f not in matched_fields]

    suggestions.extend(_ambiguity_suggestions(missing_required, triples, unmapped_columns))

    logger.info(
        "csv_columns_matched",
        columns=len(columns),
        matched=len(matches),
        unmapped=len(unmapped_columns),
        missing_required=missing_required,
        suggestions=len(suggestions),
    )

    return ColumnMatchResult(
        matches=matches,
        unmapped_columns=unmapped_columns,
        missing_required=missing_required,
        suggestions=suggestions,
    )


def match_csv_rows(
    rows: list[Mapping[str, Any]],
    max_samples: int = MAX_SAMPLES,
    **kwargs,
) -> ColumnMatchResult:
    """
    Convenience wrapper: sample raw CSV rows and run the matcher.

    Extra keyword arguments are passed to match_csv_columns.
    """
    return match_csv_columns(extract_column_samples(rows, max_samples), **kwargs)


class ColumnMatcherService:
    """
    Column matcher bound to application settings.

    Holds no state besides the (immutable) settings it was built with.
    """

    def __init__(self, app_settings: Optional[Settings] = None):
        self.settings = app_settings or get_settings()

    def _options(self, min_confidence: Optional[float], include_optional: bool) -> dict:
        return {
            "min_confidence": (
                self.settings.min_value_confidence if min_confidence is None else min_confidence
            ),
            "header_threshold": self.settings.header_match_threshold,
            "header_hint_bonus": self.settings.header_hint_bonus,
            "include_optional": include_optional,
            "market_band": (self.settings.market_min_length, self.settings.market_max_length),
        }

    def match_columns(
        self,
        column_samples: Mapping[str, list[str]],
        min_confidence: Optional[float] = None,
        include_optional: bool = True,
    ) -> ColumnMatchResult:
        """Match pre-extracted column samples."""
        return match_csv_columns(column_samples, **self._options(min_confidence, include_optional))

    def match_rows(
        self,
        rows: list[Mapping[str, Any]],
        max_samples: Optional[int] = None,
        min_confidence: Optional[float] = None,
        include_optional: bool = True,
    ) -> ColumnMatchResult:
        """Sample raw rows, then match."""
        samples = extract_column_samples(rows, max_samples or self.settings.csv_max_samples)
        return self.match_columns(samples, min_confidence, include_optional)


# Singleton instance
_column_matcher_service: Optional[ColumnMatcherService] = None


def get_column_matcher_service() -> ColumnMatcherService:
    """Get or create ColumnMatcherService instance."""
    global _column_matcher_service
    if _column_matcher_service is None:
        _column_matcher_service = ColumnMatcherService()
    return _column_matcher_service
