"""
Header fuzzy matcher.

Scores raw CSV header strings against the synonyms of every schema field.

Scores here are integers 0-100 (rapidfuzz's scale). They are converted to the
0-1 confidence used everywhere else when a ColumnMatch is built.
"""

import re
from typing import Iterable, Optional

import structlog
from rapidfuzz import fuzz, utils

from config.trade_schema import DB_SCHEMA
from models.column_match import ColumnMatch, SchemaField
from utils.text_utils import strip_accents

logger = structlog.get_logger(__name__)

# Default header acceptance threshold (0-1 scale, i.e. 75/100)
HEADER_MATCH_THRESHOLD = 0.75

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def _alnum_length(text: str) -> int:
    return len(_NON_ALNUM_RE.sub("", text.lower()))


def score_synonym(csv_header: str, synonym: str) -> int:
    """
    Score a CSV header against a single synonym. Returns 0-100.

    token_set_ratio gives 100 whenever one string's tokens are a subset of the
    other's, regardless of length: "rr" scores 100 against "rr potential".
    A length-coverage multiplier scales 60% of the raw score by how close the
    two lengths are, keeping a 40% floor:

        coverage = min(h, s) / max(h, s, 1)
        score    = round(raw * (0.4 + 0.6 * coverage))

    Lengths count only [a-z0-9] characters, after accents are stripped.
    """
    if not csv_header or not synonym:
        return 0

    header = strip_accents(csv_header)
    raw = fuzz.token_set_ratio(header, synonym, processor=utils.default_process)
    if raw <= 0:
        return 0

    header_len = _alnum_length(header)
    synonym_len = _alnum_length(synonym)
    coverage = min(header_len, synonym_len) / max(header_len, synonym_len, 1)

    return int(round(raw * (0.4 + 0.6 * coverage)))


def score_field(csv_header: str, schema_field: SchemaField) -> int:
    """Score a CSV header against all synonyms of a field; return the max."""
    return max(
        (score_synonym(csv_header, synonym) for synonym in schema_field.synonyms),
        default=0,
    )


def match_headers(
    csv_headers: list[str],
    threshold: Optional[float] = None,
    fields: Optional[Iterable[SchemaField]] = None,
) -> list[ColumnMatch]:
    """
    Match raw CSV headers to schema fields by header text alone.

    - Each schema field is assigned at most once (greedy highest-score-first).
    - Each header claims at most one field.
    - Headers below `threshold` come back with db_field=None.

    Args:
        csv_headers: Raw header strings, as they appear in the file
        threshold: Minimum confidence 0-1 to accept (default 0.75)
        fields: Schema fields to consider (default: the whole registry)

    Returns:
        One ColumnMatch per input header, in input order
    """
    if threshold is None:
        threshold = HEADER_MATCH_THRESHOLD
    schema_fields = list(DB_SCHEMA if fields is None else fields)
    min_score = threshold * 100

    pairs: list[tuple[int, int, int]] = []
    for ci, header in enumerate(csv_headers):
        for fi, schema_field in enumerate(schema_fields):
            score = score_field(header, schema_field)
            if score > 0 and score >= min_score:
                pairs.append((ci, fi, score))

    # Stable sort: ties keep header order, then registry order
    pairs.sort(key=lambda pair: pair[2], reverse=True)

    used_fields: set[int] = set()
    assignments: dict[int, tuple[int, int]] = {}
    for ci, fi, score in pairs:
        if ci in assignments or fi in used_fields:
            continue
        assignments[ci] = (fi, score)
        used_fields.add(fi)

    matches: list[ColumnMatch] = []
    for ci, header in enumerate(csv_headers):
        if ci not in assignments:
            matches.append(ColumnMatch(csv_header=header))
            continue
        fi, score = assignments[ci]
        schema_field = schema_fields[fi]
        matches.append(ColumnMatch(
            csv_header=header,
            db_field=schema_field.key,
            score=score / 100,
            label=schema_field.label,
            required=schema_field.required,
            value_type=schema_field.value_type,
        ))

    logger.debug(
        "headers_matched",
        headers=len(csv_headers),
        matched=len(assignments),
        threshold=threshold,
    )
    return matches


def to_field_mapping(matches: list[ColumnMatch]) -> dict[str, str]:
    """
    Convert ColumnMatch results to the mapping the row parser expects.

    Example: {"Symbol 🇬🇧": "market", "WIN": "trade_outcome"}
    """
    return {m.csv_header: m.db_field for m in matches if m.db_field}
