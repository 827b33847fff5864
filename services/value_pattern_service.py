"""
Value-pattern matcher.

Scores a CSV column against each required trade field by looking only at
sample cell values, never at the header text. Every detector returns a 0-1
confidence: the share of non-empty samples that look like the field, with
partial credit for plausible but unusual values.

Detectors are total. Any string input, including "", "%%%", "nan" and very
long text, yields a score and never raises.
"""

import re
from typing import Callable, Optional

from config.markets import KNOWN_MARKETS, MARKET_MAX_LENGTH, MARKET_MIN_LENGTH
from config.trade_vocabulary import (
    DIRECTION_MAX_DISTINCT,
    HEADER_HINTS,
    OUTCOME_MAX_DISTINCT,
)
from utils.trade_normalizers import (
    is_direction,
    is_outcome,
    normalize_market,
    parse_numeric,
    parse_ratio_value,
)

FieldDetector = Callable[[list[str]], float]

# Share of samples that must look like "date + time" to flag a combined column
COMBINED_DATETIME_RATIO = 0.5

# Flat bonus for a header containing a hint word for the field
HEADER_HINT_BONUS = 0.1


# ===================
# DATE / TIME
# ===================

DATE_PATTERNS = [
    re.compile(r"^\d{4}-\d{2}-\d{2}$"),              # YYYY-MM-DD
    re.compile(r"^\d{2}/\d{2}/\d{4}$"),              # DD/MM/YYYY or MM/DD/YYYY
    re.compile(r"^\d{2}-\d{2}-\d{4}$"),              # DD-MM-YYYY
    re.compile(r"^\d{2}\.\d{2}\.\d{4}$"),            # DD.MM.YYYY
    re.compile(r"^\d{4}/\d{2}/\d{2}$"),              # YYYY/MM/DD
    re.compile(r"^\d{1,2}/\d{1,2}/\d{2,4}$"),        # M/D/YY or M/D/YYYY
    re.compile(r"^\d{1,2}-\d{1,2}-\d{2,4}$"),        # M-D-YY
    re.compile(r"^\d{1,2}\.\d{1,2}\.\d{2,4}$"),      # M.D.YY
    re.compile(r"^\d{1,2}\s+[A-Za-z]{3,}\s+\d{4}$"),  # 1 Jan 2025
    re.compile(r"^[A-Za-z]{3,}\s+\d{1,2},?\s+\d{4}$"),  # Jan 1, 2025
]

TIME_PATTERNS = [
    re.compile(r"^\d{1,2}:\d{2}$"),                  # HH:MM
    re.compile(r"^\d{1,2}:\d{2}:\d{2}$"),            # HH:MM:SS
    re.compile(r"^\d{1,2}:\d{2}\s*[APap][Mm]$"),     # HH:MM AM/PM
    re.compile(r"^\d{1,2}:\d{2}:\d{2}\s*[APap][Mm]$"),  # HH:MM:SS AM/PM
]

_EMBEDDED_TIME_RE = re.compile(r"\d{1,2}:\d{2}")
_DATETIME_SPLIT_RE = re.compile(r"[\sT]")


def _valid(samples: list[str]) -> list[str]:
    return [s for s in samples if s != ""]


def has_time_component(value: str) -> bool:
    """True if an H:MM time appears anywhere in the value."""
    return _EMBEDDED_TIME_RE.search(value) is not None


def _is_date(value: str) -> bool:
    return any(p.match(value) for p in DATE_PATTERNS)


def score_date(samples: list[str]) -> float:
    """Share of samples shaped like a pure date. Combined datetimes score 0."""
    valid = _valid(samples)
    if not valid:
        return 0.0
    matched = [s for s in valid if not has_time_component(s) and _is_date(s)]
    return len(matched) / len(valid)


def score_time(samples: list[str]) -> float:
    """Share of samples shaped like a time of day."""
    valid = _valid(samples)
    if not valid:
        return 0.0
    matched = [s for s in valid if any(p.match(s) for p in TIME_PATTERNS)]
    return len(matched) / len(valid)


def is_combined_datetime(
    samples: list[str],
    min_ratio: float = COMBINED_DATETIME_RATIO,
) -> bool:
    """
    True if the column holds date and time together ("2025-01-15 09:30:00").

    The date part is whatever precedes the first space or "T".
    """
    valid = _valid(samples)
    if not valid:
        return False
    count = 0
    for s in valid:
        date_part = _DATETIME_SPLIT_RE.split(s, maxsplit=1)[0]
        if _is_date(date_part) and has_time_component(s):
            count += 1
    return count / len(valid) >= min_ratio


# ===================
# MARKET
# ===================

MARKET_PLAIN_RE = re.compile(r"^[A-Z][A-Z0-9]{1,9}$")      # EURUSD, NAS100
MARKET_SLASH_RE = re.compile(r"^[A-Z]{2,6}/[A-Z]{2,4}$")   # EUR/USD
MARKET_DASH_RE = re.compile(r"^[A-Z]{2,6}-[A-Z]{2,4}$")    # EUR-USD


def score_market(
    samples: list[str],
    min_length: int = MARKET_MIN_LENGTH,
    max_length: int = MARKET_MAX_LENGTH,
) -> float:
    """
    Average per-sample symbol score.

    1.0 for a known symbol, 0.75 for a symbol-shaped value, 0 otherwise.
    Values whose normalized length falls outside the band score 0.
    """
    valid = _valid(samples)
    if not valid:
        return 0.0
    score = 0.0
    for s in valid:
        normalized = normalize_market(s)
        if not min_length <= len(normalized) <= max_length:
            continue
        if normalized in KNOWN_MARKETS:
            score += 1
            continue
        upper = s.strip().upper()
        if (
            MARKET_PLAIN_RE.match(upper)
            or MARKET_SLASH_RE.match(upper)
            or MARKET_DASH_RE.match(upper)
        ):
            score += 0.75
    return score / len(valid)


# ===================
# CATEGORICAL
# ===================

def _score_vocabulary(
    samples: list[str],
    matches: Callable[[str], bool],
    max_distinct: int,
) -> float:
    """
    1.0 when every distinct value is vocabulary and there are few of them,
    otherwise the share of samples in the vocabulary.
    """
    valid = _valid(samples)
    if not valid:
        return 0.0
    unique = {s.strip().lower() for s in valid}
    if len(unique) <= max_distinct and all(matches(u) for u in unique):
        return 1.0
    return sum(1 for s in valid if matches(s)) / len(valid)


def score_direction(samples: list[str]) -> float:
    """Direction column confidence (long/buy vs short/sell vocabulary)."""
    return _score_vocabulary(samples, is_direction, DIRECTION_MAX_DISTINCT)


def score_outcome(samples: list[str]) -> float:
    """Trade outcome confidence (win / lose / break-even vocabulary)."""
    return _score_vocabulary(samples, is_outcome, OUTCOME_MAX_DISTINCT)


# ===================
# NUMERIC
# ===================

def _band_score(number: float, full: tuple[float, float], half: tuple[float, float]) -> float:
    if not half[0] <= number <= half[1]:
        return 0.0
    return 1.0 if full[0] <= number <= full[1] else 0.5


def score_risk_per_trade(samples: list[str]) -> float:
    """
    Risk % confidence.

    Full credit in [0.25, 10], half in [0.05, 20]. Ratio-shaped values
    ("1:2") are skipped. An explicit "%" anywhere adds 0.2 (capped at 1).
    """
    valid = _valid(samples)
    if not valid:
        return 0.0
    score = 0.0
    has_percent = False
    for s in valid:
        if ":" in s:
            continue
        if "%" in s:
            has_percent = True
        number = parse_numeric(s)
        if number is not None:
            score += _band_score(number, (0.25, 10), (0.05, 20))
    base = score / len(valid)
    return min(1.0, base + 0.2) if has_percent else base


def score_risk_reward_ratio(samples: list[str]) -> float:
    """
    R:R confidence.

    Accepts "L:R" (reward per risk = R/L) or a bare number. Full credit in
    [0.5, 10], half in [0.1, 20]. Percentages are skipped. Colon format adds
    0.2 (capped at 1).
    """
    valid = _valid(samples)
    if not valid:
        return 0.0
    score = 0.0
    has_colon = False
    for s in valid:
        if "%" in s:
            continue
        if ":" in s:
            has_colon = True
        number = parse_ratio_value(s)
        if number is not None:
            score += _band_score(number, (0.5, 10), (0.1, 20))
    base = score / len(valid)
    return min(1.0, base + 0.2) if has_colon else base


# ===================
# HEADER HINT
# ===================

def header_hint(csv_header: str, field: str, bonus: float = HEADER_HINT_BONUS) -> float:
    """Flat bonus if the lower-cased header contains a hint word for `field`."""
    lower = csv_header.lower()
    hints = HEADER_HINTS.get(field, ())
    return bonus if any(h in lower for h in hints) else 0.0


# ===================
# DETECTOR MAP
# ===================

DETECTORS: dict[str, FieldDetector] = {
    "trade_date": score_date,
    "trade_time": score_time,
    "market": score_market,
    "direction": score_direction,
    "trade_outcome": score_outcome,
    "risk_per_trade": score_risk_per_trade,
    "risk_reward_ratio": score_risk_reward_ratio,
}


def score_column(
    samples: list[str],
    field: str,
    market_band: Optional[tuple[int, int]] = None,
) -> float:
    """
    Value confidence that a column holds `field`. 0 for fields with no detector.

    `market_band` overrides the (min, max) normalized symbol length.
    """
    if field == "market" and market_band is not None:
        return score_market(samples, *market_band)
    detector = DETECTORS.get(field)
    if detector is None:
        return 0.0
    return detector(samples)
