"""
Normalizers for raw trade values.

Turn journal cell text ("BUY", "✓", "1.5%", "1:3", "GBP/USD 🇬🇧") into the
canonical values stored on a trade. Every function here is total: it accepts
any string and returns None (or False) instead of raising.
"""

import math
import re
from typing import Optional

from config.markets import MARKET_ALIASES
from config.trade_vocabulary import (
    BOOL_TRUE,
    DIRECTION_LONG,
    DIRECTION_SHORT,
    OUTCOME_BREAK_EVEN,
    OUTCOME_LOSE,
    OUTCOME_WIN,
)
from utils.text_utils import normalize_trim

# Regional indicator symbols (flag emoji halves)
_FLAG_EMOJI_RE = re.compile("[\U0001F1E0-\U0001F1FF]")
_MARKET_SEPARATORS_RE = re.compile(r"[\\/\-\s]+")

# EU style: dot = thousands, comma = decimal (1.234,56)
_EU_NUMBER_RE = re.compile(r"^\d{1,3}(\.\d{3})*,\d+$")
_NUMERIC_NOISE_RE = re.compile(r"[\s€$£¥%]")
_TRAILING_UNIT_RE = re.compile(r"[rRkK]\s*$")


# ===================
# MARKET
# ===================

def normalize_market(value: str) -> str:
    """
    Canonical symbol form: flag emoji and separators removed, upper-cased.

    "GBP/USD 🇬🇧" → "GBPUSD", "eur-usd" → "EURUSD"
    """
    if not value:
        return ""
    without_flags = _FLAG_EMOJI_RE.sub("", value)
    return _MARKET_SEPARATORS_RE.sub("", without_flags.upper())


def resolve_market_alias(value: str) -> str:
    """Normalize a symbol and apply plain-language aliases (Gold → XAUUSD)."""
    normalized = normalize_market(value)
    return MARKET_ALIASES.get(normalized, normalized)


# ===================
# DIRECTION / OUTCOME
# ===================

def is_direction(value: str) -> bool:
    """True if the value is in the long or short vocabulary."""
    lower = value.strip().lower()
    return lower in DIRECTION_LONG or lower in DIRECTION_SHORT


def normalize_direction(value: str) -> Optional[str]:
    """Normalize a raw direction value to "Long" or "Short"."""
    lower = value.strip().lower()
    if lower in DIRECTION_LONG:
        return "Long"
    if lower in DIRECTION_SHORT:
        return "Short"
    return None


def is_outcome(value: str) -> bool:
    """True if the value is in the win, lose or break-even vocabulary."""
    lower = value.strip().lower()
    return lower in OUTCOME_WIN or lower in OUTCOME_LOSE or lower in OUTCOME_BREAK_EVEN


def normalize_outcome(value: str) -> Optional[str]:
    """Normalize a raw trade outcome to "Win", "Lose" or "Break-Even"."""
    lower = value.strip().lower()
    if lower in OUTCOME_WIN:
        return "Win"
    if lower in OUTCOME_LOSE:
        return "Lose"
    if lower in OUTCOME_BREAK_EVEN:
        return "Break-Even"
    return None


# ===================
# NUMBERS
# ===================

def _to_finite_float(text: str) -> Optional[float]:
    try:
        number = float(text)
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_numeric(value: str) -> Optional[float]:
    """
    Parse a number after dropping percent signs and thousands commas.

    "1.5%" → 1.5, "1,250" → 1250.0, "abc" → None, "nan" → None
    """
    if not value:
        return None
    return _to_finite_float(value.replace("%", "").replace(",", "").strip())


def parse_risk_value(value: str) -> Optional[float]:
    """
    Convert a raw risk value to a numeric percentage.

    "1.5%" → 1.5, "2" → 2.0
    """
    return parse_numeric(value)


def parse_ratio_value(value: str) -> Optional[float]:
    """
    Parse a risk/reward ratio to a single reward-per-risk number.

    "1:3" → 3.0 | "2:1" → 0.5 | "2.5" → 2.5 | "2.5R" → 2.5 | "abc" → None

    Both sides of a colon must be numbers and the risk side must be non-zero.
    """
    if not value:
        return None

    text = value.strip()
    if ":" in text:
        left_text, right_text = text.split(":", 1)
        left = _to_finite_float(left_text.strip())
        right = _to_finite_float(right_text.strip())
        if left is None or right is None or left == 0:
            return None
        return right / left

    if text[-1:] in ("R", "r"):
        text = text[:-1]
    return parse_numeric(text)


def normalize_numeric_input(value: str) -> str:
    """
    Prepare a localized numeric string for float().

    Strips currency symbols, percent signs, whitespace and a trailing R/k
    ("1.5R" → "1.5"). Supports EU "1.234,56" and US "1,234.56" grouping.
    """
    text = _NUMERIC_NOISE_RE.sub("", normalize_trim(value or ""))
    text = _TRAILING_UNIT_RE.sub("", text)

    if _EU_NUMBER_RE.match(text):
        return text.replace(".", "").replace(",", ".")

    # US style thousands commas: 1,234.56
    if "," in text and "." in text and text.rfind(",") < text.rfind("."):
        text = text.replace(",", "")

    text = text.replace(",", ".")

    # Several dots: every dot but the last is a thousands separator
    parts = text.split(".")
    if len(parts) > 2:
        text = "".join(parts[:-1]) + "." + parts[-1]
    return text


def parse_localized_number(value: str) -> Optional[float]:
    """float() of normalize_numeric_input, or None when still not a number."""
    text = normalize_numeric_input(value)
    if not text:
        return None
    return _to_finite_float(text)


# ===================
# BOOLEANS
# ===================

def parse_bool(value: Optional[str]) -> bool:
    """
    Very flexible boolean: yes/no, 1/0, true/false, x, +/-, oui/non, ✓/✗ ...

    Anything not recognised as true is False.
    """
    text = " ".join(normalize_trim(value or "").lower().split())
    return text in BOOL_TRUE
