"""
Trade CSV parser.

Turns an uploaded trade journal CSV plus a column mapping
({csv_header: trade_field}) into normalized trade records ready for insert.
The mapping usually comes from the column matcher and is then confirmed or
edited by the user.

Rows are validated one by one: a bad row produces RowError entries and is left
out, it never aborts the whole file.
"""

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from io import BytesIO, StringIO
from pathlib import Path
import re
from typing import Any, Optional, Union

import pandas as pd
import structlog

from exceptions import TradeCsvParseError
from utils.text_utils import clean_cell, normalize_trim
from utils.trade_normalizers import (
    normalize_direction,
    normalize_outcome,
    parse_bool,
    parse_localized_number,
    parse_ratio_value,
    resolve_market_alias,
)
from utils.trade_pnl import calculate_trade_pnl

logger = structlog.get_logger(__name__)

CsvSource = Union[str, bytes, BytesIO, Path]

# Most row errors included in an API response
MAX_REPORTED_ERRORS = 50

DEFAULT_TRADE_TIME = "00:00:00"


# ===================
# DATA CLASSES
# ===================

@dataclass
class TradeRecord:
    """Parsed trade ready for database insertion."""
    trade_date: date
    trade_time: str
    day_of_week: str
    quarter: str
    market: str
    direction: str
    trade_outcome: str
    risk_per_trade: float
    risk_reward_ratio: float
    risk_reward_ratio_long: float = 0.0
    sl_size: float = 0.0
    displacement_size: float = 0.0
    fvg_size: Optional[float] = None
    confidence_at_entry: Optional[float] = None
    mind_state_at_entry: Optional[str] = None
    setup_type: str = ""
    liquidity: str = ""
    liquidity_taken: str = ""
    mss: str = ""
    evaluation: str = ""
    trend: Optional[str] = None
    trade_link: str = ""
    notes: Optional[str] = None
    break_even: bool = False
    reentry: bool = False
    news_related: bool = False
    local_high_low: bool = False
    partials_taken: bool = False
    executed: bool = True
    launch_hour: bool = False
    pnl_percentage: Optional[float] = None
    calculated_profit: Optional[float] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["trade_date"] = self.trade_date.isoformat()
        return data


@dataclass
class RowError:
    """Single validation error from parsing."""
    row: int
    field: str
    error: str
    value: Optional[str] = None


@dataclass
class TradeCsvParseResult:
    """Result of parsing a trade CSV file."""
    trades: list[TradeRecord] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)
    total_rows: int = 0
    skipped_rows: int = 0

    @property
    def success(self) -> bool:
        """True if at least one trade parsed."""
        return len(self.trades) > 0

    @property
    def invalid_rows(self) -> int:
        return len({e.row for e in self.errors})

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "trade_count": len(self.trades),
            "error_count": len(self.errors),
            "total_rows": self.total_rows,
            "skipped_rows": self.skipped_rows,
            "invalid_rows": self.invalid_rows,
            "trades": [t.to_dict() for t in self.trades],
            "errors": [
                {
                    "row": e.row,
                    "field": e.field,
                    "error": e.error,
                    "value": e.value,
                }
                for e in self.errors[:MAX_REPORTED_ERRORS]
            ],
        }


# ===================
# LOADING
# ===================

def detect_delimiter(first_line: str) -> str:
    """Semicolon when it outnumbers commas in the header line (EU exports), else comma."""
    return ";" if first_line.count(";") > first_line.count(",") else ","


def _read_text(file: CsvSource) -> str:
    """Get CSV text from raw text, bytes, a buffer or a path."""
    if isinstance(file, BytesIO):
        file = file.getvalue()
    elif isinstance(file, Path):
        file = file.read_bytes()
    elif isinstance(file, str) and "\n" not in file and "," not in file and ";" not in file:
        # Single token without separators: treat as a path
        path = Path(file)
        if path.is_file():
            file = path.read_bytes()

    if isinstance(file, bytes):
        for encoding in ("utf-8-sig", "cp1252", "latin-1"):
            try:
                return file.decode(encoding)
            except UnicodeDecodeError:
                continue
    return file


def load_csv_rows(file: CsvSource) -> tuple[list[str], list[dict[str, str]]]:
    """
    Load a CSV into cleaned headers and row dicts of raw cell text.

    Every cell comes back as a string ("" for missing). Rows with more cells
    than headers are truncated.

    Raises:
        TradeCsvParseError: If the file can't be read or has no header row
    """
    try:
        text = _read_text(file)
    except OSError as e:
        logger.error("csv_load_failed", error=str(e))
        raise TradeCsvParseError(
            message=f"Failed to read file: {str(e)}",
            details={"original_error": str(e)}
        )

    text = text.lstrip("\ufeff")
    first_line = next((line for line in text.splitlines() if line.strip()), "")
    if not first_line:
        raise TradeCsvParseError(message="CSV file is empty")

    sep = detect_delimiter(first_line)
    try:
        header_df = pd.read_csv(StringIO(text), sep=sep, dtype=str, nrows=0)
        width = len(header_df.columns)
        df = pd.read_csv(
            StringIO(text),
            sep=sep,
            dtype=str,
            keep_default_na=False,
            index_col=False,
            engine="python",
            on_bad_lines=lambda fields: fields[:width],
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError) as e:
        logger.error("csv_load_failed", error=str(e), separator=sep)
        raise TradeCsvParseError(
            message=f"Failed to read CSV: {str(e)}",
            details={"original_error": str(e)}
        )

    headers = [clean_cell(col) for col in df.columns]
    df.columns = headers
    rows = [
        {header: value if isinstance(value, str) else "" for header, value in record.items()}
        for record in df.to_dict(orient="records")
    ]

    logger.debug("csv_loaded", separator=sep, columns=len(headers), rows=len(rows))
    return headers, rows


def extract_csv_headers(csv_text: CsvSource) -> list[str]:
    """Header row only, with delimiter detection."""
    headers, _ = load_csv_rows(csv_text)
    return headers


# ===================
# VALUE PARSING
# ===================

_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})")
_DATETIME_SPLIT_RE = re.compile(r"[\sT]")
_TIME_RE = re.compile(r"(\d{1,2}):(\d{2})(?::(\d{2}))?\s*([AaPp][Mm])?")

# Day-first formats are tried before month-first ones
DATE_FORMATS = [
    "%d.%m.%Y",
    "%d/%m/%Y",
    "%Y.%m.%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%d-%m-%Y",
    "%d/%m/%y",
    "%m/%d/%y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
]


def parse_trade_date(value: str) -> Optional[date]:
    """
    Parse a journal date. ISO first, then EU day-first, then US month-first.

    A trailing time ("2025-01-15 09:30", "15.01.2025 09:30") is ignored.
    """
    text = normalize_trim(value)
    if not text:
        return None

    match = _ISO_DATE_RE.match(text)
    if match:
        try:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        except ValueError:
            return None

    candidates = [text]
    date_part = _DATETIME_SPLIT_RE.split(text, maxsplit=1)[0]
    if date_part != text:
        candidates.append(date_part)

    for candidate in candidates:
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(candidate, fmt).date()
            except ValueError:
                continue
    return None


def parse_trade_time(value: str) -> Optional[str]:
    """
    Find a time of day in the value and format it as HH:MM:SS.

    "9:30" → "09:30:00", "2:15 PM" → "14:15:00", "2025-01-15 09:30:12" → "09:30:12"
    """
    match = _TIME_RE.search(normalize_trim(value))
    if not match:
        return None

    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3) or 0)
    meridiem = (match.group(4) or "").lower()
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        hour = hour % 12 + (12 if meridiem == "pm" else 0)

    if hour > 23 or minute > 59 or second > 59:
        return None
    return f"{hour:02d}:{minute:02d}:{second:02d}"


def _quarter(trade_date: date) -> str:
    return f"Q{(trade_date.month - 1) // 3 + 1}"


def _optional_number(raw: str) -> Optional[float]:
    if not normalize_trim(raw):
        return None
    return parse_localized_number(raw)


def _parse_rr(raw: str) -> Optional[float]:
    if ":" in raw:
        return parse_ratio_value(normalize_trim(raw))
    return parse_localized_number(raw)


# ===================
# MAIN PARSER
# ===================

def parse_csv_trades(
    file: CsvSource,
    field_mapping: dict[str, Optional[str]],
    defaults: Optional[dict[str, Any]] = None,
) -> TradeCsvParseResult:
    """
    Parse a trade journal CSV using a column mapping.

    Args:
        file: CSV text, raw bytes, BytesIO or a path
        field_mapping: CSV header → trade field (None or "" skips the column)
        defaults: Optional "risk_per_trade", "risk_reward_ratio" and
            "account_balance" used when a row has no value

    Returns:
        TradeCsvParseResult with trades and per-row errors

    Raises:
        TradeCsvParseError: If the file can't be read
    """
    defaults = defaults or {}
    result = TradeCsvParseResult()

    headers, rows = load_csv_rows(file)

    missing_headers = [h for h, f in field_mapping.items() if f and h not in headers]
    if missing_headers:
        logger.warning("mapping_headers_not_in_file", headers=missing_headers)

    if not rows:
        result.errors.append(RowError(row=0, field="file", error="CSV file has no data rows"))
        return result

    result.total_rows = len(rows)
    default_risk = defaults.get("risk_per_trade")
    default_rr = defaults.get("risk_reward_ratio")
    account_balance = defaults.get("account_balance")

    for idx, row in enumerate(rows):
        row_num = idx + 2  # CSV row (1-indexed + header)

        values: dict[str, str] = {}
        for header in headers:
            trade_field = field_mapping.get(header)
            if trade_field:
                values[trade_field] = clean_cell(row.get(header))

        # Stats blocks and totals rows next to the trade table
        if all(v == "" for v in values.values()):
            result.skipped_rows += 1
            continue

        row_errors: list[RowError] = []

        # Date
        raw_date = values.get("trade_date", "")
        trade_date = parse_trade_date(raw_date)
        if not raw_date:
            row_errors.append(RowError(row_num, "trade_date", "Missing required field: Date"))
        elif trade_date is None:
            row_errors.append(RowError(
                row_num, "trade_date",
                "Invalid date (try YYYY-MM-DD, DD.MM.YYYY, DD/MM/YYYY or MM/DD/YYYY)",
                raw_date[:50],
            ))

        # Time: own column, else the time part of a combined date column
        raw_time = values.get("trade_time", "")
        if raw_time:
            trade_time = parse_trade_time(raw_time)
            if trade_time is None:
                row_errors.append(RowError(row_num, "trade_time", "Invalid time", raw_time[:50]))
        else:
            trade_time = parse_trade_time(raw_date) if raw_date else None
            trade_time = trade_time or DEFAULT_TRADE_TIME

        # Required text fields
        market = values.get("market", "")
        direction = values.get("direction", "")
        outcome = values.get("trade_outcome", "")
        for name, raw, label in (
            ("market", market, "Market"),
            ("direction", direction, "Direction"),
            ("trade_outcome", outcome, "Outcome"),
        ):
            if not raw:
                row_errors.append(RowError(row_num, name, f"Missing required field: {label}"))

        # Risk %
        raw_risk = values.get("risk_per_trade", "")
        risk = parse_localized_number(raw_risk) if raw_risk else default_risk
        if raw_risk and risk is None:
            row_errors.append(RowError(row_num, "risk_per_trade", "Risk % must be a number", raw_risk[:50]))
        elif risk is None:
            row_errors.append(RowError(
                row_num, "risk_per_trade",
                "Missing required field: Risk % (or set a default)",
            ))

        # R:R
        raw_rr = values.get("risk_reward_ratio", "")
        rr = _parse_rr(raw_rr) if raw_rr else default_rr
        if raw_rr and rr is None:
            row_errors.append(RowError(row_num, "risk_reward_ratio", "Risk:Reward Ratio must be a number", raw_rr[:50]))
        elif rr is None:
            row_errors.append(RowError(
                row_num, "risk_reward_ratio",
                "Missing required field: Risk:Reward Ratio (or set a default)",
            ))

        raw_sl = values.get("sl_size", "")
        sl_size = _optional_number(raw_sl)
        if raw_sl and sl_size is None:
            row_errors.append(RowError(row_num, "sl_size", "SL Size must be a number", raw_sl[:50]))

        if row_errors:
            result.errors.extend(row_errors)
            continue

        # Valid row: build the trade
        normalized_outcome = normalize_outcome(outcome)
        is_lose = normalized_outcome == "Lose"

        rr_long = _optional_number(values.get("risk_reward_ratio_long", ""))
        if rr_long is None:
            rr_long = 0.0 if is_lose else float(rr)

        break_even = parse_bool(values.get("break_even"))
        csv_profit = _optional_number(values.get("calculated_profit", ""))
        csv_pnl_pct = _optional_number(values.get("pnl_percentage", ""))

        computed = None
        if (csv_profit is None or csv_pnl_pct is None) and account_balance:
            computed = calculate_trade_pnl(
                normalized_outcome or "Win",
                risk,
                rr,
                break_even,
                account_balance,
            )

        trade = TradeRecord(
            trade_date=trade_date,
            trade_time=trade_time,
            day_of_week=trade_date.strftime("%A"),
            quarter=_quarter(trade_date),
            market=resolve_market_alias(market) or market,
            direction=normalize_direction(direction) or direction,
            trade_outcome=normalized_outcome or outcome,
            risk_per_trade=float(risk),
            risk_reward_ratio=float(rr),
            risk_reward_ratio_long=rr_long,
            sl_size=sl_size or 0.0,
            displacement_size=_optional_number(values.get("displacement_size", "")) or 0.0,
            fvg_size=_optional_number(values.get("fvg_size", "")),
            confidence_at_entry=_optional_number(values.get("confidence_at_entry", "")),
            mind_state_at_entry=values.get("mind_state_at_entry") or None,
            setup_type=values.get("setup_type", ""),
            liquidity=values.get("liquidity", ""),
            liquidity_taken=values.get("liquidity_taken", ""),
            mss=values.get("mss", ""),
            evaluation=values.get("evaluation", ""),
            trend=values.get("trend") or None,
            trade_link=values.get("trade_link", ""),
            notes=values.get("notes") or None,
            break_even=break_even,
            reentry=parse_bool(values.get("reentry")),
            news_related=parse_bool(values.get("news_related")),
            local_high_low=parse_bool(values.get("local_high_low")),
            partials_taken=parse_bool(values.get("partials_taken")),
            executed=parse_bool(values["executed"]) if "executed" in values else True,
            launch_hour=parse_bool(values.get("launch_hour")),
            pnl_percentage=csv_pnl_pct if csv_pnl_pct is not None else (computed or {}).get("pnl_percentage"),
            calculated_profit=csv_profit if csv_profit is not None else (computed or {}).get("calculated_profit"),
        )
        result.trades.append(trade)

    logger.info(
        "trade_csv_parsed",
        total_rows=result.total_rows,
        trades=len(result.trades),
        errors=len(result.errors),
        skipped=result.skipped_rows,
    )
    return result
