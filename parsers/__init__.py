"""
File parsers module.
"""

from parsers.trade_csv_parser import (
    detect_delimiter,
    load_csv_rows,
    extract_csv_headers,
    parse_csv_trades,
    TradeCsvParseResult,
    TradeRecord,
    RowError,
)

__all__ = [
    "detect_delimiter",
    "load_csv_rows",
    "extract_csv_headers",
    "parse_csv_trades",
    "TradeCsvParseResult",
    "TradeRecord",
    "RowError",
]
