"""
Vocabularies for categorical trade values and header hints.

All comparisons against these sets are done on lower-cased, trimmed values.
Extend the sets here; the detectors and normalizers pick changes up as-is.
"""

# =============================================================================
# DIRECTION
# =============================================================================

DIRECTION_LONG = frozenset({
    "long", "buy", "l", "b", "bto", "bo", "long position",
    "buy limit", "buy stop", "compra",
})

DIRECTION_SHORT = frozenset({
    "short", "sell", "s", "st", "sto", "so", "short position",
    "sell limit", "sell stop", "venta",
})

# Max distinct values for the "whole column is direction vocabulary" shortcut
DIRECTION_MAX_DISTINCT = 4


# =============================================================================
# TRADE OUTCOME
# =============================================================================

OUTCOME_WIN = frozenset({
    "win", "won", "w", "profit", "tp", "take profit", "winner", "✓",
    "ganada", "profitable",
})

OUTCOME_LOSE = frozenset({
    "loss", "lose", "l", "sl", "stop", "stop loss", "loser", "stopped out",
    "✗", "perdida", "lost",
})

OUTCOME_BREAK_EVEN = frozenset({
    "break-even", "breakeven", "be", "b/e", "break even", "scratch", "empate",
})

OUTCOME_MAX_DISTINCT = 5


# =============================================================================
# BOOLEANS
# =============================================================================

BOOL_TRUE = frozenset({
    "yes", "y", "true", "1", "+", "on", "ok", "positive", "x", "check",
    "checked", "affirmative", "correct", "✓", "oui", "si", "sí", "ja", "da", "sim",
})

BOOL_FALSE = frozenset({
    "no", "n", "false", "0", "-", "off", "negative", "nope", "none", "✗",
    "non", "nein", "нет", "não",
})


# =============================================================================
# HEADER HINTS
# =============================================================================
# Substrings that, when present in a lower-cased header, add a small bonus to
# a column whose values already look like the field. Tie-breaker only.

HEADER_HINTS = {
    "trade_date": ("date", "fecha", "datum", "dat", "day"),
    "trade_time": ("time", "hour", "heure", "zeit", "entry time", "open time"),
    "market": ("market", "pair", "symbol", "instrument", "asset", "currency", "ticker"),
    "direction": ("direction", "side", "type", "action", "buy", "sell", "position"),
    "trade_outcome": ("outcome", "result", "win", "loss", "pnl result", "w/l"),
    "risk_per_trade": ("risk", "% risk", "risk %", "risk_pct", "risk amount", "%"),
    "risk_reward_ratio": ("rr", "r/r", "r:r", "ratio", "reward", "risk reward", "rr ratio"),
}
