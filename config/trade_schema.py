"""
Canonical trade schema registry.

Every field a CSV column can be imported into, with the header variants seen
in MT4/MT5 exports and hand-kept journals. The synonym lists are data: add a
spelling here and both matchers use it without code changes.

Derived P&L fields (calculated_profit, pnl_percentage) are not listed: they
are computed from risk_per_trade and risk_reward_ratio on import.
"""

from typing import Optional

from models.column_match import SchemaField, ValueType


def _field(key, label, synonyms, value_type, description, required=False):
    return SchemaField(
        key=key,
        label=label,
        synonyms=tuple(synonyms),
        required=required,
        value_type=value_type,
        description=description,
    )


DB_SCHEMA: tuple[SchemaField, ...] = (
    # =========================================================================
    # REQUIRED
    # =========================================================================
    _field(
        "trade_date", "Trade Date",
        [
            "trade_date", "date", "open date", "close date", "deal date",
            "trade day", "entry date", "open_date", "close_date", "deal_date",
            "tradedate", "opendate", "closedate",
            "datetime", "trade datetime", "open datetime",
            "execution date", "filled date", "transaction date",
            "day traded", "date traded",
            "fecha", "datum",
        ],
        ValueType.DATE, "Date the trade was opened (any format)", required=True,
    ),
    _field(
        "trade_time", "Trade Time",
        [
            "trade_time", "time", "open time", "entry time", "close time",
            "timestamp", "open_time", "entry_time", "hour", "tradetime",
            "opentime", "closetime",
            "close_time", "fill time", "execution time", "trade timestamp",
            "time of entry", "time entered", "entry hour",
            "hora", "zeit", "heure",
        ],
        ValueType.TIME, "Trade entry time (HH:mm or HH:mm:ss)", required=True,
    ),
    _field(
        "market", "Market / Symbol",
        [
            "market", "symbol", "pair", "instrument", "asset", "ticker",
            "sym", "currency pair", "security", "product", "contract",
            "currency_pair", "currencypair", "ccy", "fx pair",
            "trade symbol", "trading pair", "underlying", "commodity",
            "index", "stock", "equity", "crypto", "coin",
            "cross", "fx cross", "name", "code",
            "pair indices", "pair/indices", "pairs indices", "symbol pair",
            "pair symbol", "symbol/pair", "market symbol", "instrument name",
            "par", "mercado", "simbolo",
        ],
        ValueType.STRING, "Trading symbol e.g. EURUSD, XAUUSD", required=True,
    ),
    _field(
        "direction", "Direction",
        [
            "direction", "type", "side", "order type", "trade type", "action",
            "buy sell", "long short", "position", "operation", "order_type",
            "trade_type", "buy/sell", "b/s", "buysell",
            "cmd", "deal type", "pos type", "position type", "pos_type",
            "trade direction", "entry direction", "order side",
            "long or short", "buy or sell",
            "direccion", "richtung",
        ],
        ValueType.STRING, "Long or Short (buy/sell)", required=True,
    ),
    _field(
        "trade_outcome", "Trade Outcome",
        [
            "trade_outcome", "outcome", "result", "win", "loss", "win loss",
            "status", "trade result", "pnl result", "win/loss", "w/l",
            "tradeoutcome", "winloss", "win_loss",
            "verdict", "trade status", "success", "profit loss result",
            "hit sl", "hit tp", "closed result", "p/l result",
            "resultado", "ergebnis",
        ],
        ValueType.STRING, "Win or Lose", required=True,
    ),
    _field(
        "risk_per_trade", "Risk Per Trade (%)",
        [
            "risk_per_trade", "risk", "risk percent", "risk pct", "risk %",
            "% risk", "r", "risk amount", "position risk", "risk per trade",
            "riskpct", "risk_pct", "risk_%", "%_risk",
            "risk percentage", "account risk", "capital at risk",
            "risked", "max risk", "stake", "%risk", "risk size",
            "riesgo", "risiko",
        ],
        ValueType.NUMBER, "Risk percentage per trade (e.g. 1 = 1%)", required=True,
    ),
    _field(
        "risk_reward_ratio", "Risk/Reward Ratio",
        [
            "risk_reward_ratio", "rr", "r r", "rr ratio", "risk reward",
            "reward risk", "r:r", "risk to reward", "tp sl ratio", "risk/reward",
            "rr_ratio", "r_r", "rrr",
            "planned rr", "intended rr", "setup rr", "initial rr",
            "reward to risk", "r2r", "rr setup", "r/r",
            "rr multiple", "rr-multiple", "r multiple", "r-multiple", "rmultiple",
            "rr_multiple", "r_multiple",
        ],
        ValueType.NUMBER, "Risk to reward ratio (e.g. 2.0 = 1:2)", required=True,
    ),

    # =========================================================================
    # OPTIONAL - NUMERIC
    # =========================================================================
    _field(
        "sl_size", "Stop Loss Size",
        [
            "sl_size", "sl", "stop loss", "stoploss", "sl pips", "stop pips",
            "s/l", "sl distance", "stop_loss", "slsize", "sl_pips",
            "stop loss pips", "stop loss size", "sl size pips", "sl points",
            "stop distance", "stop points", "sl pts", "pips sl",
            "stop in pips", "slp",
        ],
        ValueType.NUMBER, "Stop loss size in pips",
    ),
    _field(
        "risk_reward_ratio_long", "Potential R:R",
        [
            "risk_reward_ratio_long", "actual rr", "achieved rr", "final rr",
            "realised rr", "actual risk reward", "target rr", "max rr",
            "achieved_rr", "actual_rr",
            "realized rr", "result rr", "exit rr", "closed rr",
            "final risk reward", "actual r r",
            "potential rr", "rr potential", "potential r r", "potential risk reward",
            "potential_rr", "rr_potential",
        ],
        ValueType.NUMBER, "Actual or potential risk/reward ratio",
    ),
    _field(
        "displacement_size", "Displacement Size",
        [
            "displacement_size", "displacement", "impulse", "impulse size",
            "move size", "displacementsize",
            "candle size", "displacement pips", "disp", "disp size",
            "move pips", "displacement move",
        ],
        ValueType.NUMBER, "Displacement/impulse move size in pips",
    ),
    _field(
        "fvg_size", "FVG Size",
        [
            "fvg_size", "fvg", "fair value gap", "gap size", "imbalance size",
            "fvgsize",
            "imbalance", "imb", "imb size", "void size", "price gap",
            "fvg pips", "inefficiency", "liquidity void",
        ],
        ValueType.NUMBER, "Fair Value Gap size in pips",
    ),
    _field(
        "confidence_at_entry", "Confidence at Entry",
        [
            "confidence_at_entry", "confidence", "conviction", "entry confidence",
            "certainty", "conf",
            "entry conviction", "confidence score", "confidence level",
            "rating at entry", "trade confidence", "mental clarity",
        ],
        ValueType.NUMBER, "Confidence level at entry (1-10)",
    ),
    _field(
        "mind_state_at_entry", "Mind State at Entry",
        [
            "mind_state_at_entry", "mind state", "psychology", "mental state",
            "emotional state", "focus", "mindstate",
            "mindset", "emotion", "emotions", "mood", "mental",
            "mental score", "psychology score", "focus level",
            "state of mind", "mental status",
        ],
        ValueType.NUMBER, "Mental state at entry (1-10)",
    ),

    # =========================================================================
    # OPTIONAL - STRING
    # =========================================================================
    _field(
        "setup_type", "Setup Type",
        [
            "setup_type", "setup", "pattern", "strategy", "trade setup",
            "entry model", "model", "setup name", "signal", "setuptype",
            "trade pattern", "entry type", "trade model", "system",
            "confluence", "reason", "entry reason", "trade reason",
            "trigger", "entry trigger", "why",
        ],
        ValueType.STRING, "Trading setup or pattern used",
    ),
    _field(
        "liquidity", "Liquidity",
        [
            "liquidity", "liquidity type", "liq", "structure", "liquidity level",
            "liq_type",
            "pool", "liquidity pool", "target liquidity", "liq target",
            "buy side", "sell side", "bsl", "ssl",
        ],
        ValueType.STRING, "Liquidity level targeted",
    ),
    _field(
        "liquidity_taken", "Liquidity Taken",
        [
            "liquidity_taken", "liq taken", "taken liquidity", "sweep",
            "liquidity swept", "liquiditytaken",
            "swept", "bsl taken", "ssl taken", "liquidity grab",
            "stop hunt", "equal highs", "equal lows",
            "prev high low", "previous high low",
        ],
        ValueType.STRING, "Which liquidity level was swept",
    ),
    _field(
        "mss", "MSS",
        [
            "mss", "market structure", "structure shift", "choch", "bos",
            "break of structure", "market_structure",
            "change of character", "choch bos", "market shift",
            "structure break", "market structure shift", "bos choch",
        ],
        ValueType.STRING, "Market structure shift type",
    ),
    _field(
        "evaluation", "Evaluation",
        [
            "evaluation", "grade", "score", "quality", "trade quality", "rating",
            "review",
            "mark", "feedback", "trade grade", "trade score", "trade rating",
            "execution quality", "execution score", "self assessment",
            "performance",
        ],
        ValueType.STRING, "Trade quality evaluation (A+, A, B, C)",
    ),
    _field(
        "trend", "Trend",
        [
            "trend", "market trend", "bias", "directional bias", "overall trend",
            "htf bias", "htf_bias",
            "market bias", "higher tf bias", "higher timeframe bias",
            "macro trend", "daily bias", "weekly bias", "trend direction",
            "bullish bearish", "htf trend",
        ],
        ValueType.STRING, "Overall market trend (Bullish/Bearish)",
    ),
    _field(
        "trade_link", "Trade Link",
        [
            "trade_link", "link", "chart", "chart link", "screenshot",
            "tradingview", "image", "url", "tradelink",
            "chart url", "tv link", "photo", "image link", "chart screenshot",
            "tv", "reference", "analysis link", "ref",
        ],
        ValueType.STRING, "URL to chart screenshot",
    ),
    _field(
        "notes", "Notes",
        [
            "notes", "comment", "comments", "memo", "description", "remarks",
            "annotation", "observations", "note",
            "thoughts", "journal", "journal notes", "trade notes",
            "reflection", "post trade", "post trade notes",
            "analysis", "details", "summary",
            "notas", "notizen",
        ],
        ValueType.STRING, "Trade notes or observations",
    ),

    # =========================================================================
    # OPTIONAL - BOOLEAN
    # =========================================================================
    _field(
        "break_even", "Break Even",
        [
            "break_even", "be", "breakeven", "moved to be", "be hit",
            "break even hit", "break_even_hit",
            "be moved", "moved be", "sl moved to be", "stop to be",
            "to breakeven", "be activated", "be trigger",
        ],
        ValueType.BOOLEAN, "Did trade hit break even?",
    ),
    _field(
        "reentry", "Re-entry",
        [
            "reentry", "re_entry", "reenter", "second entry", "retry",
            "re trade", "re-entry",
            "2nd entry", "entry 2", "additional entry",
            "rebuy", "resell",
        ],
        ValueType.BOOLEAN, "Was this a re-entry trade?",
    ),
    _field(
        "news_related", "News Related",
        [
            "news_related", "news", "fundamental", "event", "catalyst",
            "news trade", "high impact", "newsrelated",
            "news event", "economic event", "economic news",
            "high impact news", "news driven", "around news", "near news",
            "fomc", "nfp", "cpi",
        ],
        ValueType.BOOLEAN, "Was this trade influenced by news?",
    ),
    _field(
        "local_high_low", "Local High/Low",
        [
            "local_high_low", "local hl", "swing hl", "local swing",
            "swing point", "localhighlow",
            "local level", "swing high low", "local highs lows",
            "recent hl", "local structure",
        ],
        ValueType.BOOLEAN, "Did trade respect local high/low?",
    ),
    _field(
        "partials_taken", "Partials Taken",
        [
            "partials_taken", "partials", "partial tp", "partial close",
            "scaled out", "partial exit", "partialstaken",
            "scaled", "tp1", "partial profit", "partial profits",
            "took partials", "reduce position", "runner",
        ],
        ValueType.BOOLEAN, "Were partial profits taken?",
    ),
    _field(
        "executed", "Executed",
        [
            "executed", "taken", "entered", "traded", "trade taken",
            "live", "is_executed",
            "filled", "placed", "active", "trade placed", "trade executed",
            "is live",
        ],
        ValueType.BOOLEAN, "Was the trade actually executed?",
    ),
    _field(
        "launch_hour", "Launch Hour",
        [
            "launch_hour", "session", "trading session", "session open",
            "london open", "ny open", "killzone", "launchhour",
            "asian session", "london session", "new york session", "ny session",
            "am session", "pm session", "overlap", "open", "macros",
            "killzone session",
        ],
        ValueType.BOOLEAN, "Was trade taken during launch hour/killzone?",
    ),
)


def _build_index(fields: tuple[SchemaField, ...]) -> dict[str, SchemaField]:
    """Index fields by key, rejecting duplicate keys."""
    index: dict[str, SchemaField] = {}
    for schema_field in fields:
        if schema_field.key in index:
            raise ValueError(f"Duplicate schema field key: {schema_field.key}")
        index[schema_field.key] = schema_field
    return index


_SCHEMA_INDEX = _build_index(DB_SCHEMA)

REQUIRED_FIELDS: tuple[str, ...] = tuple(f.key for f in DB_SCHEMA if f.required)
OPTIONAL_FIELDS: tuple[str, ...] = tuple(f.key for f in DB_SCHEMA if not f.required)


def get_schema_field(key: str) -> Optional[SchemaField]:
    """Look up a SchemaField by its key. Returns None when unknown."""
    return _SCHEMA_INDEX.get(key)


def list_schema_fields(required: Optional[bool] = None) -> list[SchemaField]:
    """All schema fields in registry order, optionally filtered by required flag."""
    if required is None:
        return list(DB_SCHEMA)
    return [f for f in DB_SCHEMA if f.required == required]
