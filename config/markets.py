"""
Market symbol configuration.

Known symbols and aliases used to recognise and clean the market column of
trade journal exports.
"""

# =============================================================================
# SYMBOL LENGTH BAND
# =============================================================================
# Applied to the normalized form (separators and flag emoji removed).
# "US30" is 4 chars, "SPX500USD" is 9; anything longer is free text.

MARKET_MIN_LENGTH = 2
MARKET_MAX_LENGTH = 10


# =============================================================================
# KNOWN SYMBOLS
# =============================================================================
# A sample value equal to one of these (after normalization) is full evidence
# for the market column. Unknown but symbol-shaped values earn partial credit.

KNOWN_MARKETS = frozenset({
    # FX majors and common crosses
    "EURUSD", "GBPUSD", "USDJPY", "AUDUSD", "NZDUSD", "USDCAD", "USDCHF",
    "GBPJPY", "EURJPY", "EURGBP", "EURAUD", "GBPAUD", "AUDJPY", "CADJPY",
    # Metals
    "XAUUSD", "XAGUSD", "GOLD", "SILVER",
    # Indices
    "NAS100", "NASDAQ", "US30", "SPX500", "SP500", "GER30", "GER40",
    "UK100", "FTSE", "JP225", "AU200", "HK50", "DXY", "VIX", "USDX",
    # Crypto
    "BTCUSD", "ETHUSD",
    # Energy
    "CRUDE", "OIL", "BRENT",
})


# =============================================================================
# ALIASES
# =============================================================================
# Plain-language names that journals use instead of the tradable symbol.

MARKET_ALIASES = {
    "GOLD": "XAUUSD",
    "SILVER": "XAGUSD",
    "OIL": "USOIL",
    "CRUDE": "USOIL",
}
