"""
Configuration module.

Exports:
    settings: Application settings instance
    get_settings: Function to get settings (for dependency injection)
    DB_SCHEMA: Canonical trade field registry
    get_schema_field: Registry lookup by key
"""

from config.settings import settings, get_settings, Settings
from config.trade_schema import (
    DB_SCHEMA,
    REQUIRED_FIELDS,
    OPTIONAL_FIELDS,
    get_schema_field,
    list_schema_fields,
)

__all__ = [
    # Settings
    "settings",
    "get_settings",
    "Settings",

    # Schema registry
    "DB_SCHEMA",
    "REQUIRED_FIELDS",
    "OPTIONAL_FIELDS",
    "get_schema_field",
    "list_schema_fields",
]
