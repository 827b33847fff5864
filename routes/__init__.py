"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.trade_import import router as trade_import_router

__all__ = [
    "trade_import_router",
]
