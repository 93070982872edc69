"""Pydantic Settings v2 configuration.

Import settings via the cached loader:
    from keyset_connection.core.settings import get_pagination_settings

Configuration precedence (highest to lowest):
    1. Explicit options passed to an engine
    2. init kwargs (testing/overrides)
    3. Environment variables (PAGINATION_*)
    4. .env file (development only)
"""

from __future__ import annotations

from .loader import clear_settings_cache, get_pagination_settings
from .pagination import PaginationSettings

__all__ = [
    "PaginationSettings",
    "clear_settings_cache",
    "get_pagination_settings",
]
