"""Cached settings loaders."""

from __future__ import annotations

from functools import lru_cache

from .pagination import PaginationSettings


@lru_cache(maxsize=1)
def get_pagination_settings() -> PaginationSettings:
    """Get cached pagination settings.

    Returns:
        Validated and frozen PaginationSettings instance.
    """
    return PaginationSettings()


def clear_settings_cache() -> None:
    """Clear cached settings so the next load re-reads the environment."""
    get_pagination_settings.cache_clear()
