"""Logging helpers.

Usage:
    from keyset_connection.infra.logging import get_lazy_logger

    lazy_logger = get_lazy_logger("pagination.items")
    lazy_logger.debug(lambda: f"find: {expensive_render(criteria)}")
"""

from keyset_connection.infra.logging.lazy import (
    LazyLoggerAdapter,
    LazyString,
    get_lazy_logger,
)

__all__ = [
    "LazyLoggerAdapter",
    "LazyString",
    "get_lazy_logger",
]
