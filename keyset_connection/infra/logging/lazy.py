"""Deferred log message rendering.

Every store round trip is logged at DEBUG, usually with a rendered filter,
sort map or SQL statement. Rendering those is skipped unless the record will
actually be emitted.

Two forms are supported:

- ``LazyString`` wraps a single argument for a plain ``logging.Logger``.
- ``LazyLoggerAdapter`` accepts callables as the message or as any argument.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable


class LazyString:
    """Log argument rendered on ``str()``.

    Example:
        logger.debug("%s: %s", comment, LazyString(lambda: str(statement)))
    """

    __slots__ = ("_render",)

    def __init__(self, render: Callable[[], Any]) -> None:
        self._render = render

    def __str__(self) -> str:
        return str(self._render())

    def __repr__(self) -> str:
        return f"LazyString({self._render!r})"


def _materialize(value: Any) -> Any:
    return value() if callable(value) else value


class LazyLoggerAdapter(logging.LoggerAdapter):
    """Adapter resolving callable messages and arguments at emit time.

    Context passed at construction is attached to every record as ``extra``.

    Example:
        log = LazyLoggerAdapter(logging.getLogger("pagination.items"), {"store": "items"})
        log.debug(lambda: f"edges {sort.value} -> {len(rows)}")
    """

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        """Emit ``msg`` at ``level`` if enabled, resolving callables first."""
        if not self.isEnabledFor(level):
            return
        super().log(
            level,
            _materialize(msg),
            *(_materialize(arg) for arg in args),
            **kwargs,
        )

    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)


def get_lazy_logger(name: str, **context: Any) -> LazyLoggerAdapter:
    """Build a lazy adapter over ``logging.getLogger(name)``.

    Args:
        name: Logger name, ``pagination.<store>`` by convention
        **context: Fields bound to every record via ``extra``
    """
    return LazyLoggerAdapter(logging.getLogger(name), dict(context))


__all__ = ["LazyLoggerAdapter", "LazyString", "get_lazy_logger"]
