"""Page size normalization.

``first`` arrives from the transport layer in whatever shape the client sent
it. It is resolved once per request into a frozen :class:`Limit` whose value
always satisfies ``1 <= value <= maximum``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

DEFAULT_LIMIT = 10
MAX_LIMIT = 200

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Any) -> int | None:
    """Parse the leading integer of ``value``.

    Floats are truncated toward zero and strings are read up to the first
    non-digit, so ``2.6`` and ``"2px"`` both parse to ``2``. Returns ``None``
    when no integer can be read.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return math.trunc(value)
    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


@dataclass(frozen=True, slots=True)
class Limit:
    """Resolved page size.

    Attributes:
        value: Number of edges to return
        default: Value used when the request was missing or invalid
        maximum: Upper bound the value was clamped to
    """

    value: int
    default: int = DEFAULT_LIMIT
    maximum: int = MAX_LIMIT

    @classmethod
    def resolve(
        cls,
        raw: Any,
        *,
        default: int = DEFAULT_LIMIT,
        maximum: int = MAX_LIMIT,
    ) -> Limit:
        """Resolve a requested page size.

        Args:
            raw: Requested page size (int, float, numeric string or None)
            default: Returned when ``raw`` is not a positive integer
            maximum: Values above this are clamped to it

        Returns:
            Frozen Limit

        Example:
            Limit.resolve(0).value          # 10
            Limit.resolve(500).value        # 200
            Limit.resolve("25", maximum=20).value  # 20
        """
        limit = parse_int(raw)
        if not limit or limit < 1:
            value = default
        elif limit > maximum:
            value = maximum
        else:
            value = limit
        return cls(value=value, default=default, maximum=maximum)


def resolve_limit(
    raw: Any,
    *,
    default: int = DEFAULT_LIMIT,
    maximum: int = MAX_LIMIT,
) -> int:
    """Shortcut for ``Limit.resolve(...).value``."""
    return Limit.resolve(raw, default=default, maximum=maximum).value


__all__ = ["DEFAULT_LIMIT", "MAX_LIMIT", "Limit", "parse_int", "resolve_limit"]
