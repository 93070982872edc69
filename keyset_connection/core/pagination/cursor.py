"""Cursor resolution.

Two cursor flavors exist, both opaque to clients:

1. Keyset cursors are the identity of the last seen entity. Resolving one
   loads that entity's sort value and turns it into a seek boundary.
2. Search cursors are the ranking tuple (``sort`` values) the search backend
   returned for the last seen hit, serialized as a compact JSON array, e.g.
   ``[2.7,"5b3980c956d5a405cc4007c5"]``.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from keyset_connection.core.exceptions import InvalidCursorError
from keyset_connection.core.pagination.predicates import Predicate, seek_after

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from keyset_connection.core.database.protocols import DocumentStore
    from keyset_connection.core.pagination.sort import Sort

type EntityLookup = Callable[[str, Mapping[str, int]], Awaitable[Any]]


class KeysetCursorResolver:
    """Turn an ``after`` identity into a seek boundary.

    The referenced entity is fetched with a projection limited to the sort
    field in a single round trip. A missing entity raises
    :class:`~keyset_connection.core.exceptions.NotFoundError` from the lookup;
    the error propagates rather than producing an empty page.

    Example:
        resolver = KeysetCursorResolver(store, paginated.find_cursor_entity)
        boundary = await resolver.resolve(after, sort)
        criteria = store.build_filter(base_criteria, boundary)
    """

    def __init__(self, store: DocumentStore, lookup: EntityLookup) -> None:
        self.store = store
        self._lookup = lookup

    @staticmethod
    def projection(sort: Sort) -> dict[str, int]:
        """Fields needed from the cursor entity to build the boundary."""
        return {sort.field: 1}

    async def resolve(self, after: str | None, sort: Sort) -> Predicate | None:
        """Resolve ``after`` into a boundary predicate.

        Args:
            after: Identity of the last seen entity, or None for the first page
            sort: Resolved sort of the request

        Returns:
            Predicate selecting entities after the cursor, None when no cursor
        """
        if not after:
            return None

        entity = await self._lookup(after, self.projection(sort))
        identity = self.store.get_value(entity, sort.identity_field)
        value = identity if sort.is_identity else self.store.get_value(entity, sort.field)
        return seek_after(
            sort.field,
            value,
            identity_field=sort.identity_field,
            identity=identity,
            order=sort.order,
        )


class SearchCursorCodec:
    """Encode and decode search ranking tuples.

    Usage:
        cursor = SearchCursorCodec.encode([2.7, "abc"])   # '[2.7,"abc"]'
        SearchCursorCodec.decode(cursor)                   # [2.7, "abc"]
    """

    @staticmethod
    def encode(sort_values: list[Any]) -> str:
        """Serialize a hit's sort values to a compact JSON array."""
        return json.dumps(list(sort_values), separators=(",", ":"))

    @staticmethod
    def decode(cursor: str | None) -> list[Any] | None:
        """Parse a cursor; empty cursors decode to None.

        Raises:
            InvalidCursorError: If the cursor is not a JSON array
        """
        if not cursor:
            return None
        try:
            values = json.loads(cursor)
        except (TypeError, ValueError) as e:
            raise InvalidCursorError(str(cursor), "not valid JSON") from e
        if not isinstance(values, list):
            raise InvalidCursorError(cursor, "expected a JSON array")
        return values


__all__ = ["EntityLookup", "KeysetCursorResolver", "SearchCursorCodec"]
