"""Store capabilities consumed by the pagination engines.

Pagination never talks to a driver directly. It goes through this narrow
interface so document and relational backends share one seek algorithm.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from keyset_connection.core.pagination.predicates import Predicate
    from keyset_connection.core.pagination.sort import SortOrder


class StoreQuery(Protocol):
    """Chainable find query, executed by :meth:`to_list`."""

    def sort(self, order: Mapping[str, SortOrder]) -> Self: ...

    def limit(self, count: int) -> Self: ...

    def skip(self, count: int) -> Self: ...

    def collation(self, options: Mapping[str, Any]) -> Self: ...

    def comment(self, text: str) -> Self: ...

    async def to_list(self) -> list[Any]: ...


@runtime_checkable
class DocumentStore(Protocol):
    """Backend holding the entities being paginated.

    Attributes:
        name: Human-readable store name used in logs and query comments
        identity_field: Unique, comparable field used as keyset tie-breaker
    """

    name: str
    identity_field: str

    def coerce_identity(self, value: Any) -> Any:
        """Convert an opaque cursor string back into a native identity value."""
        ...

    def get_value(self, entity: Any, field: str) -> Any:
        """Read a (possibly dotted) field from an entity."""
        ...

    def build_filter(self, criteria: Any, predicate: Predicate | None = None) -> Any:
        """Conjoin base criteria with a compiled predicate, in native syntax."""
        ...

    async def count(self, filter: Any) -> int: ...  # noqa: A002

    def find(self, filter: Any, projection: Mapping[str, Any] | None = None) -> StoreQuery: ...  # noqa: A002

    async def find_one(
        self,
        filter: Any,  # noqa: A002
        projection: Mapping[str, Any] | None = None,
    ) -> Any | None: ...


__all__ = ["DocumentStore", "StoreQuery"]
