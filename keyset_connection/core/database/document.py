"""Document-store adapter.

Wraps an async collection with the motor / pymongo-async surface
(``find``, ``find_one``, ``count_documents`` and a chainable cursor with
``to_list``). The driver is duck typed; nothing here imports it.

Seek predicates compile to filter documents::

    Comparison("_id", GT, oid)            -> {"_id": {"$gt": oid}}
    AnyOf(a, AllOf(b, c))                 -> {"$or": [a, {**b, **c}]}

Clauses are merged into one document when their keys do not collide and
wrapped in ``$and`` when they do, so base criteria are never overwritten.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self

from keyset_connection.core.exceptions import InvalidCursorError
from keyset_connection.core.pagination.criteria import copy_criteria, get_nested_value
from keyset_connection.core.pagination.paginable import PaginableMixin
from keyset_connection.core.pagination.predicates import (
    AllOf,
    AnyOf,
    Comparison,
    Operator,
    Predicate,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from keyset_connection.core.pagination.sort import SortOrder

_OPERATORS = {
    Operator.NE: "$ne",
    Operator.GT: "$gt",
    Operator.LT: "$lt",
    Operator.IN: "$in",
}


def compile_filter(predicate: Predicate) -> dict[str, Any]:
    """Compile a seek predicate into a filter document."""
    if isinstance(predicate, Comparison):
        if predicate.operator is Operator.EQ:
            return {predicate.field: predicate.value}
        value = list(predicate.value) if predicate.operator is Operator.IN else predicate.value
        return {predicate.field: {_OPERATORS[predicate.operator]: value}}
    if isinstance(predicate, AllOf):
        merged: dict[str, Any] = {}
        for clause in predicate.clauses:
            merged = conjoin(merged, compile_filter(clause))
        return merged
    if isinstance(predicate, AnyOf):
        return {"$or": [compile_filter(clause) for clause in predicate.clauses]}
    msg = f"Unsupported predicate: {predicate!r}"
    raise TypeError(msg)


def conjoin(left: Mapping[str, Any], right: Mapping[str, Any]) -> dict[str, Any]:
    """AND two filter documents."""
    if not left:
        return dict(right)
    if not right:
        return dict(left)
    if left.keys() & right.keys():
        return {"$and": [dict(left), dict(right)]}
    return {**left, **right}


class MongoQuery:
    """Deferred ``find`` whose options are applied to the driver cursor."""

    def __init__(
        self,
        collection: Any,
        filter: Mapping[str, Any],  # noqa: A002
        projection: Mapping[str, Any] | None,
    ) -> None:
        self._collection = collection
        self._filter = filter
        self._projection = projection
        self._sort: list[tuple[str, int]] = []
        self._skip = 0
        self._limit = 0
        self._collation: dict[str, Any] | None = None
        self._comment: str | None = None

    def sort(self, order: Mapping[str, SortOrder]) -> Self:
        self._sort = [(field, int(direction)) for field, direction in order.items()]
        return self

    def limit(self, count: int) -> Self:
        self._limit = count
        return self

    def skip(self, count: int) -> Self:
        self._skip = count
        return self

    def collation(self, options: Mapping[str, Any]) -> Self:
        self._collation = dict(options)
        return self

    def comment(self, text: str) -> Self:
        self._comment = text
        return self

    async def to_list(self) -> list[Any]:
        cursor = self._collection.find(self._filter, self._projection)
        if self._sort:
            cursor = cursor.sort(self._sort)
        if self._skip:
            cursor = cursor.skip(self._skip)
        if self._limit:
            cursor = cursor.limit(self._limit)
        if self._collation:
            cursor = cursor.collation(self._collation)
        if self._comment:
            cursor = cursor.comment(self._comment)
        return await cursor.to_list(length=None)


class MongoStore(PaginableMixin):
    """Document store backed by an async collection.

    Attributes:
        collection: Driver collection
        name: Store name used in logs and query comments
        identity_field: Identity field, ``_id`` by default

    Example:
        from bson import ObjectId

        store = MongoStore(db.items, identity_factory=ObjectId)
    """

    def __init__(
        self,
        collection: Any,
        *,
        name: str | None = None,
        identity_factory: Callable[[str], Any],
        identity_field: str = "_id",
    ) -> None:
        """Initialize the adapter.

        Args:
            collection: Async collection (motor or pymongo async API)
            name: Store name; defaults to the collection name
            identity_field: Identity field name
            identity_factory: Converts cursor strings back to identity values,
                e.g. ``bson.ObjectId`` for ObjectId keys or ``str`` for string keys.
                Cursors carry ``str(identity)``, so a mismatched type would
                never match the stored key.
        """
        self.collection = collection
        self.name = name or getattr(collection, "name", None) or "collection"
        self.identity_field = identity_field
        self._identity_factory = identity_factory

    def coerce_identity(self, value: Any) -> Any:
        try:
            return self._identity_factory(value)
        except Exception as e:  # noqa: BLE001 - bson.errors.InvalidId is not a ValueError
            raise InvalidCursorError(str(value), f"not a valid {self.name} identity") from e

    def get_value(self, entity: Any, field: str) -> Any:
        return get_nested_value(entity, field)

    def build_filter(self, criteria: Any, predicate: Predicate | None = None) -> dict[str, Any]:
        base = copy_criteria(dict(criteria)) if criteria else {}
        if predicate is None:
            return base
        return conjoin(base, compile_filter(predicate))

    async def count(self, filter: Any) -> int:  # noqa: A002
        return await self.collection.count_documents(filter)

    def find(self, filter: Any, projection: Mapping[str, Any] | None = None) -> MongoQuery:  # noqa: A002
        return MongoQuery(self.collection, filter, dict(projection) if projection else None)

    async def find_one(
        self,
        filter: Any,  # noqa: A002
        projection: Mapping[str, Any] | None = None,
    ) -> Any | None:
        return await self.collection.find_one(filter, dict(projection) if projection else None)


__all__ = ["MongoQuery", "MongoStore", "compile_filter", "conjoin"]
