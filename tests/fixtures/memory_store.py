"""In-memory async collection with the motor cursor surface.

Supports the subset of query operators the pagination engines emit (``$gt``,
``$lt``, ``$ne``, ``$in``, ``$or``, ``$and``, equality and compiled patterns) plus
sort, skip, limit, projection, collation and comments. String comparisons
under a collation follow ``en_US`` ordering: case-insensitive first,
lowercase before uppercase on ties.

Every driver call is recorded in ``calls`` so tests can assert how many round
trips a paginator issued.
"""

from __future__ import annotations

import copy
import functools
import re
from collections import Counter
from typing import Any


def collation_key(value: Any) -> Any:
    """Sort key approximating an ``en_US`` collation for strings."""
    if isinstance(value, str):
        return (value.casefold(), tuple(char.isupper() for char in value))
    return value


def _compare(left: Any, right: Any, collated: bool) -> int:
    if left is None or right is None:
        # null sorts first, as in MongoDB
        return (left is not None) - (right is not None)
    if collated:
        left, right = collation_key(left), collation_key(right)
    try:
        if left < right:
            return -1
        if left > right:
            return 1
    except TypeError:
        return 0
    return 0


def _matches_condition(value: Any, condition: Any, collated: bool) -> bool:
    if isinstance(condition, re.Pattern):
        return isinstance(value, str) and condition.search(value) is not None
    if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
        for op, operand in condition.items():
            if value is None and op in ("$gt", "$lt"):
                return False
            if op == "$gt" and not _compare(value, operand, collated) > 0:
                return False
            if op == "$lt" and not _compare(value, operand, collated) < 0:
                return False
            if op == "$ne" and value == operand:
                return False
            if op == "$in" and value not in operand:
                return False
            if op == "$eq" and value != operand:
                return False
        return True
    return value == condition


def matches(doc: dict[str, Any], filter: dict[str, Any], collated: bool = False) -> bool:  # noqa: A002
    """Evaluate a filter document against ``doc``."""
    for key, condition in filter.items():
        if key == "$or":
            if not any(matches(doc, clause, collated) for clause in condition):
                return False
        elif key == "$and":
            if not all(matches(doc, clause, collated) for clause in condition):
                return False
        elif not _matches_condition(_lookup(doc, key), condition, collated):
            return False
    return True


def _lookup(doc: dict[str, Any], key: str) -> Any:
    current: Any = doc
    for part in key.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


def _project(doc: dict[str, Any], projection: dict[str, Any] | None) -> dict[str, Any]:
    if not projection:
        return copy.deepcopy(doc)
    included = {field for field, flag in projection.items() if flag}
    if projection.get("_id", 1):
        included.add("_id")
    return {key: copy.deepcopy(value) for key, value in doc.items() if key in included}


class MemoryCursor:
    """Chainable cursor evaluated by :meth:`to_list`."""

    def __init__(
        self,
        collection: MemoryCollection,
        filter: dict[str, Any] | None,  # noqa: A002
        projection: dict[str, Any] | None,
    ) -> None:
        self._collection = collection
        self._filter = filter or {}
        self._projection = projection
        self._sort: list[tuple[str, int]] = []
        self._skip = 0
        self._limit = 0
        self._collation: dict[str, Any] | None = None

    def sort(self, keys: list[tuple[str, int]]) -> MemoryCursor:
        self._sort = list(keys)
        return self

    def skip(self, count: int) -> MemoryCursor:
        self._skip = count
        return self

    def limit(self, count: int) -> MemoryCursor:
        self._limit = count
        return self

    def collation(self, options: dict[str, Any]) -> MemoryCursor:
        self._collation = dict(options)
        return self

    def comment(self, text: str) -> MemoryCursor:
        self._collection.comments.append(text)
        return self

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        self._collection.calls["find"] += 1
        self._collection.collations.append(self._collation)
        collated = bool(self._collation and self._collation.get("locale"))
        docs = [doc for doc in self._collection.docs if matches(doc, self._filter, collated)]

        def order(a: dict[str, Any], b: dict[str, Any]) -> int:
            for field, direction in self._sort:
                result = _compare(_lookup(a, field), _lookup(b, field), collated)
                if result:
                    return result * direction
            return 0

        if self._sort:
            docs.sort(key=functools.cmp_to_key(order))
        docs = docs[self._skip :]
        if self._limit:
            docs = docs[: self._limit]
        if length is not None:
            docs = docs[:length]
        return [_project(doc, self._projection) for doc in docs]


class MemoryCollection:
    """Async collection holding documents in insertion order."""

    def __init__(self, name: str, docs: list[dict[str, Any]] | None = None) -> None:
        self.name = name
        self.docs: list[dict[str, Any]] = []
        self.calls: Counter[str] = Counter()
        self.comments: list[str] = []
        self.collations: list[dict[str, Any] | None] = []
        self._next_id = 1
        for doc in docs or []:
            self.insert(doc)

    def insert(self, doc: dict[str, Any]) -> dict[str, Any]:
        stored = {"_id": self._next_id, **doc}
        self._next_id += 1
        self.docs.append(stored)
        return stored

    def delete(self, identity: Any) -> None:
        self.docs = [doc for doc in self.docs if doc["_id"] != identity]

    def find(
        self,
        filter: dict[str, Any] | None = None,  # noqa: A002
        projection: dict[str, Any] | None = None,
    ) -> MemoryCursor:
        return MemoryCursor(self, filter, projection)

    async def find_one(
        self,
        filter: dict[str, Any] | None = None,  # noqa: A002
        projection: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        self.calls["find_one"] += 1
        for doc in self.docs:
            if matches(doc, filter or {}):
                return _project(doc, projection)
        return None

    async def count_documents(self, filter: dict[str, Any]) -> int:  # noqa: A002
        self.calls["count_documents"] += 1
        return sum(1 for doc in self.docs if matches(doc, filter))


__all__ = ["MemoryCollection", "MemoryCursor", "collation_key", "matches"]
