"""Sort normalization with identity tie-breaking.

A keyset walk needs a strict total order. Sorting by a non-unique field alone
leaves rows with equal values in an undefined order, so every sort map is
extended with the identity field in the same direction. Sorting by the
identity field itself, or by the creation timestamp (monotonic with the
identity), collapses to the identity field alone.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from keyset_connection.core.pagination.limit import parse_int

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_COLLATION: Mapping[str, Any] = MappingProxyType({"locale": "en_US"})


class SortOrder(IntEnum):
    """Sort direction.

    Integer values match the document-store convention so a sort map can be
    handed to a driver unchanged.
    """

    ASCENDING = 1
    DESCENDING = -1

    def inverted(self) -> SortOrder:
        """Return the opposite direction."""
        if self is SortOrder.ASCENDING:
            return SortOrder.DESCENDING
        return SortOrder.ASCENDING

    @property
    def keyword(self) -> str:
        """Lowercase keyword (``asc``/``desc``)."""
        return "asc" if self is SortOrder.ASCENDING else "desc"

    @classmethod
    def parse(cls, order: Any) -> SortOrder:
        """Parse a requested direction.

        ``"asc"`` and ``"desc"`` are matched case-insensitively. Otherwise the
        value is descending only when its leading integer is ``-1``; anything
        else (``None``, ``0``, ``100``, ``-2``, ``"foo"``) is ascending.
        """
        if isinstance(order, SortOrder):
            return order
        if isinstance(order, str):
            keyword = order.strip().lower()
            if keyword == "asc":
                return cls.ASCENDING
            if keyword == "desc":
                return cls.DESCENDING
        return cls.DESCENDING if parse_int(order) == -1 else cls.ASCENDING


@dataclass(frozen=True, slots=True)
class Sort:
    """Resolved sort for one page request.

    Attributes:
        field: Effective sort field (already collapsed to the identity field
            where applicable)
        order: Sort direction
        identity_field: Unique field used as tie-breaker
        created_field: Creation timestamp field that collapses to identity
    """

    field: str
    order: SortOrder = SortOrder.ASCENDING
    identity_field: str = "_id"
    created_field: str | None = "createdAt"
    _collation: Mapping[str, Any] = field(
        default_factory=lambda: DEFAULT_COLLATION, repr=False, hash=False
    )

    @classmethod
    def resolve(
        cls,
        field: str | None = None,
        order: Any = None,
        *,
        collation: Mapping[str, Any] | None = None,
        created_field: str | None = "createdAt",
        identity_field: str = "_id",
        locale: str | None = None,
    ) -> Sort:
        """Resolve requested sort input.

        Args:
            field: Requested sort field; falls back to ``id``
            order: Requested direction, see :meth:`SortOrder.parse`
            collation: Collation overrides, shallow-merged over the defaults
            created_field: Creation timestamp field, or None to disable
            identity_field: The store's identity field
            locale: Default collation locale (``en_US`` when omitted)

        Returns:
            Frozen Sort

        Example:
            Sort.resolve("name", "desc").value
            # {"name": SortOrder.DESCENDING, "_id": SortOrder.DESCENDING}
        """
        requested = field or "id"
        resolve_to_id = {"id", "_id", identity_field}
        if created_field:
            resolve_to_id.add(created_field)
        effective = identity_field if requested in resolve_to_id else requested

        base = {"locale": locale} if locale else dict(DEFAULT_COLLATION)
        merged = {**base, **(collation or {})}

        return cls(
            field=effective,
            order=SortOrder.parse(order),
            identity_field=identity_field,
            created_field=created_field,
            _collation=MappingProxyType(merged),
        )

    @property
    def is_identity(self) -> bool:
        """Whether the sort is on the identity field alone."""
        return self.field == self.identity_field

    @property
    def value(self) -> dict[str, SortOrder]:
        """Forward sort map, identity tie-breaker last."""
        sort = {self.field: self.order}
        if not self.is_identity:
            sort[self.identity_field] = self.order
        return sort

    @property
    def value_reversed(self) -> dict[str, SortOrder]:
        """Sort map with every direction inverted."""
        return {key: order.inverted() for key, order in self.value.items()}

    @property
    def collation(self) -> dict[str, Any]:
        """Collation options for the store; a fresh dict on every access."""
        return dict(self._collation)

    @property
    def options(self) -> dict[str, Any]:
        """Options this sort was resolved with."""
        return {"created_field": self.created_field, "collation": self.collation}


__all__ = ["DEFAULT_COLLATION", "Sort", "SortOrder"]
