"""Type-ahead (autocomplete) pagination.

Builds a regex criterion for a term on one field and paginates the matches
sorted ascending by that field.

Example:
    type_ahead = TypeAhead("name", "fo", {"status": "active"}, position="starts-with")
    paginated = type_ahead.paginate(store, {"first": 10})
    # criteria {"status": "active", "name": re.compile("^fo", re.IGNORECASE)}
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from keyset_connection.core.exceptions import InvalidInputError
from keyset_connection.core.pagination.criteria import copy_criteria
from keyset_connection.core.pagination.engine import Pagination
from keyset_connection.core.pagination.sort import SortOrder

if TYPE_CHECKING:
    from collections.abc import Mapping

    from keyset_connection.core.database.protocols import DocumentStore


class TypeAheadPosition(StrEnum):
    """Where the term must appear in the field value."""

    CONTAINS = "contains"
    STARTS_WITH = "starts-with"
    ENDS_WITH = "ends-with"
    EXACT_MATCH = "exact-match"

    @property
    def anchors(self) -> tuple[str, str]:
        """Regex prefix and suffix for this position."""
        return {
            TypeAheadPosition.CONTAINS: ("", ""),
            TypeAheadPosition.STARTS_WITH: ("^", ""),
            TypeAheadPosition.ENDS_WITH: ("", "$"),
            TypeAheadPosition.EXACT_MATCH: ("^", "$"),
        }[self]


@dataclass(frozen=True, slots=True)
class TypeAheadQuery:
    """Criteria and sort produced by :meth:`TypeAhead.build_criteria`."""

    criteria: dict[str, Any]
    sort: dict[str, Any]


class TypeAhead:
    """Autocomplete request on a single field.

    Attributes:
        field: Field matched against the term
        term: Text typed by the user
        position: Where the term must appear
        escape: Whether regex metacharacters in the term are escaped
        case_sensitive: Whether matching is case sensitive
    """

    def __init__(
        self,
        field: str,
        term: str,
        criteria: Mapping[str, Any] | None = None,
        *,
        position: TypeAheadPosition | str = TypeAheadPosition.CONTAINS,
        escape: bool = True,
        case_sensitive: bool = False,
        deep: bool = False,
    ) -> None:
        """Initialize a type-ahead request.

        Args:
            field: Field to match
            term: Term to match
            criteria: Additional base criteria
            position: ``contains``, ``starts-with``, ``ends-with`` or ``exact-match``
            escape: Escape regex metacharacters in ``term``
            case_sensitive: Match case sensitively
            deep: Deep-copy criteria leaf values

        Raises:
            InvalidInputError: If ``field`` or ``term`` is empty, or
                ``position`` is unknown
        """
        if not field:
            msg = "A type ahead field must be specified."
            raise InvalidInputError(msg, field="field")
        if not term:
            msg = "A type ahead term must be specified."
            raise InvalidInputError(msg, field="term")
        try:
            self.position = TypeAheadPosition(position)
        except ValueError as e:
            msg = f"Unknown type ahead position: {position!r}"
            raise InvalidInputError(msg, field="position") from e

        self.field = field
        self.term = term
        self.escape = escape
        self.case_sensitive = case_sensitive
        self._deep = deep
        self._criteria = copy_criteria(dict(criteria or {}), deep=deep)

    @property
    def criteria(self) -> dict[str, Any]:
        """Copy of the base criteria."""
        return copy_criteria(self._criteria, deep=self._deep)

    def build_regex(self) -> re.Pattern[str]:
        """Compile the match pattern for the term."""
        start, end = self.position.anchors
        value = re.escape(self.term) if self.escape else self.term
        flags = 0 if self.case_sensitive else re.IGNORECASE
        return re.compile(f"{start}{value}{end}", flags)

    def build_criteria(self) -> TypeAheadQuery:
        """Base criteria plus the term pattern, sorted ascending by field.

        The pattern replaces any criteria already set on ``field``.
        """
        return TypeAheadQuery(
            criteria={**self.criteria, self.field: self.build_regex()},
            sort={"field": self.field, "order": SortOrder.ASCENDING},
        )

    def paginate(
        self,
        store: DocumentStore,
        pagination: Mapping[str, Any] | None = None,
        **options: Any,
    ) -> Pagination:
        """Start a page request for the matches.

        Args:
            store: Store to query
            pagination: ``{"first": int, "after": cursor}``
            **options: Extra :class:`Pagination` keyword arguments
        """
        query = self.build_criteria()
        return Pagination(
            store,
            criteria=query.criteria,
            pagination=pagination,
            sort=query.sort,
            **options,
        )


__all__ = ["TypeAhead", "TypeAheadPosition", "TypeAheadQuery"]
