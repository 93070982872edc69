"""Backend-neutral seek predicates.

The keyset boundary is built from typed comparison clauses. Each store
adapter compiles them to its native syntax (a filter document for document
stores, a SQL expression for relational stores), so one seek algorithm serves
every backend.

For ``ORDER BY name ASC, _id ASC`` with the last seen row at ``("foo", 42)``
the boundary is::

    AnyOf(
        Comparison("name", Operator.GT, "foo"),
        AllOf(
            Comparison("name", Operator.EQ, "foo"),
            Comparison("_id", Operator.GT, 42),
        ),
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from keyset_connection.core.pagination.sort import SortOrder


class Operator(StrEnum):
    """Comparison operators understood by every store adapter."""

    EQ = "eq"
    NE = "ne"
    GT = "gt"
    LT = "lt"
    IN = "in"

    @classmethod
    def seek(cls, order: SortOrder) -> Operator:
        """Operator that selects rows strictly after a boundary in ``order``."""
        return cls.GT if order is SortOrder.ASCENDING else cls.LT


@dataclass(frozen=True, slots=True)
class Comparison:
    """``field <operator> value``."""

    field: str
    operator: Operator
    value: Any


@dataclass(frozen=True, slots=True)
class AllOf:
    """Conjunction of clauses."""

    clauses: tuple[Predicate, ...]

    def __init__(self, *clauses: Predicate) -> None:
        object.__setattr__(self, "clauses", tuple(clauses))


@dataclass(frozen=True, slots=True)
class AnyOf:
    """Disjunction of clauses."""

    clauses: tuple[Predicate, ...]

    def __init__(self, *clauses: Predicate) -> None:
        object.__setattr__(self, "clauses", tuple(clauses))


type Predicate = Comparison | AllOf | AnyOf


def seek_after(
    field: str,
    value: Any,
    *,
    identity_field: str,
    identity: Any,
    order: SortOrder,
) -> Predicate:
    """Build the two-column keyset boundary.

    Args:
        field: Primary sort field
        value: Primary sort value of the last seen entity
        identity_field: Unique tie-breaker field
        identity: Identity of the last seen entity
        order: Sort direction shared by both columns

    Returns:
        Predicate selecting every entity strictly after the boundary
    """
    op = Operator.seek(order)
    if field == identity_field:
        return Comparison(identity_field, op, identity)
    tie = AllOf(
        Comparison(field, Operator.EQ, value),
        Comparison(identity_field, op, identity),
    )
    # NULL sorts before every value: first ascending, last descending.
    if value is None:
        if order is SortOrder.ASCENDING:
            return AnyOf(Comparison(field, Operator.NE, None), tie)
        return tie
    if order is SortOrder.DESCENDING:
        return AnyOf(Comparison(field, op, value), Comparison(field, Operator.EQ, None), tie)
    return AnyOf(Comparison(field, op, value), tie)


__all__ = ["AllOf", "AnyOf", "Comparison", "Operator", "Predicate", "seek_after"]
