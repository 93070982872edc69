"""Relational adapter for SQLAlchemy declarative models.

Lets the keyset engine page over an ``AsyncSession`` with the same seek
algorithm used for document stores. For ``ORDER BY name DESC, id DESC`` with
the last row at ``("foo", 42)`` the boundary compiles to::

    WHERE (name < 'foo') OR (name IS NULL) OR (name = 'foo' AND id < 42)

NULL sorts as the smallest value in both ORDER BY and the boundary.

Base criteria may be a SQLAlchemy boolean expression or a mapping of
attribute name to value (equality, ``IN`` for sequences, ``REGEXP`` for
compiled patterns).
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Self

from sqlalchemy import ColumnElement, String, and_, func, or_, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import load_only

from keyset_connection.core.exceptions import InvalidCursorError, InvalidInputError
from keyset_connection.core.pagination.criteria import get_nested_value
from keyset_connection.core.pagination.paginable import PaginableMixin
from keyset_connection.core.pagination.predicates import (
    AllOf,
    AnyOf,
    Comparison,
    Operator,
    Predicate,
)
from keyset_connection.core.pagination.sort import SortOrder
from keyset_connection.infra.logging import LazyString

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute

logger = logging.getLogger(__name__)


class SqlAlchemyQuery[T]:
    """Deferred ``SELECT`` built from the chained find options."""

    def __init__(
        self,
        store: SqlAlchemyStore[T],
        where: ColumnElement[bool] | None,
        projection: Mapping[str, Any] | None,
    ) -> None:
        self._store = store
        self._where = where
        self._projection = projection
        self._order: list[tuple[str, SortOrder]] = []
        self._skip = 0
        self._limit = 0
        self._comment: str | None = None

    def sort(self, order: Mapping[str, SortOrder]) -> Self:
        self._order = [(field, SortOrder.parse(direction)) for field, direction in order.items()]
        return self

    def limit(self, count: int) -> Self:
        self._limit = count
        return self

    def skip(self, count: int) -> Self:
        self._skip = count
        return self

    def collation(self, options: Mapping[str, Any]) -> Self:
        # Locale maps are document-store metadata; SQL collation is fixed per store.
        return self

    def comment(self, text: str) -> Self:
        self._comment = text
        return self

    async def to_list(self) -> list[T]:
        store = self._store
        stmt = select(store.model)
        if self._where is not None:
            stmt = stmt.where(self._where)
        for field, direction in self._order:
            column = store.sort_expression(field)
            # NULL is the smallest value, matching the seek boundary on every dialect.
            if direction is SortOrder.ASCENDING:
                stmt = stmt.order_by(column.asc().nulls_first())
            else:
                stmt = stmt.order_by(column.desc().nulls_last())
        if self._skip:
            stmt = stmt.offset(self._skip)
        if self._limit:
            stmt = stmt.limit(self._limit)
        if self._projection:
            included = [store.column(field) for field, flag in self._projection.items() if flag]
            if included:
                stmt = stmt.options(load_only(*included))

        if self._comment:
            logger.debug("%s: %s", self._comment, LazyString(lambda: str(stmt)))
        result = await store.execute(stmt)
        return list(result.scalars().all())


class SqlAlchemyStore[T](PaginableMixin):
    """Store over one SQLAlchemy model.

    Attributes:
        session: Async session used for every query
        model: Declarative model class
        name: Store name used in logs (defaults to the model name)
        identity_field: Attribute name of the primary key

    Example:
        store = SqlAlchemyStore(session, Item, collation="NOCASE")
        paginated = store.paginate(
            pagination={"first": 20},
            sort={"field": "name", "order": "desc"},
            sort_options={"created_field": "created_at"},
        )
    """

    def __init__(
        self,
        session: AsyncSession,
        model: type[T],
        *,
        name: str | None = None,
        collation: str | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            session: Async database session
            model: Declarative model with a single-column primary key
            name: Store name; defaults to the model class name
            collation: SQL collation applied to string columns in ORDER BY
                and seek comparisons, so both agree on ordering
        """
        self.session = session
        self.model = model
        self.name = name or model.__name__
        self._collation = collation
        self._lock = asyncio.Lock()

        mapper = sa_inspect(model)
        pk_columns = mapper.primary_key
        if len(pk_columns) != 1:
            msg = f"{model.__name__} must have exactly one primary key column"
            raise InvalidInputError(msg)
        self._pk_column = pk_columns[0]
        self.identity_field = mapper.get_property_by_column(self._pk_column).key

    async def execute(self, stmt: Any) -> Any:
        """Execute a statement, one at a time per store.

        Facets may run concurrently while an ``AsyncSession`` allows only one
        operation in flight.
        """
        async with self._lock:
            return await self.session.execute(stmt)

    def column(self, field: str) -> InstrumentedAttribute[Any]:
        """Resolve a model attribute by name."""
        attr = getattr(self.model, field, None)
        if attr is None or not hasattr(attr, "property"):
            msg = f"{self.model.__name__} has no column {field!r}"
            raise InvalidInputError(msg, field=field)
        return attr

    def sort_expression(self, field: str) -> Any:
        """Column expression used for ordering and seek comparisons."""
        column = self.column(field)
        if self._collation and isinstance(getattr(column, "type", None), String):
            return column.collate(self._collation)
        return column

    def coerce_identity(self, value: Any) -> Any:
        try:
            python_type = self._pk_column.type.python_type
        except NotImplementedError:
            return value
        if isinstance(value, python_type):
            return value
        try:
            return python_type(value)
        except (TypeError, ValueError) as e:
            raise InvalidCursorError(str(value), f"not a valid {self.name} identity") from e

    def get_value(self, entity: Any, field: str) -> Any:
        return get_nested_value(entity, field)

    def compile(self, predicate: Predicate) -> ColumnElement[bool]:
        """Compile a seek predicate into a SQL expression."""
        if isinstance(predicate, Comparison):
            column = self.sort_expression(predicate.field)
            value = predicate.value
            match predicate.operator:
                case Operator.EQ:
                    return column.is_(None) if value is None else column == value
                case Operator.NE:
                    return column.is_not(None) if value is None else column != value
                case Operator.GT:
                    return column > value
                case Operator.LT:
                    return column < value
                case Operator.IN:
                    return column.in_(list(value))
        if isinstance(predicate, AllOf):
            return and_(*(self.compile(clause) for clause in predicate.clauses))
        if isinstance(predicate, AnyOf):
            return or_(*(self.compile(clause) for clause in predicate.clauses))
        msg = f"Unsupported predicate: {predicate!r}"
        raise TypeError(msg)

    def _criteria_clauses(self, criteria: Any) -> list[ColumnElement[bool]]:
        if criteria is None:
            return []
        if isinstance(criteria, ColumnElement):
            return [criteria]
        if not isinstance(criteria, Mapping):
            msg = f"Unsupported criteria type: {type(criteria).__name__}"
            raise InvalidInputError(msg, field="criteria")

        clauses: list[ColumnElement[bool]] = []
        for field, value in criteria.items():
            column = self.column(field)
            if isinstance(value, re.Pattern):
                flags = "i" if value.flags & re.IGNORECASE else None
                clauses.append(column.regexp_match(value.pattern, flags=flags))
            elif isinstance(value, (list, tuple, set, frozenset)):
                clauses.append(column.in_(list(value)))
            elif value is None:
                clauses.append(column.is_(None))
            else:
                clauses.append(column == value)
        return clauses

    def build_filter(
        self,
        criteria: Any,
        predicate: Predicate | None = None,
    ) -> ColumnElement[bool] | None:
        clauses = self._criteria_clauses(criteria)
        if predicate is not None:
            clauses.append(self.compile(predicate))
        if not clauses:
            return None
        return clauses[0] if len(clauses) == 1 else and_(*clauses)

    async def count(self, filter: Any) -> int:  # noqa: A002
        stmt = select(func.count()).select_from(self.model)
        if filter is not None:
            stmt = stmt.where(filter)
        return (await self.execute(stmt)).scalar_one()

    def find(
        self,
        filter: Any,  # noqa: A002
        projection: Mapping[str, Any] | None = None,
    ) -> SqlAlchemyQuery[T]:
        return SqlAlchemyQuery(self, filter, projection)

    async def find_one(
        self,
        filter: Any,  # noqa: A002
        projection: Mapping[str, Any] | None = None,
    ) -> T | None:
        rows = await self.find(filter, projection).limit(1).to_list()
        return rows[0] if rows else None


__all__ = ["SqlAlchemyQuery", "SqlAlchemyStore"]
