"""Keyset pagination engine for document stores.

One :class:`Pagination` instance serves one page request. Each facet
(``total_count``, ``query_criteria``, ``edges``, ``end_cursor``,
``has_next_page``) is computed lazily on first access and shared by every
later or concurrent access, so the connection resolvers may call them in any
order without repeating a store round trip.

Example:
    paginated = Pagination(
        store,
        criteria={"status": "active"},
        pagination={"first": 5, "after": last_cursor},
        sort={"field": "name", "order": "desc"},
    )
    edges = await paginated.edges()
    if await paginated.has_next_page():
        next_after = await paginated.end_cursor()
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from keyset_connection.core.exceptions import NotFoundError
from keyset_connection.core.pagination.criteria import copy_criteria
from keyset_connection.core.pagination.cursor import KeysetCursorResolver
from keyset_connection.core.pagination.limit import Limit
from keyset_connection.core.pagination.memo import SupportsFacets, facet, once_per_instance
from keyset_connection.core.pagination.predicates import Comparison, Operator
from keyset_connection.core.pagination.schemas import Edge
from keyset_connection.core.pagination.sort import Sort
from keyset_connection.core.settings import PaginationSettings, get_pagination_settings
from keyset_connection.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from keyset_connection.core.database.protocols import DocumentStore, StoreQuery


def as_mapping(value: Mapping[str, Any] | BaseModel | Any | None) -> dict[str, Any]:
    """Normalize request input to a plain dict.

    Accepts mappings, pydantic models and dataclass instances (GraphQL input
    types); unset (None) model and dataclass fields are left out.
    """
    if value is None:
        return {}
    if isinstance(value, BaseModel):
        return value.model_dump(exclude_none=True)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: getattr(value, f.name)
            for f in dataclasses.fields(value)
            if getattr(value, f.name) is not None
        }
    return dict(value)


def resolve_limit_options(
    settings: PaginationSettings,
    overrides: Mapping[str, Any] | None,
) -> dict[str, int]:
    """Page size bounds from settings, with explicit overrides winning."""
    return {
        "default": settings.default_limit,
        "maximum": settings.max_limit,
        **(overrides or {}),
    }


class Pagination(SupportsFacets):
    """Keyset page request over a :class:`DocumentStore`.

    Attributes:
        store: Store being paginated
        criteria: Defensive copy of the base criteria
        first: Resolved page size
        after: Identity of the last seen entity, or None
        sort: Resolved sort (with identity tie-breaker)
        projection: Optional field projection applied to edges
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        criteria: Any = None,
        pagination: Mapping[str, Any] | BaseModel | None = None,
        sort: Mapping[str, Any] | BaseModel | None = None,
        projection: Mapping[str, Any] | None = None,
        limit_options: Mapping[str, Any] | None = None,
        sort_options: Mapping[str, Any] | None = None,
        settings: PaginationSettings | None = None,
        deep: bool = False,
    ) -> None:
        """Initialize a page request.

        Args:
            store: Store adapter to query
            criteria: Backend-native base criteria
            pagination: ``{"first": int, "after": cursor}``
            sort: ``{"field": str, "order": "asc" | "desc" | 1 | -1}``
            projection: Fields to load for edge nodes
            limit_options: ``{"default": int, "maximum": int}``
            sort_options: ``{"collation": {...}, "created_field": str}``
            settings: Settings to use instead of the cached defaults
            deep: Deep-copy criteria leaf values instead of keeping references
        """
        super().__init__()
        self.settings = settings or get_pagination_settings()
        self.store = store
        self.criteria = copy_criteria(criteria, deep=deep)

        page = as_mapping(pagination)
        self.first = Limit.resolve(
            page.get("first"),
            **resolve_limit_options(self.settings, limit_options),
        )
        self.after = page.get("after") or None

        requested = as_mapping(sort)
        self.sort = Sort.resolve(
            requested.get("field"),
            requested.get("order"),
            identity_field=store.identity_field,
            **{
                "created_field": self.settings.created_field,
                "locale": self.settings.collation_locale,
                **(sort_options or {}),
            },
        )
        self.projection = dict(projection) if projection else None

        self._resolver = KeysetCursorResolver(store, self.find_cursor_entity)
        self._logger = logging.getLogger(f"pagination.{store.name}")
        self._lazy = get_lazy_logger(f"pagination.{store.name}")

    @facet
    async def total_count(self) -> int:
        """Count of all entities matching the base criteria.

        The seek boundary is excluded: this is the size of the whole result
        set, not of the remaining pages.
        """
        count = await self.store.count(self.store.build_filter(self.criteria))
        self._debug(lambda: f"total_count -> {count}")
        return count

    @facet
    async def query_criteria(self) -> Any:
        """Base criteria conjoined with the seek boundary of ``after``."""
        boundary = await self._resolver.resolve(self.after, self.sort)
        return self.store.build_filter(self.criteria, boundary)

    @facet
    async def edges(self) -> list[Edge[Any]]:
        """Entities of this page, in sort order, with their cursors."""
        criteria = await self.query_criteria()
        query = self._sorted(self.store.find(criteria, self.projection), "edges")
        docs = await query.limit(self.first.value).to_list()

        identity_field = self.store.identity_field
        edges = [
            Edge(node=doc, cursor=str(self.store.get_value(doc, identity_field)))
            for doc in docs
        ]
        self._debug(lambda: f"edges(first={self.first.value}, sort={self.sort.value}) -> {len(edges)}")
        return edges

    @facet
    async def end_cursor(self) -> str | None:
        """Cursor of the last edge, or None for an empty page."""
        edges = await self.edges()
        return edges[-1].cursor if edges else None

    @facet
    async def has_next_page(self) -> bool:
        """Probe for one more entity past this page.

        Skips ``first`` rows under the same criteria and sort and fetches at
        most one identity, so the cost is bounded by the page size rather than
        by the size of the remaining result set.
        """
        criteria = await self.query_criteria()
        projection = {self.store.identity_field: 1}
        query = self._sorted(self.store.find(criteria, projection), "has_next_page")
        docs = await query.skip(self.first.value).limit(1).to_list()
        self._debug(lambda: f"has_next_page -> {bool(docs)}")
        return bool(docs)

    @once_per_instance("cursor_entity")
    async def find_cursor_entity(self, id: Any, projection: Mapping[str, Any]) -> Any:  # noqa: A002
        """Load the entity referenced by the ``after`` cursor.

        A request carries at most one cursor, so the lookup is memoized once
        per instance.

        Raises:
            NotFoundError: If no entity has the given identity
        """
        identity_field = self.store.identity_field
        criteria = self.store.build_filter(
            None,
            Comparison(identity_field, Operator.EQ, self.store.coerce_identity(id)),
        )
        doc = await self.store.find_one(criteria, projection)
        if doc is None:
            self._logger.info(
                "Cursor entity not found",
                extra={
                    "store": self.store.name,
                    "id": str(id),
                    "operation": "pagination.find_cursor_entity",
                },
            )
            raise NotFoundError(self.store.name, {identity_field: id})
        return doc

    def _sorted(self, query: StoreQuery, method: str) -> StoreQuery:
        return (
            query.sort(self.sort.value)
            .collation(self.sort.collation)
            .comment(self.create_comment(method))
        )

    def create_comment(self, method: str) -> str:
        """Comment attached to every store query issued by ``method``."""
        return f"Pagination: {self.store.name} - {method}"

    def _debug(self, message: Callable[[], str]) -> None:
        if self.settings.log_queries:
            self._lazy.debug(message)


__all__ = ["Pagination", "as_mapping", "resolve_limit_options"]
