"""Ranked-search pagination.

Results are ranked by a search engine and paged with ``search_after``; the
entities themselves are hydrated from the system of record. The engine owns
``size``, ``sort`` and ``search_after`` in the search body, the caller owns
everything else (query, aggregations, highlighting, ...).

Example:
    paginated = SearchPagination(
        store,
        ElasticsearchBackend(client),
        params={"index": "items", "body": {"query": {"match": {"name": "foo"}}}},
        pagination={"first": 20, "after": cursor},
    )
    edges = await paginated.edges()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from keyset_connection.core.pagination.criteria import copy_criteria
from keyset_connection.core.pagination.cursor import SearchCursorCodec
from keyset_connection.core.pagination.engine import as_mapping, resolve_limit_options
from keyset_connection.core.pagination.limit import Limit
from keyset_connection.core.pagination.memo import SupportsFacets, facet
from keyset_connection.core.pagination.predicates import Comparison, Operator
from keyset_connection.core.pagination.schemas import Edge
from keyset_connection.core.settings import PaginationSettings, get_pagination_settings
from keyset_connection.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pydantic import BaseModel

    from keyset_connection.core.database.protocols import DocumentStore
    from keyset_connection.core.search.backend import SearchBackend, SearchHit


class SearchPagination(SupportsFacets):
    """Page request over search-engine ranked results.

    Attributes:
        store: System of record used to hydrate hits
        backend: Search engine adapter
        params: Deep copy of the caller's search parameters
        first: Resolved page size
        after: Decoded ranking tuple of the last seen hit, or None

    Raises:
        InvalidCursorError: At construction, if ``after`` is not a JSON array
    """

    def __init__(
        self,
        store: DocumentStore,
        backend: SearchBackend,
        *,
        params: Mapping[str, Any] | None = None,
        pagination: Mapping[str, Any] | BaseModel | None = None,
        projection: Mapping[str, Any] | None = None,
        limit_options: Mapping[str, Any] | None = None,
        settings: PaginationSettings | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings or get_pagination_settings()
        self.store = store
        self.backend = backend
        self.params: dict[str, Any] = copy_criteria(dict(params or {}), deep=True)
        self.projection = dict(projection) if projection else None

        page = as_mapping(pagination)
        self.first = Limit.resolve(
            page.get("first"),
            **resolve_limit_options(self.settings, limit_options),
        )
        self.after = SearchCursorCodec.decode(page.get("after"))

        self._lazy = get_lazy_logger(f"pagination.{store.name}", search=True)

    def search_body(self) -> dict[str, Any]:
        """Caller's body with the engine-owned paging keys applied."""
        body = {
            **self.params.get("body", {}),
            "size": self.first.value,
            "sort": copy_criteria(self.settings.search_sort),
        }
        if self.after is not None:
            body["search_after"] = list(self.after)
        return body

    def search_params(self) -> dict[str, Any]:
        """Full parameters of the page search."""
        return {**self.params, "body": self.search_body()}

    def count_params(self) -> dict[str, Any]:
        """Count parameters: the caller's query only, no paging keys."""
        params = {key: value for key, value in self.params.items() if key != "body"}
        body = self.params.get("body") or {}
        if "query" in body:
            params["body"] = {"query": body["query"]}
        return params

    @facet
    async def total_count(self) -> int:
        """Number of documents matching the caller's query."""
        count = await self.backend.count(self.count_params())
        self._lazy.debug(lambda: f"search total_count -> {count}")
        return count

    @facet
    async def hits(self) -> list[SearchHit]:
        """Raw hits of this page in search engine rank order."""
        response = await self.backend.search(self.search_params())
        return list(response.hits)

    @facet
    async def edges(self) -> list[Edge[Any]]:
        """Hydrated entities of this page, in descending score order.

        Hits whose entity no longer exists in the store are dropped. Entities
        with equal scores keep the search engine's rank.
        """
        hits = await self.hits()
        ranked: dict[str, tuple[int, SearchHit]] = {}
        for rank, hit in enumerate(hits):
            ranked.setdefault(hit.identity, (rank, hit))
        if not ranked:
            return []

        identity_field = self.store.identity_field
        ids = [self.store.coerce_identity(identity) for identity in ranked]
        criteria = self.store.build_filter(None, Comparison(identity_field, Operator.IN, ids))
        query = self.store.find(criteria, self.projection).comment(self.create_comment("edges"))
        docs = await query.to_list()

        found: list[tuple[tuple[float, int], Any, SearchHit]] = []
        for doc in docs:
            entry = ranked.get(str(self.store.get_value(doc, identity_field)))
            if entry is None:
                continue
            rank, hit = entry
            found.append(((-(hit.score or 0), rank), doc, hit))
        found.sort(key=lambda item: item[0])

        if len(found) < len(ranked):
            self._lazy.debug(
                lambda: f"{len(ranked) - len(found)} search hits missing from {self.store.name}"
            )
        return [
            Edge(node=doc, cursor=SearchCursorCodec.encode(hit.sort))
            for _, doc, hit in found
        ]

    @facet
    async def end_cursor(self) -> str | None:
        """Cursor of the last edge, or None when the search returned nothing.

        If every hit of the page was dropped during hydration, the last raw
        hit still marks the page position so the next page can follow it.
        """
        edges = await self.edges()
        if edges:
            return edges[-1].cursor
        hits = await self.hits()
        return SearchCursorCodec.encode(hits[-1].sort) if hits else None

    @facet
    async def has_next_page(self) -> bool:
        """Probe the search engine for one hit after the end cursor."""
        cursor = await self.end_cursor()
        if cursor is None:
            return False

        body = {
            **self.search_body(),
            "size": 1,
            "search_after": SearchCursorCodec.decode(cursor),
        }
        response = await self.backend.search({**self.params, "body": body})
        self._lazy.debug(lambda: f"search has_next_page -> {bool(response.hits)}")
        return bool(response.hits)

    def create_comment(self, method: str) -> str:
        """Comment attached to hydration queries issued by ``method``."""
        return f"SearchPagination: {self.store.name} - {method}"


__all__ = ["SearchPagination"]
