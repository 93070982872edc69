"""Search backend protocol and an Elasticsearch-style adapter.

The ranked-search engine only needs two calls from a search engine: a count
over a query and a ranked search returning, for every hit, its identity, its
relevance score and the ranking tuple used for ``search_after``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SearchHit:
    """One ranked hit.

    Attributes:
        identity: Identity of the matching entity, as the search index stores it
        score: Relevance score (None when the engine did not score the hit)
        sort: Ranking tuple to pass back as ``search_after``
    """

    identity: str
    score: float | None = None
    sort: list[Any] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SearchResponse:
    """Hits of one search call, in engine rank order."""

    hits: list[SearchHit] = field(default_factory=list)


@runtime_checkable
class SearchBackend(Protocol):
    """What the ranked-search engine needs from a search engine."""

    async def count(self, params: Mapping[str, Any]) -> int:
        """Number of documents matching ``params["body"]["query"]``."""
        ...

    async def search(self, params: Mapping[str, Any]) -> SearchResponse:
        """Run a ranked search with the given parameters."""
        ...


class ElasticsearchBackend:
    """Adapter over an async Elasticsearch-compatible client.

    The client is duck typed: anything exposing ``await client.search(**params)``
    and ``await client.count(**params)`` with Elasticsearch response bodies
    works (``elasticsearch.AsyncElasticsearch``, OpenSearch async clients or a
    test double).

    Example:
        from elasticsearch import AsyncElasticsearch

        backend = ElasticsearchBackend(AsyncElasticsearch("http://localhost:9200"))
        paginated = SearchPagination(store, backend, params={"index": "items", "body": body})
    """

    def __init__(self, client: Any) -> None:
        self.client = client

    async def count(self, params: Mapping[str, Any]) -> int:
        response = await self.client.count(**params)
        return int(_body(response)["count"])

    async def search(self, params: Mapping[str, Any]) -> SearchResponse:
        response = _body(await self.client.search(**params))
        hits = response.get("hits", {}).get("hits", [])
        logger.debug("Search returned %d hits", len(hits))
        return SearchResponse(
            hits=[
                SearchHit(
                    identity=str(hit["_id"]),
                    score=hit.get("_score"),
                    sort=list(hit.get("sort") or []),
                )
                for hit in hits
            ]
        )


def _body(response: Any) -> Mapping[str, Any]:
    # elasticsearch-py 8 wraps bodies in ObjectApiResponse
    return getattr(response, "body", response)


__all__ = ["ElasticsearchBackend", "SearchBackend", "SearchHit", "SearchResponse"]
