"""Search engine integration for ranked pagination."""

from keyset_connection.core.search.backend import (
    ElasticsearchBackend,
    SearchBackend,
    SearchHit,
    SearchResponse,
)

__all__ = [
    "ElasticsearchBackend",
    "SearchBackend",
    "SearchHit",
    "SearchResponse",
]
