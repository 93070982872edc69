"""Relay-style keyset pagination.

Pages are stable under concurrent inserts and deletes and cost a bounded
number of indexed seeks, never an OFFSET scan over earlier pages:

- ``Pagination`` pages a document or relational store by seeking past the
  last seen ``(sort value, identity)`` pair.
- ``SearchPagination`` pages search-engine ranked results with
  ``search_after`` and hydrates them from the store.
- ``TypeAhead`` builds autocomplete criteria and paginates the matches.

Relay Connection Style:
    paginated = store.paginate(
        criteria={"status": "active"},
        pagination={"first": 20, "after": cursor},
        sort={"field": "name", "order": "desc"},
    )
    connection = await resolve_connection(paginated)

Simple REST Style:
    page = (await resolve_connection(paginated)).to_cursor_page()

Each facet (total count, edges, end cursor, has-next-page) is computed at most
once per engine instance, so resolvers may request them in any order.
"""

from keyset_connection.core.pagination.cursor import KeysetCursorResolver, SearchCursorCodec
from keyset_connection.core.pagination.engine import Pagination
from keyset_connection.core.pagination.limit import Limit, resolve_limit
from keyset_connection.core.pagination.memo import FacetCache, facet
from keyset_connection.core.pagination.predicates import AllOf, AnyOf, Comparison, Operator
from keyset_connection.core.pagination.resolvers import (
    ConnectionResolvers,
    PageInfoResolver,
    resolve_connection,
)
from keyset_connection.core.pagination.schemas import (
    Connection,
    CursorPage,
    Edge,
    PageInfo,
)
from keyset_connection.core.pagination.search import SearchPagination
from keyset_connection.core.pagination.sort import Sort, SortOrder
from keyset_connection.core.pagination.type_ahead import (
    TypeAhead,
    TypeAheadPosition,
    TypeAheadQuery,
)

__all__ = [
    # Predicates
    "AllOf",
    "AnyOf",
    "Comparison",
    # Schemas
    "Connection",
    # Resolvers
    "ConnectionResolvers",
    "CursorPage",
    "Edge",
    # Memoization
    "FacetCache",
    # Cursors
    "KeysetCursorResolver",
    # Input normalization
    "Limit",
    "Operator",
    "PageInfo",
    "PageInfoResolver",
    # Engines
    "Pagination",
    "SearchCursorCodec",
    "SearchPagination",
    "Sort",
    "SortOrder",
    "TypeAhead",
    "TypeAheadPosition",
    "TypeAheadQuery",
    "facet",
    "resolve_connection",
    "resolve_limit",
]
