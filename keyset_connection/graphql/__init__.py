"""GraphQL (Strawberry) adapter for paginated connections."""

from keyset_connection.graphql.types import (
    PageInfoType,
    PaginationInput,
    SortDirection,
    SortInput,
    create_connection_type,
    create_edge_type,
)

__all__ = [
    "PageInfoType",
    "PaginationInput",
    "SortDirection",
    "SortInput",
    "create_connection_type",
    "create_edge_type",
]
