"""Strawberry GraphQL types for paginated connections.

Connection fields resolve lazily through
:class:`~keyset_connection.core.pagination.resolvers.ConnectionResolvers`, so
a query selecting only ``totalCount`` runs only the count.

Example:
    ItemConnection = create_connection_type(ItemType, "Item", to_node=ItemType.from_document)

    @strawberry.type
    class Query:
        @strawberry.field
        def items(
            self,
            pagination: PaginationInput | None = None,
            sort: SortInput | None = None,
        ) -> ItemConnection:
            return ItemConnection(paginated=store.paginate(pagination=pagination, sort=sort))
"""

from collections.abc import Callable
from enum import StrEnum
from typing import Any

import strawberry

from keyset_connection.core.pagination.resolvers import (
    ConnectionResolvers,
    PageInfoResolver,
    Paginated,
)
from keyset_connection.core.pagination.schemas import Edge

__all__ = [
    "PageInfoType",
    "PaginationInput",
    "SortDirection",
    "SortInput",
    "create_connection_type",
    "create_edge_type",
]


@strawberry.enum(description="Sort direction")
class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


@strawberry.input(description="Input for cursor-based pagination")
class PaginationInput:
    """Forward pagination arguments for Relay cursor connections."""

    first: int | None = strawberry.field(
        default=None,
        description="Number of items to return",
    )
    after: str | None = strawberry.field(
        default=None,
        description="Cursor to start pagination from (exclusive)",
    )


@strawberry.input(description="Sort field and direction")
class SortInput:
    field: str | None = strawberry.field(default=None, description="Field to sort by")
    order: SortDirection | None = strawberry.field(default=None, description="Sort direction")


@strawberry.type(name="PageInfo", description="Relay connection pagination metadata")
class PageInfoType:
    """GraphQL Relay PageInfo.

    Mirrors keyset_connection.core.pagination.schemas.PageInfo, resolved lazily.
    """

    resolver: strawberry.Private[PageInfoResolver]

    @strawberry.field(description="Whether more items exist")
    async def has_next_page(self) -> bool:
        return await self.resolver.has_next_page()

    @strawberry.field(description="Cursor of the last item")
    async def end_cursor(self) -> str | None:
        return await self.resolver.end_cursor()


def create_edge_type(
    node_type: type,
    type_name_prefix: str,
    to_node: Callable[[Any], Any] | None = None,
) -> type:
    """Create a Relay Edge type for ``node_type``.

    Args:
        node_type: Strawberry type of the nodes
        type_name_prefix: Prefix for the type name ("Item" -> "ItemEdge")
        to_node: Converts a store entity into a ``node_type`` instance

    Returns:
        A Strawberry Edge type class wrapping an
        :class:`~keyset_connection.core.pagination.schemas.Edge`
    """
    convert = to_node or (lambda node: node)

    @strawberry.type(
        name=f"{type_name_prefix}Edge",
        description=f"Edge containing a {type_name_prefix} node and cursor",
    )
    class EdgeType:
        edge: strawberry.Private[Edge[Any]]

        @strawberry.field(description="The node containing the actual data")
        def node(self) -> node_type:  # type: ignore[valid-type]
            return convert(self.edge.node)

        @strawberry.field(description="Opaque cursor for this edge used in pagination")
        def cursor(self) -> str:
            return self.edge.cursor

    return EdgeType


def create_connection_type(
    node_type: type,
    type_name_prefix: str,
    *,
    to_node: Callable[[Any], Any] | None = None,
    page_info_type: type = PageInfoType,
) -> type:
    """Create a Relay Connection type whose fields resolve from a paginator.

    Args:
        node_type: Strawberry type of the nodes
        type_name_prefix: Prefix for the type name ("Item" -> "ItemConnection")
        to_node: Converts a store entity into a ``node_type`` instance
        page_info_type: PageInfo type to expose

    Returns:
        A Strawberry Connection type, instantiated as ``Type(paginated=...)``

    Example:
        ItemConnection = create_connection_type(ItemType, "Item")

        # Produces:
        # type ItemConnection {
        #   totalCount: Int!
        #   edges: [ItemEdge!]!
        #   pageInfo: PageInfo!
        # }
    """
    edge_type = create_edge_type(node_type, type_name_prefix, to_node)

    @strawberry.type(
        name=f"{type_name_prefix}Connection",
        description=f"Relay connection for {type_name_prefix} with cursor-based pagination",
    )
    class ConnectionType:
        paginated: strawberry.Private[Paginated]

        @strawberry.field(description="Total matching items")
        async def total_count(self) -> int:
            return await ConnectionResolvers.total_count(self.paginated)

        @strawberry.field(description="List of edges containing nodes and their cursors")
        async def edges(self) -> list[edge_type]:  # type: ignore[valid-type]
            edges = await ConnectionResolvers.edges(self.paginated)
            return [edge_type(edge=ConnectionResolvers.edge(edge)) for edge in edges]

        @strawberry.field(description="Pagination information")
        def page_info(self) -> page_info_type:  # type: ignore[valid-type]
            return page_info_type(resolver=ConnectionResolvers.page_info(self.paginated))

    return ConnectionType
