"""Connection field resolvers.

Maps Relay connection fields onto an engine's facets. GraphQL servers resolve
fields independently, so each resolver only awaits the facet it needs; the
engine's per-instance cache makes the order irrelevant.

Both :class:`~keyset_connection.core.pagination.engine.Pagination` and
:class:`~keyset_connection.core.pagination.search.SearchPagination` satisfy
:class:`Paginated`.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Protocol

from keyset_connection.core.pagination.schemas import Connection, PageInfo

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from keyset_connection.core.pagination.schemas import Edge


class Paginated(Protocol):
    """Facets exposed by every pagination engine."""

    def total_count(self) -> Awaitable[int]: ...

    def edges(self) -> Awaitable[list[Edge[Any]]]: ...

    def end_cursor(self) -> Awaitable[str | None]: ...

    def has_next_page(self) -> Awaitable[bool]: ...


class PageInfoResolver:
    """Lazy ``pageInfo``: each field runs its facet only when requested."""

    __slots__ = ("_paginated",)

    def __init__(self, paginated: Paginated) -> None:
        self._paginated = paginated

    async def has_next_page(self) -> bool:
        return await self._paginated.has_next_page()

    async def end_cursor(self) -> str | None:
        return await self._paginated.end_cursor()


class ConnectionResolvers:
    """Resolvers for the ``Connection`` and ``Edge`` fields."""

    @staticmethod
    async def total_count(paginated: Paginated) -> int:
        return await paginated.total_count()

    @staticmethod
    async def edges(paginated: Paginated) -> list[Edge[Any]]:
        return await paginated.edges()

    @staticmethod
    def page_info(paginated: Paginated) -> PageInfoResolver:
        return PageInfoResolver(paginated)

    @staticmethod
    def edge(edge: Edge[Any]) -> Edge[Any]:
        """Edges already carry ``node`` and ``cursor``."""
        return edge


async def resolve_connection[T](paginated: Paginated) -> Connection[T]:
    """Materialize every facet into a :class:`Connection`.

    Example:
        connection = await resolve_connection(store.paginate(pagination={"first": 20}))
        page = connection.to_cursor_page()
    """
    total_count, edges, has_next_page, end_cursor = await asyncio.gather(
        paginated.total_count(),
        paginated.edges(),
        paginated.has_next_page(),
        paginated.end_cursor(),
    )
    return Connection(
        total_count=total_count,
        edges=edges,
        page_info=PageInfo(has_next_page=has_next_page, end_cursor=end_cursor),
    )


__all__ = ["ConnectionResolvers", "PageInfoResolver", "Paginated", "resolve_connection"]
