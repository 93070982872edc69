"""Page shapes returned to callers.

``Connection`` is the Relay shape (total count, edges, page info). REST
handlers that want a flat list convert it with :meth:`Connection.to_cursor_page`.

Example:
    connection = await resolve_connection(paginated)
    page = connection.to_cursor_page()
    # CursorPage(items=[...], next_cursor="42", has_more=True, total_count=120)
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

NodeT = TypeVar("NodeT")


class PageInfo(BaseModel):
    """Forward navigation metadata.

    Attributes:
        has_next_page: Whether entities exist after the last edge
        end_cursor: Cursor of the last edge, None for an empty page
    """

    has_next_page: bool = Field(default=False, description="Whether another page follows")
    end_cursor: str | None = Field(default=None, description="Cursor to pass as `after`")


class Edge(BaseModel, Generic[NodeT]):
    """A node and the cursor that resumes pagination right after it."""

    node: NodeT = Field(description="Paginated entity")
    cursor: str = Field(description="Opaque position of this entity")


class CursorPage(BaseModel, Generic[NodeT]):
    """Flat REST page.

    Attributes:
        items: Entities of this page
        next_cursor: ``after`` value for the next page, None on the last page
        has_more: Whether another page follows
        total_count: Size of the whole result set
    """

    items: list[NodeT] = Field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False
    total_count: int | None = None


class Connection(BaseModel, Generic[NodeT]):
    """Materialized Relay connection for one page request.

    Attributes:
        total_count: Size of the whole result set, not just this page
        edges: Edges of this page, in sort order
        page_info: Navigation metadata
    """

    total_count: int = Field(default=0, ge=0, description="Entities matching the base criteria")
    edges: list[Edge[NodeT]] = Field(default_factory=list, description="Edges in sort order")
    page_info: PageInfo = Field(default_factory=PageInfo)

    @property
    def nodes(self) -> list[NodeT]:
        """Nodes without edge wrappers."""
        return [edge.node for edge in self.edges]

    def to_cursor_page(self) -> CursorPage[NodeT]:
        """Flatten into a :class:`CursorPage`.

        The last page carries no ``next_cursor`` even though it has an end
        cursor.
        """
        has_more = self.page_info.has_next_page
        return CursorPage(
            items=self.nodes,
            next_cursor=self.page_info.end_cursor if has_more else None,
            has_more=has_more,
            total_count=self.total_count,
        )


__all__ = ["Connection", "CursorPage", "Edge", "PageInfo"]
