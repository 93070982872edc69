"""``paginate()`` shortcut for store adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from keyset_connection.core.pagination.engine import Pagination

if TYPE_CHECKING:
    from collections.abc import Mapping


class PaginableMixin:
    """Adds ``paginate()`` to a store adapter.

    Example:
        store = MongoStore(db.items, identity_factory=ObjectId)
        paginated = store.paginate(
            criteria={"status": "active"},
            pagination={"first": 20, "after": cursor},
            sort={"field": "name", "order": "desc"},
        )
        edges = await paginated.edges()
    """

    def paginate(
        self,
        *,
        criteria: Any = None,
        pagination: Mapping[str, Any] | None = None,
        sort: Mapping[str, Any] | None = None,
        **options: Any,
    ) -> Pagination:
        """Start a page request against this store."""
        return Pagination(
            self,  # type: ignore[arg-type]
            criteria=criteria,
            pagination=pagination,
            sort=sort,
            **options,
        )


__all__ = ["PaginableMixin"]
