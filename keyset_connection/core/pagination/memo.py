"""Single-flight memoization for page facets.

Connection fields (``totalCount``, ``edges``, ``pageInfo.endCursor``,
``pageInfo.hasNextPage``) are resolved independently and in any order. Every
facet of one engine instance therefore runs its store round trip at most once:
the first call starts a task, every later or overlapping call awaits the same
task. A failed task stays failed for the life of the instance.

The cache belongs to a single engine instance, never to the process, so one
request's boundary can never leak into another request.
"""

from __future__ import annotations

import asyncio
import functools
from typing import TYPE_CHECKING, Any, Concatenate

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Coroutine, Hashable


class FacetCache:
    """Per-instance map of facet name to its shared task."""

    __slots__ = ("_tasks",)

    def __init__(self) -> None:
        self._tasks: dict[Hashable, asyncio.Future[Any]] = {}

    def run[T](
        self,
        key: Hashable,
        factory: Callable[[], Coroutine[Any, Any, T]],
    ) -> Awaitable[T]:
        """Return an awaitable for ``key``, starting ``factory`` on first use.

        Callers receive a shielded view of the shared task so cancelling one
        awaiting caller does not cancel the computation for the others.
        """
        task = self._tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._tasks[key] = task
        return asyncio.shield(task)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)


class SupportsFacets:
    """Mixin giving an engine its own :class:`FacetCache`."""

    _facets: FacetCache

    def __init__(self) -> None:
        self._facets = FacetCache()


def facet[S: SupportsFacets, T](
    method: Callable[[S], Coroutine[Any, Any, T]],
) -> Callable[[S], Awaitable[T]]:
    """Memoize an argument-free coroutine method as a single-flight facet.

    Example:
        class Pagination(SupportsFacets):
            @facet
            async def total_count(self) -> int:
                return await self.store.count(self.criteria)
    """
    key = method.__name__

    @functools.wraps(method)
    def wrapper(self: S) -> Awaitable[T]:
        return self._facets.run(key, lambda: method(self))

    return wrapper


def once_per_instance[S: SupportsFacets, **P, T](
    key: str,
) -> Callable[
    [Callable[Concatenate[S, P], Coroutine[Any, Any, T]]],
    Callable[Concatenate[S, P], Awaitable[T]],
]:
    """Memoize a coroutine method under a fixed ``key`` regardless of arguments.

    Used for lookups that happen at most once per request, such as resolving
    the single ``after`` cursor.
    """

    def decorator(
        method: Callable[Concatenate[S, P], Coroutine[Any, Any, T]],
    ) -> Callable[Concatenate[S, P], Awaitable[T]]:
        @functools.wraps(method)
        def wrapper(self: S, *args: P.args, **kwargs: P.kwargs) -> Awaitable[T]:
            return self._facets.run(key, lambda: method(self, *args, **kwargs))

        return wrapper

    return decorator


__all__ = ["FacetCache", "SupportsFacets", "facet", "once_per_instance"]
