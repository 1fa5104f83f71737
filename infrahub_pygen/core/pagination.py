"""Cursor pagination over connection-style results."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class EdgePage(Generic[T]):
    """One page of nodes and the cursor of the next page, if any."""
    nodes: list[T] = field(default_factory=list)
    next_cursor: Any = None


class Paginator(Generic[T, R]):
    """Drives a fetch/extract pair until no cursor is returned.

    ``fetch(cursor)`` performs the request (``cursor`` is None for the first
    page) and ``extract(response)`` turns its result into an EdgePage.

    Examples:
        paginator = Paginator(fetch_widgets, lambda r: EdgePage(r.nodes, r.cursor))
        widgets = await paginator.collect_all()
    """

    def __init__(
        self,
        fetch: Callable[[Any], Awaitable[R]],
        extract: Callable[[R], EdgePage[T]],
    ):
        self._fetch = fetch
        self._extract = extract
        self._cursor: Any = None
        self._done = False

    @property
    def done(self) -> bool:
        return self._done

    async def next_page(self) -> list[T] | None:
        """Fetch the next page; None once the last page has been returned."""
        if self._done:
            return None
        response = await self._fetch(self._cursor)
        page = self._extract(response)
        self._cursor = page.next_cursor
        if self._cursor is None:
            self._done = True
        return page.nodes

    async def collect_all(self) -> list[T]:
        items: list[T] = []
        while (page := await self.next_page()) is not None:
            items.extend(page)
        return items
