"""Unit tests for the cursor paginator."""

import asyncio

from infrahub_pygen.core.pagination import EdgePage, Paginator


class TestPaginator:
    def test_collect_all(self):
        calls = []

        async def fetch(cursor):
            calls.append(cursor)
            if cursor is None:
                return EdgePage(nodes=[1, 2], next_cursor="next")
            return EdgePage(nodes=[3], next_cursor=None)

        paginator = Paginator(fetch, lambda page: page)
        assert asyncio.run(paginator.collect_all()) == [1, 2, 3]
        assert calls == [None, "next"]

    def test_next_page_done(self):
        async def fetch(cursor):
            return {"items": [42]}

        paginator = Paginator(fetch, lambda response: EdgePage(response["items"]))

        async def run():
            first = await paginator.next_page()
            second = await paginator.next_page()
            return first, second

        assert asyncio.run(run()) == ([42], None)
        assert paginator.done
