# backend/tests/test_loader.py

import asyncio

import pytest

from pokego.errors import HTTPStatusError
from pokego.loader import LoaderState, PaginatedLoader
from pokego.models import PokemonSummary, SummaryPage


def make_page(ids, next_url="https://pokeapi.co/api/v2/pokemon?offset=x"):
    return SummaryPage(
        summaries=[PokemonSummary(id=i, name=f"p{i}", type_names=["normal"]) for i in ids],
        count=1000,
        next=next_url,
    )


class FakePages:
    """Serves queued pages (or errors) and records the requested (limit, offset)."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def __call__(self, limit, offset):
        self.calls.append((limit, offset))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.mark.asyncio
async def test_full_pages_advance_offset(store):
    pages = FakePages(make_page(range(1, 4)), make_page(range(4, 7)))
    loader = PaginatedLoader(store, fetch_page=pages, page_size=3)

    await loader.load_initial()
    await loader.load_more()

    assert pages.calls == [(3, 0), (3, 3)]
    assert [p.id for p in loader.items] == [1, 2, 3, 4, 5, 6]
    assert loader.offset == 6
    assert loader.state is LoaderState.IDLE
    assert loader.has_more_data

@pytest.mark.asyncio
async def test_short_page_exhausts_loader(store):
    pages = FakePages(make_page(range(1, 16)))
    loader = PaginatedLoader(store, fetch_page=pages, page_size=20)

    await loader.load_more()

    assert loader.state is LoaderState.EXHAUSTED
    assert not loader.has_more_data
    assert len(loader.items) == 15

    await loader.load_more()
    assert len(pages.calls) == 1
    assert not any(loader.should_load_more(item) for item in loader.items)

@pytest.mark.asyncio
async def test_empty_page_exhausts_without_advancing(store):
    pages = FakePages(make_page([]))
    loader = PaginatedLoader(store, fetch_page=pages, page_size=20)

    await loader.load_more()

    assert loader.state is LoaderState.EXHAUSTED
    assert loader.offset == 0
    assert loader.items == []

@pytest.mark.asyncio
async def test_failure_sets_message_and_stays_retryable(store):
    pages = FakePages(HTTPStatusError(500), make_page(range(1, 3)))
    loader = PaginatedLoader(store, fetch_page=pages, page_size=2)

    await loader.load_more()

    assert loader.state is LoaderState.IDLE
    assert loader.error_message == "HTTP error 500"
    assert loader.offset == 0

    await loader.load_more()

    assert loader.error_message is None
    assert [p.id for p in loader.items] == [1, 2]
    assert pages.calls == [(2, 0), (2, 0)]

@pytest.mark.asyncio
async def test_load_more_is_ignored_while_loading(store):
    release = asyncio.Event()
    calls = []

    async def slow_page(limit, offset):
        calls.append(offset)
        await release.wait()
        return make_page(range(1, 3))

    loader = PaginatedLoader(store, fetch_page=slow_page, page_size=2)
    first = asyncio.create_task(loader.load_more())
    await asyncio.sleep(0)

    assert loader.is_loading
    await loader.load_more()
    release.set()
    await first

    assert calls == [0]
    assert loader.state is LoaderState.IDLE

@pytest.mark.asyncio
async def test_load_initial_is_noop_once_items_loaded(store):
    pages = FakePages(make_page(range(1, 3)))
    loader = PaginatedLoader(store, fetch_page=pages, page_size=2)

    await loader.load_initial()
    await loader.load_initial()

    assert pages.calls == [(2, 0)]

@pytest.mark.asyncio
async def test_should_load_more_only_for_last_item(store):
    loader = PaginatedLoader(store, fetch_page=FakePages(make_page(range(1, 4))), page_size=3)
    assert loader.should_load_more(1) is False

    await loader.load_more()

    assert loader.should_load_more(loader.items[-1]) is True
    assert loader.should_load_more(3) is True
    assert loader.should_load_more(loader.items[0]) is False

@pytest.mark.asyncio
async def test_items_carry_current_favorite_state(store):
    await store.add(2)
    loader = PaginatedLoader(store, fetch_page=FakePages(make_page([1, 2])), page_size=2)

    await loader.load_more()

    assert [p.is_favorite for p in loader.items] == [False, True]

@pytest.mark.asyncio
async def test_toggle_favorite_updates_loaded_item(store):
    loader = PaginatedLoader(store, fetch_page=FakePages(make_page([1, 2])), page_size=2)
    await loader.load_more()

    assert await loader.toggle_favorite(1) is True

    assert loader.items[0].is_favorite is True
    assert await store.is_favorite(1)

@pytest.mark.asyncio
async def test_upstream_pagination_mode_uses_next_link(store):
    # A page shortened by dropped details does not end the feed in this mode
    pages = FakePages(make_page([1]), make_page([3, 4], next_url=None))
    loader = PaginatedLoader(store, fetch_page=pages, page_size=2, trust_upstream_pagination=True)

    await loader.load_more()
    assert loader.state is LoaderState.IDLE

    await loader.load_more()
    assert loader.state is LoaderState.EXHAUSTED
    assert pages.calls == [(2, 0), (2, 2)]

@pytest.mark.asyncio
async def test_unexpected_error_returns_loader_to_idle(store):
    pages = FakePages(RuntimeError("boom"), make_page(range(1, 3)))
    loader = PaginatedLoader(store, fetch_page=pages, page_size=2)

    with pytest.raises(RuntimeError):
        await loader.load_more()

    assert loader.state is LoaderState.IDLE
    assert loader.has_more_data

    await loader.load_more()
    assert [p.id for p in loader.items] == [1, 2]

@pytest.mark.asyncio
async def test_cancelled_load_returns_loader_to_idle(store):
    started = asyncio.Event()

    async def hanging_page(limit, offset):
        started.set()
        await asyncio.sleep(10)

    loader = PaginatedLoader(store, fetch_page=hanging_page, page_size=2)
    task = asyncio.create_task(loader.load_more())
    await started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert loader.state is LoaderState.IDLE
    loader.fetch_page = FakePages(make_page(range(1, 3)))
    await loader.load_more()
    assert loader.should_load_more(2) is True

def test_explicit_page_size_is_kept(store):
    assert PaginatedLoader(store, page_size=5).page_size == 5

    with pytest.raises(ValueError):
        PaginatedLoader(store, page_size=0)
