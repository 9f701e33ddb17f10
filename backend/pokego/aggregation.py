# backend/pokego/aggregation.py

import asyncio
import logging
from typing import Any, Awaitable, Callable, Hashable, Iterable, List, NamedTuple, Optional, Tuple

import httpx

from . import endpoints
from .config import settings
from .errors import PokeAPIError
from .favorites import FavoriteStore
from .models import (
    Pokemon,
    PokemonListResponse,
    PokemonSummary,
    PokemonTypeListResponse,
    Region,
    RegionDetailResponse,
    RegionIndexResponse,
    SummaryPage,
    enrich,
)
from .pokeapi_client import request

logger = logging.getLogger(__name__)


# --- Single-request helpers ---

async def fetch_pokemon_list(limit: int = 20, offset: int = 0, client: Optional[httpx.AsyncClient] = None) -> PokemonListResponse:
    return await request(endpoints.pokemon_list(limit, offset), PokemonListResponse, client=client)

async def fetch_pokemon_detail(pokemon_id: int, client: Optional[httpx.AsyncClient] = None) -> Pokemon:
    return await request(endpoints.pokemon_detail(pokemon_id), Pokemon, client=client)

async def fetch_types(client: Optional[httpx.AsyncClient] = None) -> PokemonTypeListResponse:
    return await request(endpoints.types(), PokemonTypeListResponse, client=client)

async def fetch_region_list(client: Optional[httpx.AsyncClient] = None) -> RegionIndexResponse:
    return await request(endpoints.region_list(), RegionIndexResponse, client=client)

async def fetch_region_detail(region_id: int, client: Optional[httpx.AsyncClient] = None) -> RegionDetailResponse:
    return await request(endpoints.region_detail(region_id), RegionDetailResponse, client=client)


# --- Fan-out / join ---

class FetchOutcome(NamedTuple):
    """Result of one detail fetch: either `value` or `error` is set."""
    key: Hashable
    value: Any = None
    error: Optional[PokeAPIError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

async def gather_details(
    keys: Iterable[Hashable],
    fetch: Callable[[Any], Awaitable[Any]],
    concurrency: Optional[int] = None,
) -> Tuple[List[FetchOutcome], List[FetchOutcome]]:
    """
    Runs `fetch(key)` for every key with at most `concurrency` calls in flight.

    A PokeAPIError raised by one fetch is captured in its outcome instead of
    failing the whole batch. Cancelling the caller cancels every pending fetch.

    Returns:
        (succeeded, failed) outcomes. No ordering guarantee is made between
        keys; callers needing a stable order must sort.
    """
    limit = concurrency if concurrency is not None else settings.detail_fetch_concurrency
    if limit < 1:
        raise ValueError(f"concurrency must be >= 1, got {limit}")
    semaphore = asyncio.Semaphore(limit)

    async def run(key: Hashable) -> FetchOutcome:
        async with semaphore:
            try:
                return FetchOutcome(key=key, value=await fetch(key))
            except PokeAPIError as e:
                logger.warning(f"Detail fetch skipped for {key}: {type(e).__name__}: {e}")
                return FetchOutcome(key=key, error=e)

    outcomes = await asyncio.gather(*(run(key) for key in keys))
    succeeded = [o for o in outcomes if o.ok]
    failed = [o for o in outcomes if not o.ok]
    if failed:
        logger.warning(f"Dropped {len(failed)} of {len(outcomes)} detail fetches.")
    return succeeded, failed


# --- Aggregations ---

async def fetch_summary_page(
    limit: int = 20,
    offset: int = 0,
    store: Optional[FavoriteStore] = None,
    concurrency: Optional[int] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> SummaryPage:
    """
    Fetches one page of the Pokémon list and resolves every entry to a summary.

    The list call must succeed (its error propagates and no detail is fetched).
    Entries whose URL carries no numeric id are skipped; detail fetches that
    fail are logged and left out of the page.
    """
    listing = await fetch_pokemon_list(limit, offset, client=client)

    ids: List[int] = []
    for ref in listing.results:
        if ref.id is None:
            logger.debug(f"Skipping list entry without numeric id: {ref.name} ({ref.url})")
        elif ref.id not in ids:
            ids.append(ref.id)

    succeeded, failed = await gather_details(
        ids, lambda pokemon_id: fetch_pokemon_detail(pokemon_id, client=client), concurrency
    )

    favorite_ids = await store.get_ids() if store is not None else set()
    summaries = enrich((o.value for o in succeeded), favorite_ids)
    logger.info(f"Aggregated {len(summaries)} Pokémon summaries (limit={limit}, offset={offset}).")
    return SummaryPage(
        summaries=summaries,
        count=listing.count,
        next=listing.next,
        failed_ids=[o.key for o in failed],
    )

async def fetch_summaries(
    limit: int = 9,
    offset: int = 0,
    store: Optional[FavoriteStore] = None,
    concurrency: Optional[int] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> List[PokemonSummary]:
    """List + concurrent details combined into summaries (unordered)."""
    page = await fetch_summary_page(limit, offset, store=store, concurrency=concurrency, client=client)
    return page.summaries

async def fetch_regions(
    concurrency: Optional[int] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> List[Region]:
    """
    Fetches every region with its location count.

    The entry at position i of the region index is joined with the detail of
    region id i + 1; the entry's own url is not used.
    """
    index = await fetch_region_list(client=client)

    region_ids = range(1, len(index.results) + 1)
    succeeded, _ = await gather_details(
        region_ids, lambda region_id: fetch_region_detail(region_id, client=client), concurrency
    )

    regions = [Region.from_index(index.results[o.key - 1], o.value) for o in succeeded]
    logger.info(f"Aggregated {len(regions)} regions.")
    return regions
