# backend/pokego/loader.py

import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Union

from .aggregation import fetch_summary_page
from .config import settings
from .errors import PokeAPIError
from .favorites import FavoriteStore
from .models import PokemonSummary, SummaryPage

logger = logging.getLogger(__name__)

PageFetcher = Callable[[int, int], Awaitable[SummaryPage]]


class LoaderState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    EXHAUSTED = "exhausted"


class PaginatedLoader:
    """
    Incremental loader for infinite-scroll consumers.

    Pages of `page_size` summaries are appended to `items` as `load_more()` is
    called. Only one page is in flight at a time, and once the end of the data
    is reached further calls do nothing. A failed page leaves the loader idle
    with `error_message` set so the caller can retry.
    """

    def __init__(
        self,
        store: FavoriteStore,
        fetch_page: Optional[PageFetcher] = None,
        page_size: Optional[int] = None,
        trust_upstream_pagination: Optional[bool] = None,
    ):
        self.store = store
        self.fetch_page = fetch_page or (lambda limit, offset: fetch_summary_page(limit, offset))
        self.page_size = settings.page_size if page_size is None else page_size
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")
        if trust_upstream_pagination is None:
            trust_upstream_pagination = settings.trust_upstream_pagination
        self.trust_upstream_pagination = trust_upstream_pagination

        self.items: List[PokemonSummary] = []
        self.offset = 0
        self.state = LoaderState.IDLE
        self.error_message: Optional[str] = None

    @property
    def is_loading(self) -> bool:
        return self.state is LoaderState.LOADING

    @property
    def has_more_data(self) -> bool:
        return self.state is not LoaderState.EXHAUSTED

    async def load_initial(self) -> None:
        if self.items:
            return
        self.offset = 0
        if self.state is LoaderState.EXHAUSTED:
            self.state = LoaderState.IDLE
        await self.load_more()

    async def load_more(self) -> None:
        if self.state is not LoaderState.IDLE:
            return

        self.state = LoaderState.LOADING
        self.error_message = None
        logger.debug(f"Loading page: limit={self.page_size}, offset={self.offset}")
        exhausted = False
        try:
            page = await self.fetch_page(self.page_size, self.offset)
            exhausted = await self._apply_page(page)
        except PokeAPIError as e:
            logger.error(f"Failed to load page at offset {self.offset}: {e}")
            self.error_message = str(e)
        finally:
            # Failures and cancellations leave the loader retryable, never exhausted
            self.state = LoaderState.EXHAUSTED if exhausted else LoaderState.IDLE

        if exhausted:
            logger.info(f"No more data after {len(self.items)} items.")

    async def _apply_page(self, page: SummaryPage) -> bool:
        """Appends the page; returns True when no further page should be requested."""
        new_items = page.summaries
        if not new_items and not self.trust_upstream_pagination:
            return True

        favorite_ids = await self.store.get_ids()
        self.items.extend(item.model_copy(update={"is_favorite": item.id in favorite_ids}) for item in new_items)
        self.offset += self.page_size

        if self.trust_upstream_pagination:
            return page.next is None
        # A short page means the end of the list, even when the page was shortened by dropped details
        return len(new_items) < self.page_size

    def should_load_more(self, item: Union[PokemonSummary, int]) -> bool:
        """True when `item` is the last loaded item and another page may be requested."""
        if not self.items:
            return False
        item_id = item.id if isinstance(item, PokemonSummary) else item
        return item_id == self.items[-1].id and self.state is LoaderState.IDLE

    async def toggle_favorite(self, pokemon_id: int) -> bool:
        new_state = await self.store.toggle_favorite(pokemon_id)
        for index, item in enumerate(self.items):
            if item.id == pokemon_id:
                self.items[index] = item.model_copy(update={"is_favorite": new_state})
                break
        return new_state
