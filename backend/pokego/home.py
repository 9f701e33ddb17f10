# backend/pokego/home.py

import asyncio
import logging
from typing import List, Optional

from .aggregation import fetch_regions, fetch_summaries, fetch_types
from .config import settings
from .errors import PokeAPIError
from .favorites import FavoriteStore
from .models import HomeData, PokemonSummary, Region

logger = logging.getLogger(__name__)


class HomeFeed:
    """
    Data behind the home page: featured Pokémon, type names and regions.

    The three sections load concurrently and independently; a failing
    section keeps its previous content and sets `error_message`.
    """

    def __init__(
        self,
        store: FavoriteStore,
        featured_limit: Optional[int] = None,
        region_limit: Optional[int] = None,
    ):
        self.store = store
        self.featured_limit = settings.featured_pokemon_limit if featured_limit is None else featured_limit
        self.region_limit = settings.home_region_limit if region_limit is None else region_limit

        self.featured_pokemons: List[PokemonSummary] = []
        self.pokemon_types: List[str] = []
        self.regions: List[Region] = []
        self.error_message: Optional[str] = None

        self._loading_pokemons = False
        self._loading_types = False
        self._loading_regions = False

    @property
    def is_loading(self) -> bool:
        return self._loading_pokemons or self._loading_types or self._loading_regions

    async def load_all(self) -> HomeData:
        self.error_message = None
        await asyncio.gather(
            self.load_featured_pokemons(),
            self.load_pokemon_types(),
            self.load_regions(),
        )
        return self.snapshot()

    async def load_featured_pokemons(self) -> None:
        self._loading_pokemons = True
        try:
            summaries = await fetch_summaries(self.featured_limit, 0, store=self.store)
            # Sub-fetches complete in any order
            self.featured_pokemons = sorted(summaries, key=lambda s: s.id)
        except PokeAPIError as e:
            logger.error(f"Failed to load featured pokemons: {e}")
            self.error_message = f"Failed to load pokemons: {e}"
        finally:
            self._loading_pokemons = False

    async def load_pokemon_types(self) -> None:
        self._loading_types = True
        try:
            response = await fetch_types()
            self.pokemon_types = response.type_names
        except PokeAPIError as e:
            logger.error(f"Failed to load types: {e}")
            self.error_message = f"Failed to load types: {e}"
        finally:
            self._loading_types = False

    async def load_regions(self) -> None:
        self._loading_regions = True
        try:
            all_regions = await fetch_regions()
            self.regions = all_regions[:self.region_limit]
        except PokeAPIError as e:
            logger.error(f"Failed to load regions: {e}")
            self.error_message = f"Failed to load regions: {e}"
        finally:
            self._loading_regions = False

    async def toggle_favorite(self, pokemon_id: int) -> bool:
        new_state = await self.store.toggle_favorite(pokemon_id)
        for index, pokemon in enumerate(self.featured_pokemons):
            if pokemon.id == pokemon_id:
                self.featured_pokemons[index] = pokemon.model_copy(update={"is_favorite": new_state})
                break
        return new_state

    def pokemon_at(self, index: int) -> Optional[PokemonSummary]:
        return self.featured_pokemons[index] if 0 <= index < len(self.featured_pokemons) else None

    def type_at(self, index: int) -> Optional[str]:
        return self.pokemon_types[index] if 0 <= index < len(self.pokemon_types) else None

    def region_at(self, index: int) -> Optional[Region]:
        return self.regions[index] if 0 <= index < len(self.regions) else None

    def snapshot(self) -> HomeData:
        return HomeData(
            featured_pokemons=list(self.featured_pokemons),
            pokemon_types=list(self.pokemon_types),
            regions=list(self.regions),
            error_message=self.error_message,
        )
