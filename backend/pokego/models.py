# backend/pokego/models.py
from typing import List, Optional, Iterable
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field


# --- Wire models (PokeAPI responses) ---

class NamedResource(BaseModel):
    """A `{name, url}` reference returned by PokeAPI list endpoints."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Resource name")
    url: str = Field(..., description="URL of the resource detail on PokeAPI")

    @property
    def id(self) -> Optional[int]:
        """Numeric id from the trailing path segment, e.g. ".../pokemon/1/" -> 1."""
        segments = [s for s in urlsplit(self.url).path.split('/') if s]
        if not segments:
            return None
        try:
            return int(segments[-1])
        except ValueError:
            return None

class PokemonListResponse(BaseModel):
    """GET /pokemon?limit=&offset="""
    count: int
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[NamedResource]

class TypeInfo(BaseModel):
    model_config = ConfigDict(frozen=True)
    name: str

class PokemonTypeSlot(BaseModel):
    model_config = ConfigDict(frozen=True)
    type: TypeInfo

class StatInfo(BaseModel):
    model_config = ConfigDict(frozen=True)
    name: str
    url: Optional[str] = None

class PokemonStatData(BaseModel):
    model_config = ConfigDict(frozen=True)
    base_stat: int
    effort: int = 0
    stat: StatInfo

class OfficialArtwork(BaseModel):
    model_config = ConfigDict(frozen=True)
    front_default: Optional[str] = None

class OtherSprites(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)
    official_artwork: Optional[OfficialArtwork] = Field(None, alias="official-artwork")

class SpriteData(BaseModel):
    model_config = ConfigDict(frozen=True)
    front_default: Optional[str] = None
    other: Optional[OtherSprites] = None

class Pokemon(BaseModel):
    """Full Pokémon record from GET /pokemon/{id}. Immutable once fetched."""
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    types: List[PokemonTypeSlot] = Field(default_factory=list)
    sprites: SpriteData = Field(default_factory=SpriteData)
    stats: List[PokemonStatData] = Field(default_factory=list)

    @property
    def type_names(self) -> List[str]:
        return [slot.type.name for slot in self.types]

    @property
    def image_url(self) -> Optional[str]:
        # Official artwork first, default front sprite as fallback
        other = self.sprites.other
        if other and other.official_artwork and other.official_artwork.front_default:
            return other.official_artwork.front_default
        return self.sprites.front_default

class PokemonTypeItem(BaseModel):
    name: str

class PokemonTypeListResponse(BaseModel):
    """GET /type"""
    results: List[PokemonTypeItem]

    @property
    def type_names(self) -> List[str]:
        return [item.name for item in self.results]

class RegionIndexResponse(BaseModel):
    """GET /region"""
    results: List[NamedResource]

class RegionDetailResponse(BaseModel):
    """GET /region/{id}"""
    name: str
    locations: List[NamedResource] = Field(default_factory=list)

    @property
    def location_count(self) -> int:
        return len(self.locations)


# --- Domain models (served to callers) ---

class StatSummary(BaseModel):
    """Represents a base stat for a Pokémon."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Name of the stat (e.g., 'hp', 'attack')")
    base_stat: int = Field(..., description="Base stat value")

class PokemonSummary(BaseModel):
    """Summary data for a Pokémon, for list views and favorites."""
    id: int = Field(..., description="Pokémon ID")
    name: str = Field(..., description="Pokémon name")
    type_names: List[str] = Field(..., description="Type names in slot order")
    image_url: Optional[str] = Field(None, description="Official artwork or default sprite URL")
    stats: List[StatSummary] = Field(default_factory=list, description="Base stats in source order")
    # Snapshot taken at enrichment time, not kept in sync with the store
    is_favorite: bool = Field(False, description="Was this Pokémon a favorite when the summary was built?")

    @classmethod
    def from_pokemon(cls, pokemon: Pokemon, is_favorite: bool = False) -> "PokemonSummary":
        return cls(
            id=pokemon.id,
            name=pokemon.name,
            type_names=pokemon.type_names,
            image_url=pokemon.image_url,
            stats=[StatSummary(name=s.stat.name, base_stat=s.base_stat) for s in pokemon.stats],
            is_favorite=is_favorite,
        )

class Region(BaseModel):
    """A region name joined with the number of locations it contains."""
    name: str = Field(..., description="Region name")
    location_count: int = Field(..., description="Number of locations in the region")

    @classmethod
    def from_index(cls, item: NamedResource, detail: RegionDetailResponse) -> "Region":
        return cls(name=item.name, location_count=detail.location_count)

class SummaryPage(BaseModel):
    """One aggregated page of summaries plus the upstream pagination fields."""
    summaries: List[PokemonSummary] = Field(default_factory=list)
    count: int = Field(0, description="Total number of Pokémon reported upstream")
    next: Optional[str] = Field(None, description="Upstream URL of the next page, if any")
    failed_ids: List[int] = Field(default_factory=list, description="Detail fetches that were dropped")

class HomeData(BaseModel):
    """Everything the home screen shows in one payload."""
    featured_pokemons: List[PokemonSummary] = Field(default_factory=list)
    pokemon_types: List[str] = Field(default_factory=list)
    regions: List[Region] = Field(default_factory=list)
    error_message: Optional[str] = None

class FavoriteState(BaseModel):
    id: int
    is_favorite: bool

class FavoriteList(BaseModel):
    ids: List[int] = Field(default_factory=list)


def enrich(pokemon: Iterable[Pokemon], favorite_ids: Iterable[int]) -> List[PokemonSummary]:
    """Turn detail records into summaries, flagging the ones in `favorite_ids`."""
    favorites = set(favorite_ids)
    return [PokemonSummary.from_pokemon(p, is_favorite=p.id in favorites) for p in pokemon]
