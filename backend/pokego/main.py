# backend/pokego/main.py

from fastapi import Depends, FastAPI, Path, Query, Request, status
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
from typing import List

from .aggregation import fetch_pokemon_detail, fetch_regions, fetch_summaries, fetch_types
from .clients import get_http_client, close_http_client
from .config import settings
from .errors import HTTPStatusError, PokeAPIError
from .favorites import FavoriteStore, create_favorite_store
from .home import HomeFeed
from .loader import PaginatedLoader
from .models import FavoriteList, FavoriteState, HomeData, PokemonSummary, Region

# Configure logging
logger = logging.getLogger(__name__)
logging.basicConfig(level=settings.log_level, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup phase
    logger.info("Application startup...")
    await get_http_client()
    logger.info("PokeAPI HTTPX client initialized.")

    store = create_favorite_store(settings)
    app.state.favorite_store = store
    app.state.browse_loader = PaginatedLoader(store)
    logger.info(f"Favorite store ready (backend: {settings.favorites_backend}).")

    yield # Application runs here

    # Shutdown phase
    logger.info("Application shutdown...")
    await store.close()
    await close_http_client()
    logger.info("Resources cleaned up.")

app = FastAPI(
    title="PokeGo API",
    description="Aggregated Pokémon, types and regions from PokeAPI, with favorites",
    version="1.0.0",
    lifespan=lifespan,
)

# --- Dependencies ---

def get_favorite_store(request: Request) -> FavoriteStore:
    return request.app.state.favorite_store

def get_browse_loader(request: Request) -> PaginatedLoader:
    return request.app.state.browse_loader

# --- Error mapping ---

@app.exception_handler(PokeAPIError)
async def pokeapi_error_handler(request: Request, exc: PokeAPIError):
    if isinstance(exc, HTTPStatusError) and exc.status_code == 404:
        logger.warning(f"Upstream resource not found for {request.url.path}")
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Resource not found upstream."})
    logger.error(f"Upstream PokeAPI failure for {request.url.path}: {type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": f"PokeAPI request failed: {exc}", "error": type(exc).__name__},
    )

# --- API Endpoints ---

@app.get("/")
async def read_root():
    """ Basic root endpoint to check if the API is running. """
    return {
        "message": "Welcome to the PokeGo API!",
        "documentation": "/docs",
        "favorites_backend": settings.favorites_backend,
    }

@app.get(
    "/api/pokemon",
    response_model=List[PokemonSummary],
    summary="Get a page of Pokémon summaries",
    tags=["Pokemon"]
)
async def list_pokemon(
    limit: int = Query(20, ge=1, le=200, description="Number of Pokémon in the page"),
    offset: int = Query(0, ge=0, description="Starting position"),
    store: FavoriteStore = Depends(get_favorite_store),
):
    """
    Resolves one page of the PokeAPI list to summaries. Entries whose detail
    could not be fetched are left out; results are sorted by id.
    """
    logger.info(f"Received request for Pokémon page. limit={limit}, offset={offset}")
    summaries = await fetch_summaries(limit, offset, store=store)
    return sorted(summaries, key=lambda s: s.id)

@app.get(
    "/api/pokemon/{pokemon_id}",
    response_model=PokemonSummary,
    summary="Get a single Pokémon summary",
    tags=["Pokemon"]
)
async def get_pokemon(
    pokemon_id: int = Path(..., ge=1, description="National Pokédex ID"),
    store: FavoriteStore = Depends(get_favorite_store),
):
    pokemon = await fetch_pokemon_detail(pokemon_id)
    return PokemonSummary.from_pokemon(pokemon, is_favorite=await store.is_favorite(pokemon.id))

@app.get("/api/types", response_model=List[str], summary="Get all Pokémon type names", tags=["Metadata"])
async def get_types():
    response = await fetch_types()
    return response.type_names

@app.get("/api/regions", response_model=List[Region], summary="Get all regions with location counts", tags=["Metadata"])
async def get_regions():
    regions = await fetch_regions()
    return regions

@app.get("/api/home", response_model=HomeData, summary="Get the home page sections", tags=["Home"])
async def get_home(store: FavoriteStore = Depends(get_favorite_store)):
    """Featured Pokémon, types and regions; a failed section is reported in `error_message`."""
    feed = HomeFeed(store)
    return await feed.load_all()

# --- Browse feed (infinite scroll) ---

def _browse_payload(loader: PaginatedLoader) -> dict:
    return {
        "items": [item.model_dump() for item in loader.items],
        "offset": loader.offset,
        "state": loader.state.value,
        "has_more_data": loader.has_more_data,
        "error_message": loader.error_message,
    }

@app.get("/api/browse", summary="Get the Pokémon loaded so far", tags=["Browse"])
async def get_browse(loader: PaginatedLoader = Depends(get_browse_loader)):
    await loader.load_initial()
    return _browse_payload(loader)

@app.post("/api/browse/more", summary="Load the next page of Pokémon", tags=["Browse"])
async def browse_more(loader: PaginatedLoader = Depends(get_browse_loader)):
    await loader.load_more()
    return _browse_payload(loader)

# --- Favorites ---

@app.get("/api/favorites", response_model=FavoriteList, tags=["Favorites"])
async def list_favorites(store: FavoriteStore = Depends(get_favorite_store)):
    return FavoriteList(ids=sorted(await store.get_ids()))

@app.post("/api/favorites/{pokemon_id}/toggle", response_model=FavoriteState, tags=["Favorites"])
async def toggle_favorite(
    pokemon_id: int = Path(..., ge=1),
    loader: PaginatedLoader = Depends(get_browse_loader),
):
    # Goes through the loader so already loaded browse items reflect the change
    new_state = await loader.toggle_favorite(pokemon_id)
    return FavoriteState(id=pokemon_id, is_favorite=new_state)

@app.put("/api/favorites/{pokemon_id}", response_model=FavoriteState, tags=["Favorites"])
async def add_favorite(pokemon_id: int = Path(..., ge=1), store: FavoriteStore = Depends(get_favorite_store)):
    await store.add(pokemon_id)
    return FavoriteState(id=pokemon_id, is_favorite=True)

@app.delete("/api/favorites/{pokemon_id}", response_model=FavoriteState, tags=["Favorites"])
async def remove_favorite(pokemon_id: int = Path(..., ge=1), store: FavoriteStore = Depends(get_favorite_store)):
    await store.remove(pokemon_id)
    return FavoriteState(id=pokemon_id, is_favorite=False)

@app.delete("/api/favorites", status_code=status.HTTP_204_NO_CONTENT, tags=["Favorites"])
async def clear_favorites(store: FavoriteStore = Depends(get_favorite_store)):
    await store.clear()
