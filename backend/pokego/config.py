# backend/pokego/config.py

import os
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
# Useful for local development
env_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), '.env')
load_dotenv(dotenv_path=env_path)

class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file_encoding='utf-8')

    # PokeAPI base URL
    pokeapi_base_url: str = "https://pokeapi.co/api/v2"

    # HTTP timeouts for the shared client (seconds)
    request_timeout_seconds: float = 10.0
    connect_timeout_seconds: float = 5.0

    # Max number of detail fetches in flight per aggregation call
    detail_fetch_concurrency: int = Field(10, ge=1)

    # Infinite-scroll page size and home page section sizes
    page_size: int = Field(20, ge=1)
    featured_pokemon_limit: int = Field(9, ge=1)
    home_region_limit: int = Field(6, ge=0)

    # When True the loader trusts the upstream `next` link to detect the last page
    # instead of the "short page" heuristic
    trust_upstream_pagination: bool = False

    # Favorite store persistence: "redis" or "file"
    favorites_backend: Literal["redis", "file"] = "redis"
    # Reads REDIS_URL from environment or .env file
    redis_url: str = "redis://localhost:6379/0"
    favorites_key: str = "favoritePokemonIds"
    favorites_file: str = os.path.join(os.path.expanduser("~"), ".pokego", "favorites.json")

    log_level: str = "INFO"


# Create a single instance of the settings to be imported in other modules
settings = Settings()
