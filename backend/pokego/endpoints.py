# backend/pokego/endpoints.py
"""Catalog of the PokeAPI requests this service makes."""

from typing import Dict, Optional, Tuple
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field

from .config import settings

DEFAULT_HEADERS = {"Content-Type": "application/json"}


class Endpoint(BaseModel):
    """A single request against PokeAPI: where to send it and with which query."""
    model_config = ConfigDict(frozen=True)

    base_url: str
    path: str
    method: str = "GET"
    headers: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_HEADERS))
    query_params: Tuple[Tuple[str, str], ...] = ()

    @property
    def url(self) -> str:
        url = f"{self.base_url.rstrip('/')}{self.path}"
        if self.query_params:
            url = f"{url}?{urlencode(self.query_params)}"
        return url


def _endpoint(path: str, base_url: Optional[str] = None, query_params: Tuple[Tuple[str, str], ...] = ()) -> Endpoint:
    return Endpoint(base_url=base_url or settings.pokeapi_base_url, path=path, query_params=query_params)

def pokemon_list(limit: int, offset: int, base_url: Optional[str] = None) -> Endpoint:
    return _endpoint("/pokemon", base_url, (("limit", str(limit)), ("offset", str(offset))))

def pokemon_detail(pokemon_id: int, base_url: Optional[str] = None) -> Endpoint:
    return _endpoint(f"/pokemon/{pokemon_id}", base_url)

def types(base_url: Optional[str] = None) -> Endpoint:
    return _endpoint("/type", base_url)

def region_list(base_url: Optional[str] = None) -> Endpoint:
    return _endpoint("/region", base_url)

def region_detail(region_id: int, base_url: Optional[str] = None) -> Endpoint:
    return _endpoint(f"/region/{region_id}", base_url)
