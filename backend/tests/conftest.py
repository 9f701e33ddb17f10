# backend/tests/conftest.py

from typing import Dict, List, Optional

import pytest

from pokego import clients
from pokego.favorites import FavoriteStore


@pytest.fixture(autouse=True)
def fresh_http_client(monkeypatch):
    # Each test runs on its own event loop; never reuse a client across loops
    monkeypatch.setattr(clients, "_httpx_client", None)


class InMemoryFavoriteBackend:
    """Favorite backend keeping values in a dict, for tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})
        self.closed = False

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def backend():
    return InMemoryFavoriteBackend()

@pytest.fixture
def store(backend):
    return FavoriteStore(backend, key="favoritePokemonIds")


def pokemon_json(pokemon_id: int, name: str, types: List[str] = ("normal",), artwork: Optional[str] = None) -> dict:
    """Minimal PokeAPI /pokemon/{id} body."""
    return {
        "id": pokemon_id,
        "name": name,
        "height": 7,
        "weight": 69,
        "types": [{"slot": i + 1, "type": {"name": t, "url": "..."}} for i, t in enumerate(types)],
        "stats": [
            {"base_stat": 45, "effort": 0, "stat": {"name": "hp", "url": "https://pokeapi.co/api/v2/stat/1/"}},
            {"base_stat": 49, "effort": 0, "stat": {"name": "attack", "url": "https://pokeapi.co/api/v2/stat/2/"}},
        ],
        "sprites": {
            "front_default": f"https://img.example/{pokemon_id}.png",
            "other": {"official-artwork": {"front_default": artwork}},
        },
    }

def list_json(ids: List[int], count: int = 1328, next_url: Optional[str] = "https://pokeapi.co/api/v2/pokemon?offset=20&limit=20") -> dict:
    """Minimal PokeAPI /pokemon list body."""
    return {
        "count": count,
        "next": next_url,
        "previous": None,
        "results": [{"name": f"pokemon-{i}", "url": f"https://pokeapi.co/api/v2/pokemon/{i}/"} for i in ids],
    }
