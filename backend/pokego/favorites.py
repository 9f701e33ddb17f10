# backend/pokego/favorites.py
"""
Favorite Pokémon ids, persisted as one JSON-encoded list under a single key.

Every operation reads and rewrites the whole set. Mutations on one
FavoriteStore instance are serialized by a lock; two processes writing the
same key can still overwrite each other's changes.
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Optional, Protocol, Set

import redis.asyncio as redis

from .config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class FavoriteBackend(Protocol):
    async def get(self, key: str) -> Optional[str]: ...
    async def set(self, key: str, value: str) -> None: ...
    async def delete(self, key: str) -> None: ...
    async def close(self) -> None: ...


class RedisFavoriteBackend:
    """Stores the favorites value in Redis."""

    def __init__(self, redis_url: Optional[str] = None, client: Optional[redis.Redis] = None):
        if client is None:
            url = redis_url or default_settings.redis_url
            logger.info(f"Creating Redis connection pool for favorites at: {url}")
            pool = redis.ConnectionPool.from_url(url, decode_responses=True, max_connections=20)
            client = redis.Redis(connection_pool=pool)
        self._client = client

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self._client.get(key)
        except redis.RedisError as e:
            logger.error(f"Redis GET error for key '{key}': {e}", exc_info=True)
            return None

    async def set(self, key: str, value: str) -> None:
        await self._client.set(key, value)
        logger.debug(f"Redis SET for key: {key}")

    async def delete(self, key: str) -> None:
        await self._client.delete(key)

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("Favorites Redis client closed.")


class FileFavoriteBackend:
    """Stores key/value pairs in a small JSON document on disk."""

    def __init__(self, path):
        self.path = Path(path)

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read favorites file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp_path, self.path)

    async def get(self, key: str) -> Optional[str]:
        data = await asyncio.to_thread(self._read_all)
        value = data.get(key)
        return value if isinstance(value, str) else None

    async def set(self, key: str, value: str) -> None:
        def _set():
            data = self._read_all()
            data[key] = value
            self._write_all(data)
        await asyncio.to_thread(_set)

    async def delete(self, key: str) -> None:
        def _delete():
            data = self._read_all()
            if data.pop(key, None) is not None:
                self._write_all(data)
        await asyncio.to_thread(_delete)

    async def close(self) -> None:
        pass


class FavoriteStore:
    """Set of favorited Pokémon ids with toggle/query operations."""

    def __init__(self, backend: FavoriteBackend, key: Optional[str] = None):
        self._backend = backend
        self.key = key or default_settings.favorites_key
        self._lock = asyncio.Lock()

    async def get_ids(self) -> Set[int]:
        """All favorite ids; an unreadable or corrupt value counts as empty."""
        raw = await self._backend.get(self.key)
        if raw is None:
            return set()
        try:
            return {int(n) for n in json.loads(raw)}
        except (ValueError, TypeError) as e:
            logger.warning(f"Failed to decode favorites stored under '{self.key}': {e}. Treating as empty.")
            return set()

    async def _save(self, ids: Set[int]) -> None:
        await self._backend.set(self.key, json.dumps(sorted(ids)))

    async def is_favorite(self, pokemon_id: int) -> bool:
        return pokemon_id in await self.get_ids()

    async def toggle_favorite(self, pokemon_id: int) -> bool:
        """Flip the favorite flag of `pokemon_id` and return the new state."""
        async with self._lock:
            ids = await self.get_ids()
            if pokemon_id in ids:
                ids.remove(pokemon_id)
            else:
                ids.add(pokemon_id)
            await self._save(ids)
            logger.info(f"Favorite toggled for Pokémon {pokemon_id}: {pokemon_id in ids}")
            return pokemon_id in ids

    async def add(self, pokemon_id: int) -> None:
        async with self._lock:
            ids = await self.get_ids()
            ids.add(pokemon_id)
            await self._save(ids)

    async def remove(self, pokemon_id: int) -> None:
        async with self._lock:
            ids = await self.get_ids()
            ids.discard(pokemon_id)
            await self._save(ids)

    async def clear(self) -> None:
        async with self._lock:
            await self._backend.delete(self.key)
            logger.info(f"Favorites cleared (key: {self.key}).")

    async def close(self) -> None:
        await self._backend.close()


def create_favorite_store(config: Optional[Settings] = None) -> FavoriteStore:
    """Builds the store selected by `favorites_backend` in the settings."""
    config = config or default_settings
    if config.favorites_backend == "file":
        backend = FileFavoriteBackend(config.favorites_file)
    else:
        backend = RedisFavoriteBackend(config.redis_url)
    return FavoriteStore(backend, key=config.favorites_key)
