# backend/pokego/clients.py
import httpx
import logging
from typing import Optional

from .config import settings

logger = logging.getLogger(__name__)

# --- Shared HTTP Client Instance ---
# One pooled client for every PokeAPI call made by this process
_httpx_client: Optional[httpx.AsyncClient] = None

def _build_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.request_timeout_seconds, connect=settings.connect_timeout_seconds),
        follow_redirects=True,
        limits=httpx.Limits(max_connections=100, max_keepalive_connections=20)
    )

async def get_http_client() -> httpx.AsyncClient:
    """Gets or creates the shared httpx client."""
    global _httpx_client
    if _httpx_client is None or _httpx_client.is_closed:
        logger.info("Creating/Recreating shared httpx client for PokeAPI.")
        _httpx_client = _build_client()
    return _httpx_client

async def close_http_client():
    """Closes the shared httpx client."""
    global _httpx_client
    if _httpx_client and not _httpx_client.is_closed:
        await _httpx_client.aclose()
        _httpx_client = None
        logger.info("PokeAPI httpx client closed.")
    elif _httpx_client:
        _httpx_client = None
        logger.warning("PokeAPI httpx client was already closed.")
