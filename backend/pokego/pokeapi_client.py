# backend/pokego/pokeapi_client.py

import httpx
import logging
from typing import Optional, Type, TypeVar
from urllib.parse import urlsplit

from pydantic import BaseModel, ValidationError

from .clients import get_http_client
from .endpoints import Endpoint
from .errors import (
    DecodingError,
    HTTPStatusError,
    InvalidResponseError,
    InvalidURLError,
    NetworkError,
    UnknownError,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _validate_url(url: str) -> str:
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise InvalidURLError(f"Cannot build a request URL from {url!r}", url=url)
    return url

async def request(endpoint: Endpoint, model: Type[ModelT], client: Optional[httpx.AsyncClient] = None) -> ModelT:
    """
    Performs a single request against PokeAPI and decodes the body into `model`.

    Args:
        endpoint: Endpoint from the catalog in `endpoints.py`.
        model: Pydantic model the JSON body must match.
        client: Optional httpx client; the shared client is used by default.

    Returns:
        The decoded model instance.

    Raises:
        PokeAPIError: one of InvalidURLError, NetworkError, InvalidResponseError,
            HTTPStatusError, DecodingError or UnknownError. No retries are made.
    """
    url = _validate_url(endpoint.url)
    client = client or await get_http_client()

    logger.debug(f"Fetching data from PokeAPI: {endpoint.method} {url}")
    try:
        response = await client.request(endpoint.method, url, headers=endpoint.headers)
    except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
        raise InvalidURLError(f"Invalid URL {url!r}: {e}", url=url) from e
    except httpx.ProtocolError as e:
        logger.error(f"Malformed response from {url!r}: {e}")
        raise InvalidResponseError(f"Malformed response: {e}", url=url) from e
    except httpx.TransportError as e:
        # Timeouts, refused connections, DNS failures...
        logger.error(f"An error occurred while requesting {url!r}: {type(e).__name__}: {e}")
        raise NetworkError(e, url=url) from e
    except httpx.DecodingError as e:
        raise InvalidResponseError(f"Undecodable response content: {e}", url=url) from e
    except httpx.HTTPError as e:
        logger.error(f"Unexpected httpx error for {url!r}: {e}", exc_info=True)
        raise UnknownError(str(e), url=url) from e

    if not 200 <= response.status_code <= 299:
        logger.warning(f"HTTP error occurred: {response.status_code} {response.reason_phrase} for url {url!r}")
        raise HTTPStatusError(response.status_code, url=url)

    try:
        payload = response.json()
    except ValueError as e:
        logger.error(f"Response from {url!r} is not valid JSON: {e}")
        raise DecodingError(e, url=url) from e

    try:
        decoded = model.model_validate(payload)
    except ValidationError as e:
        logger.error(f"Response from {url!r} does not match {model.__name__}: {e.error_count()} error(s)")
        raise DecodingError(e, url=url) from e

    logger.debug(f"Successfully fetched data from {url}, status: {response.status_code}")
    return decoded
