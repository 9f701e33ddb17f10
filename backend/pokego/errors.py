# backend/pokego/errors.py
"""Error taxonomy raised by the PokeAPI transport."""

from typing import Optional


class PokeAPIError(Exception):
    """Base class for every failure surfaced by the transport."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.url = url


class InvalidURLError(PokeAPIError):
    """The endpoint could not be turned into an absolute URL."""


class NetworkError(PokeAPIError):
    """Transport-level failure (connection refused, timeout, ...)."""

    def __init__(self, cause: BaseException, url: Optional[str] = None):
        super().__init__(f"Network error: {cause}", url=url)
        self.cause = cause


class InvalidResponseError(PokeAPIError):
    """The server answered with something that is not a usable HTTP response."""


class HTTPStatusError(PokeAPIError):
    """Status code outside of 200-299."""

    def __init__(self, status_code: int, url: Optional[str] = None):
        super().__init__(f"HTTP error {status_code}", url=url)
        self.status_code = status_code


class DecodingError(PokeAPIError):
    """Body was not JSON or did not match the expected schema."""

    def __init__(self, cause: BaseException, url: Optional[str] = None):
        super().__init__(f"Decoding error: {cause}", url=url)
        self.cause = cause


class UnknownError(PokeAPIError):
    """Failure that could not be classified."""
