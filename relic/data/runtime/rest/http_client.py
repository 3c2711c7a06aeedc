"""Async HTTP client wrapper."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

import aiohttp

from ...core.exceptions import TransportError

logger = logging.getLogger(__name__)

QueryParams = Sequence[tuple[str, str]] | dict[str, str]


class HTTPClient:
    """Async HTTP client wrapper.

    Error statuses whose body is a JSON object with an ``error`` field are
    returned to the caller, so endpoint adapters can surface the service's
    own message. Everything else that goes wrong on the wire becomes a
    TransportError.
    """

    def __init__(self, timeout: float = 30.0) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def get(
        self,
        url: str,
        params: QueryParams | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET request returning the decoded JSON body.

        Args:
            url: Absolute URL
            params: Query parameters; a sequence of pairs keeps repeated keys
            headers: Extra request headers

        Raises:
            TransportError: On connection failures, timeouts, undecodable
                bodies and error statuses without an error payload
        """
        try:
            async with self.session.get(url, params=params, headers=headers) as response:
                status = response.status
                try:
                    payload = await response.json(content_type=None)
                except ValueError as e:
                    raise TransportError(
                        f"Invalid JSON response (HTTP {status})",
                        status_code=status,
                        url=url,
                    ) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Request failed: {e}", url=url) from e
        except asyncio.TimeoutError as e:
            raise TransportError("Request timed out", url=url) from e

        if status >= 400 and not (isinstance(payload, dict) and "error" in payload):
            raise TransportError(f"HTTP {status}", status_code=status, url=url)

        logger.debug("http_get", extra={"url": url, "status": status})
        return payload

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
