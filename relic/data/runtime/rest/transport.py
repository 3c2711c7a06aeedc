"""REST transport delegating to the shared HTTP client."""

from __future__ import annotations

from typing import Any

from .http_client import HTTPClient, QueryParams


class RESTTransport:
    """Thin transport used by RestRunner; owns one HTTPClient."""

    def __init__(self, *, timeout: float = 30.0) -> None:
        self._http = HTTPClient(timeout=timeout)

    async def get(
        self,
        path: str,
        params: QueryParams | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await self._http.get(path, params=params, headers=headers)

    async def close(self) -> None:
        await self._http.close()
