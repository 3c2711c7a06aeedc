"""REST request runner using endpoint specs and response adapters."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..chunking import SpanPolicy
from .transport import RESTTransport


@dataclass(frozen=True)
class RestEndpointSpec:
    id: str
    method: str  # only "GET" is used by the metrics API
    build_path: Callable[[dict[str, Any]], str]
    build_query: Callable[[dict[str, Any]], list[tuple[str, str]]] | None = None
    build_headers: Callable[[dict[str, Any]], dict[str, str]] | None = None
    # Endpoints limited by time span per call declare how to chunk them
    span_policy: SpanPolicy | None = None


class ResponseAdapter:
    def parse(self, response: Any, params: dict[str, Any]) -> Any:
        return response


class RestRunner:
    def __init__(self, transport: RESTTransport) -> None:
        self._t = transport

    async def run(
        self, *, spec: RestEndpointSpec, adapter: ResponseAdapter, params: dict[str, Any]
    ) -> Any:
        path = spec.build_path(params)
        query = spec.build_query(params) if spec.build_query else None
        headers = spec.build_headers(params) if spec.build_headers else None

        if spec.method.upper() != "GET":
            raise ValueError(f"Unsupported method for {spec.id}: {spec.method}")

        data = await self._t.get(path, params=query, headers=headers)
        return adapter.parse(data, params)
