"""New Relic REST connector.

This connector provides direct access to the New Relic REST API v2 metric
endpoints. It performs single, uncached requests; chunking and caching are
layered on top by the query engine.

Architecture:
    This connector uses the endpoint registry to look up specs and adapters,
    then uses RestRunner to execute requests.
"""

from __future__ import annotations

import logging
from typing import Any

from relic.data.connectors.newrelic.config import APPLICATIONS_PAGE_SIZE, metric_data_url
from relic.data.core import DEFAULT_HOST, DEFAULT_TIMEOUT
from relic.data.models import Application, MetricQuery, MetricTable
from relic.data.runtime.chunking import SpanPolicy, extract_span_policy
from relic.data.runtime.rest import RestRunner, RESTTransport

from .endpoints import get_endpoint_adapter, get_endpoint_spec

logger = logging.getLogger(__name__)


class NewRelicRESTConnector:
    """New Relic REST connector for application metric data."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        host: str = DEFAULT_HOST,
        timeout: float = DEFAULT_TIMEOUT,
        transport: RESTTransport | None = None,
    ) -> None:
        """Initialize New Relic REST connector.

        Args:
            api_key: REST API key sent as ``X-Api-Key``
            host: API host; override to proxy requests through another host
            timeout: Total HTTP timeout per request in seconds
            transport: Optional transport (one is created if not provided)
        """
        self.host = host
        self._api_key = api_key
        self._transport = transport or RESTTransport(timeout=timeout)
        self._runner = RestRunner(self._transport)

    def metric_data_url(self, app_id: int) -> str:
        """URL metric data for ``app_id`` is fetched from."""
        return metric_data_url(app_id, self.host)

    @property
    def span_policy(self) -> SpanPolicy | None:
        """Span policy declared by the metric data endpoint."""
        return extract_span_policy(get_endpoint_spec("metric_data"))

    async def fetch(self, endpoint_id: str, params: dict[str, Any]) -> Any:
        """Fetch data from a New Relic REST endpoint.

        Args:
            endpoint_id: Endpoint identifier (e.g., "metric_data", "applications")
            params: Request parameters

        Returns:
            Parsed response from the endpoint adapter

        Raises:
            ValueError: If endpoint_id is not found in registry
        """
        spec = get_endpoint_spec(endpoint_id)
        if spec is None:
            raise ValueError(f"Unknown REST endpoint: {endpoint_id}")

        adapter_cls = get_endpoint_adapter(endpoint_id)
        if adapter_cls is None:
            raise ValueError(f"No adapter found for endpoint: {endpoint_id}")

        params = {**params, "host": self.host, "api_key": self._api_key}
        return await self._runner.run(spec=spec, adapter=adapter_cls(), params=params)

    async def fetch_metric_data(self, app_id: int, query: MetricQuery) -> MetricTable:
        """Fetch one window of metric data with a single request.

        The window must already fit the endpoint's span limits.
        """
        return await self.fetch("metric_data", {"app_id": app_id, "query": query})

    async def fetch_applications(self) -> list[Application]:
        """List applications with positive throughput, busiest first."""
        page = 1
        apps: list[Application] = []
        while True:
            chunk: list[Application] = await self.fetch("applications", {"page": page})
            apps.extend(chunk)
            if len(chunk) < APPLICATIONS_PAGE_SIZE:
                break
            page += 1

        logger.debug("applications_listed", extra={"pages": page, "applications": len(apps)})
        active = [app for app in apps if app.throughput > 0]
        return sorted(active, key=lambda app: app.throughput, reverse=True)

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> NewRelicRESTConnector:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
