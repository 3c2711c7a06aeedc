"""New Relic application metric data endpoint definition and adapter.

Time-ranged endpoint: the service caps how wide a window one call may
cover, depending on the sampling period, so it declares a span policy.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from relic.data.connectors.newrelic.config import build_headers, metric_data_url
from relic.data.connectors.newrelic.rest.schemas import NewRelicMetricDataResponse, extract_error
from relic.data.core import DEFAULT_HOST, ProviderError, RemoteAPIError
from relic.data.models import MetricObservation, MetricQuery, MetricTable
from relic.data.runtime.chunking import DEFAULT_SPAN_POLICY
from relic.data.runtime.rest import ResponseAdapter, RestEndpointSpec


def build_path(params: dict[str, Any]) -> str:
    """Build the metric data URL for the application."""
    return metric_data_url(int(params["app_id"]), params.get("host") or DEFAULT_HOST)


def build_query(params: dict[str, Any]) -> list[tuple[str, str]]:
    """Build query parameters, repeating ``names[]`` and ``values[]``."""
    query: MetricQuery = params["query"]
    return query.query_params()


# Endpoint specification
SPEC = RestEndpointSpec(
    id="metric_data",
    method="GET",
    build_path=build_path,
    build_query=build_query,
    build_headers=build_headers,
    span_policy=DEFAULT_SPAN_POLICY,
)


class Adapter(ResponseAdapter):
    """Adapter for parsing metric data responses into a MetricTable."""

    def parse(self, response: Any, params: dict[str, Any]) -> MetricTable:
        """Parse a metric data response.

        Args:
            response: Decoded JSON body
            params: Request parameters containing the query

        Returns:
            MetricTable with one row per metric timeslice, in response order

        Raises:
            RemoteAPIError: If the response carries an error field
            ProviderError: If the response has an unexpected shape
        """
        message = extract_error(response)
        if message is not None:
            raise RemoteAPIError(f"Error in response: {message}")

        try:
            raw = NewRelicMetricDataResponse.model_validate(response)
        except ValidationError as e:
            raise ProviderError(f"Unexpected metric data response: {e}") from e

        query: MetricQuery = params["query"]
        value_names = list(query.value_names)
        rows = [
            MetricObservation(
                name=metric.name,
                start=timeslice.from_,
                values={name: timeslice.values.get(name) for name in value_names},
            )
            for metric in raw.metric_data.metrics
            for timeslice in metric.timeslices
        ]
        return MetricTable(value_names=value_names, rows=rows)
