"""New Relic applications listing endpoint definition and adapter."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from relic.data.connectors.newrelic.config import applications_url, build_headers
from relic.data.connectors.newrelic.rest.schemas import (
    NewRelicApplicationsResponse,
    extract_error,
)
from relic.data.core import DEFAULT_HOST, ProviderError, RemoteAPIError
from relic.data.models import Application
from relic.data.runtime.rest import ResponseAdapter, RestEndpointSpec


def build_path(params: dict[str, Any]) -> str:
    return applications_url(params.get("host") or DEFAULT_HOST)


def build_query(params: dict[str, Any]) -> list[tuple[str, str]]:
    return [("page", str(params.get("page", 1)))]


SPEC = RestEndpointSpec(
    id="applications",
    method="GET",
    build_path=build_path,
    build_query=build_query,
    build_headers=build_headers,
)


class Adapter(ResponseAdapter):
    """Adapter for one page of the applications listing."""

    def parse(self, response: Any, params: dict[str, Any]) -> list[Application]:
        message = extract_error(response)
        if message is not None:
            raise RemoteAPIError(f"Error in response: {message}")

        try:
            raw = NewRelicApplicationsResponse.model_validate(response)
        except ValidationError as e:
            raise ProviderError(f"Unexpected applications response: {e}") from e

        return [
            Application(id=app.id, name=app.name, throughput=app.throughput)
            for app in raw.applications
        ]
