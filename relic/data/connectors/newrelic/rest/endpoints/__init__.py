"""New Relic REST endpoint registry."""

from __future__ import annotations

from relic.data.runtime.rest import ResponseAdapter, RestEndpointSpec

from . import applications, metric_data

_ENDPOINTS: dict[str, tuple[RestEndpointSpec, type[ResponseAdapter]]] = {
    metric_data.SPEC.id: (metric_data.SPEC, metric_data.Adapter),
    applications.SPEC.id: (applications.SPEC, applications.Adapter),
}


def get_endpoint_spec(endpoint_id: str) -> RestEndpointSpec | None:
    entry = _ENDPOINTS.get(endpoint_id)
    return entry[0] if entry else None


def get_endpoint_adapter(endpoint_id: str) -> type[ResponseAdapter] | None:
    entry = _ENDPOINTS.get(endpoint_id)
    return entry[1] if entry else None


__all__ = ["get_endpoint_spec", "get_endpoint_adapter"]
