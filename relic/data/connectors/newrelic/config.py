"""Shared New Relic connector constants.

This module centralizes URLs and limits used by the REST endpoints so the
connector itself can stay small and focused.
"""

from __future__ import annotations

from relic.data.core.config import DEFAULT_HOST

# Application ids below 1 are routed here to get a canned response in tests
MOCK_METRIC_DATA_URL = "http://mockbin.org/bin/1ba023e7-d63c-4e92-a4af-bedb93e9aa98"

# The applications listing returns at most this many entries per page
APPLICATIONS_PAGE_SIZE = 200

API_KEY_HEADER = "X-Api-Key"


def metric_data_url(app_id: int, host: str = DEFAULT_HOST) -> str:
    """Metric data URL for an application, or the mock URL for ids below 1."""
    if app_id < 1:
        return MOCK_METRIC_DATA_URL
    return f"https://{host}/v2/applications/{app_id}/metrics/data.json"


def applications_url(host: str = DEFAULT_HOST) -> str:
    return f"https://{host}/v2/applications.json"


def build_headers(params: dict[str, object]) -> dict[str, str]:
    """Request headers shared by every endpoint."""
    headers = {"Accept": "application/json"}
    api_key = params.get("api_key")
    if api_key:
        headers[API_KEY_HEADER] = str(api_key)
    return headers
