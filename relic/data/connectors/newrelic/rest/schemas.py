"""New Relic REST API v2 raw response schemas.

This module defines Pydantic models for raw New Relic API responses.
These models represent the exact structure returned by the API before
conversion to domain models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class NewRelicTimeslice(BaseModel):
    """One timeslice of a metric."""

    from_: datetime = Field(..., alias="from", description="Timeslice start")
    to: datetime | None = Field(None, description="Timeslice end")
    values: dict[str, float | None] = Field(default_factory=dict, description="Values by name")

    model_config = {"populate_by_name": True}


class NewRelicMetric(BaseModel):
    """A metric with its timeslices."""

    name: str = Field(..., description="Metric name")
    timeslices: list[NewRelicTimeslice] = Field(default_factory=list, description="Timeslices")


class NewRelicMetricData(BaseModel):
    """Body of the ``metric_data`` object."""

    metrics: list[NewRelicMetric] = Field(default_factory=list, description="Metrics")
    metrics_not_found: list[str] = Field(default_factory=list, description="Unknown metrics")
    metrics_found: list[str] = Field(default_factory=list, description="Known metrics")


class NewRelicMetricDataResponse(BaseModel):
    """Raw metric data response."""

    metric_data: NewRelicMetricData = Field(..., description="Metric data")


class NewRelicApplicationSummary(BaseModel):
    """Subset of ``application_summary`` used for ranking applications."""

    throughput: float = Field(0.0, description="Requests per minute")
    response_time: float | None = Field(None, description="Average response time")
    error_rate: float | None = Field(None, description="Error rate")


class NewRelicApplication(BaseModel):
    """Raw application entry."""

    id: int = Field(..., description="Application ID")
    name: str = Field(..., description="Application name")
    reporting: bool = Field(False, description="Whether the app currently reports data")
    application_summary: NewRelicApplicationSummary | None = Field(
        None, description="Summary metrics, present for reporting apps"
    )

    @property
    def throughput(self) -> float:
        if self.reporting and self.application_summary is not None:
            return self.application_summary.throughput
        return 0.0


class NewRelicApplicationsResponse(BaseModel):
    """Raw applications listing page."""

    applications: list[NewRelicApplication] = Field(default_factory=list, description="Apps")


def extract_error(response: Any) -> str | None:
    """Return the error message of an error payload, or None.

    The API reports errors either as a string or as ``{"title": ...}``.
    """
    if not isinstance(response, dict) or response.get("error") is None:
        return None
    error = response["error"]
    if isinstance(error, dict):
        return str(error.get("title") or error)
    return str(error)


__all__ = [
    "NewRelicApplication",
    "NewRelicApplicationSummary",
    "NewRelicApplicationsResponse",
    "NewRelicMetric",
    "NewRelicMetricData",
    "NewRelicMetricDataResponse",
    "NewRelicTimeslice",
    "extract_error",
]
