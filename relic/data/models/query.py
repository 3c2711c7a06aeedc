"""Metric query model."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..utils.timestamps import coerce_period, ensure_aware, to_api_time


class MetricQuery(BaseModel):
    """Normalized description of one metric data request.

    Metric and value names keep the order they were given in; that order is
    part of the request sent to the service and of the cache fingerprint.
    """

    metric_names: list[str] = Field(..., min_length=1)
    value_names: list[str] = Field(..., min_length=1)
    period: timedelta | None = None
    start_time: datetime
    end_time: datetime

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator("metric_names", "value_names", mode="before")
    @classmethod
    def coerce_names(cls, v: Any) -> Any:
        """Accept a single name where a list is expected."""
        if isinstance(v, str):
            return [v]
        if isinstance(v, tuple):
            return list(v)
        return v

    @field_validator("metric_names", "value_names")
    @classmethod
    def validate_names(cls, v: list[str]) -> list[str]:
        if any(not name for name in v):
            raise ValueError("names must be non-empty strings")
        return v

    @field_validator("period", mode="before")
    @classmethod
    def coerce_period_seconds(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return coerce_period(v)
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def make_aware(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    @model_validator(mode="after")
    def validate_window(self) -> MetricQuery:
        if self.start_time > self.end_time:
            raise ValueError("start_time must not be after end_time")
        return self

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    @property
    def period_seconds(self) -> int | None:
        """Sampling period in whole seconds, as sent to the service."""
        if self.period is None:
            return None
        return int(self.period.total_seconds())

    def with_window(self, start_time: datetime, end_time: datetime) -> MetricQuery:
        """Copy of this query narrowed to ``[start_time, end_time)``."""
        return self.model_copy(update={"start_time": start_time, "end_time": end_time})

    def query_params(self) -> list[tuple[str, str]]:
        """Ordered query string pairs, repeating ``names[]`` and ``values[]``."""
        params: list[tuple[str, str]] = [("names[]", name) for name in self.metric_names]
        params.extend(("values[]", value) for value in self.value_names)
        params.append(("from", to_api_time(self.start_time)))
        params.append(("to", to_api_time(self.end_time)))
        if self.period_seconds is not None:
            params.append(("period", str(self.period_seconds)))
        params.append(("raw", "true"))
        return params
