"""Timestamp helpers shared by the query model and the REST endpoints."""

from __future__ import annotations

from datetime import datetime, timedelta

# The API accepts minute granularity; seconds are always sent as zero.
API_TIME_FORMAT = "%Y-%m-%dT%H:%M:00%z"


def ensure_aware(value: datetime) -> datetime:
    """Return ``value`` with a timezone, treating naive values as local time."""
    if value.tzinfo is None or value.utcoffset() is None:
        return value.astimezone()
    return value


def to_api_time(value: datetime) -> str:
    """Format a datetime for the ``from``/``to`` query parameters.

    The local offset of ``value`` is preserved, e.g. ``2016-01-28T09:15:00-0800``.
    """
    return ensure_aware(value).strftime(API_TIME_FORMAT)


def to_epoch_seconds(value: datetime) -> float:
    """Numeric instant used when fingerprinting queries."""
    return ensure_aware(value).timestamp()


def coerce_period(period: timedelta | float | int | None) -> timedelta | None:
    """Normalise a sampling period given as seconds or a timedelta."""
    if period is None or isinstance(period, timedelta):
        return period
    if isinstance(period, bool):
        raise TypeError("period must be a number of seconds or a timedelta")
    return timedelta(seconds=period)
