"""Data models for metric queries and results.

Architecture:
    This module exports the Pydantic v2 data models used throughout the
    library. Queries and observations are immutable (frozen=True) so that a
    query's fingerprint cannot drift after it was computed.

Design Decisions:
    - Pydantic v2: Type validation plus JSON serialization for the disk cache
    - Ordered name lists: the service takes repeated ``names[]``/``values[]``
      parameters and their order is part of the cache key
    - Float values: metric values are measurements, not prices

Model Categories:
    - Requests: MetricQuery
    - Results: MetricObservation, MetricTable
    - Metadata: Application
"""

from .application import Application
from .query import MetricQuery
from .table import MetricObservation, MetricTable

__all__ = [
    "Application",
    "MetricObservation",
    "MetricQuery",
    "MetricTable",
]
