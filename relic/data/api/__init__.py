"""High-level query API."""

from .engine import MetricQueryEngine
from .fetcher import BatchFetcher
from .metric_api import MetricDataAPI, list_applications, query_metrics

__all__ = [
    "BatchFetcher",
    "MetricDataAPI",
    "MetricQueryEngine",
    "list_applications",
    "query_metrics",
]
