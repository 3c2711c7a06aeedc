"""Relic Data - chunked, cached application metric queries for New Relic."""

from .api import BatchFetcher, MetricDataAPI, MetricQueryEngine, list_applications, query_metrics
from .cache import CacheStore, FileCacheStore, ResultCache, fingerprint_chunk, fingerprint_query
from .connectors.newrelic import NewRelicRESTConnector
from .core import (
    CacheIOError,
    DataError,
    IncompatibleHistoricalPeriodError,
    InvalidPeriodError,
    ProviderError,
    QueryConfig,
    QueryError,
    RemoteAPIError,
    TransportError,
)
from .models import Application, MetricObservation, MetricQuery, MetricTable
from .runtime.chunking import ChunkPlan, ChunkPlanner, SpanPolicy, SpanTier

__version__ = "0.1.0"

__all__ = [
    # Facade
    "MetricDataAPI",
    "query_metrics",
    "list_applications",
    # Engine
    "MetricQueryEngine",
    "BatchFetcher",
    "ChunkPlanner",
    "ChunkPlan",
    "SpanPolicy",
    "SpanTier",
    # Cache
    "CacheStore",
    "FileCacheStore",
    "ResultCache",
    "fingerprint_query",
    "fingerprint_chunk",
    # Connectors
    "NewRelicRESTConnector",
    # Models
    "Application",
    "MetricObservation",
    "MetricQuery",
    "MetricTable",
    # Config
    "QueryConfig",
    # Exceptions
    "DataError",
    "QueryError",
    "InvalidPeriodError",
    "IncompatibleHistoricalPeriodError",
    "ProviderError",
    "RemoteAPIError",
    "TransportError",
    "CacheIOError",
]
