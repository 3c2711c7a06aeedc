"""Core components."""

from .config import DEFAULT_CACHE_DIR, DEFAULT_HOST, DEFAULT_TIMEOUT, QueryConfig
from .exceptions import (
    CacheIOError,
    DataError,
    IncompatibleHistoricalPeriodError,
    InvalidPeriodError,
    ProviderError,
    QueryError,
    RemoteAPIError,
    TransportError,
)

__all__ = [
    "QueryConfig",
    "DEFAULT_HOST",
    "DEFAULT_CACHE_DIR",
    "DEFAULT_TIMEOUT",
    "DataError",
    "QueryError",
    "InvalidPeriodError",
    "IncompatibleHistoricalPeriodError",
    "ProviderError",
    "RemoteAPIError",
    "TransportError",
    "CacheIOError",
]
