"""Custom exception hierarchy."""

from __future__ import annotations

from datetime import datetime, timedelta


class DataError(Exception):
    """Base exception for all library errors."""

    pass


class QueryError(DataError, ValueError):
    """Query parameters are invalid.

    Raised before any network or cache activity takes place.
    """

    pass


class InvalidPeriodError(QueryError):
    """Sampling period is shorter than the service minimum."""

    def __init__(self, message: str, period: timedelta | None = None) -> None:
        super().__init__(message)
        self.period = period


class IncompatibleHistoricalPeriodError(QueryError):
    """Sub-hour period requested for data older than the fine retention window."""

    def __init__(
        self,
        message: str,
        period: timedelta | None = None,
        start_time: datetime | None = None,
    ) -> None:
        super().__init__(message)
        self.period = period
        self.start_time = start_time


class ProviderError(DataError):
    """Error from external data provider."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemoteAPIError(ProviderError):
    """The metrics service answered with an error payload."""

    pass


class TransportError(ProviderError):
    """Network or HTTP-layer failure while talking to the service."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.url = url


class CacheIOError(DataError):
    """Result cache could not be read or written.

    Never fatal to a query: callers log it and carry on uncached.
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key
