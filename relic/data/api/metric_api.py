"""Ergonomic MetricDataAPI facade for application metric queries.

The MetricDataAPI offers a high-level interface over the connector, the
result cache and the query engine, resolving defaults such as the end of the
window and the cache location.

Architecture:
    This module implements the Facade pattern (GoF). MetricDataAPI handles:
    - Default parameter resolution (host, cache directory, end time)
    - Query construction (MetricQuery from method parameters)
    - Delegation to MetricQueryEngine for chunked, cached fetching
    - Resource lifecycle management

Design Decisions:
    - Connector, cache and clock injection allow testing without network,
      without touching the working directory and without a real clock
    - Context manager pattern ensures the HTTP session is closed

See Also:
    - MetricQueryEngine: The underlying orchestration
    - MetricQuery: Request model used for fingerprinting
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta
from pathlib import Path

from ..cache import FileCacheStore, ResultCache
from ..connectors.newrelic import NewRelicRESTConnector
from ..core.config import DEFAULT_CACHE_DIR, DEFAULT_HOST, QueryConfig
from ..models import Application, MetricQuery, MetricTable
from ..runtime.chunking import ProgressCallback, SpanPolicy
from ..utils.timestamps import coerce_period, ensure_aware
from .engine import Clock, MetricQueryEngine, local_now

logger = logging.getLogger(__name__)

DEFAULT_METRICS = ("HttpDispatcher",)
DEFAULT_VALUES = ("average_response_time",)


class MetricDataAPI:
    """High-level facade for application metric data.

    Example:
        >>> async with MetricDataAPI(api_key="...") as api:
        ...     table = await api.query_metrics(
        ...         app_id=-1,
        ...         duration=3600,
        ...         period=300,
        ...         metrics=["HttpDispatcher"],
        ...         values=["calls_per_minute"],
        ...     )
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        account_id: int | str | None = None,
        config: QueryConfig | None = None,
        connector: NewRelicRESTConnector | None = None,
        cache: ResultCache | None = None,
        policy: SpanPolicy | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the MetricDataAPI.

        Args:
            api_key: REST API key
            account_id: Account the key belongs to (informational only)
            config: Host, cache directory and timeout settings
            connector: Optional connector (created from config if not provided)
            cache: Optional result cache (a file cache under config.cache_dir
                is created if not provided)
            policy: Optional span policy overriding the endpoint's
            clock: Optional clock, defaults to the local current time
        """
        self._config = config or QueryConfig()
        self._account_id = account_id
        self._owns_connector = connector is None
        self._connector = connector or NewRelicRESTConnector(
            api_key,
            host=self._config.host,
            timeout=self._config.timeout,
        )
        self._cache = cache or ResultCache(FileCacheStore(self._config.cache_dir))
        self._clock = clock or local_now
        self._engine = MetricQueryEngine(
            self._connector,
            cache=self._cache,
            policy=policy,
            clock=self._clock,
        )
        self._closed = False

    @property
    def config(self) -> QueryConfig:
        return self._config

    @property
    def engine(self) -> MetricQueryEngine:
        return self._engine

    def build_query(
        self,
        *,
        duration: float | timedelta = 3600,
        end_time: datetime | None = None,
        period: float | timedelta | None = None,
        metrics: str | Sequence[str] = DEFAULT_METRICS,
        values: str | Sequence[str] = DEFAULT_VALUES,
    ) -> MetricQuery:
        """Resolve defaults into a MetricQuery.

        The window is ``[end_time - duration, end_time)``; end_time defaults
        to the current time.
        """
        end = ensure_aware(end_time) if end_time is not None else self._clock()
        span = duration if isinstance(duration, timedelta) else timedelta(seconds=duration)
        return MetricQuery(
            metric_names=[metrics] if isinstance(metrics, str) else list(metrics),
            value_names=[values] if isinstance(values, str) else list(values),
            period=coerce_period(period),
            start_time=end - span,
            end_time=end,
        )

    async def query_metrics(
        self,
        app_id: int,
        *,
        duration: float | timedelta = 3600,
        end_time: datetime | None = None,
        period: float | timedelta | None = None,
        metrics: str | Sequence[str] = DEFAULT_METRICS,
        values: str | Sequence[str] = DEFAULT_VALUES,
        use_cache: bool | None = None,
        progress: ProgressCallback | None = None,
    ) -> MetricTable:
        """Fetch metric values over a time window as one table.

        Args:
            app_id: Application id. Use -1 to get a canned response for tests.
            duration: Length of the window in seconds (or a timedelta)
            end_time: End of the window (default: now)
            period: Timeslice length in seconds (or a timedelta), minimum 60;
                None lets the service choose
            metrics: Metric names, e.g. ``"HttpDispatcher"``
            values: Value names, e.g. ``"calls_per_minute"``
            use_cache: Reuse and store results on disk (default from config)
            progress: Called as ``progress(completed, total)`` after each chunk

        Returns:
            MetricTable with a row per metric timeslice
        """
        if self._closed:
            raise RuntimeError("MetricDataAPI is closed")

        query = self.build_query(
            duration=duration,
            end_time=end_time,
            period=period,
            metrics=metrics,
            values=values,
        )
        logger.debug(
            "query_requested",
            extra={"account_id": self._account_id, "app_id": app_id},
        )
        return await self._engine.query(
            app_id,
            query,
            use_cache=self._config.use_cache if use_cache is None else use_cache,
            progress=progress,
        )

    async def fetch_applications(self) -> list[Application]:
        """Applications with positive throughput, busiest first."""
        if self._closed:
            raise RuntimeError("MetricDataAPI is closed")
        return await self._connector.fetch_applications()

    async def close(self) -> None:
        """Close the connector if this facade created it."""
        if self._closed:
            return
        if self._owns_connector:
            await self._connector.close()
        self._closed = True

    async def __aenter__(self) -> MetricDataAPI:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


async def query_metrics(
    account_id: int | str | None,
    api_key: str | None,
    app_id: int,
    duration: float | timedelta = 3600,
    end_time: datetime | None = None,
    period: float | timedelta | None = None,
    metrics: str | Sequence[str] = DEFAULT_METRICS,
    values: str | Sequence[str] = DEFAULT_VALUES,
    use_cache: bool = True,
    host: str = DEFAULT_HOST,
    progress: ProgressCallback | None = None,
    cache_dir: str | Path = DEFAULT_CACHE_DIR,
) -> MetricTable:
    """One-shot metric query; see ``MetricDataAPI.query_metrics``."""
    config = QueryConfig(host=host, cache_dir=Path(cache_dir), use_cache=use_cache)
    async with MetricDataAPI(api_key, account_id=account_id, config=config) as api:
        return await api.query_metrics(
            app_id,
            duration=duration,
            end_time=end_time,
            period=period,
            metrics=metrics,
            values=values,
            progress=progress,
        )


async def list_applications(
    account_id: int | str | None,
    api_key: str | None,
    host: str = DEFAULT_HOST,
) -> list[Application]:
    """One-shot applications listing; see ``MetricDataAPI.fetch_applications``."""
    config = QueryConfig(host=host)
    async with MetricDataAPI(api_key, account_id=account_id, config=config) as api:
        return await api.fetch_applications()
