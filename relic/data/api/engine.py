"""Query engine orchestrating validation, caching, planning and fetching.

A query moves through these steps:

1. Validate the period rules (no I/O happens before this passes).
2. Look up the whole-window fingerprint; a hit ends the query.
3. Plan the chunk windows.
4. Fetch every chunk in order, reporting progress after each one.
5. Concatenate the chunk tables and cache the combined table.

Any failing chunk aborts the query with the original error. Chunks cached
before the failure stay cached.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cache import ResultCache, fingerprint_query
from ..connectors.newrelic import NewRelicRESTConnector
from ..models import MetricQuery, MetricTable
from ..runtime.chunking import (
    DEFAULT_SPAN_POLICY,
    ChunkExecutor,
    ChunkPlan,
    ChunkPlanner,
    ProgressCallback,
    SpanPolicy,
)
from .fetcher import BatchFetcher

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current time, timezone-aware in the local zone."""
    return datetime.now().astimezone()


class MetricQueryEngine:
    """Runs chunked, cached metric queries against one connector."""

    def __init__(
        self,
        connector: NewRelicRESTConnector,
        *,
        cache: ResultCache | None = None,
        policy: SpanPolicy | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the query engine.

        Args:
            connector: Connector issuing the single-window requests
            cache: Result cache; None disables caching entirely
            policy: Span policy (defaults to the one the endpoint declares)
            clock: Returns the current time, used by the retention rule
        """
        self._connector = connector
        self._cache = cache
        self._clock = clock or local_now
        resolved = policy or connector.span_policy or DEFAULT_SPAN_POLICY
        self._planner = ChunkPlanner(resolved, endpoint_id="metric_data")
        self._executor = ChunkExecutor(endpoint_id="metric_data")
        self._fetcher = BatchFetcher(connector, cache)

    async def query(
        self,
        app_id: int,
        query: MetricQuery,
        *,
        use_cache: bool = True,
        progress: ProgressCallback | None = None,
    ) -> MetricTable:
        """Fetch the full window of ``query`` as one table.

        Args:
            app_id: Application id; ids below 1 hit the mock endpoint
            query: What to fetch
            use_cache: Read and write cache entries
            progress: Called as ``progress(completed, total)`` after each chunk

        Returns:
            MetricTable in chunk order, then timeslice order

        Raises:
            InvalidPeriodError: If the period is below the service minimum
            IncompatibleHistoricalPeriodError: If a sub-hour period reaches
                past the fine retention window
            RemoteAPIError: If the service rejected a chunk
            TransportError: If a chunk request failed on the wire
        """
        self._planner.validate(
            period=query.period,
            start_time=query.start_time,
            now=self._clock(),
        )

        cache = self._cache if use_cache else None
        fingerprint: str | None = None
        if cache is not None:
            fingerprint = fingerprint_query(
                query, endpoint=self._connector.metric_data_url(app_id)
            )
            cached = cache.get(fingerprint)
            if cached is not None:
                return cached

        plans = self._planner.plan(
            start_time=query.start_time,
            end_time=query.end_time,
            period=query.period,
        )
        logger.info(
            "query_started",
            extra={
                "app_id": app_id,
                "metrics": list(query.metric_names),
                "values": list(query.value_names),
                "total_chunks": len(plans),
            },
        )

        if plans:

            async def fetch_chunk(plan: ChunkPlan) -> MetricTable:
                return await self._fetcher.fetch(app_id, plan, query, use_cache=use_cache)

            result = await self._executor.execute(
                plans=plans,
                fetch_chunk=fetch_chunk,
                progress=progress,
                value_names=list(query.value_names),
            )
            table: MetricTable = result.data
        else:
            table = MetricTable(value_names=list(query.value_names))

        if cache is not None and fingerprint is not None:
            cache.put(fingerprint, table)

        logger.info(
            "query_completed",
            extra={"app_id": app_id, "rows": len(table), "total_chunks": len(plans)},
        )
        return table
