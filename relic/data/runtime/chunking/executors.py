"""Chunk execution logic for fetching and aggregating chunks.

This module provides the ChunkExecutor class that executes chunk plans in
order, reports progress, and aggregates the per-chunk tables with
deduplication of rows that straddle chunk boundaries.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from datetime import datetime
from time import perf_counter

from ...models import MetricObservation, MetricTable
from .definitions import ChunkPlan, ChunkResult
from .telemetry import log_chunk_completed, log_chunk_error, log_chunk_execution_complete

ProgressCallback = Callable[[int, int], Awaitable[None]] | Callable[[int, int], None]


class ChunkExecutor:
    """Executes chunk plans and aggregates results.

    Chunks run sequentially: the plan fixes every boundary up front, but the
    assembled table must keep chunk order.
    """

    def __init__(self, *, endpoint_id: str = "unknown") -> None:
        """Initialize chunk executor.

        Args:
            endpoint_id: Endpoint identifier used in telemetry
        """
        self._endpoint_id = endpoint_id

    async def execute(
        self,
        *,
        plans: list[ChunkPlan],
        fetch_chunk: Callable[[ChunkPlan], Awaitable[MetricTable]],
        progress: ProgressCallback | None = None,
        value_names: list[str] | None = None,
    ) -> ChunkResult:
        """Execute chunk plans and aggregate results.

        Args:
            plans: List of chunk plans to execute
            fetch_chunk: Async function that takes a ChunkPlan and returns a table
            progress: Optional callback invoked as ``progress(completed, total)``
                after every chunk
            value_names: Column names of the assembled table

        Returns:
            ChunkResult with the assembled MetricTable and metadata

        Raises:
            ValueError: If no plans are given
            Exception: Whatever ``fetch_chunk`` raised; remaining chunks are skipped
        """
        if not plans:
            raise ValueError("Cannot execute: no chunk plans provided")

        total = len(plans)
        execution_start = perf_counter()
        rows: list[MetricObservation] = []
        seen: set[tuple[str, datetime]] = set()
        latencies: list[float] = []
        duplicates = 0
        columns: list[str] = list(value_names or [])

        for completed, plan in enumerate(plans, start=1):
            chunk_start = perf_counter()
            try:
                table = await fetch_chunk(plan)
            except Exception as e:
                log_chunk_error(
                    endpoint_id=self._endpoint_id,
                    chunk_index=plan.chunk_index,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise
            chunk_latency_ms = (perf_counter() - chunk_start) * 1000.0
            latencies.append(chunk_latency_ms)

            for name in table.value_names:
                if name not in columns:
                    columns.append(name)

            fresh = self._deduplicate(table.rows, seen)
            duplicates += len(table.rows) - len(fresh)
            rows.extend(fresh)

            log_chunk_completed(
                endpoint_id=self._endpoint_id,
                chunk_index=plan.chunk_index,
                total_chunks=total,
                rows_aggregated=len(fresh),
                latency_ms=chunk_latency_ms,
            )

            if progress is not None:
                outcome = progress(completed, total)
                if inspect.isawaitable(outcome):
                    await outcome

        data = MetricTable(value_names=columns, rows=rows)
        result = ChunkResult(
            data=data,
            chunks_used=total,
            total_points=len(rows),
            duplicates_dropped=duplicates,
            start_timestamp=data.earliest,
            end_timestamp=data.latest,
            chunk_latencies_ms=latencies,
        )

        log_chunk_execution_complete(
            endpoint_id=self._endpoint_id,
            result=result,
            total_latency_ms=(perf_counter() - execution_start) * 1000.0,
        )

        return result

    def _deduplicate(
        self,
        rows: list[MetricObservation],
        seen: set[tuple[str, datetime]],
    ) -> list[MetricObservation]:
        """Drop rows whose (metric, timeslice) was already aggregated.

        Args:
            rows: Rows of the current chunk
            seen: Keys aggregated so far, updated in place

        Returns:
            Rows not seen before, in their original order
        """
        filtered = []
        for row in rows:
            if row.key in seen:
                continue
            seen.add(row.key)
            filtered.append(row)
        return filtered
