"""Structured logging for chunking operations.

This module provides telemetry hooks for chunking operations, emitting
structured logs for observability.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from .definitions import ChunkResult

logger = logging.getLogger(__name__)


def log_chunk_plan(
    *,
    endpoint_id: str,
    total_chunks: int,
    window_size: timedelta | None = None,
    period: timedelta | None = None,
    start_time: datetime | None = None,
    end_time: datetime | None = None,
) -> None:
    """Log chunk plan creation.

    Args:
        endpoint_id: Endpoint identifier
        total_chunks: Total number of chunks planned
        window_size: Maximum span of each chunk
        period: Sampling period of the request
        start_time: Start of the planned window
        end_time: End of the planned window
    """
    logger.info(
        "chunk_plan_created",
        extra={
            "endpoint_id": endpoint_id,
            "total_chunks": total_chunks,
            "window_size": int(window_size.total_seconds()) if window_size else None,
            "period": int(period.total_seconds()) if period else None,
            "start_time": start_time.isoformat() if start_time else None,
            "end_time": end_time.isoformat() if end_time else None,
        },
    )


def log_chunk_completed(
    *,
    endpoint_id: str,
    chunk_index: int,
    total_chunks: int,
    rows_aggregated: int,
    latency_ms: float | None = None,
) -> None:
    """Log completion of a single chunk.

    Args:
        endpoint_id: Endpoint identifier
        chunk_index: Zero-based index of the chunk
        total_chunks: Number of chunks in the plan
        rows_aggregated: Number of rows aggregated from this chunk
        latency_ms: Latency in milliseconds (optional)
    """
    logger.info(
        "chunk_completed",
        extra={
            "endpoint_id": endpoint_id,
            "chunk_index": chunk_index,
            "total_chunks": total_chunks,
            "rows_aggregated": rows_aggregated,
            "latency_ms": latency_ms,
        },
    )


def log_chunk_execution_complete(
    *,
    endpoint_id: str,
    result: ChunkResult,
    total_latency_ms: float | None = None,
) -> None:
    """Log completion of chunk execution.

    Args:
        endpoint_id: Endpoint identifier
        result: ChunkResult from execution
        total_latency_ms: Total latency in milliseconds (optional)
    """
    logger.info(
        "chunk_execution_complete",
        extra={
            "endpoint_id": endpoint_id,
            "chunks_used": result.chunks_used,
            "total_points": result.total_points,
            "duplicates_dropped": result.duplicates_dropped,
            "start_timestamp": result.start_timestamp.isoformat()
            if result.start_timestamp
            else None,
            "end_timestamp": result.end_timestamp.isoformat() if result.end_timestamp else None,
            "chunk_latencies_ms": list(result.chunk_latencies_ms),
            "total_latency_ms": total_latency_ms,
        },
    )


def log_chunk_error(
    *,
    endpoint_id: str,
    chunk_index: int,
    error_type: str,
    error_message: str,
) -> None:
    """Log chunk execution error.

    Args:
        endpoint_id: Endpoint identifier
        chunk_index: Zero-based index of the chunk that failed
        error_type: Type of error (e.g., "TransportError", "RemoteAPIError")
        error_message: Error message
    """
    logger.error(
        "chunk_error",
        extra={
            "endpoint_id": endpoint_id,
            "chunk_index": chunk_index,
            "error_type": error_type,
            "error_message": error_message,
        },
    )
