"""Time-window chunking layer for range-limited endpoints.

This module splits an arbitrary time window into requests the metrics
service accepts and reassembles the per-request results.

Architecture:
    The chunking layer consists of:
    - definitions.py: Chunk metadata structures (SpanPolicy, ChunkPlan, ChunkResult)
    - planners.py: Chunk planning logic (validates periods, determines chunk windows)
    - executors.py: Chunk execution logic (fetches and aggregates chunks)
    - telemetry.py: Structured logging

Usage:
    Endpoints opt into chunking by declaring a ``span_policy`` on their
    endpoint specification; the query engine reads it to plan requests.
"""

from __future__ import annotations

from .definitions import (
    DEFAULT_SPAN_POLICY,
    DEFAULT_SPAN_TIERS,
    ChunkPlan,
    ChunkResult,
    SpanPolicy,
    SpanTier,
    extract_span_policy,
)
from .executors import ChunkExecutor, ProgressCallback
from .planners import ChunkPlanner

__all__ = [
    "SpanTier",
    "SpanPolicy",
    "DEFAULT_SPAN_TIERS",
    "DEFAULT_SPAN_POLICY",
    "ChunkPlan",
    "ChunkResult",
    "ChunkPlanner",
    "ChunkExecutor",
    "ProgressCallback",
    "extract_span_policy",
]
