"""Chunking metadata definitions and policy structures.

This module defines the data structures used to describe how a time window
is split into requests the metrics service will accept: span policies,
chunk plans and chunk results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any


@dataclass(frozen=True)
class SpanTier:
    """Span tier definition for period-based request limits.

    Attributes:
        min_period: Minimum sampling period (inclusive) for this tier
        max_span: Longest time window a single request may cover
    """

    min_period: timedelta
    max_span: timedelta


# Limits observed on the New Relic REST API v2. Coarser sampling periods
# allow wider windows per call.
DEFAULT_SPAN_TIERS: tuple[SpanTier, ...] = (
    SpanTier(min_period=timedelta(hours=1), max_span=timedelta(days=7)),
    SpanTier(min_period=timedelta(minutes=10), max_span=timedelta(hours=24)),
    SpanTier(min_period=timedelta(minutes=1), max_span=timedelta(hours=3)),
)


@dataclass(frozen=True)
class SpanPolicy:
    """Declarative policy for the maximum span of one request.

    The span is selected by sampling period, never by total duration.
    Periods below ``min_period`` are rejected, and periods below
    ``fine_period_limit`` are only retained for ``fine_retention``.

    Examples:
        # Service defaults
        SpanPolicy()

        # A single tier allowing one day per call for any period >= 5 minutes
        SpanPolicy(
            tiers=(SpanTier(timedelta(minutes=5), timedelta(days=1)),),
            min_period=timedelta(minutes=5),
        )
    """

    tiers: tuple[SpanTier, ...] = DEFAULT_SPAN_TIERS
    min_period: timedelta = timedelta(seconds=60)
    fine_period_limit: timedelta = timedelta(hours=1)
    fine_retention: timedelta = timedelta(days=8)

    def __post_init__(self) -> None:
        """Validate span policy configuration."""
        if not self.tiers:
            raise ValueError("SpanPolicy tiers cannot be empty")
        if any(tier.max_span <= timedelta(0) for tier in self.tiers):
            raise ValueError("SpanPolicy tier spans must be positive")
        # Widest period first so the first match wins
        ordered = tuple(sorted(self.tiers, key=lambda t: t.min_period, reverse=True))
        object.__setattr__(self, "tiers", ordered)

    def span_for(self, period: timedelta) -> timedelta | None:
        """Return the span of the first tier matching ``period``.

        Args:
            period: Sampling period

        Returns:
            Maximum span, or None if no tier accepts the period
        """
        for tier in self.tiers:
            if period >= tier.min_period:
                return tier.max_span
        return None


DEFAULT_SPAN_POLICY = SpanPolicy()


@dataclass(frozen=True)
class ChunkPlan:
    """Plan for a single chunk.

    Attributes:
        start_time: Start of this chunk's window (inclusive)
        end_time: End of this chunk's window (exclusive)
        chunk_index: Zero-based index of this chunk in the overall plan
    """

    start_time: datetime
    end_time: datetime
    chunk_index: int = 0

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time


@dataclass
class ChunkResult:
    """Result of chunked execution.

    Attributes:
        data: Aggregated data from all chunks
        chunks_used: Number of chunks that were fetched
        total_points: Total number of rows aggregated
        duplicates_dropped: Rows discarded because an earlier chunk had them
        start_timestamp: Timestamp of the earliest row
        end_timestamp: Timestamp of the latest row
        chunk_latencies_ms: Per-chunk fetch latency, in plan order
    """

    data: Any
    chunks_used: int
    total_points: int = 0
    duplicates_dropped: int = 0
    start_timestamp: datetime | None = None
    end_timestamp: datetime | None = None
    chunk_latencies_ms: list[float] = field(default_factory=list)


def extract_span_policy(spec: Any) -> SpanPolicy | None:
    """Extract the span policy from an endpoint specification.

    Args:
        spec: REST endpoint specification

    Returns:
        SpanPolicy if the endpoint declares one, None otherwise
    """
    policy = getattr(spec, "span_policy", None)
    if isinstance(policy, SpanPolicy):
        return policy
    return None
