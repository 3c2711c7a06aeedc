"""Chunk planning logic for determining chunk windows.

This module provides the ChunkPlanner class that validates a requested
window against the service's period rules and splits it into contiguous
sub-windows that each fit into a single request.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from ...core.exceptions import IncompatibleHistoricalPeriodError, InvalidPeriodError
from .definitions import DEFAULT_SPAN_POLICY, ChunkPlan, SpanPolicy
from .telemetry import log_chunk_plan


class ChunkPlanner:
    """Plans chunk windows for time-ranged metric requests.

    The planner takes a window (start_time, end_time) and a sampling period,
    then splits the window into chunks no wider than the span the policy
    allows for that period.
    """

    def __init__(
        self,
        policy: SpanPolicy | None = None,
        *,
        endpoint_id: str = "unknown",
    ) -> None:
        """Initialize chunk planner.

        Args:
            policy: Span policy for the endpoint (service defaults if omitted)
            endpoint_id: Endpoint identifier used in telemetry
        """
        self._policy = policy or DEFAULT_SPAN_POLICY
        self._endpoint_id = endpoint_id

    @property
    def policy(self) -> SpanPolicy:
        return self._policy

    def validate(
        self,
        *,
        period: timedelta | None,
        start_time: datetime,
        now: datetime,
    ) -> None:
        """Check the period rules before anything is fetched.

        Args:
            period: Sampling period (None lets the service pick one)
            start_time: Start of the requested window
            now: Current time, used for the retention rule

        Raises:
            InvalidPeriodError: If the period is below the service minimum
            IncompatibleHistoricalPeriodError: If a sub-hour period is
                requested for data older than the fine retention window
        """
        if period is None:
            return

        if period < self._policy.min_period or self._policy.span_for(period) is None:
            raise self._invalid_period(period)

        if (
            period < self._policy.fine_period_limit
            and start_time < now - self._policy.fine_retention
        ):
            raise IncompatibleHistoricalPeriodError(
                f"You can't have a period less than "
                f"{int(self._policy.fine_period_limit.total_seconds() // 60)} minutes when "
                f"getting data older than {self._policy.fine_retention.days} days: "
                f"{start_time.isoformat()}",
                period=period,
                start_time=start_time,
            )

    def max_span(self, period: timedelta | None, duration: timedelta) -> timedelta:
        """Maximum window a single request may cover.

        Args:
            period: Sampling period
            duration: Total requested duration, used when period is None

        Returns:
            Span per request

        Raises:
            InvalidPeriodError: If no tier accepts the period
        """
        if period is None:
            return duration

        span = self._policy.span_for(period)
        if span is None or period < self._policy.min_period:
            raise self._invalid_period(period)
        return span

    def _invalid_period(self, period: timedelta) -> InvalidPeriodError:
        minimum = int(self._policy.min_period.total_seconds())
        return InvalidPeriodError(
            f"Period must be at least {minimum} seconds: {period.total_seconds():g}",
            period=period,
        )

    def expected_chunks(self, duration: timedelta, period: timedelta | None) -> int:
        """Number of chunks needed to cover ``duration``, i.e. ceil(duration / span)."""
        if duration <= timedelta(0):
            return 0
        span = self.max_span(period, duration)
        return -(-duration // span)

    def plan(
        self,
        *,
        start_time: datetime,
        end_time: datetime,
        period: timedelta | None = None,
    ) -> list[ChunkPlan]:
        """Plan chunks for a window.

        Args:
            start_time: Start of the window (inclusive)
            end_time: End of the window (exclusive)
            period: Sampling period

        Returns:
            Contiguous, ordered chunk plans; the last one ends exactly at
            ``end_time``. Empty for a zero-length window.

        Raises:
            ValueError: If start_time is after end_time
            InvalidPeriodError: If the period is below the service minimum
        """
        if start_time > end_time:
            raise ValueError("Cannot plan chunks: start_time is after end_time")

        duration = end_time - start_time
        if duration == timedelta(0):
            log_chunk_plan(
                endpoint_id=self._endpoint_id,
                total_chunks=0,
                period=period,
                start_time=start_time,
                end_time=end_time,
            )
            return []

        window_size = self.max_span(period, duration)

        plans: list[ChunkPlan] = []
        current_start = start_time
        chunk_index = 0

        while current_start < end_time:
            chunk_end = min(end_time, current_start + window_size)
            plans.append(
                ChunkPlan(
                    start_time=current_start,
                    end_time=chunk_end,
                    chunk_index=chunk_index,
                )
            )
            chunk_index += 1
            current_start = chunk_end

        log_chunk_plan(
            endpoint_id=self._endpoint_id,
            total_chunks=len(plans),
            window_size=window_size,
            period=period,
            start_time=start_time,
            end_time=end_time,
        )

        return plans
