"""Unit tests for chunk planning logic."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from relic.data.core import IncompatibleHistoricalPeriodError, InvalidPeriodError
from relic.data.runtime.chunking import ChunkPlanner, SpanPolicy, SpanTier

START = datetime(2024, 1, 1, tzinfo=UTC)


def assert_covers(plans, start, end):
    """Chunks are contiguous, ordered, and cover exactly [start, end)."""
    assert plans[0].start_time == start
    assert plans[-1].end_time == end
    for index, plan in enumerate(plans):
        assert plan.chunk_index == index
        assert plan.start_time < plan.end_time
    for previous, current in zip(plans, plans[1:], strict=False):
        assert previous.end_time == current.start_time
    assert sum((p.duration for p in plans), timedelta(0)) == end - start


class TestChunkPlanner:
    """Test ChunkPlanner functionality."""

    @pytest.mark.parametrize(
        ("period", "span"),
        [
            (timedelta(hours=1), timedelta(days=7)),
            (timedelta(days=1), timedelta(days=7)),
            (timedelta(minutes=10), timedelta(hours=24)),
            (timedelta(minutes=59), timedelta(hours=24)),
            (timedelta(minutes=1), timedelta(hours=3)),
            (timedelta(minutes=5), timedelta(hours=3)),
        ],
    )
    def test_max_span_selected_by_period(self, period, span):
        """Test the span tier is chosen by sampling period."""
        planner = ChunkPlanner()
        assert planner.max_span(period, timedelta(days=30)) == span

    def test_max_span_without_period_is_whole_duration(self):
        """Test a missing period fetches the whole window at once."""
        planner = ChunkPlanner()
        assert planner.max_span(None, timedelta(days=30)) == timedelta(days=30)

    def test_max_span_rejects_short_period(self):
        """Test periods under 60 seconds are invalid."""
        planner = ChunkPlanner()
        with pytest.raises(InvalidPeriodError, match="at least 60 seconds"):
            planner.max_span(timedelta(seconds=59), timedelta(hours=1))

    def test_plan_single_chunk_within_span(self):
        """Test one hour at a 5 minute period fits into one request."""
        planner = ChunkPlanner()
        end = START + timedelta(hours=1)

        plans = planner.plan(start_time=START, end_time=end, period=timedelta(minutes=5))

        assert len(plans) == 1
        assert plans[0].start_time == START
        assert plans[0].end_time == end

    def test_plan_clips_last_chunk(self):
        """Test ten days at an hourly period need two chunks, the second 3 days."""
        planner = ChunkPlanner()
        end = START + timedelta(days=10)

        plans = planner.plan(start_time=START, end_time=end, period=timedelta(hours=1))

        assert len(plans) == 2
        assert plans[0].duration == timedelta(days=7)
        assert plans[1].duration == timedelta(days=3)
        assert plans[1].end_time == end
        assert_covers(plans, START, end)

    def test_plan_exact_multiple_of_span(self):
        """Test no empty trailing chunk when the window divides evenly."""
        planner = ChunkPlanner()
        end = START + timedelta(hours=6)

        plans = planner.plan(start_time=START, end_time=end, period=timedelta(minutes=1))

        assert len(plans) == 2
        assert_covers(plans, START, end)

    def test_plan_without_period(self):
        """Test a missing period yields a single chunk."""
        planner = ChunkPlanner()
        end = START + timedelta(days=45)

        plans = planner.plan(start_time=START, end_time=end, period=None)

        assert len(plans) == 1
        assert_covers(plans, START, end)

    @pytest.mark.parametrize(
        "duration",
        [
            timedelta(minutes=1),
            timedelta(hours=2, minutes=59, seconds=59),
            timedelta(hours=3, seconds=1),
            timedelta(days=1, minutes=17),
            timedelta(days=8),
            timedelta(days=31, hours=5),
        ],
    )
    @pytest.mark.parametrize(
        "period",
        [None, timedelta(minutes=1), timedelta(minutes=10), timedelta(hours=1)],
    )
    def test_plan_covers_window_exactly(self, duration, period):
        """Test chunks never gap, overlap or overshoot."""
        planner = ChunkPlanner()
        end = START + duration

        plans = planner.plan(start_time=START, end_time=end, period=period)

        assert_covers(plans, START, end)
        assert len(plans) == planner.expected_chunks(duration, period)
        span = planner.max_span(period, duration)
        assert all(plan.duration <= span for plan in plans)

    def test_plan_zero_length_window(self):
        """Test an empty window plans no chunks."""
        planner = ChunkPlanner()
        assert planner.plan(start_time=START, end_time=START, period=timedelta(hours=1)) == []
        assert planner.expected_chunks(timedelta(0), timedelta(hours=1)) == 0

    def test_plan_rejects_inverted_window(self):
        """Test start after end is rejected."""
        planner = ChunkPlanner()
        with pytest.raises(ValueError, match="start_time is after end_time"):
            planner.plan(start_time=START, end_time=START - timedelta(seconds=1))

    def test_plan_rejects_short_period(self):
        """Test planning also refuses periods under a minute."""
        planner = ChunkPlanner()
        with pytest.raises(InvalidPeriodError):
            planner.plan(
                start_time=START,
                end_time=START + timedelta(hours=1),
                period=timedelta(seconds=30),
            )

    def test_plan_with_custom_policy(self):
        """Test a custom span policy drives the chunk size."""
        policy = SpanPolicy(
            tiers=(SpanTier(min_period=timedelta(minutes=5), max_span=timedelta(hours=1)),),
            min_period=timedelta(minutes=5),
        )
        planner = ChunkPlanner(policy)
        end = START + timedelta(hours=2, minutes=30)

        plans = planner.plan(start_time=START, end_time=end, period=timedelta(minutes=5))

        assert [p.duration for p in plans] == [
            timedelta(hours=1),
            timedelta(hours=1),
            timedelta(minutes=30),
        ]


class TestChunkPlannerValidation:
    """Test period and retention validation."""

    NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)

    def test_validate_accepts_missing_period(self):
        """Test no period skips every rule."""
        planner = ChunkPlanner()
        planner.validate(period=None, start_time=self.NOW - timedelta(days=90), now=self.NOW)

    @pytest.mark.parametrize("seconds", [0, 1, 30, 59])
    def test_validate_rejects_short_period(self, seconds):
        """Test periods under 60 seconds raise InvalidPeriodError."""
        planner = ChunkPlanner()
        with pytest.raises(InvalidPeriodError) as exc_info:
            planner.validate(
                period=timedelta(seconds=seconds),
                start_time=self.NOW - timedelta(hours=1),
                now=self.NOW,
            )
        assert exc_info.value.period == timedelta(seconds=seconds)

    def test_validate_rejects_fine_period_for_old_data(self):
        """Test a sub-hour period older than 8 days is refused."""
        planner = ChunkPlanner()
        start = self.NOW - timedelta(days=8, minutes=1)

        with pytest.raises(IncompatibleHistoricalPeriodError, match="older than 8 days"):
            planner.validate(period=timedelta(minutes=5), start_time=start, now=self.NOW)

    def test_validate_allows_fine_period_inside_retention(self):
        """Test exactly 8 days back is still allowed."""
        planner = ChunkPlanner()
        start = self.NOW - timedelta(days=8)
        planner.validate(period=timedelta(minutes=59), start_time=start, now=self.NOW)

    def test_validate_allows_hourly_period_for_old_data(self):
        """Test hourly periods are not subject to the retention rule."""
        planner = ChunkPlanner()
        start = self.NOW - timedelta(days=365)
        planner.validate(period=timedelta(hours=1), start_time=start, now=self.NOW)
