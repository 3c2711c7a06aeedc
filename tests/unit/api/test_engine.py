"""Unit tests for MetricQueryEngine.

Requests go through a real connector whose transport answers with generated
timeslices, so chunking, caching and parsing are exercised together.
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from relic.data.api import MetricQueryEngine
from relic.data.cache import FileCacheStore, ResultCache
from relic.data.connectors.newrelic import MOCK_METRIC_DATA_URL
from relic.data.core import (
    IncompatibleHistoricalPeriodError,
    InvalidPeriodError,
    RemoteAPIError,
    TransportError,
)
from relic.data.models import MetricQuery


def make_query(now, *, duration, period, metrics=("HttpDispatcher",), values=("call_count",)):
    return MetricQuery(
        metric_names=list(metrics),
        value_names=list(values),
        period=period,
        start_time=now - duration,
        end_time=now,
    )


@pytest.fixture
def engine(connector, cache, clock):
    return MetricQueryEngine(connector, cache=cache, clock=clock)


class TestMetricQueryEngine:
    """Test end-to-end query behavior."""

    @pytest.mark.asyncio
    async def test_single_window_on_mock_application(self, engine, service, now):
        """Test a one-hour query at 5 minutes is one request of 12 rows."""
        query = make_query(now, duration=timedelta(hours=1), period=300)

        table = await engine.query(-1, query)

        assert len(service.calls) == 1
        assert service.calls[0][0] == MOCK_METRIC_DATA_URL
        assert len(table) == 12
        assert table.columns == ["name", "start", "call_count"]
        assert table.earliest == query.start_time

    @pytest.mark.asyncio
    async def test_long_window_is_chunked(self, engine, service, now):
        """Test ten days at one hour splits into a 7-day and a 3-day request."""
        query = make_query(now, duration=timedelta(days=10), period=3600)

        table = await engine.query(42, query)

        assert len(service.calls) == 2
        assert len(table) == 240
        starts = [row.start for row in table.rows]
        assert starts == sorted(starts)
        assert starts[0] == query.start_time
        assert starts[-1] == now - timedelta(hours=1)
        assert service.calls[0][0].endswith("/v2/applications/42/metrics/data.json")

    @pytest.mark.asyncio
    async def test_multiple_metrics_and_values(self, engine, service, now):
        """Test every requested value becomes a column for every metric."""
        query = make_query(
            now,
            duration=timedelta(hours=1),
            period=600,
            metrics=("HttpDispatcher", "Apdex"),
            values=("call_count", "average_response_time"),
        )

        table = await engine.query(42, query)

        assert table.metric_names == ["HttpDispatcher", "Apdex"]
        assert len(table.filter("Apdex")) == 6
        assert table.columns == ["name", "start", "call_count", "average_response_time"]
        params = service.calls[0][1]
        assert [v for k, v in params if k == "names[]"] == ["HttpDispatcher", "Apdex"]

    @pytest.mark.asyncio
    async def test_repeat_query_is_served_from_cache(self, engine, service, now):
        """Test an identical query makes no further requests."""
        query = make_query(now, duration=timedelta(days=10), period=3600)

        first = await engine.query(42, query)
        progress_calls = []
        second = await engine.query(
            42, query, progress=lambda i, n: progress_calls.append((i, n))
        )

        assert len(service.calls) == 2
        assert second.model_dump_json() == first.model_dump_json()
        assert progress_calls == []

    @pytest.mark.asyncio
    async def test_cache_layout(self, engine, now, cache_files):
        """Test each chunk and the whole query get their own entry."""
        query = make_query(now, duration=timedelta(days=10), period=3600)

        await engine.query(42, query)

        files = cache_files()
        assert len(files) == 3
        assert all(len(name) == len("0" * 64 + ".json") for name in files)

    @pytest.mark.asyncio
    async def test_overlapping_query_reuses_chunk_entries(self, engine, service, now):
        """Test a query sharing a chunk window with an earlier one skips that request."""
        long_query = make_query(now, duration=timedelta(days=10), period=3600)
        await engine.query(42, long_query)
        assert len(service.calls) == 2

        first_week = long_query.with_window(
            long_query.start_time, long_query.start_time + timedelta(days=7)
        )
        table = await engine.query(42, first_week)

        assert len(service.calls) == 2
        assert len(table) == 168

    @pytest.mark.asyncio
    async def test_use_cache_false_bypasses_cache(self, engine, service, now, cache_dir):
        """Test disabling the cache fetches every time and writes nothing."""
        query = make_query(now, duration=timedelta(hours=1), period=300)

        await engine.query(42, query, use_cache=False)
        await engine.query(42, query, use_cache=False)

        assert len(service.calls) == 2
        assert not cache_dir.exists()

    @pytest.mark.asyncio
    async def test_engine_without_cache(self, connector, service, clock, now):
        """Test an engine built without a cache still answers queries."""
        engine = MetricQueryEngine(connector, clock=clock)
        query = make_query(now, duration=timedelta(hours=1), period=300)

        table = await engine.query(42, query)

        assert len(table) == 12
        assert len(service.calls) == 1

    @pytest.mark.asyncio
    async def test_progress_reported_per_chunk(self, engine, now):
        """Test progress is called once per chunk with a 1-based index."""
        calls = []

        async def on_progress(completed, total):
            calls.append((completed, total))

        await engine.query(
            42,
            make_query(now, duration=timedelta(days=10), period=3600),
            progress=on_progress,
        )

        assert calls == [(1, 2), (2, 2)]

    @pytest.mark.asyncio
    async def test_zero_length_window(self, engine, service, now):
        """Test an empty window returns an empty table without requests."""
        query = make_query(now, duration=timedelta(0), period=300)

        table = await engine.query(42, query)

        assert table.is_empty
        assert table.value_names == ["call_count"]
        assert service.calls == []

    @pytest.mark.asyncio
    async def test_no_period_is_a_single_request(self, engine, service, now):
        """Test an unset period leaves chunking off."""
        query = make_query(now, duration=timedelta(days=2), period=None)

        await engine.query(42, query)

        assert len(service.calls) == 1
        assert "period" not in dict(service.calls[0][1])


class TestMetricQueryEngineValidation:
    """Test period rules are enforced before any I/O."""

    @pytest.mark.asyncio
    async def test_short_period_rejected(self, engine, service, now, cache_dir):
        """Test periods under a minute raise InvalidPeriodError."""
        query = make_query(now, duration=timedelta(hours=1), period=30)

        with pytest.raises(InvalidPeriodError, match="at least 60 seconds"):
            await engine.query(42, query)

        assert service.calls == []
        assert not cache_dir.exists()

    @pytest.mark.asyncio
    async def test_fine_period_too_far_back_rejected(self, engine, service, now, cache_dir):
        """Test sub-hour periods cannot reach past eight days."""
        query = make_query(now, duration=timedelta(days=9), period=300)

        with pytest.raises(IncompatibleHistoricalPeriodError) as exc_info:
            await engine.query(42, query)

        assert exc_info.value.start_time == query.start_time
        assert service.calls == []
        assert not cache_dir.exists()

    @pytest.mark.asyncio
    async def test_hourly_period_may_reach_far_back(self, engine, service, now):
        """Test the retention rule only applies below one hour."""
        query = make_query(now, duration=timedelta(days=9), period=3600)

        await engine.query(42, query)

        assert len(service.calls) == 2


class TestMetricQueryEngineFailures:
    """Test error propagation and partial caching."""

    @pytest.mark.asyncio
    async def test_remote_error_caches_nothing(self, engine, service, now, cache_files):
        """Test an error payload raises and leaves the cache empty."""
        service.errors[1] = {"error": {"title": "Invalid API key"}}
        query = make_query(now, duration=timedelta(hours=1), period=300)

        with pytest.raises(RemoteAPIError, match="Invalid API key"):
            await engine.query(42, query)

        assert cache_files() == []

    @pytest.mark.asyncio
    async def test_failed_chunk_keeps_earlier_chunks(self, engine, service, now, cache_files):
        """Test a retry only refetches the chunks that never completed."""
        service.errors[2] = TransportError("Request timed out")
        query = make_query(now, duration=timedelta(days=10), period=3600)

        with pytest.raises(TransportError):
            await engine.query(42, query)
        assert len(cache_files()) == 1

        service.errors.clear()
        table = await engine.query(42, query)

        assert len(service.calls) == 3
        assert service.windows[2] == service.windows[1]
        assert len(table) == 240

    @pytest.mark.asyncio
    async def test_cache_write_failure_does_not_abort(
        self, connector, service, clock, now, tmp_path
    ):
        """Test an unwritable cache degrades to uncached queries."""
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("occupied")
        engine = MetricQueryEngine(
            connector, cache=ResultCache(FileCacheStore(blocker)), clock=clock
        )
        query = make_query(now, duration=timedelta(hours=1), period=300)

        first = await engine.query(42, query)
        second = await engine.query(42, query)

        assert len(first) == len(second) == 12
        assert len(service.calls) == 2

    @pytest.mark.asyncio
    async def test_unusable_cache_root_does_not_abort(
        self, connector, service, clock, now, tmp_path
    ):
        """Test a cache root the OS rejects is treated as no cache."""
        engine = MetricQueryEngine(
            connector, cache=ResultCache(FileCacheStore(tmp_path / ("x" * 300))), clock=clock
        )
        query = make_query(now, duration=timedelta(hours=1), period=300)

        table = await engine.query(42, query)

        assert len(table) == 12
        assert len(service.calls) == 1
