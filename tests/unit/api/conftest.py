"""Shared fixtures for query engine and facade tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from relic.data.cache import FileCacheStore, ResultCache
from relic.data.connectors.newrelic import NewRelicRESTConnector
from relic.data.runtime.rest import RESTTransport

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=UTC)
WIRE_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


class FakeMetricService:
    """Answers metric data requests with one timeslice per period.

    ``errors`` maps a 1-based call number to a payload returned instead of
    data, or to an exception raised from the transport.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[tuple[str, str]]]] = []
        self.errors: dict[int, object] = {}

    async def get(self, path, params=None, headers=None):
        self.calls.append((path, list(params or [])))
        failure = self.errors.get(len(self.calls))
        if isinstance(failure, Exception):
            raise failure
        if failure is not None:
            return failure

        pairs = list(params or [])
        names = [v for k, v in pairs if k == "names[]"]
        values = [v for k, v in pairs if k == "values[]"]
        single = dict(pairs)
        start = datetime.strptime(single["from"], WIRE_TIME_FORMAT)
        end = datetime.strptime(single["to"], WIRE_TIME_FORMAT)
        step = timedelta(seconds=int(single.get("period", "60")))

        metrics = []
        for name in names:
            timeslices = []
            cursor = start
            while cursor < end:
                timeslices.append(
                    {
                        "from": cursor.isoformat(),
                        "to": (cursor + step).isoformat(),
                        "values": {value: float(len(timeslices)) for value in values},
                    }
                )
                cursor += step
            metrics.append({"name": name, "timeslices": timeslices})
        return {"metric_data": {"metrics": metrics}}

    @property
    def windows(self) -> list[tuple[str, str]]:
        return [(dict(params)["from"], dict(params)["to"]) for _, params in self.calls]


@pytest.fixture
def service():
    return FakeMetricService()


@pytest.fixture
def transport(service):
    mock = MagicMock(spec=RESTTransport)
    mock.get = AsyncMock(side_effect=service.get)
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def connector(transport):
    return NewRelicRESTConnector("test-key", transport=transport)


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "query_cache"


@pytest.fixture
def cache(cache_dir):
    return ResultCache(FileCacheStore(cache_dir))


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock(now):
    return lambda: now


@pytest.fixture
def cache_files(cache_dir):
    """Names of the entries currently in the cache directory."""

    def list_files():
        if not cache_dir.exists():
            return []
        return sorted(p.name for p in cache_dir.glob("*.json"))

    return list_files
