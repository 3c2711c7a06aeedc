"""Per-chunk fetching with chunk-level caching."""

from __future__ import annotations

import logging

from ..cache import ResultCache, fingerprint_chunk
from ..connectors.newrelic import NewRelicRESTConnector
from ..models import MetricQuery, MetricTable
from ..runtime.chunking import ChunkPlan

logger = logging.getLogger(__name__)


class BatchFetcher:
    """Fetches one chunk of a query, consulting the cache first.

    Chunk entries are keyed by the chunk's own window, so identical
    sub-ranges requested by different overlapping queries share entries.
    Error responses raise before anything is written.
    """

    def __init__(
        self,
        connector: NewRelicRESTConnector,
        cache: ResultCache | None = None,
    ) -> None:
        self._connector = connector
        self._cache = cache

    async def fetch(
        self,
        app_id: int,
        chunk: ChunkPlan,
        query: MetricQuery,
        *,
        use_cache: bool = True,
    ) -> MetricTable:
        """Return the table for ``query`` restricted to ``chunk``.

        Args:
            app_id: Application id; ids below 1 hit the mock endpoint
            chunk: Window to fetch
            query: Full query the chunk belongs to
            use_cache: Read and write the chunk-level cache entry

        Raises:
            RemoteAPIError: If the service returned an error payload
            TransportError: If the request failed on the wire
        """
        cache = self._cache if use_cache else None
        fingerprint: str | None = None
        if cache is not None:
            fingerprint = fingerprint_chunk(
                query, chunk, endpoint=self._connector.metric_data_url(app_id)
            )
            cached = cache.get(fingerprint)
            if cached is not None:
                return cached

        chunk_query = query.with_window(chunk.start_time, chunk.end_time)
        table = await self._connector.fetch_metric_data(app_id, chunk_query)

        if cache is not None and fingerprint is not None:
            cache.put(fingerprint, table)
        return table
