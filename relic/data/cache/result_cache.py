"""Best-effort persistent cache of fetched metric tables."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from ..core.exceptions import CacheIOError
from ..models import MetricTable
from .store import CacheStore

logger = logging.getLogger(__name__)


class ResultCache:
    """Maps fingerprints to previously fetched MetricTables.

    Caching is an optimization only: unreadable or corrupt entries read as a
    miss and failed writes are logged, never raised.
    """

    def __init__(self, store: CacheStore) -> None:
        self._store = store

    def get(self, fingerprint: str) -> MetricTable | None:
        """Return the cached table for ``fingerprint``, or None on a miss."""
        try:
            if not self._store.exists(fingerprint):
                logger.debug("cache_miss", extra={"fingerprint": fingerprint})
                return None
            payload = self._store.read(fingerprint)
            table = MetricTable.model_validate_json(payload)
        except (CacheIOError, ValidationError) as e:
            logger.warning(
                "cache_read_failed",
                extra={"fingerprint": fingerprint, "error": str(e)},
            )
            return None

        logger.info("cache_hit", extra={"fingerprint": fingerprint, "rows": len(table)})
        return table

    def put(self, fingerprint: str, table: MetricTable) -> bool:
        """Persist ``table`` under ``fingerprint``.

        Returns:
            True if the entry was written, False if the write failed
        """
        try:
            self._store.write(fingerprint, table.model_dump_json().encode("utf-8"))
        except CacheIOError as e:
            logger.warning(
                "cache_write_failed",
                extra={"fingerprint": fingerprint, "error": str(e)},
            )
            return False

        logger.info("cache_write", extra={"fingerprint": fingerprint, "rows": len(table)})
        return True
