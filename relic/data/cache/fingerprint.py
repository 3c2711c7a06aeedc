"""Deterministic cache keys for metric queries.

A fingerprint is the SHA-256 of a canonical JSON document describing
everything that affects a result: the endpoint URL (host and application),
metric and value names in request order, the period in whole seconds as it
is sent, and the numeric window bounds. Two granularities exist, one for a
whole query and one per chunk, so overlapping queries can share chunk entries.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from ..models import MetricQuery
from ..runtime.chunking import ChunkPlan
from ..utils.timestamps import to_epoch_seconds

QUERY_SCOPE = "query"
CHUNK_SCOPE = "chunk"


def _document(query: MetricQuery, *, scope: str, endpoint: str) -> dict[str, Any]:
    return {
        "scope": scope,
        "endpoint": endpoint,
        "names": list(query.metric_names),
        "values": list(query.value_names),
        "period": query.period_seconds,
        "from": to_epoch_seconds(query.start_time),
        "to": to_epoch_seconds(query.end_time),
    }


def _digest(document: dict[str, Any]) -> str:
    payload = json.dumps(document, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def fingerprint_query(query: MetricQuery, *, endpoint: str) -> str:
    """Fingerprint of a query over its whole requested window."""
    return _digest(_document(query, scope=QUERY_SCOPE, endpoint=endpoint))


def fingerprint_chunk(query: MetricQuery, chunk: ChunkPlan, *, endpoint: str) -> str:
    """Fingerprint of a query narrowed to one chunk's window."""
    narrowed = query.with_window(chunk.start_time, chunk.end_time)
    return _digest(_document(narrowed, scope=CHUNK_SCOPE, endpoint=endpoint))
