"""On-disk result cache keyed by query fingerprints."""

from .fingerprint import fingerprint_chunk, fingerprint_query
from .result_cache import ResultCache
from .store import CacheStore, FileCacheStore

__all__ = [
    "CacheStore",
    "FileCacheStore",
    "ResultCache",
    "fingerprint_chunk",
    "fingerprint_query",
]
