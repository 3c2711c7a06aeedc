"""Key/blob storage backing the result cache."""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Protocol

from ..core.config import DEFAULT_CACHE_DIR
from ..core.exceptions import CacheIOError


class CacheStore(Protocol):
    """Minimal storage contract consumed by ResultCache."""

    def exists(self, key: str) -> bool: ...

    def read(self, key: str) -> bytes: ...

    def write(self, key: str, data: bytes) -> None: ...

    def ensure_container(self) -> None: ...


class FileCacheStore:
    """Stores one ``<key>.json`` file per entry under a root directory.

    Entries are immutable for a given key, so concurrent writers (threads or
    processes) need no locking: each write lands in a temporary file that is
    renamed over the target, and the last writer wins.
    """

    suffix = ".json"

    def __init__(self, root: str | Path = DEFAULT_CACHE_DIR) -> None:
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid cache key: {key!r}")
        return self.root / f"{key}{self.suffix}"

    def exists(self, key: str) -> bool:
        path = self.path_for(key)
        try:
            return path.is_file()
        except OSError as e:
            raise CacheIOError(f"Cannot stat cache entry {path}: {e}", key=key) from e

    def read(self, key: str) -> bytes:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except OSError as e:
            raise CacheIOError(f"Cannot read cache entry {path}: {e}", key=key) from e

    def ensure_container(self) -> None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheIOError(f"Cannot create cache directory {self.root}: {e}") from e

    def write(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        self.ensure_container()
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                dir=self.root, prefix=f".{key}.", suffix=".tmp", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(data)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise CacheIOError(f"Cannot write cache entry {path}: {e}", key=key) from e
