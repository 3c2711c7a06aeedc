"""Library-wide configuration defaults.

Everything here can be overridden per instance through ``QueryConfig`` or the
constructor arguments of ``MetricDataAPI``. ``QueryConfig.from_env`` lets
deployments point the cache somewhere else without code changes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

DEFAULT_HOST = "api.newrelic.com"
DEFAULT_CACHE_DIR = Path("query_cache")
DEFAULT_TIMEOUT = 30.0

ENV_HOST = "RELIC_DATA_HOST"
ENV_CACHE_DIR = "RELIC_DATA_CACHE_DIR"
ENV_TIMEOUT = "RELIC_DATA_TIMEOUT"


@dataclass(frozen=True)
class QueryConfig:
    """Connection and caching settings for metric queries.

    Attributes:
        host: API host, override to proxy requests through another host
        cache_dir: Root directory of the on-disk result cache
        use_cache: Default for reading and writing cached results
        timeout: Total HTTP timeout per request in seconds
    """

    host: str = DEFAULT_HOST
    cache_dir: Path = DEFAULT_CACHE_DIR
    use_cache: bool = True
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.host:
            raise ValueError("host must not be empty")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        # Accept plain strings for convenience
        object.__setattr__(self, "cache_dir", Path(self.cache_dir))

    @classmethod
    def from_env(cls, **overrides: object) -> QueryConfig:
        """Build a config from ``RELIC_DATA_*`` environment variables.

        Explicit keyword overrides win over the environment.
        """
        config = cls(
            host=os.environ.get(ENV_HOST, DEFAULT_HOST),
            cache_dir=Path(os.environ.get(ENV_CACHE_DIR, str(DEFAULT_CACHE_DIR))),
            timeout=float(os.environ.get(ENV_TIMEOUT, DEFAULT_TIMEOUT)),
        )
        return replace(config, **overrides) if overrides else config
