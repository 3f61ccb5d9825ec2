"""OMDb configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_choice, env_float, env_int, env_str, require_env_vars
from .http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
    ShouldCacheHook,
)
from .storage import get_storage_config

OMDB_BASE_URL = "https://www.omdbapi.com/"
OMDB_TIMEOUT_SECONDS = 10.0
# Short enough to sit well below the smallest staleness tier (one hour).
OMDB_HTTP_CACHE_TTL_SECONDS = 300.0


@dataclass(frozen=True, slots=True)
class OmdbConfig:
    """Holds OMDb API configuration values."""

    api_key: str
    resilience: ResilienceConfig


def _cache_config(backend: str, cache_predicate: ShouldCacheHook | None) -> CacheConfig | None:
    if backend == "off":
        return None
    if backend == "sqlite":
        return CacheConfig(
            backend="sqlite",
            sqlite_path=str(get_storage_config().http_cache_path()),
            default_ttl_seconds=OMDB_HTTP_CACHE_TTL_SECONDS,
            should_cache=cache_predicate,
        )
    return CacheConfig(
        backend="memory",
        default_ttl_seconds=OMDB_HTTP_CACHE_TTL_SECONDS,
        should_cache=cache_predicate,
    )


def get_omdb_config(
    *,
    resilience: ResilienceConfig | None = None,
    cache_predicate: ShouldCacheHook | None = None,
) -> OmdbConfig:
    values = require_env_vars(("OMDB_API_KEY",))
    if resilience is None:
        per_second = env_float("OMDB_RATE_LIMIT_PER_SECOND", None)
        resilience = ResilienceConfig(
            name="omdb",
            base_url=env_str("OMDB_BASE_URL", OMDB_BASE_URL),
            timeout_seconds=env_float("OMDB_TIMEOUT_SECONDS", OMDB_TIMEOUT_SECONDS)
            or OMDB_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=env_int("OMDB_RETRY_TOTAL", 0)),
            ratelimit=RateLimit(max_calls=max(1, int(per_second)), per_seconds=1.0)
            if per_second
            else None,
            cache=_cache_config(
                env_choice("OMDB_HTTP_CACHE", "memory", {"memory", "sqlite", "off"}),
                cache_predicate,
            ),
        )
    return OmdbConfig(api_key=values["OMDB_API_KEY"], resilience=resilience)
