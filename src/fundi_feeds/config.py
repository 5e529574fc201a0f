"""
Environment-driven configuration for the Fundi feeds engine.

All settings have working defaults; ``FeedsConfig.from_env()`` overrides
them from FUNDI_* environment variables.
"""

import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from fundi_feeds.lib import paths
from fundi_feeds.services.feed_service import DEFAULT_PAGE_SIZE
from fundi_feeds.services.feed_service_http import DEFAULT_BASE_URL

_TRUTHY = {"1", "true", "yes"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


@dataclass(frozen=True)
class FeedsConfig:
    """
    Settings shared by the services and state containers.

    Attributes:
        base_url: Backend base URL.
        service_kind: Default FeedService implementation ("http"/"demo").
        page_size: Records requested per page.
        timeout: Per-request timeout in seconds.
        max_retries: Attempts made by the retry policy.
        cache_ttl: Freshness window for metadata lists.
        dedupe: Skip already-listed ids when appending a page.
        cache_dir: Directory for persisted local data (recent searches).
        api_token: Bearer token, if one is configured.
    """

    base_url: str = DEFAULT_BASE_URL
    service_kind: str = "http"
    page_size: int = DEFAULT_PAGE_SIZE
    timeout: float = 30.0
    max_retries: int = 3
    cache_ttl: timedelta = timedelta(minutes=5)
    dedupe: bool = True
    cache_dir: Path = field(default_factory=paths.cache_dir)
    api_token: str | None = None

    @classmethod
    def from_env(cls) -> "FeedsConfig":
        return cls(
            base_url=os.getenv("FUNDI_API_BASE_URL", DEFAULT_BASE_URL),
            service_kind=os.getenv("FUNDI_FEEDS_SERVICE", "http").lower(),
            page_size=_env_int("FUNDI_FEEDS_PAGE_SIZE", DEFAULT_PAGE_SIZE),
            timeout=_env_float("FUNDI_FEEDS_TIMEOUT", 30.0),
            max_retries=_env_int("FUNDI_FEEDS_MAX_RETRIES", 3),
            cache_ttl=timedelta(seconds=_env_int("FUNDI_FEEDS_CACHE_TTL", 300)),
            dedupe=_env_bool("FUNDI_FEEDS_DEDUPE", True),
            cache_dir=paths.cache_dir(),
            api_token=os.getenv("FUNDI_API_TOKEN") or None,
        )
