"""
Service factory for the Fundi feeds engine.

This module provides the get_feed_service() factory function that returns
the requested FeedService implementation.

Available Implementations:
- http: httpx client for the marketplace REST backend
- demo: In-memory service with static fixture data

Unlike a process-wide singleton, every call returns a new instance; the
owner injects it into its state containers and closes it when done.
Configure the default via the FUNDI_FEEDS_SERVICE environment variable.
"""

import os
from typing import Any, Callable, Dict

from fundi_feeds.lib import logs
from fundi_feeds.services.feed_service import DEFAULT_PAGE_SIZE, FeedService
from fundi_feeds.services.feed_service_demo import DemoFeedService
from fundi_feeds.services.feed_service_http import HttpFeedService

LOG = logs.logger(__file__)

_SERVICE_REGISTRY: Dict[str, Callable[..., FeedService]] = {
    "demo": DemoFeedService,
    "http": HttpFeedService,
}


def get_feed_service(kind: str | None = None, **kwargs: Any) -> FeedService:
    """
    Return a new feed service of the requested kind.

    Args:
        kind: "http" or "demo"; defaults to FUNDI_FEEDS_SERVICE or "http".
        **kwargs: Passed to the implementation's constructor.

    Raises:
        ValueError: For an unknown kind.
    """
    resolved_kind = (kind or os.getenv("FUNDI_FEEDS_SERVICE", "http")).lower()
    LOG.info("get_feed_service - kind:%s resolved_kind:%s", kind, resolved_kind)
    try:
        factory = _SERVICE_REGISTRY[resolved_kind]
    except KeyError as exc:
        msg = f"Unknown feed service kind: {resolved_kind}"
        raise ValueError(msg) from exc
    return factory(**kwargs)


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "DemoFeedService",
    "FeedService",
    "HttpFeedService",
    "get_feed_service",
]
