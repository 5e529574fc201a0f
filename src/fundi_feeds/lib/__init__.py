"""
Infrastructure helpers for the Fundi feeds engine.

Modules:
    logs: Logging utilities
    paths: Local storage paths
    clients: httpx client factory
    caches: Staleness cache and disk-backed store
    retry: Bounded retry with linear backoff
"""

from fundi_feeds.lib import logs, paths, clients, caches, retry

__all__ = ["caches", "clients", "logs", "paths", "retry"]
