"""
Reference metadata (categories, skills, locations) behind a staleness cache.

The lists change rarely, so each is fetched at most once per TTL window
and a failed refresh keeps serving the previous list.
"""

import asyncio
from datetime import timedelta
from typing import Awaitable, Callable

from fundi_feeds.lib import logs
from fundi_feeds.lib.caches import DEFAULT_TTL, StalenessCache
from fundi_feeds.services.feed_service import FeedService

LOG = logs.logger(__file__)

CATEGORIES = "categories"
SKILLS = "skills"
LOCATIONS = "locations"


class MetadataStore:
    """
    Cached access to the metadata lists of one feed service.

    The cache may be shared between stores (and screens); pass the same
    StalenessCache instance to share it.
    """

    def __init__(
        self,
        service: FeedService,
        cache: StalenessCache | None = None,
        ttl: timedelta = DEFAULT_TTL,
    ) -> None:
        self._service = service
        self.cache = cache or StalenessCache(ttl=ttl)
        self.errors: dict[str, str] = {}
        self._fetchers: dict[str, Callable[[], Awaitable[list[str]]]] = {
            CATEGORIES: service.list_categories,
            SKILLS: service.list_skills,
            LOCATIONS: service.list_locations,
        }

    async def get(self, key: str, force: bool = False) -> list[str]:
        """
        Return the list named ``key``.

        Raises:
            KeyError: For an unknown list name.
            FeedError: If the fetch failed and nothing was cached yet.
        """
        fetch = self._fetchers[key]
        return await self.cache.get_or_fetch(key, fetch, force=force)

    async def categories(self, force: bool = False) -> list[str]:
        return await self.get(CATEGORIES, force)

    async def skills(self, force: bool = False) -> list[str]:
        return await self.get(SKILLS, force)

    async def locations(self, force: bool = False) -> list[str]:
        return await self.get(LOCATIONS, force)

    async def load_all(self, force: bool = False) -> dict[str, list[str]]:
        """
        Fetch every list concurrently.

        Lists that fail with nothing cached come back empty. The failure
        is logged and its message kept in ``errors`` under the list name
        until a later load of that list succeeds.
        """
        keys = list(self._fetchers)
        results = await asyncio.gather(
            *(self.get(key, force) for key in keys), return_exceptions=True
        )
        loaded: dict[str, list[str]] = {}
        for key, result in zip(keys, results):
            if isinstance(result, Exception):
                LOG.error("Error loading %s: %s", key, result)
                self.errors[key] = getattr(result, "message", None) or str(result)
                loaded[key] = []
            else:
                self.errors.pop(key, None)
                loaded[key] = result
        return loaded
