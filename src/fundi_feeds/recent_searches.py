"""
Recent free-text search terms, persisted to local storage.

At most five terms are kept, most recent first. Adding a term that is
already listed moves it to the front instead of duplicating it.
"""

from pathlib import Path

from fundi_feeds.lib import logs, paths
from fundi_feeds.lib.caches import DiskCache

LOG = logs.logger(__file__)

MAX_RECENT_SEARCHES = 5
_STORAGE_KEY = "recent_searches"


class RecentSearches:
    """
    Most-recent-first list of search terms backed by a DiskCache.

    Attributes:
        limit: Maximum number of terms kept.
    """

    def __init__(
        self,
        store: DiskCache | None = None,
        limit: int = MAX_RECENT_SEARCHES,
    ) -> None:
        self._store = store
        self.limit = limit
        self._terms: list[str] = []
        if store is not None:
            stored = store.get(_STORAGE_KEY, default=[])
            self._terms = [t for t in stored if isinstance(t, str)][:limit]

    @classmethod
    def open(cls, cache_dir: str | Path | None = None) -> "RecentSearches":
        """Load the list persisted under ``cache_dir`` (default local dir)."""
        return cls(DiskCache(Path(cache_dir) if cache_dir else paths.cache_dir()))

    @property
    def terms(self) -> list[str]:
        return list(self._terms)

    def add(self, term: str) -> bool:
        """
        Record ``term`` as the most recent search.

        Blank terms are ignored.

        Returns:
            True if the list changed.
        """
        term = term.strip() if term else ""
        if not term:
            return False
        if self._terms and self._terms[0] == term:
            return False
        if term in self._terms:
            self._terms.remove(term)
        self._terms.insert(0, term)
        del self._terms[self.limit :]
        self._save()
        return True

    def remove(self, term: str) -> bool:
        if term not in self._terms:
            return False
        self._terms.remove(term)
        self._save()
        return True

    def clear(self) -> None:
        self._terms = []
        self._save()

    def close(self) -> None:
        if self._store is not None:
            self._store.close()

    def _save(self) -> None:
        if self._store is not None:
            self._store.set(_STORAGE_KEY, list(self._terms))
            LOG.debug("Saved %d recent searches", len(self._terms))
