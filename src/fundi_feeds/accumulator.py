"""
Page accumulation for infinite-scroll feeds.

A PageAccumulator owns the ordered list of records fetched so far for the
active query and the cursor of the next page to request. Fresh searches
``replace`` the list, "load more" ``append``s to it.

Appending skips records whose id is already listed, so overlapping pages
from the backend do not produce duplicate rows. Placeholders (records
without an id) are always kept. Pass ``dedupe=False`` for plain
concatenation.
"""

from typing import Generic, Sequence, TypeVar

from fundi_feeds.lib import logs
from fundi_feeds.models.common import PageCursor, RecordPage

LOG = logs.logger(__file__)

R = TypeVar("R")


class PageAccumulator(Generic[R]):
    """
    Ordered, de-duplicated record list plus pagination cursor.

    Attributes:
        cursor: Next page to fetch and whether more exist.
        dedupe: Whether append skips already-listed ids.
        generation: Bumped on every reset; fetches started under an older
            generation must not be applied.
    """

    def __init__(self, dedupe: bool = True) -> None:
        self.dedupe = dedupe
        self.cursor = PageCursor()
        self.generation = 0
        self._records: list[R] = []
        self._ids: set[str] = set()

    @property
    def records(self) -> list[R]:
        """Copy of the accumulated records in arrival order."""
        return list(self._records)

    @property
    def has_more(self) -> bool:
        return self.cursor.has_more

    @property
    def next_page(self) -> int:
        return self.cursor.page

    @property
    def is_empty(self) -> bool:
        return not self._records

    def __len__(self) -> int:
        return len(self._records)

    def replace(self, page: RecordPage[R]) -> None:
        """Discard prior contents and start over from ``page``."""
        self._records = []
        self._ids = set()
        self._extend(page.items)
        self.cursor.page = page.page
        self.cursor.advance(page.has_more)

    def append(self, page: RecordPage[R]) -> int:
        """
        Add ``page`` after the existing records.

        Returns:
            Number of records actually added.
        """
        added = self._extend(page.items)
        skipped = len(page.items) - added
        if skipped:
            LOG.info("Skipped %d duplicate records from page %d", skipped, page.page)
        self.cursor.page = page.page
        self.cursor.advance(page.has_more)
        return added

    def reset(self) -> None:
        """Clear records, rewind to page 1 and invalidate in-flight fetches."""
        self._records = []
        self._ids = set()
        self.cursor.reset()
        self.generation += 1

    def _extend(self, items: Sequence[R]) -> int:
        added = 0
        for record in items:
            record_id = getattr(record, "id", "")
            if self.dedupe and record_id:
                if record_id in self._ids:
                    continue
                self._ids.add(record_id)
            self._records.append(record)
            added += 1
        return added
