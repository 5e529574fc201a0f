"""
Pagination and page models shared by every feed.

This module defines:

- FeedKind: the entity feeds served by the backend (fundis, jobs, payments)
- Pagination: the backend pagination sub-object, normalised
- RecordPage: one fetched page of decoded records
- PageCursor: the next page to request and whether more pages exist

The backend is inconsistent about pagination keys (``hasNextPage`` on some
endpoints, ``current_page``/``last_page`` on others, camelCase on a few).
``Pagination.from_payload`` is the single place where the variants are
resolved, in this priority order:

    has_next_page  <- hasNextPage, has_next_page, has_more, hasMore
    current_page   <- current_page, currentPage
    last_page      <- last_page, lastPage
    total          <- total, totalCount
    per_page       <- per_page, perPage
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Mapping, Sequence, TypeVar

from fundi_feeds.utils import parse_bool

T = TypeVar("T")

_HAS_NEXT_KEYS = ("hasNextPage", "has_next_page", "has_more", "hasMore")
_CURRENT_PAGE_KEYS = ("current_page", "currentPage")
_LAST_PAGE_KEYS = ("last_page", "lastPage")
_TOTAL_KEYS = ("total", "totalCount")
_PER_PAGE_KEYS = ("per_page", "perPage")


class FeedKind(str, Enum):
    """A paginated entity feed and the names the backend uses for it."""

    FUNDIS = "fundis"
    JOBS = "jobs"
    PAYMENTS = "payments"

    @property
    def path(self) -> str:
        """List endpoint path, e.g. ``/fundis``."""
        return f"/{self.value}"

    @property
    def list_key(self) -> str:
        """Key holding the record list in a list response."""
        return self.value

    @property
    def label(self) -> str:
        """Plural noun used in user-facing messages."""
        return self.value


def _first(raw: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True, slots=True)
class Pagination:
    """
    Normalised pagination metadata from a list response.

    Every attribute is None when the backend did not report it.
    """

    current_page: int | None = None
    last_page: int | None = None
    total: int | None = None
    per_page: int | None = None
    has_next_page: bool | None = None

    @classmethod
    def from_payload(cls, raw: Any) -> "Pagination":
        """Build from the raw ``pagination`` object; tolerant of junk."""
        if not isinstance(raw, Mapping):
            return cls()
        has_next = _first(raw, _HAS_NEXT_KEYS)
        return cls(
            current_page=_optional_int(_first(raw, _CURRENT_PAGE_KEYS)),
            last_page=_optional_int(_first(raw, _LAST_PAGE_KEYS)),
            total=_optional_int(_first(raw, _TOTAL_KEYS)),
            per_page=_optional_int(_first(raw, _PER_PAGE_KEYS)),
            has_next_page=None if has_next is None else parse_bool(has_next),
        )

    @property
    def has_more_hint(self) -> bool | None:
        """
        What the metadata says about further pages.

        An explicit next-page flag wins; otherwise ``current_page <
        last_page`` when both are known; otherwise None (no signal).
        """
        if self.has_next_page is not None:
            return self.has_next_page
        if self.current_page is not None and self.last_page is not None:
            return self.current_page < self.last_page
        return None


@dataclass(frozen=True, slots=True)
class RecordPage(Generic[T]):
    """
    A single fetched page of records.

    Attributes:
        items: Decoded records in the order the backend returned them.
        page: The page number that was requested (1-indexed).
        page_size: The page size that was requested.
        pagination: Normalised backend metadata.
    """

    items: Sequence[T]
    page: int
    page_size: int
    pagination: Pagination = field(default_factory=Pagination)

    @property
    def has_more(self) -> bool:
        """
        Return True when another page should be requested.

        A short page ends the feed, and so does metadata reporting no
        next page; either signal is enough.
        """
        if len(self.items) < self.page_size:
            return False
        return self.pagination.has_more_hint is not False

    @property
    def total(self) -> int | None:
        return self.pagination.total


@dataclass
class PageCursor:
    """
    Tracks the next page to fetch.

    The cursor only advances after a successful fetch, so a failed
    request is retried against the same page.

    Attributes:
        page: Next page number to request (1-indexed).
        has_more: Whether more pages are available.
    """

    page: int = 1
    has_more: bool = True

    def advance(self, has_more: bool) -> None:
        """Move past the page that was just fetched."""
        self.page += 1
        self.has_more = has_more

    def reset(self) -> None:
        """Go back to the first page."""
        self.page = 1
        self.has_more = True
