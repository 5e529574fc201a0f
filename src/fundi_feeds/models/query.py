"""
Search, filter and sort state for the feeds.

QueryState holds what the user is currently looking for. Whenever a value
actually changes, subscribers are notified so they can reset pagination;
setting a filter to the value it already has is a no-op.
"""

from enum import Enum
from typing import Any, Callable, Iterable, Mapping

from fundi_feeds.models.common import FeedKind


class FilterName(str, Enum):
    """Supported filters. Values are the backend query parameter names."""

    SEARCH = "search"
    LOCATION = "location"
    CATEGORY = "category"
    SKILLS = "skills"
    MIN_RATING = "minRating"
    MIN_BUDGET = "minBudget"
    MAX_BUDGET = "maxBudget"
    IS_URGENT = "isUrgent"
    IS_AVAILABLE = "isAvailable"
    IS_VERIFIED = "isVerified"
    STATUS = "status"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# Filters each feed sends to the backend
FEED_FILTERS: Mapping[FeedKind, frozenset[FilterName]] = {
    FeedKind.FUNDIS: frozenset(
        {
            FilterName.SEARCH,
            FilterName.LOCATION,
            FilterName.SKILLS,
            FilterName.MIN_RATING,
            FilterName.IS_AVAILABLE,
            FilterName.IS_VERIFIED,
        }
    ),
    FeedKind.JOBS: frozenset(
        {
            FilterName.SEARCH,
            FilterName.CATEGORY,
            FilterName.LOCATION,
            FilterName.MIN_BUDGET,
            FilterName.MAX_BUDGET,
            FilterName.IS_URGENT,
            FilterName.STATUS,
        }
    ),
    FeedKind.PAYMENTS: frozenset({FilterName.SEARCH, FilterName.STATUS}),
}

_LIST_FILTERS = frozenset({FilterName.SKILLS})

Listener = Callable[["QueryState"], None]


def _normalise(name: FilterName, value: Any) -> Any:
    """Canonical stored form: lists become tuples, blanks become None."""
    if value is None:
        return None
    if name in _LIST_FILTERS:
        if isinstance(value, str):
            value = [value]
        items = tuple(str(item) for item in value)
        return items or None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _param_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, tuple):
        return ",".join(value)
    return str(value)


class QueryState:
    """
    Current search/filter/sort intent of one feed screen.

    Attributes:
        sort_key: Backend sort field, or None for the default order.
        sort_direction: Direction applied when ``sort_key`` is set.
    """

    def __init__(self) -> None:
        self._filters: dict[FilterName, Any] = {}
        self.sort_key: str | None = None
        self.sort_direction = SortDirection.DESC
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register ``listener`` to be called after every effective change.

        Returns:
            A function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def search(self) -> str:
        return self._filters.get(FilterName.SEARCH) or ""

    @property
    def filters(self) -> dict[FilterName, Any]:
        """Copy of the filters that are currently set."""
        return dict(self._filters)

    @property
    def is_empty(self) -> bool:
        return not self._filters and self.sort_key is None

    def get(self, name: FilterName | str) -> Any:
        return self._filters.get(FilterName(name))

    def set_filter(self, name: FilterName | str, value: Any) -> bool:
        """
        Set or clear (``value=None``) one filter.

        String names are converted through FilterName, so an unknown name
        raises ValueError here rather than being silently accepted.

        Returns:
            True if the effective value changed and pagination was reset.
        """
        key = FilterName(name)
        new_value = _normalise(key, value)
        if self._filters.get(key) == new_value:
            return False
        if new_value is None:
            del self._filters[key]
        else:
            self._filters[key] = new_value
        self._notify()
        return True

    def set_search(self, text: str | None) -> bool:
        return self.set_filter(FilterName.SEARCH, text.strip() if text else None)

    def update(self, values: Mapping[FilterName | str, Any]) -> bool:
        """
        Apply several filters, notifying subscribers at most once.

        Returns:
            True if any value changed.
        """
        changed = False
        for name, value in values.items():
            key = FilterName(name)
            new_value = _normalise(key, value)
            if self._filters.get(key) == new_value:
                continue
            changed = True
            if new_value is None:
                del self._filters[key]
            else:
                self._filters[key] = new_value
        if changed:
            self._notify()
        return changed

    def set_sort(
        self, key: str | None, direction: SortDirection | str = SortDirection.DESC
    ) -> bool:
        direction = SortDirection(direction)
        if self.sort_key == key and self.sort_direction == direction:
            return False
        self.sort_key = key
        self.sort_direction = direction
        self._notify()
        return True

    def clear(self) -> None:
        """Reset search, filters and sort; always resets pagination."""
        self._filters.clear()
        self.sort_key = None
        self.sort_direction = SortDirection.DESC
        self._notify()

    def to_params(self, kind: FeedKind) -> dict[str, str]:
        """Serialise the filters that apply to ``kind`` as query parameters."""
        allowed = FEED_FILTERS[kind]
        params = {
            name.value: _param_value(value)
            for name, value in self._filters.items()
            if name in allowed
        }
        if self.sort_key:
            params["sort_by"] = self.sort_key
            params["sort_order"] = self.sort_direction.value
        return params

    def describe(self) -> str:
        """Short human-readable summary used in log lines."""
        parts: Iterable[str] = (
            f"{name.value}={_param_value(value)}"
            for name, value in sorted(self._filters.items(), key=lambda i: i[0].value)
        )
        text = ", ".join(parts)
        return text or "no filters"

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
