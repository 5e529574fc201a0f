"""Helper functions for in-memory record filtering and demo feeds."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Sequence, TypeVar

if TYPE_CHECKING:
    from fundi_feeds.models.records import Fundi, Job, Payment

R = TypeVar("R")


def searchable_terms(record: "Fundi | Job | Payment") -> list[str]:
    """Return the lower-cased terms a free-text search matches against."""
    fields = ("name", "title", "description", "location", "category", "bio",
              "customer_name", "payment_type", "reference")
    terms = [getattr(record, name, None) for name in fields]
    for name in ("skills", "required_skills", "tags"):
        terms.extend(getattr(record, name, ()) or ())
    return [str(term).lower() for term in terms if term]


def matches_query(record: "Fundi | Job | Payment", query: str | None) -> bool:
    """Case-insensitive substring match; an empty query matches everything."""
    if not query or not query.strip():
        return True
    normalized = query.strip().lower()
    return any(normalized in term for term in searchable_terms(record))


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"true", "1", "yes"}


def matches_params(record: "Fundi | Job | Payment", params: Mapping[str, str]) -> bool:
    """
    Check a record against serialized filter parameters.

    Parameters that do not apply to the record type are ignored.
    """
    for name, value in params.items():
        if name == "search":
            if not matches_query(record, value):
                return False
        elif name in _TEXT_FIELDS:
            actual = getattr(record, _TEXT_FIELDS[name], None)
            if actual is not None and value.lower() not in actual.lower():
                return False
        elif name == "skills":
            matcher = getattr(record, "has_skill", None) or getattr(
                record, "requires_skill", None
            )
            wanted = [s.strip() for s in value.split(",") if s.strip()]
            if matcher is not None and not all(matcher(s) for s in wanted):
                return False
        elif name in _BOUNDS:
            attr, is_minimum = _BOUNDS[name]
            actual = getattr(record, attr, None)
            if actual is None:
                continue
            if is_minimum and actual < float(value):
                return False
            if not is_minimum and actual > float(value):
                return False
        elif name in _FLAGS:
            actual = getattr(record, _FLAGS[name], None)
            if actual is not None and actual != _as_bool(value):
                return False
        elif name == "status":
            status = getattr(record, "status", None)
            if status is not None and str(getattr(status, "value", status)) != value:
                return False
    return True


_TEXT_FIELDS = {"location": "location", "category": "category"}
_BOUNDS = {
    "minRating": ("rating", True),
    "minBudget": ("budget", True),
    "maxBudget": ("budget", False),
}
_FLAGS = {
    "isUrgent": "is_urgent",
    "isAvailable": "is_available",
    "isVerified": "is_verified",
}


def virtual_slice(base: Sequence[R], start: int, end: int) -> list[R]:
    """
    Generate a virtual slice of records for a long demo feed.

    Cycles through the base records, creating copies whose ids carry the
    virtual position so that every copy is distinct.
    """
    count = max(end - start, 0)
    if count == 0 or not base:
        return []
    base_len = len(base)
    return [
        virtual_record(base[(start + offset) % base_len], start + offset)
        for offset in range(count)
    ]


def virtual_record(template: R, index: int) -> R:
    """Copy ``template`` with an id suffixed by its virtual position."""
    suffix = f"-{index + 1:04d}"
    return template.copy_with(id=f"{template.id}{suffix}")
