"""
Decoding of backend payloads into record models.

Decoders wrap each item in a benedict for safe nested key access and try
the known snake_case / camelCase variants of every field, preferring the
snake_case spelling. ``decode_records`` applies a decoder to a whole page:
an item that fails to decode is replaced by the record type's ``empty()``
placeholder and logged, so one bad item never blanks a page.
"""

from typing import Any, Callable, Iterable, Mapping, Sequence, TypeVar

from benedict import benedict

from fundi_feeds.lib import logs
from fundi_feeds.models.common import FeedKind
from fundi_feeds.models.records import (
    Fundi,
    Job,
    Payment,
    PaymentStatus,
    PortfolioItem,
)
from fundi_feeds.utils import (
    parse_bool,
    parse_date,
    parse_float,
    parse_int,
    parse_optional_str,
    parse_str,
    parse_string_list,
)

LOG = logs.logger(__file__)

R = TypeVar("R")

# Errors that mark a single item as malformed
DECODE_ERRORS = (ValueError, TypeError, KeyError, AttributeError)


def _wrap(payload: Any) -> benedict:
    if not isinstance(payload, Mapping):
        raise TypeError(f"Expected an object, got {type(payload).__name__}")
    # Backend keys may contain dots (e.g. metadata["mpesa.receipt"])
    return benedict(dict(payload), keypath_separator=None, keyattr_dynamic=True)


def _get(b: benedict, key: str) -> Any:
    """Look up ``key``; a dotted key walks nested objects one level per part."""
    if "." in key:
        return b.get(key.split("."))
    return b.get(key)


def _pick(b: benedict, *keys: str) -> Any:
    """Return the first non-None value among ``keys`` (dotted paths allowed)."""
    for key in keys:
        value = _get(b, key)
        if value is not None:
            return value
    return None


def _portfolio(b: benedict) -> tuple[PortfolioItem, ...]:
    raw = _pick(b, "visible_portfolio", "portfolio_items", "portfolio.items")
    if not raw:
        return ()
    items = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            continue
        items.append(
            PortfolioItem(
                id=parse_str(entry.get("id")),
                title=parse_str(entry.get("title")),
                description=parse_str(entry.get("description")),
                image_url=parse_optional_str(
                    entry.get("image_url") or entry.get("imageUrl")
                ),
                is_visible=parse_bool(
                    entry.get("is_visible", entry.get("isVisible"))
                ),
            )
        )
    return tuple(items)


def _fundi_location(b: benedict) -> str:
    lat = _get(b, "fundi_profile.location_lat")
    lng = _get(b, "fundi_profile.location_lng")
    if lat is not None and lng is not None:
        return f"{lat}, {lng}"
    return parse_str(_pick(b, "fundi_profile.location", "location"))


def decode_fundi(payload: Any) -> Fundi:
    """
    Decode one fundi item.

    Profile fields may be nested under ``fundi_profile``; those take
    precedence over top-level values. A fundi with no explicit
    availability is available unless its status is something other
    than ``active``.

    Raises:
        TypeError, ValueError: If the item is not an object or a numeric
            field holds a non-numeric value.
    """
    b = _wrap(payload)

    status = b.get("status")
    available_flag = _pick(b, "is_available", "isAvailable")
    if available_flag is not None:
        is_available = parse_bool(available_flag)
    else:
        is_available = status is None or str(status) == "active"

    return Fundi(
        id=parse_str(b.get("id")),
        name=parse_str(_pick(b, "fundi_profile.full_name", "full_name", "name")),
        email=parse_str(b.get("email")),
        phone=parse_str(b.get("phone")),
        profile_image=parse_optional_str(_pick(b, "profile_image", "profileImage")),
        location=_fundi_location(b),
        rating=parse_float(b.get("rating")),
        total_jobs=parse_int(_pick(b, "total_jobs", "totalJobs")),
        completed_jobs=parse_int(_pick(b, "completed_jobs", "completedJobs")),
        skills=parse_string_list(_pick(b, "fundi_profile.skills", "skills")),
        certifications=parse_string_list(b.get("certifications")),
        nida_number=parse_optional_str(_pick(b, "nida_number", "nidaNumber")),
        veta_certificate=parse_optional_str(
            _pick(
                b,
                "fundi_profile.veta_certificate",
                "veta_certificate",
                "vetaCertificate",
            )
        ),
        is_verified=(
            _get(b, "fundi_profile.verification_status") == "approved"
            or parse_bool(_pick(b, "is_verified", "isVerified"))
        ),
        is_available=is_available,
        bio=parse_optional_str(_pick(b, "fundi_profile.bio", "bio")),
        hourly_rate=parse_float(_pick(b, "hourly_rate", "hourlyRate")),
        portfolio=_portfolio(b),
        created_at=parse_date(_pick(b, "created_at", "createdAt")),
        updated_at=parse_date(_pick(b, "updated_at", "updatedAt")),
    )


def _budget_breakdown(raw: Any) -> dict[str, float]:
    if not raw:
        return {}
    if not isinstance(raw, Mapping):
        raise TypeError("budget breakdown must be an object")
    return {str(key): parse_float(value) for key, value in raw.items()}


def decode_job(payload: Any) -> Job:
    """
    Decode one job item.

    The category may arrive as a plain name or as a nested object with a
    ``name``; the customer likewise as flat fields or a ``customer`` object.
    """
    b = _wrap(payload)

    category = _pick(b, "category.name", "category")
    if isinstance(category, Mapping):
        category = None

    priority = parse_str(b.get("priority"), "medium")
    urgent_flag = _pick(b, "is_urgent", "isUrgent")
    is_urgent = (
        parse_bool(urgent_flag) if urgent_flag is not None else priority == "urgent"
    )

    return Job(
        id=parse_str(b.get("id")),
        title=parse_str(b.get("title")),
        description=parse_str(b.get("description")),
        category=parse_str(category),
        location=parse_str(b.get("location")),
        budget=parse_float(b.get("budget")),
        currency=parse_str(b.get("currency"), "TSh"),
        status=parse_str(b.get("status"), "pending"),
        customer_id=parse_str(_pick(b, "customer_id", "customerId", "customer.id")),
        customer_name=parse_str(
            _pick(b, "customer_name", "customerName", "customer.full_name", "customer.name")
        ),
        customer_phone=parse_optional_str(
            _pick(b, "customer_phone", "customerPhone", "customer.phone")
        ),
        customer_email=parse_optional_str(
            _pick(b, "customer_email", "customerEmail", "customer.email")
        ),
        required_skills=parse_string_list(_pick(b, "required_skills", "requiredSkills")),
        attachments=parse_string_list(b.get("attachments")),
        deadline=parse_date(b.get("deadline")),
        created_at=parse_date(_pick(b, "created_at", "createdAt")),
        updated_at=parse_date(_pick(b, "updated_at", "updatedAt")),
        budget_breakdown=_budget_breakdown(_pick(b, "budget_breakdown", "budgetBreakdown")),
        estimated_duration=parse_int(_pick(b, "estimated_duration", "estimatedDuration")),
        priority=priority,
        is_urgent=is_urgent,
        tags=parse_string_list(b.get("tags")),
    )


def decode_payment(payload: Any) -> Payment:
    """Decode one payment item."""
    b = _wrap(payload)
    metadata = b.get("metadata")
    return Payment(
        id=parse_str(b.get("id")),
        user_id=parse_str(_pick(b, "user_id", "userId")),
        amount=parse_float(b.get("amount")),
        payment_type=parse_str(_pick(b, "payment_type", "paymentType")),
        status=PaymentStatus.from_value(b.get("status", "pending")),
        reference=parse_optional_str(
            _pick(b, "reference", "pesapal_reference", "pesapalReference")
        ),
        metadata=dict(metadata) if isinstance(metadata, Mapping) else {},
        created_at=parse_date(_pick(b, "created_at", "createdAt")),
        updated_at=parse_date(_pick(b, "updated_at", "updatedAt")),
    )


_DECODERS: dict[FeedKind, tuple[Callable[[Any], Any], Callable[[], Any]]] = {
    FeedKind.FUNDIS: (decode_fundi, Fundi.empty),
    FeedKind.JOBS: (decode_job, Job.empty),
    FeedKind.PAYMENTS: (decode_payment, Payment.empty),
}


def decode_or_placeholder(
    payload: Any,
    decoder: Callable[[Any], R],
    placeholder: Callable[[], R],
) -> R:
    """Decode ``payload`` or return ``placeholder()`` if it is malformed."""
    try:
        return decoder(payload)
    except DECODE_ERRORS as e:
        LOG.warning(
            "Substituting placeholder for malformed %s: %s",
            decoder.__name__.removeprefix("decode_"),
            e,
        )
        return placeholder()


def decode_records(kind: FeedKind, items: Iterable[Any]) -> list[Any]:
    """
    Decode a page of raw items for ``kind``.

    Always returns one record per input item, in order.
    """
    decoder, placeholder = _DECODERS[kind]
    return [decode_or_placeholder(item, decoder, placeholder) for item in items]


def decode_record(kind: FeedKind, payload: Any) -> Any:
    """Decode a single detail payload for ``kind``."""
    decoder, placeholder = _DECODERS[kind]
    return decode_or_placeholder(payload, decoder, placeholder)


def decode_names(items: Sequence[Any]) -> list[str]:
    """
    Normalise a metadata list to names.

    Items may be plain strings or objects carrying a ``name``; anything
    else is skipped.
    """
    names = []
    for item in items:
        if isinstance(item, str):
            name = item
        elif isinstance(item, Mapping):
            name = parse_str(item.get("name"))
        else:
            continue
        name = name.strip()
        if name:
            names.append(name)
    return names
