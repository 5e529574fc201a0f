"""
Marketplace record models.

Records are immutable values decoded once at the API boundary. Any change
produces a new record through ``copy_with``. Each record type exposes
``empty()``, the placeholder substituted for items that fail to decode;
decoding an empty payload yields a record equal to it.

    Fundi    - a tradesperson profile (supply side)
    Job      - a job posting with its budget breakdown
    Payment  - a payment transaction
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Sequence, TypeVar, Union

from fundi_feeds.utils import format_compact, format_currency, format_deadline

R = TypeVar("R", bound="Record")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class _RecordMixin:
    """Behaviour shared by all record types."""

    __slots__ = ()

    def copy_with(self: R, **overrides: Any) -> R:
        """Return a copy of this record with the given fields replaced."""
        return replace(self, **overrides)

    @property
    def is_placeholder(self) -> bool:
        """True for records without an identifier (decode placeholders)."""
        return not self.id


@dataclass(frozen=True, slots=True)
class PortfolioItem:
    """A piece of work shown on a fundi profile."""

    id: str = ""
    title: str = ""
    description: str = ""
    image_url: str | None = None
    is_visible: bool = False


@dataclass(frozen=True, slots=True)
class Fundi(_RecordMixin):
    """A skilled worker listed in the marketplace."""

    id: str = ""
    name: str = ""
    email: str = ""
    phone: str = ""
    profile_image: str | None = None
    location: str = ""
    rating: float = 0.0
    total_jobs: int = 0
    completed_jobs: int = 0
    skills: Sequence[str] = ()
    certifications: Sequence[str] = ()
    nida_number: str | None = None
    veta_certificate: str | None = None
    is_verified: bool = False
    is_available: bool = True
    bio: str | None = None
    hourly_rate: float = 0.0
    portfolio: Sequence[PortfolioItem] = ()
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def empty(cls) -> "Fundi":
        return cls()

    @property
    def completion_rate(self) -> float:
        """Completed jobs as a percentage of all jobs."""
        if self.total_jobs == 0:
            return 0.0
        return self.completed_jobs / self.total_jobs * 100

    @property
    def formatted_hourly_rate(self) -> str:
        return f"{format_currency(self.hourly_rate)}/hour"

    @property
    def status_text(self) -> str:
        if not self.is_available:
            return "Busy"
        if self.is_verified:
            return "Verified & Available"
        return "Available"

    def has_skill(self, skill: str) -> bool:
        """Case-insensitive substring match against the fundi's skills."""
        needle = skill.lower()
        return any(needle in s.lower() for s in self.skills)


_PRIORITY_LEVELS = {"low": 1, "medium": 2, "high": 3, "urgent": 4}


@dataclass(frozen=True, slots=True)
class Job(_RecordMixin):
    """A job posted by a customer."""

    id: str = ""
    title: str = ""
    description: str = ""
    category: str = ""
    location: str = ""
    budget: float = 0.0
    currency: str = "TSh"
    status: str = "pending"
    customer_id: str = ""
    customer_name: str = ""
    customer_phone: str | None = None
    customer_email: str | None = None
    required_skills: Sequence[str] = ()
    attachments: Sequence[str] = ()
    deadline: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    budget_breakdown: Mapping[str, float] = field(default_factory=dict)
    estimated_duration: int = 0
    priority: str = "medium"
    is_urgent: bool = False
    tags: Sequence[str] = ()

    @classmethod
    def empty(cls) -> "Job":
        return cls()

    @property
    def formatted_budget(self) -> str:
        return format_currency(self.budget, self.currency)

    @property
    def is_expired(self) -> bool:
        """True once the deadline has passed. Jobs without one never expire."""
        return self.deadline is not None and _now() > self.deadline

    @property
    def days_until_deadline(self) -> int | None:
        if self.deadline is None:
            return None
        return (self.deadline - _now()).days

    @property
    def formatted_deadline(self) -> str:
        days = self.days_until_deadline
        if days is None:
            return "No deadline"
        return format_deadline(days)

    @property
    def priority_level(self) -> int:
        return _PRIORITY_LEVELS.get(self.priority.lower(), 2)

    @property
    def breakdown_total(self) -> float:
        """Sum of all budget breakdown lines."""
        return sum(self.budget_breakdown.values())

    def requires_skill(self, skill: str) -> bool:
        needle = skill.lower()
        return any(needle in s.lower() for s in self.required_skills)


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @classmethod
    def from_value(cls, value: Any) -> "PaymentStatus":
        """Map a backend status string, defaulting to pending."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.PENDING


@dataclass(frozen=True, slots=True)
class Payment(_RecordMixin):
    """A payment transaction."""

    id: str = ""
    user_id: str = ""
    amount: float = 0.0
    payment_type: str = ""
    status: PaymentStatus = PaymentStatus.PENDING
    reference: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def empty(cls) -> "Payment":
        return cls()

    @property
    def formatted_amount(self) -> str:
        return format_compact(self.amount, "TZS")

    @property
    def is_completed(self) -> bool:
        return self.status is PaymentStatus.COMPLETED

    @property
    def is_pending(self) -> bool:
        return self.status is PaymentStatus.PENDING

    @property
    def is_failed(self) -> bool:
        return self.status is PaymentStatus.FAILED


Record = Union[Fundi, Job, Payment]
