"""
Data models for the Fundi feeds engine.

This package provides:
- Record models (Fundi, Job, Payment) with derived display properties
- Pagination models (Pagination, RecordPage, PageCursor, FeedKind)
- QueryState, the search/filter/sort intent of a feed screen

All models use Python dataclasses; records are frozen.
"""

from fundi_feeds.models.common import FeedKind, PageCursor, Pagination, RecordPage
from fundi_feeds.models.query import FilterName, QueryState, SortDirection
from fundi_feeds.models.records import (
    Fundi,
    Job,
    Payment,
    PaymentStatus,
    PortfolioItem,
    Record,
)

__all__ = [
    "FeedKind",
    "FilterName",
    "Fundi",
    "Job",
    "PageCursor",
    "Pagination",
    "Payment",
    "PaymentStatus",
    "PortfolioItem",
    "QueryState",
    "Record",
    "RecordPage",
    "SortDirection",
]
