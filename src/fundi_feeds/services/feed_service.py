"""
Abstract base class defining the feed data access contract.

A FeedService turns one page request into one backend call and decodes the
result. Implementations raise a ``FeedError`` subclass on failure and have
no other side effects; callers own pagination and list state.

Implementations:
- HttpFeedService: httpx client for the marketplace REST backend
- DemoFeedService: static in-memory data for development/testing
"""

from abc import ABC, abstractmethod
from typing import Mapping

from fundi_feeds.models.common import FeedKind, RecordPage
from fundi_feeds.models.records import Fundi, Job, Payment

DEFAULT_PAGE_SIZE = 15


class FeedService(ABC):
    """
    Abstract base class for feed data access.

    Subclasses implement ``list_records`` plus the detail and metadata
    lookups. The per-entity helpers are thin wrappers over
    ``list_records``.
    """

    @abstractmethod
    async def list_records(
        self,
        kind: FeedKind,
        params: Mapping[str, str] | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> RecordPage:
        """
        Return one page of records of ``kind``.

        Args:
            kind: Which feed to read.
            params: Backend filter parameters (see QueryState.to_params).
            page: Page number (1-indexed).
            page_size: Number of items per page.

        Raises:
            FeedError: On transport, HTTP, application or shape failures.
        """

    @abstractmethod
    async def get_fundi(self, fundi_id: str) -> Fundi:
        """Return the full profile of one fundi."""

    @abstractmethod
    async def get_job(self, job_id: str) -> Job:
        """Return the details of one job."""

    @abstractmethod
    async def list_categories(self) -> list[str]:
        """Return job category names."""

    @abstractmethod
    async def list_skills(self) -> list[str]:
        """Return skill names."""

    @abstractmethod
    async def list_locations(self) -> list[str]:
        """Return location names."""

    async def list_fundis(
        self,
        params: Mapping[str, str] | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> RecordPage[Fundi]:
        return await self.list_records(FeedKind.FUNDIS, params, page, page_size)

    async def list_jobs(
        self,
        params: Mapping[str, str] | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> RecordPage[Job]:
        return await self.list_records(FeedKind.JOBS, params, page, page_size)

    async def list_payments(
        self,
        params: Mapping[str, str] | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> RecordPage[Payment]:
        return await self.list_records(FeedKind.PAYMENTS, params, page, page_size)

    async def aclose(self) -> None:
        """Release resources held by the service. Default is a no-op."""

    async def __aenter__(self) -> "FeedService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
