"""
Demo implementation of FeedService using static in-memory data.

This service is useful for:
- Local development without a running backend
- Exercising the feed state containers with realistic data
- Demonstrating the command line browser offline

Payloads go through the same decoders as the HTTP service. With
``virtual_fundis`` set, an unfiltered fundi feed is stretched to that many
records by cycling the templates with position-suffixed ids, simulating a
long infinite-scroll feed.
"""

from typing import Any, Mapping, Sequence

from fundi_feeds.data.demo_feeds import (
    DEMO_CATEGORIES,
    DEMO_FUNDIS,
    DEMO_JOBS,
    DEMO_LOCATIONS,
    DEMO_PAYMENTS,
    DEMO_SKILLS,
)
from fundi_feeds.errors import ApplicationError
from fundi_feeds.lib import logs
from fundi_feeds.models.common import FeedKind, Pagination, RecordPage
from fundi_feeds.models.records import Fundi, Job
from fundi_feeds.services.decoding import decode_records
from fundi_feeds.services.feed_service import DEFAULT_PAGE_SIZE, FeedService
from fundi_feeds.utils import matches_params, virtual_slice

LOG = logs.logger(__file__)


class DemoFeedService(FeedService):
    """
    In-memory feed service backed by static demo payloads.

    Attributes:
        virtual_fundis: Length of the simulated unfiltered fundi feed, or
            0 to serve only the fixture fundis.
    """

    def __init__(
        self,
        payloads: Mapping[FeedKind, Sequence[Mapping[str, Any]]] | None = None,
        virtual_fundis: int = 0,
    ) -> None:
        """
        Initialize with feed data.

        Args:
            payloads: Raw items per feed, or None to use the demo fixtures.
            virtual_fundis: Simulated total for the unfiltered fundi feed.
        """
        raw = payloads or {
            FeedKind.FUNDIS: DEMO_FUNDIS,
            FeedKind.JOBS: DEMO_JOBS,
            FeedKind.PAYMENTS: DEMO_PAYMENTS,
        }
        self._records = {
            kind: decode_records(kind, raw.get(kind, ())) for kind in FeedKind
        }
        self.virtual_fundis = virtual_fundis

    async def list_records(
        self,
        kind: FeedKind,
        params: Mapping[str, str] | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> RecordPage:
        """
        Return a page of records matching ``params``.

        Pagination metadata is reported Laravel-style
        (``current_page``/``last_page``), like most backend endpoints.
        """
        params = dict(params or {})
        page, page_size = max(page, 1), max(page_size, 1)
        start = (page - 1) * page_size

        base = self._records[kind]
        virtual = kind is FeedKind.FUNDIS and self.virtual_fundis and not params
        if virtual:
            total = self.virtual_fundis
            items = virtual_slice(base, start, min(start + page_size, total))
        else:
            matching = [record for record in base if matches_params(record, params)]
            total = len(matching)
            items = matching[start : start + page_size]

        last_page = max((total + page_size - 1) // page_size, 1)
        LOG.debug(
            "Demo %s page %d/%d: %d records", kind.value, page, last_page, len(items)
        )
        return RecordPage(
            items=items,
            page=page,
            page_size=page_size,
            pagination=Pagination(
                current_page=page, last_page=last_page, total=total, per_page=page_size
            ),
        )

    async def get_fundi(self, fundi_id: str) -> Fundi:
        return self._find(FeedKind.FUNDIS, fundi_id)

    async def get_job(self, job_id: str) -> Job:
        return self._find(FeedKind.JOBS, job_id)

    async def list_categories(self) -> list[str]:
        return list(DEMO_CATEGORIES)

    async def list_skills(self) -> list[str]:
        return list(DEMO_SKILLS)

    async def list_locations(self) -> list[str]:
        return list(DEMO_LOCATIONS)

    def _find(self, kind: FeedKind, record_id: str) -> Any:
        for record in self._records[kind]:
            if record.id == record_id:
                return record
        raise ApplicationError(f"{kind.label[:-1].capitalize()} not found")
