"""Pytest configuration and fixtures."""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

import pytest

from fundi_feeds.lib.retry import RetryPolicy
from fundi_feeds.models.common import FeedKind, Pagination, RecordPage
from fundi_feeds.models.records import Fundi, Job
from fundi_feeds.services.feed_service import DEFAULT_PAGE_SIZE, FeedService


def make_fundis(start: int, count: int) -> list[Fundi]:
    return [Fundi(id=f"f-{i}", name=f"Fundi {i}") for i in range(start, start + count)]


class ScriptedFeedService(FeedService):
    """
    Feed service that answers list requests from a queue.

    Each queued outcome is either a list of records (served as the
    requested page) or an exception to raise. Every call is recorded.
    """

    def __init__(self, *outcomes: Any, pagination: Pagination | None = None) -> None:
        self.outcomes = list(outcomes)
        self.pagination = pagination or Pagination()
        self.calls: list[tuple[FeedKind, dict[str, str], int, int]] = []
        self.gate: asyncio.Event | None = None

    async def list_records(
        self,
        kind: FeedKind,
        params: Mapping[str, str] | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> RecordPage:
        self.calls.append((kind, dict(params or {}), page, page_size))
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return RecordPage(
            items=outcome, page=page, page_size=page_size, pagination=self.pagination
        )

    async def get_fundi(self, fundi_id: str) -> Fundi:
        return Fundi(id=fundi_id, name="Scripted")

    async def get_job(self, job_id: str) -> Job:
        return Job(id=job_id, title="Scripted")

    async def list_categories(self) -> list[str]:
        return ["Plumbing"]

    async def list_skills(self) -> list[str]:
        return ["Wiring"]

    async def list_locations(self) -> list[str]:
        return ["Arusha"]


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def sleeps() -> list[float]:
    """Delays requested by the retry policy, in order."""
    return []


@pytest.fixture
def retry(sleeps) -> RetryPolicy:
    """Retry policy that records its sleeps instead of waiting."""

    async def fake_sleep(delay: float) -> None:
        sleeps.append(delay)

    return RetryPolicy(sleep=fake_sleep)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep tests independent of the developer's FUNDI_* settings."""
    for name in (
        "FUNDI_API_BASE_URL",
        "FUNDI_FEEDS_SERVICE",
        "FUNDI_FEEDS_PAGE_SIZE",
        "FUNDI_FEEDS_TIMEOUT",
        "FUNDI_FEEDS_MAX_RETRIES",
        "FUNDI_FEEDS_CACHE_TTL",
        "FUNDI_FEEDS_DEDUPE",
        "FUNDI_API_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("FUNDI_FEEDS_CACHE_DIR", str(tmp_path / "cache"))
