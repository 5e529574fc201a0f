"""Tests for FeedController and FeedsState."""

import asyncio

import pytest
from conftest import ScriptedFeedService, make_fundis

from fundi_feeds.auth import AuthSession
from fundi_feeds.config import FeedsConfig
from fundi_feeds.errors import (
    ApplicationError,
    AuthenticationRequiredError,
    HttpStatusError,
    TransportError,
)
from fundi_feeds.lib.retry import RetryPolicy
from fundi_feeds.models.common import FeedKind
from fundi_feeds.models.query import FilterName, QueryState
from fundi_feeds.services.feed_service_demo import DemoFeedService
from fundi_feeds.state import FeedController, FeedsState, LoadMode


def controller_for(service, retry, auth=None, query=None, **kwargs):
    return FeedController(
        FeedKind.FUNDIS,
        service,
        query or QueryState(),
        auth or AuthSession("token"),
        retry=retry,
        **kwargs,
    )


class TestPagination:
    @pytest.mark.asyncio
    async def test_full_then_short_page(self, retry):
        service = ScriptedFeedService(make_fundis(0, 15), make_fundis(15, 7))
        controller = controller_for(service, retry)

        assert await controller.refresh() is True
        assert len(controller.records) == 15
        assert controller.has_more is True

        assert await controller.load_more() is True
        assert len(controller.records) == 22
        assert controller.has_more is False
        assert [call[2] for call in service.calls] == [1, 2]

    @pytest.mark.asyncio
    async def test_load_more_at_end_makes_no_request(self, retry):
        service = ScriptedFeedService(make_fundis(0, 3))
        controller = controller_for(service, retry)
        await controller.refresh()
        assert await controller.load_more() is False
        assert len(service.calls) == 1

    @pytest.mark.asyncio
    async def test_refresh_replaces(self, retry):
        service = ScriptedFeedService(make_fundis(0, 15), make_fundis(50, 2))
        controller = controller_for(service, retry)
        await controller.refresh()
        await controller.refresh()
        assert [f.id for f in controller.records] == ["f-50", "f-51"]

    @pytest.mark.asyncio
    async def test_empty_state(self, retry):
        controller = controller_for(ScriptedFeedService([]), retry)
        await controller.refresh()
        assert controller.is_empty
        assert controller.has_more is False


class TestQueryChanges:
    @pytest.mark.asyncio
    async def test_filter_change_resets(self, retry):
        query = QueryState()
        service = ScriptedFeedService(make_fundis(0, 15), make_fundis(100, 4))
        controller = controller_for(service, retry, query=query)
        await controller.refresh()

        query.set_filter(FilterName.LOCATION, "Arusha")
        assert controller.records == []
        assert controller.accumulator.next_page == 1

        await controller.refresh()
        kind, params, page, _ = service.calls[-1]
        assert params == {"location": "Arusha"}
        assert page == 1

    @pytest.mark.asyncio
    async def test_repeated_filter_does_not_reset(self, retry):
        query = QueryState()
        service = ScriptedFeedService(make_fundis(0, 15))
        controller = controller_for(service, retry, query=query)
        query.set_filter(FilterName.MIN_RATING, 4.0)
        await controller.refresh()

        assert query.set_filter(FilterName.MIN_RATING, 4.0) is False
        assert len(controller.records) == 15
        assert controller.accumulator.next_page == 2

    @pytest.mark.asyncio
    async def test_result_for_old_query_discarded(self, retry):
        query = QueryState()
        service = ScriptedFeedService(make_fundis(0, 15), make_fundis(100, 3))
        service.gate = asyncio.Event()
        controller = controller_for(service, retry, query=query)

        task = asyncio.create_task(controller.refresh())
        await asyncio.sleep(0)
        query.set_search("tiles")
        assert await controller.refresh() is False
        service.gate.set()

        assert await task is True
        assert [f.id for f in controller.records] == ["f-100", "f-101", "f-102"]
        assert controller.loading is None
        assert controller.error is None
        _, params, page, _ = service.calls[-1]
        assert params == {"search": "tiles"}
        assert page == 1
        assert len(service.calls) == 2

    @pytest.mark.asyncio
    async def test_failure_for_old_query_ignored(self, retry):
        query = QueryState()
        service = ScriptedFeedService(RuntimeError("boom"), make_fundis(100, 2))
        service.gate = asyncio.Event()
        controller = controller_for(service, retry, query=query)

        task = asyncio.create_task(controller.refresh())
        await asyncio.sleep(0)
        query.set_filter(FilterName.LOCATION, "Mwanza")
        service.gate.set()

        assert await task is True
        assert controller.error is None
        assert [f.id for f in controller.records] == ["f-100", "f-101"]
        assert service.calls[-1][1] == {"location": "Mwanza"}


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_second_load_rejected_while_in_flight(self, retry):
        service = ScriptedFeedService(make_fundis(0, 15), make_fundis(15, 15))
        service.gate = asyncio.Event()
        controller = controller_for(service, retry)

        task = asyncio.create_task(controller.refresh())
        await asyncio.sleep(0)
        assert controller.is_loading
        assert controller.loading is LoadMode.REFRESH
        assert await controller.refresh() is False
        assert await controller.load_more() is False

        service.gate.set()
        assert await task is True
        assert len(service.calls) == 1

    @pytest.mark.asyncio
    async def test_result_after_dispose_discarded(self, retry):
        service = ScriptedFeedService(make_fundis(0, 15))
        service.gate = asyncio.Event()
        controller = controller_for(service, retry)

        task = asyncio.create_task(controller.refresh())
        await asyncio.sleep(0)
        controller.dispose()
        service.gate.set()

        assert await task is False
        assert controller.records == []
        assert await controller.refresh() is False


class TestErrors:
    @pytest.mark.asyncio
    async def test_unauthenticated_makes_no_request(self, retry):
        service = ScriptedFeedService()
        controller = controller_for(service, retry, auth=AuthSession())
        assert await controller.refresh() is False
        assert controller.error == "Please log in to view fundis"
        assert controller.visible_error == "Please log in to view fundis"
        assert service.calls == []

    @pytest.mark.asyncio
    async def test_error_keeps_records_and_cursor(self, retry, sleeps):
        failure = HttpStatusError("Something went wrong. Please try again", 500)
        service = ScriptedFeedService(
            make_fundis(0, 15), failure, failure, failure, make_fundis(15, 15)
        )
        controller = controller_for(service, retry)
        await controller.refresh()

        assert await controller.load_more() is False
        assert controller.error == "Something went wrong. Please try again"
        assert len(controller.records) == 15
        assert controller.accumulator.next_page == 2
        assert controller.visible_error is None
        assert controller.can_retry
        assert sleeps == [2.0, 4.0]

        assert await controller.retry() is True
        assert service.calls[-1][2] == 2
        assert len(controller.records) == 30
        assert controller.error is None

    @pytest.mark.asyncio
    async def test_retry_repeats_failed_refresh(self, retry, sleeps):
        failure = TransportError("Please check your internet connection")
        service = ScriptedFeedService(
            make_fundis(0, 15), failure, failure, failure, make_fundis(200, 15)
        )
        controller = controller_for(service, retry)
        await controller.refresh()

        assert await controller.refresh() is False
        assert controller.failed_mode is LoadMode.REFRESH
        assert len(controller.records) == 15

        assert await controller.retry() is True
        assert service.calls[-1][2] == 1
        assert [f.id for f in controller.records][:2] == ["f-200", "f-201"]
        assert len(controller.records) == 15
        assert controller.failed_mode is None

    @pytest.mark.asyncio
    async def test_retry_after_failed_load_more_appends(self, retry, sleeps):
        failure = TransportError("x")
        service = ScriptedFeedService(
            make_fundis(0, 15), failure, failure, failure, make_fundis(15, 5)
        )
        controller = controller_for(service, retry)
        await controller.refresh()
        await controller.load_more()
        assert controller.failed_mode is LoadMode.APPEND

        assert await controller.retry() is True
        assert service.calls[-1][2] == 2
        assert len(controller.records) == 20

    @pytest.mark.asyncio
    async def test_retry_after_login_refreshes(self, retry):
        auth = AuthSession()
        service = ScriptedFeedService(make_fundis(0, 4))
        controller = controller_for(service, retry, auth=auth)
        await controller.refresh()
        assert controller.failed_mode is LoadMode.REFRESH

        auth.login("token")
        assert await controller.retry() is True
        assert len(controller.records) == 4

    @pytest.mark.asyncio
    async def test_error_on_empty_list_is_visible(self, retry):
        service = ScriptedFeedService(*[TransportError("Please check your internet connection")] * 3)
        controller = controller_for(service, retry)
        await controller.refresh()
        assert controller.visible_error == "Please check your internet connection"
        assert not controller.is_empty

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failures(self, retry):
        service = ScriptedFeedService(TransportError("x"), make_fundis(0, 4))
        controller = controller_for(service, retry)
        assert await controller.refresh() is True
        assert controller.error is None
        assert len(controller.records) == 4

    @pytest.mark.asyncio
    async def test_unexpected_error_not_retried(self, retry, sleeps):
        service = ScriptedFeedService(RuntimeError("boom"))
        controller = controller_for(service, retry)
        assert await controller.refresh() is False
        assert controller.error == "Failed to load fundis: boom"
        assert len(service.calls) == 1
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_slow_service_times_out(self):
        class HangingService(ScriptedFeedService):
            async def list_records(self, *args, **kwargs):
                await asyncio.Event().wait()

        controller = controller_for(
            HangingService(), RetryPolicy(max_attempts=1), timeout=0.01
        )
        assert await controller.refresh() is False
        assert "timed out" in controller.error


@pytest.fixture
def demo_state(retry):
    state = FeedsState(
        DemoFeedService(),
        auth=AuthSession("demo"),
        config=FeedsConfig(),
        retry=retry,
    )
    yield state
    state.dispose()


class TestFeedsState:
    @pytest.mark.asyncio
    async def test_initialize(self, demo_state):
        await demo_state.initialize()
        assert [f.id for f in demo_state.fundis.records] == ["f-100", "f-101", "f-102", "f-103"]
        assert len(demo_state.jobs.records) == 3
        assert demo_state.payments.records == []
        assert "Plumbing" in demo_state.categories
        assert "Arusha" in demo_state.locations
        assert demo_state.is_loading_metadata is False

    @pytest.mark.asyncio
    async def test_search_filters_and_remembers(self, demo_state):
        await demo_state.initialize()
        await demo_state.search("plumb")
        assert [f.id for f in demo_state.fundis.records] == ["f-100"]
        assert [j.id for j in demo_state.jobs.records] == ["j-200"]
        assert demo_state.recent_searches.terms == ["plumb"]

    @pytest.mark.asyncio
    async def test_filters_apply_per_feed(self, demo_state):
        demo_state.query.update({FilterName.MIN_RATING: 4.4, FilterName.IS_URGENT: True})
        await demo_state.apply_filters()
        assert [f.id for f in demo_state.fundis.records] == ["f-100", "f-101"]
        assert [j.id for j in demo_state.jobs.records] == ["j-201"]

    @pytest.mark.asyncio
    async def test_clear_filters_resets_every_feed(self, demo_state):
        await demo_state.initialize()
        await demo_state.payments.refresh()
        demo_state.clear_filters()
        assert all(c.records == [] for c in demo_state.controllers)

    @pytest.mark.asyncio
    async def test_details(self, demo_state):
        fundi = await demo_state.get_fundi_profile("f-101")
        assert fundi.name == "Neema Kweka"
        job = await demo_state.get_job_details("j-202")
        assert job.customer_name == "Grace Mollel"

    @pytest.mark.asyncio
    async def test_missing_detail(self, demo_state, sleeps):
        with pytest.raises(ApplicationError) as exc_info:
            await demo_state.get_job_details("j-999")
        assert exc_info.value.message == "Job not found"
        assert sleeps == [2.0, 4.0]

    @pytest.mark.asyncio
    async def test_details_require_login(self, demo_state):
        demo_state.auth.logout()
        with pytest.raises(AuthenticationRequiredError) as exc_info:
            await demo_state.get_fundi_profile("f-100")
        assert exc_info.value.message == "Please log in to view fundis"

    @pytest.mark.asyncio
    async def test_metadata_failure_is_reported(self, retry, monkeypatch):
        async def offline():
            raise TransportError("Please check your internet connection")

        service = DemoFeedService()
        monkeypatch.setattr(service, "list_skills", offline)
        state = FeedsState(service, auth=AuthSession("demo"), retry=retry)
        await state.load_metadata()
        assert state.skills == []
        assert "Plumbing" in state.categories
        assert state.metadata_error == "skills: Please check your internet connection"
        state.dispose()

    @pytest.mark.asyncio
    async def test_metadata_error_cleared_on_success(self, demo_state):
        await demo_state.load_metadata()
        assert demo_state.metadata_error is None
