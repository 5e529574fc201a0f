"""
Feed state containers.

FeedController drives one entity feed (fundis, jobs or payments): it
checks the auth gate, fetches through the retry policy, merges pages into
its accumulator and records the message of the last failure. FeedsState
bundles the controllers of one screen with its QueryState, metadata and
recent searches, the way a screen-level provider would.

State machine of a controller::

    Idle -> Loading(refresh | append) -> Idle(success) | Idle(error)

While a fetch is in flight every further refresh or load-more is rejected
rather than queued. Results that arrive after ``dispose()`` are discarded;
results for a query that changed meanwhile are discarded and the first
page of the current query is fetched in their place.
"""

import asyncio
from enum import Enum
from typing import Awaitable, Callable, Generic, TypeVar

from fundi_feeds.accumulator import PageAccumulator
from fundi_feeds.auth import AuthSession, login_required_message
from fundi_feeds.config import FeedsConfig
from fundi_feeds.errors import AuthenticationRequiredError, FeedError, TransportError
from fundi_feeds.lib import logs
from fundi_feeds.lib.retry import RetryPolicy
from fundi_feeds.metadata import CATEGORIES, LOCATIONS, SKILLS, MetadataStore
from fundi_feeds.models.common import FeedKind, RecordPage
from fundi_feeds.models.query import QueryState
from fundi_feeds.models.records import Fundi, Job, Payment
from fundi_feeds.recent_searches import RecentSearches
from fundi_feeds.services.feed_service import DEFAULT_PAGE_SIZE, FeedService

LOG = logs.logger(__file__)

R = TypeVar("R")
T = TypeVar("T")


class LoadMode(str, Enum):
    REFRESH = "refresh"
    APPEND = "append"


class FeedController(Generic[R]):
    """
    Loading state of one paginated feed.

    Attributes:
        kind: The feed this controller reads.
        query: Shared search/filter state; changes reset this feed.
        accumulator: Records fetched so far and the page cursor.
        error: Message of the last failed load, if any.
        failed_mode: Which load (refresh or append) produced ``error``.
        loading: Mode of the fetch in flight, or None when idle.
    """

    def __init__(
        self,
        kind: FeedKind,
        service: FeedService,
        query: QueryState,
        auth: AuthSession,
        retry: RetryPolicy | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        timeout: float = 30.0,
        dedupe: bool = True,
    ) -> None:
        self.kind = kind
        self.query = query
        self.auth = auth
        self.page_size = page_size
        self.timeout = timeout
        self.accumulator: PageAccumulator[R] = PageAccumulator(dedupe=dedupe)
        self.error: str | None = None
        self.loading: LoadMode | None = None
        self.failed_mode: LoadMode | None = None
        self._service = service
        self._retry = retry or RetryPolicy()
        self._active = True
        self._unsubscribe = query.subscribe(self._on_query_changed)

    @property
    def records(self) -> list[R]:
        return self.accumulator.records

    @property
    def has_more(self) -> bool:
        return self.accumulator.has_more

    @property
    def is_loading(self) -> bool:
        return self.loading is LoadMode.REFRESH

    @property
    def is_loading_more(self) -> bool:
        return self.loading is LoadMode.APPEND

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def is_empty(self) -> bool:
        """Check if the empty state should be shown."""
        return self.loading is None and self.error is None and self.accumulator.is_empty

    @property
    def visible_error(self) -> str | None:
        """The error to display; only shown while there is nothing else to show."""
        return self.error if self.accumulator.is_empty else None

    @property
    def can_retry(self) -> bool:
        return self.error is not None

    async def refresh(self) -> bool:
        """
        Fetch the first page and replace the list with it.

        Returns:
            True if new records were applied.
        """
        return await self._load(LoadMode.REFRESH)

    async def load_more(self) -> bool:
        """
        Fetch the next page and append it.

        Returns:
            True if the page was applied; False when there is nothing more
            to load, another fetch is in flight, or the fetch failed.
        """
        if not self.accumulator.has_more:
            return False
        return await self._load(LoadMode.APPEND)

    async def retry(self) -> bool:
        """
        Repeat the load that failed.

        Without a recorded failure, refreshes an empty list and otherwise
        loads the next page.
        """
        mode = self.failed_mode
        if mode is None:
            mode = LoadMode.REFRESH if self.accumulator.is_empty else LoadMode.APPEND
        if mode is LoadMode.REFRESH:
            return await self.refresh()
        return await self.load_more()

    def reset(self) -> None:
        """Forget all records and errors and rewind to the first page."""
        self.accumulator.reset()
        self.error = None
        self.failed_mode = None

    def dispose(self) -> None:
        """Stop applying results; called when the owning screen goes away."""
        self._active = False
        self._unsubscribe()

    def _on_query_changed(self, query: QueryState) -> None:
        LOG.debug("%s query changed (%s), resetting", self.kind.value, query.describe())
        self.reset()

    def _is_current(self, generation: int) -> bool:
        return self._active and self.accumulator.generation == generation

    async def _fetch_page(self, params: dict[str, str], page: int) -> RecordPage:
        try:
            return await asyncio.wait_for(
                self._service.list_records(self.kind, params, page, self.page_size),
                self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"Loading {self.kind.label} timed out after {self.timeout:.0f}s"
            ) from e

    async def _load(self, mode: LoadMode) -> bool:
        if not self._active:
            return False
        if self.loading is not None:
            LOG.debug(
                "%s %s rejected, %s in flight", self.kind.value, mode.value, self.loading.value
            )
            return False
        if not self.auth.is_authenticated:
            self.error = login_required_message(self.kind.label)
            self.failed_mode = mode
            LOG.info("%s %s skipped: not authenticated", self.kind.value, mode.value)
            return False

        page = 1 if mode is LoadMode.REFRESH else self.accumulator.next_page
        params = self.query.to_params(self.kind)
        generation = self.accumulator.generation

        self.loading = mode
        LOG.info(
            "Load started - %s %s page:%d length:%d",
            self.kind.value,
            mode.value,
            page,
            len(self.accumulator),
        )
        failure: str | None = None
        try:
            result = await self._retry.run(lambda: self._fetch_page(params, page))
        except FeedError as e:
            LOG.error("Failed to load %s: %s", self.kind.value, e.message)
            failure = e.message
        except Exception as e:
            LOG.error("Failed to load %s: %s", self.kind.value, e, exc_info=True)
            failure = f"Failed to load {self.kind.label}: {e}"
        finally:
            self.loading = None

        if not self._is_current(generation):
            return await self._reload_current(page)
        if failure is not None:
            self.error = failure
            self.failed_mode = mode
            return False

        self.error = None
        self.failed_mode = None
        if mode is LoadMode.REFRESH:
            self.accumulator.replace(result)
        else:
            self.accumulator.append(result)
        LOG.info(
            "Load complete - %s has_more:%s length:%d",
            self.kind.value,
            self.accumulator.has_more,
            len(self.accumulator),
        )
        return True

    async def _reload_current(self, stale_page: int) -> bool:
        """
        Drop the outcome of a fetch made for an outdated query.

        Loads issued while that fetch was in flight were rejected, so the
        first page of the current query is fetched now instead.
        """
        LOG.info("Discarding stale %s page %d", self.kind.value, stale_page)
        if not self._active:
            return False
        return await self._load(LoadMode.REFRESH)


class FeedsState:
    """
    State of the feeds screen: query, per-feed controllers and metadata.

    Every collaborator is injected; nothing is looked up globally, so
    tests can pass fakes for the service, auth session or storage.

    Attributes:
        query: Search/filter/sort state shared by the feeds.
        fundis: Fundi feed controller.
        jobs: Job feed controller.
        payments: Payment feed controller.
        metadata: Cached categories/skills/locations.
        metadata_error: Why the last metadata load came back incomplete, if it did.
        recent_searches: Persisted recent search terms.
    """

    def __init__(
        self,
        service: FeedService,
        auth: AuthSession | None = None,
        config: FeedsConfig | None = None,
        metadata: MetadataStore | None = None,
        recent_searches: RecentSearches | None = None,
        retry: RetryPolicy | None = None,
    ) -> None:
        config = config or FeedsConfig()
        self.auth = auth or AuthSession(config.api_token)
        self.query = QueryState()
        self._service = service
        self._retry = retry or RetryPolicy(max_attempts=config.max_retries)

        def controller(kind: FeedKind) -> FeedController:
            return FeedController(
                kind,
                service,
                self.query,
                self.auth,
                retry=self._retry,
                page_size=config.page_size,
                timeout=config.timeout,
                dedupe=config.dedupe,
            )

        self.fundis: FeedController[Fundi] = controller(FeedKind.FUNDIS)
        self.jobs: FeedController[Job] = controller(FeedKind.JOBS)
        self.payments: FeedController[Payment] = controller(FeedKind.PAYMENTS)
        self.metadata = metadata or MetadataStore(service, ttl=config.cache_ttl)
        self.recent_searches = recent_searches or RecentSearches()

        self.categories: list[str] = []
        self.skills: list[str] = []
        self.locations: list[str] = []
        self.is_loading_metadata = False
        self.metadata_error: str | None = None

    @property
    def controllers(self) -> tuple[FeedController, ...]:
        return (self.fundis, self.jobs, self.payments)

    async def initialize(self) -> None:
        """Load the first fundi and job pages and the metadata together."""
        await asyncio.gather(
            self.fundis.refresh(), self.jobs.refresh(), self.load_metadata()
        )

    async def load_metadata(self, force: bool = False) -> None:
        self.is_loading_metadata = True
        try:
            lists = await self.metadata.load_all(force=force)
        finally:
            self.is_loading_metadata = False
        self.categories = lists[CATEGORIES]
        self.skills = lists[SKILLS]
        self.locations = lists[LOCATIONS]
        errors = self.metadata.errors
        self.metadata_error = (
            "; ".join(f"{key}: {message}" for key, message in errors.items()) or None
        )

    async def apply_filters(self) -> None:
        """Reload the fundi and job feeds for the current query."""
        await asyncio.gather(self.fundis.refresh(), self.jobs.refresh())

    async def search(self, text: str) -> None:
        """Set the search text, remember it, and reload the feeds."""
        self.query.set_search(text)
        if text and text.strip():
            self.recent_searches.add(text)
        await self.apply_filters()

    def clear_filters(self) -> None:
        self.query.clear()

    async def get_fundi_profile(self, fundi_id: str) -> Fundi:
        """
        Fetch one fundi's full profile.

        Raises:
            AuthenticationRequiredError: When nobody is logged in.
            FeedError: When the lookup fails after retries.
        """
        return await self._detail(FeedKind.FUNDIS, lambda: self._service.get_fundi(fundi_id))

    async def get_job_details(self, job_id: str) -> Job:
        """Fetch one job's details; raises like get_fundi_profile."""
        return await self._detail(FeedKind.JOBS, lambda: self._service.get_job(job_id))

    def dispose(self) -> None:
        for controller in self.controllers:
            controller.dispose()

    async def _detail(self, kind: FeedKind, fetch: Callable[[], Awaitable[T]]) -> T:
        if not self.auth.is_authenticated:
            raise AuthenticationRequiredError(login_required_message(kind.label))
        return await self._retry.run(fetch)
