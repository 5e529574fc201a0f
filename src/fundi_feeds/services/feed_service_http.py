"""
httpx-backed implementation of FeedService for the marketplace REST API.

List endpoints answer with an envelope::

    {"success": true, "message": "...", "fundis": [...], "pagination": {...}}

The envelope is validated here (``success`` flag present, entity list
present) and every failure is raised as a FeedError subclass carrying the
message the UI should show. Items inside the list are decoded leniently:
malformed ones become placeholders rather than failing the page.
"""

from typing import Any, Mapping

import httpx

from fundi_feeds.auth import AuthSession
from fundi_feeds.errors import (
    NETWORK_ERROR_MESSAGE,
    SERVER_ERROR_MESSAGE,
    UNAUTHORIZED_MESSAGE,
    ApplicationError,
    HttpStatusError,
    ResponseShapeError,
    TransportError,
)
from fundi_feeds.lib import clients, logs
from fundi_feeds.models.common import FeedKind, Pagination, RecordPage
from fundi_feeds.models.records import Fundi, Job
from fundi_feeds.services.decoding import decode_names, decode_record, decode_records
from fundi_feeds.services.feed_service import DEFAULT_PAGE_SIZE, FeedService

LOG = logs.logger(__file__)

DEFAULT_BASE_URL = "https://api.fundi.app/v1"


def _status_message(response: httpx.Response) -> str:
    """Pick the user-facing message for a non-2xx response."""
    if response.status_code == 401:
        return UNAUTHORIZED_MESSAGE
    if response.status_code >= 500:
        return SERVER_ERROR_MESSAGE
    try:
        body = response.json()
    except ValueError:
        return SERVER_ERROR_MESSAGE
    if isinstance(body, Mapping):
        message = body.get("message") or body.get("error")
        if isinstance(message, str) and message:
            return message
    return SERVER_ERROR_MESSAGE


class HttpFeedService(FeedService):
    """
    Feed service talking to the REST backend over httpx.

    The service owns its AsyncClient unless one is passed in; close it
    with ``aclose()`` or use the service as an async context manager.

    Attributes:
        base_url: Backend base URL.
        auth: Session whose token is sent as a bearer header.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        auth: AuthSession | None = None,
        timeout: float = clients.DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.auth = auth or AuthSession()
        self._owns_client = client is None
        self._client = client or clients.http_client(
            base_url, timeout=timeout, transport=transport
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def list_records(
        self,
        kind: FeedKind,
        params: Mapping[str, str] | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> RecordPage:
        page = max(page, 1)
        page_size = max(page_size, 1)
        query = {"page": str(page), "limit": str(page_size), **(params or {})}

        payload = await self._get_json(kind.path, query)
        items = payload.get(kind.list_key)
        if not isinstance(items, list):
            raise ResponseShapeError(
                f"Malformed response: missing '{kind.list_key}' list"
            )

        records = decode_records(kind, items)
        pagination = Pagination.from_payload(payload.get("pagination"))
        LOG.info(
            "Fetched %s page %d: %d records (total=%s)",
            kind.value,
            page,
            len(records),
            pagination.total,
        )
        return RecordPage(
            items=records, page=page, page_size=page_size, pagination=pagination
        )

    async def get_fundi(self, fundi_id: str) -> Fundi:
        payload = await self._get_json(f"{FeedKind.FUNDIS.path}/{fundi_id}")
        return decode_record(FeedKind.FUNDIS, self._detail(payload, "fundi"))

    async def get_job(self, job_id: str) -> Job:
        payload = await self._get_json(f"{FeedKind.JOBS.path}/{job_id}")
        return decode_record(FeedKind.JOBS, self._detail(payload, "job"))

    async def list_categories(self) -> list[str]:
        return await self._list_names("/categories", "categories")

    async def list_skills(self) -> list[str]:
        return await self._list_names("/skills", "skills")

    async def list_locations(self) -> list[str]:
        return await self._list_names("/locations", "locations")

    async def _list_names(self, path: str, key: str) -> list[str]:
        payload = await self._get_json(path)
        items = payload.get(key)
        if items is None:
            items = payload.get("data")
        if not isinstance(items, list):
            raise ResponseShapeError(f"Malformed response: missing '{key}' list")
        return decode_names(items)

    @staticmethod
    def _detail(payload: Mapping[str, Any], key: str) -> Mapping[str, Any]:
        record = payload.get(key)
        if record is None:
            record = payload.get("data")
        if not isinstance(record, Mapping):
            raise ResponseShapeError(f"Malformed response: missing '{key}' object")
        return record

    async def _get_json(
        self, path: str, params: Mapping[str, str] | None = None
    ) -> Mapping[str, Any]:
        """
        GET ``path`` and return the validated success envelope.

        Raises:
            TransportError: Timeout or connection failure.
            HttpStatusError: Non-2xx status.
            ResponseShapeError: Non-JSON body or missing ``success`` flag.
            ApplicationError: ``success`` is false.
        """
        LOG.debug("GET %s params=%s", path, dict(params or {}))
        try:
            response = await self._client.get(
                path, params=params, headers=self.auth.headers()
            )
        except httpx.TimeoutException as e:
            LOG.warning("GET %s timed out: %s", path, e)
            raise TransportError(f"Request timed out. {NETWORK_ERROR_MESSAGE}") from e
        except httpx.RequestError as e:
            LOG.warning("GET %s failed: %s", path, e)
            raise TransportError(NETWORK_ERROR_MESSAGE) from e

        if response.is_error:
            LOG.warning("GET %s returned HTTP %d", path, response.status_code)
            raise HttpStatusError(_status_message(response), response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise ResponseShapeError("Malformed response: body is not JSON") from e

        if not isinstance(payload, Mapping) or "success" not in payload:
            raise ResponseShapeError("Malformed response: missing success flag")
        if not payload["success"]:
            message = payload.get("message") or SERVER_ERROR_MESSAGE
            raise ApplicationError(str(message))
        return payload
