"""Tests for HttpFeedService using httpx.MockTransport."""

import httpx
import pytest

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
from fundi_feeds.models.common import FeedKind
from fundi_feeds.models.records import Fundi
from fundi_feeds.services.feed_service_http import HttpFeedService

BASE_URL = "https://api.test/v1"


def service_for(handler, token="secret"):
    return HttpFeedService(
        base_url=BASE_URL,
        auth=AuthSession(token),
        transport=httpx.MockTransport(handler),
    )


def fundi_items(count):
    return [{"id": f"f-{n}", "full_name": f"Fundi {n}"} for n in range(count)]


class TestListRecords:
    @pytest.mark.asyncio
    async def test_request_and_decoding(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "success": True,
                    "fundis": fundi_items(15),
                    "pagination": {"hasNextPage": True, "totalCount": 40},
                },
            )

        async with service_for(handler) as service:
            page = await service.list_fundis({"location": "Arusha"}, page=2)

        request = seen[0]
        assert request.url.path == "/v1/fundis"
        assert request.url.params["page"] == "2"
        assert request.url.params["limit"] == "15"
        assert request.url.params["location"] == "Arusha"
        assert request.headers["Authorization"] == "Bearer secret"
        assert len(page.items) == 15
        assert page.items[0].name == "Fundi 0"
        assert page.has_more is True
        assert page.total == 40

    @pytest.mark.asyncio
    async def test_malformed_item_becomes_placeholder(self):
        items = fundi_items(3)
        items[1]["rating"] = "n/a"

        def handler(request):
            return httpx.Response(200, json={"success": True, "fundis": items})

        async with service_for(handler) as service:
            page = await service.list_records(FeedKind.FUNDIS)

        assert len(page.items) == 3
        assert page.items[1] == Fundi.empty()

    @pytest.mark.asyncio
    async def test_missing_list(self):
        def handler(request):
            return httpx.Response(200, json={"success": True, "data": []})

        async with service_for(handler) as service:
            with pytest.raises(ResponseShapeError):
                await service.list_jobs()

    @pytest.mark.asyncio
    async def test_application_error(self):
        def handler(request):
            return httpx.Response(200, json={"success": False, "message": "Account suspended"})

        async with service_for(handler) as service:
            with pytest.raises(ApplicationError) as exc_info:
                await service.list_payments()
        assert exc_info.value.message == "Account suspended"

    @pytest.mark.asyncio
    async def test_missing_success_flag(self):
        def handler(request):
            return httpx.Response(200, json={"fundis": []})

        async with service_for(handler) as service:
            with pytest.raises(ResponseShapeError):
                await service.list_fundis()

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>maintenance</html>")

        async with service_for(handler) as service:
            with pytest.raises(ResponseShapeError):
                await service.list_fundis()


class TestErrorMapping:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, body, message",
        [
            (401, {"message": "token expired"}, UNAUTHORIZED_MESSAGE),
            (500, {"message": "stack trace"}, SERVER_ERROR_MESSAGE),
            (503, None, SERVER_ERROR_MESSAGE),
            (422, {"message": "Invalid filter"}, "Invalid filter"),
            (404, {"error": "Not here"}, "Not here"),
        ],
    )
    async def test_status_messages(self, status, body, message):
        def handler(request):
            if body is None:
                return httpx.Response(status, text="unavailable")
            return httpx.Response(status, json=body)

        async with service_for(handler) as service:
            with pytest.raises(HttpStatusError) as exc_info:
                await service.list_fundis()
        assert exc_info.value.status_code == status
        assert exc_info.value.message == message

    @pytest.mark.asyncio
    async def test_connection_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with service_for(handler) as service:
            with pytest.raises(TransportError) as exc_info:
                await service.list_fundis()
        assert exc_info.value.message == NETWORK_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        async with service_for(handler) as service:
            with pytest.raises(TransportError) as exc_info:
                await service.list_fundis()
        assert "timed out" in exc_info.value.message


class TestDetailsAndMetadata:
    @pytest.mark.asyncio
    async def test_get_fundi(self):
        def handler(request):
            assert request.url.path == "/v1/fundis/f-7"
            return httpx.Response(
                200, json={"success": True, "fundi": {"id": "f-7", "name": "Saidi"}}
            )

        async with service_for(handler) as service:
            fundi = await service.get_fundi("f-7")
        assert fundi.name == "Saidi"

    @pytest.mark.asyncio
    async def test_get_job_from_data_key(self):
        def handler(request):
            return httpx.Response(
                200, json={"success": True, "data": {"id": "j-9", "title": "Fix gate"}}
            )

        async with service_for(handler) as service:
            job = await service.get_job("j-9")
        assert job.title == "Fix gate"

    @pytest.mark.asyncio
    async def test_metadata_lists(self):
        def handler(request):
            if request.url.path.endswith("/categories"):
                return httpx.Response(
                    200,
                    json={"success": True, "categories": [{"id": 1, "name": "Plumbing"}]},
                )
            return httpx.Response(200, json={"success": True, "data": ["Arusha", "Mwanza"]})

        async with service_for(handler) as service:
            assert await service.list_categories() == ["Plumbing"]
            assert await service.list_locations() == ["Arusha", "Mwanza"]

    @pytest.mark.asyncio
    async def test_no_token_sends_no_header(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"success": True, "skills": []})

        async with service_for(handler, token=None) as service:
            await service.list_skills()
        assert "Authorization" not in seen[0].headers
