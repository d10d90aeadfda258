"""Tests for the client: auth, error mapping, generic entry points, lifecycle."""

from __future__ import annotations

import asyncio

import httpx
import pytest
import respx
from pydantic import SecretStr

import endpointmonitor
from endpointmonitor import ConnectionConfig, ResourceKind
from endpointmonitor.exceptions import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ProtocolError,
    RateLimitError,
    ServerError,
    TransportError,
    ValidationError,
)

BASE_URL = "http://test-api.endpointmonitor.local"


class TestAuth:
    def test_api_key_header_sent(self, mock_api, client):
        route = mock_api.get("/api/check-groups/search").mock(
            return_value=httpx.Response(200, json=[])
        )
        client.search(ResourceKind.CHECK_GROUP, "prod")
        assert route.calls[0].request.headers["x-api-key"] == "epm_test_key"

    def test_user_agent_override(self, mock_api, config):
        route = mock_api.get("/api/url-checks/1").mock(
            return_value=httpx.Response(200, json={"id": 1})
        )
        with endpointmonitor.Client(config, user_agent="ci-runner/1.0") as c:
            c.get(ResourceKind.URL_CHECK, 1)
        assert route.calls[0].request.headers["user-agent"] == "ci-runner/1.0"

    def test_base_url_with_path_prefix(self):
        cfg = ConnectionConfig(url="http://epm.local/monitor", key=SecretStr("k"))
        with respx.mock() as router:
            route = router.get("http://epm.local/monitor/api/host-groups/3").mock(
                return_value=httpx.Response(200, json={"id": 3})
            )
            with endpointmonitor.Client(cfg) as c:
                resource = c.get(ResourceKind.HOST_GROUP, 3)
        assert route.called
        assert resource.id == 3


class TestSearch:
    def test_search_sends_text(self, mock_api, client):
        route = mock_api.get("/api/checks/search").mock(
            return_value=httpx.Response(200, json=[{"id": 7, "name": "prod-east"}])
        )
        matches = client.search(ResourceKind.CHECK, "prod-east")
        assert "search=prod-east" in str(route.calls[0].request.url)
        assert matches[0].id == 7
        assert matches[0].display_name == "prod-east"

    def test_search_no_matches_is_empty(self, mock_api, client):
        mock_api.get("/api/checks/search").mock(
            return_value=httpx.Response(200, json=[])
        )
        assert client.search(ResourceKind.CHECK, "nothing") == []

    def test_search_wrapped_results(self, mock_api, client):
        mock_api.get("/api/proxy-hosts/search").mock(
            return_value=httpx.Response(
                200, json={"results": [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]}
            )
        )
        matches = client.search(ResourceKind.PROXY_HOST, "x")
        assert [m.id for m in matches] == [1, 2]

    def test_search_malformed_payload(self, mock_api, client):
        mock_api.get("/api/proxy-hosts/search").mock(
            return_value=httpx.Response(200, json="oops")
        )
        with pytest.raises(ProtocolError):
            client.search(ResourceKind.PROXY_HOST, "x")

    def test_search_only_on_searchable_kinds(self, client):
        with pytest.raises(ValueError):
            client.search(ResourceKind.URL_CHECK, "x")

    def test_crud_rejected_on_search_only_kind(self, client):
        with pytest.raises(ValueError):
            client.create(ResourceKind.CHECK, {"name": "x"})


class TestErrorMapping:
    @pytest.mark.parametrize(
        "status, exc_cls",
        [
            (400, ValidationError),
            (401, AuthenticationError),
            (403, ForbiddenError),
            (404, NotFoundError),
            (409, ConflictError),
            (500, ServerError),
            (503, ServerError),
            (418, TransportError),
        ],
    )
    def test_status_mapping(self, mock_api, client, status, exc_cls):
        mock_api.get("/api/dns-checks/5").mock(
            return_value=httpx.Response(status, json={"error": "nope"})
        )
        with pytest.raises(exc_cls) as exc_info:
            client.get(ResourceKind.DNS_CHECK, 5)
        assert exc_info.value.status_code == status
        assert str(exc_info.value) == "nope"

    def test_429_raises_rate_limit_error(self, mock_api, client):
        mock_api.get("/api/dns-checks/5").mock(
            return_value=httpx.Response(
                429, json={"error": "rate limited"}, headers={"Retry-After": "5"}
            )
        )
        with pytest.raises(RateLimitError) as exc_info:
            client.get(ResourceKind.DNS_CHECK, 5)
        assert exc_info.value.retry_after == 5.0

    def test_auth_errors_are_transport_errors(self):
        assert issubclass(AuthenticationError, TransportError)
        assert issubclass(NotFoundError, TransportError)

    def test_server_error_is_not_retried(self, mock_api, client):
        route = mock_api.get("/api/dns-checks/5").mock(
            return_value=httpx.Response(503, json={"error": "busy"})
        )
        with pytest.raises(ServerError):
            client.get(ResourceKind.DNS_CHECK, 5)
        assert route.call_count == 1

    def test_connection_failure(self, mock_api, client):
        mock_api.get("/api/dns-checks/5").mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(TransportError, match="Connection failed"):
            client.get(ResourceKind.DNS_CHECK, 5)

    def test_invalid_json(self, mock_api, client):
        mock_api.get("/api/dns-checks/5").mock(
            return_value=httpx.Response(200, content=b"<html>")
        )
        with pytest.raises(ProtocolError):
            client.get(ResourceKind.DNS_CHECK, 5)

    def test_missing_id_in_payload(self, mock_api, client):
        mock_api.get("/api/dns-checks/5").mock(
            return_value=httpx.Response(200, json={"name": "no id"})
        )
        with pytest.raises(ProtocolError):
            client.get(ResourceKind.DNS_CHECK, 5)


class TestContextManager:
    def test_sync_context_manager(self, mock_api, config):
        mock_api.get("/api/check-hosts/search").mock(
            return_value=httpx.Response(200, json=[])
        )
        with endpointmonitor.Client(config) as c:
            result = c.search(ResourceKind.CHECK_HOST, "db")
        assert result == []

    @pytest.mark.asyncio
    async def test_async_context_manager(self, mock_api, config):
        mock_api.get("/api/check-hosts/search").mock(
            return_value=httpx.Response(200, json=[{"id": 4, "name": "db"}])
        )
        async with endpointmonitor.AsyncClient(config) as c:
            result = await c.search(ResourceKind.CHECK_HOST, "db")
        assert result[0].id == 4


class TestAsyncClient:
    @pytest.mark.asyncio
    async def test_async_get(self, mock_api, async_client):
        mock_api.get("/api/ping-checks/9").mock(
            return_value=httpx.Response(200, json={"id": 9, "name": "gw"})
        )
        resource = await async_client.get(ResourceKind.PING_CHECK, 9)
        assert resource.attributes == {"name": "gw"}
        await async_client.close()

    @pytest.mark.asyncio
    async def test_async_error_mapping(self, mock_api, async_client):
        mock_api.delete("/api/ping-checks/9").mock(
            return_value=httpx.Response(404, json={"error": "gone"})
        )
        with pytest.raises(NotFoundError):
            await async_client.delete(ResourceKind.PING_CHECK, 9)
        await async_client.close()

    @pytest.mark.asyncio
    async def test_cancellation_aborts_in_flight_call(self, config):
        started = asyncio.Event()

        async def stall(request):
            started.set()
            await asyncio.sleep(10)
            return httpx.Response(200, json={"id": 9})

        with respx.mock(base_url=BASE_URL, assert_all_called=False) as router:
            router.get("/api/ping-checks/9").mock(side_effect=stall)
            async with endpointmonitor.AsyncClient(config) as c:
                task = asyncio.create_task(c.get(ResourceKind.PING_CHECK, 9))
                await started.wait()
                task.cancel()
                with pytest.raises(asyncio.CancelledError):
                    await task
