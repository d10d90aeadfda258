"""Tests for search-based identity resolution."""

from __future__ import annotations

import httpx
import pytest

from endpointmonitor import (
    AsyncIdentityResolver,
    IdentityResolver,
    ResourceKind,
    SearchMatch,
    pick_many,
    pick_one,
)
from endpointmonitor.exceptions import AmbiguityError, MatchErrorKind, ProtocolError


def _matches(*ids: int) -> list[SearchMatch]:
    return [SearchMatch(id=i, name=f"obj-{i}") for i in ids]


class TestPickOne:
    def test_single_match(self):
        assert pick_one(_matches(7)) == 7

    def test_no_match(self):
        with pytest.raises(AmbiguityError) as exc_info:
            pick_one([])
        assert exc_info.value.kind is MatchErrorKind.NO_MATCH

    @pytest.mark.parametrize("ids", [(1, 2), (3, 3), (5, 6, 7)])
    def test_several_matches(self, ids):
        with pytest.raises(AmbiguityError) as exc_info:
            pick_one(_matches(*ids))
        assert exc_info.value.kind is MatchErrorKind.AMBIGUOUS_MATCH
        assert exc_info.value.count == len(ids)

    def test_wide_identifier(self):
        assert pick_one(_matches(2**40)) == 2**40


class TestPickMany:
    def test_keeps_search_order(self):
        assert pick_many(_matches(9, 2, 5)) == [9, 2, 5]

    def test_empty(self):
        assert pick_many([]) == []

    def test_rejects_identifiers_beyond_32_bits(self):
        with pytest.raises(ProtocolError):
            pick_many(_matches(1, 2**31))


class TestResolveOne:
    def test_exactly_one(self, mock_api, client):
        mock_api.get("/api/checks/search").mock(
            return_value=httpx.Response(200, json=[{"id": 7, "name": "prod-east"}])
        )
        result = IdentityResolver(client).resolve_one(ResourceKind.CHECK, "prod-east")
        assert result.ok
        assert result.value == 7
        assert len(result.diagnostics) == 0

    def test_ambiguous(self, mock_api, client):
        mock_api.get("/api/checks/search").mock(
            return_value=httpx.Response(
                200, json=[{"id": 1, "name": "prod-east"}, {"id": 2, "name": "prod-west"}]
            )
        )
        result = IdentityResolver(client).resolve_one(ResourceKind.CHECK, "prod-")
        assert not result.ok
        assert result.value is None
        (error,) = result.diagnostics.errors
        assert error.summary == "None or more than one matching check found"
        assert error.attribute_path == "search"
        assert "2 matches" in error.detail

    def test_no_match(self, mock_api, client):
        mock_api.get("/api/host-groups/search").mock(
            return_value=httpx.Response(200, json=[])
        )
        result = IdentityResolver(client).resolve_one(ResourceKind.HOST_GROUP, "nope")
        assert result.value is None
        assert "0 matches" in result.diagnostics.errors[0].detail

    def test_transport_failure(self, mock_api, client):
        mock_api.get("/api/check-groups/search").mock(
            return_value=httpx.Response(401, json={"error": "bad key"})
        )
        result = IdentityResolver(client).resolve_one(ResourceKind.CHECK_GROUP, "x")
        assert result.value is None
        (error,) = result.diagnostics.errors
        assert error.summary == "Error searching check group"
        assert "bad key" in error.detail

    def test_each_search_is_a_fresh_snapshot(self, mock_api, client):
        mock_api.get("/api/proxy-hosts/search").mock(
            side_effect=[
                httpx.Response(200, json=[{"id": 3, "name": "px"}]),
                httpx.Response(200, json=[{"id": 3, "name": "px"}, {"id": 4, "name": "px2"}]),
            ]
        )
        resolver = IdentityResolver(client)
        assert resolver.resolve_one(ResourceKind.PROXY_HOST, "px").value == 3
        assert not resolver.resolve_one(ResourceKind.PROXY_HOST, "px").ok


class TestResolveMany:
    def test_order_preserved(self, mock_api, client):
        mock_api.get("/api/android-journey-common-steps/search").mock(
            return_value=httpx.Response(
                200, json=[{"id": 12, "name": "login"}, {"id": 4, "name": "logout"}]
            )
        )
        result = IdentityResolver(client).resolve_many(
            ResourceKind.ANDROID_JOURNEY_COMMON_STEP, "log"
        )
        assert result.value == [12, 4]

    def test_empty_is_not_an_error(self, mock_api, client):
        mock_api.get("/api/dashboard-groups/search").mock(
            return_value=httpx.Response(200, json=[])
        )
        result = IdentityResolver(client).resolve_many(ResourceKind.DASHBOARD_GROUP, "x")
        assert result.ok
        assert result.value == []
        assert len(result.diagnostics) == 0

    def test_transport_failure(self, mock_api, client):
        mock_api.get("/api/dashboard-groups/search").mock(
            side_effect=httpx.ConnectError("refused")
        )
        result = IdentityResolver(client).resolve_many(ResourceKind.DASHBOARD_GROUP, "x")
        assert result.value is None
        assert result.diagnostics.errors[0].summary == "Error searching dashboard group"


class TestAsyncResolver:
    @pytest.mark.asyncio
    async def test_resolve_one(self, mock_api, async_client):
        mock_api.get("/api/checks/search").mock(
            return_value=httpx.Response(200, json=[{"id": 7, "name": "prod-east"}])
        )
        result = await AsyncIdentityResolver(async_client).resolve_one(
            ResourceKind.CHECK, "prod-east"
        )
        assert result.value == 7
        await async_client.close()

    @pytest.mark.asyncio
    async def test_resolve_many(self, mock_api, async_client):
        mock_api.get("/api/web-journey-common-steps/search").mock(
            return_value=httpx.Response(200, json=[{"id": 1}, {"id": 2}, {"id": 3}])
        )
        result = await AsyncIdentityResolver(async_client).resolve_many(
            ResourceKind.WEB_JOURNEY_COMMON_STEP, "step"
        )
        assert result.value == [1, 2, 3]
        await async_client.close()

    @pytest.mark.asyncio
    async def test_ambiguous(self, mock_api, async_client):
        mock_api.get("/api/checks/search").mock(
            return_value=httpx.Response(200, json=[{"id": 1}, {"id": 2}])
        )
        result = await AsyncIdentityResolver(async_client).resolve_one(
            ResourceKind.CHECK, "prod-"
        )
        assert not result.ok
        await async_client.close()
