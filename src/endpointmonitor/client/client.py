"""EndPointMonitor API client - sync and async variants."""

from __future__ import annotations

from typing import Any

from ..config import ConnectionConfig
from ..kinds import ResourceKind
from ._transport import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, AsyncTransport, SyncTransport
from .models import RemoteResource, SearchMatch
from .resources.kind import AsyncKindResource, KindResource


class Client:
    """Synchronous client for the EndPointMonitor REST API.

    The client holds nothing mutable besides the connection pool, so one
    instance can serve many resource instances concurrently.

    Usage::

        config = resolve_config("https://epm.example.com", "key").unwrap()
        with Client(config) as client:
            matches = client.check_groups.search("prod-")
    """

    def __init__(
        self,
        config: ConnectionConfig,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.config = config
        self._transport = SyncTransport(config, timeout=timeout, user_agent=user_agent)
        self._resources = {kind: KindResource(self._transport, kind) for kind in ResourceKind}

        self.checks = self._resources[ResourceKind.CHECK]
        self.url_checks = self._resources[ResourceKind.URL_CHECK]
        self.dns_checks = self._resources[ResourceKind.DNS_CHECK]
        self.certificate_checks = self._resources[ResourceKind.CERTIFICATE_CHECK]
        self.ping_checks = self._resources[ResourceKind.PING_CHECK]
        self.socket_checks = self._resources[ResourceKind.SOCKET_CHECK]
        self.android_journey_checks = self._resources[ResourceKind.ANDROID_JOURNEY_CHECK]
        self.web_journey_checks = self._resources[ResourceKind.WEB_JOURNEY_CHECK]
        self.android_journey_common_steps = self._resources[ResourceKind.ANDROID_JOURNEY_COMMON_STEP]
        self.web_journey_common_steps = self._resources[ResourceKind.WEB_JOURNEY_COMMON_STEP]
        self.check_groups = self._resources[ResourceKind.CHECK_GROUP]
        self.check_hosts = self._resources[ResourceKind.CHECK_HOST]
        self.dashboard_groups = self._resources[ResourceKind.DASHBOARD_GROUP]
        self.host_groups = self._resources[ResourceKind.HOST_GROUP]
        self.proxy_hosts = self._resources[ResourceKind.PROXY_HOST]
        self.maintenance_periods = self._resources[ResourceKind.MAINTENANCE_PERIOD]

    def resource(self, kind: ResourceKind) -> KindResource:
        return self._resources[kind]

    # -- Generic entry points --------------------------------------------------

    def search(self, kind: ResourceKind, text: str) -> list[SearchMatch]:
        """Free-text search; an empty list means no matches."""
        return self.resource(kind).search(text)

    def create(self, kind: ResourceKind, attributes: dict[str, Any]) -> RemoteResource:
        return self.resource(kind).create(attributes)

    def get(self, kind: ResourceKind, id: int) -> RemoteResource:
        """Fetch one object. Raises ``NotFoundError`` if it is gone."""
        return self.resource(kind).get(id)

    def update(
        self, kind: ResourceKind, id: int, attributes: dict[str, Any]
    ) -> RemoteResource:
        return self.resource(kind).update(id, attributes)

    def delete(self, kind: ResourceKind, id: int) -> None:
        """Delete one object. Raises ``NotFoundError`` if it is already gone."""
        self.resource(kind).delete(id)

    # -- Lifecycle -------------------------------------------------------------

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()


class AsyncClient:
    """Asynchronous client for the EndPointMonitor REST API.

    Usage::

        async with AsyncClient(config) as client:
            matches = await client.check_groups.search("prod-")
    """

    def __init__(
        self,
        config: ConnectionConfig,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.config = config
        self._transport = AsyncTransport(config, timeout=timeout, user_agent=user_agent)
        self._resources = {
            kind: AsyncKindResource(self._transport, kind) for kind in ResourceKind
        }

        self.checks = self._resources[ResourceKind.CHECK]
        self.url_checks = self._resources[ResourceKind.URL_CHECK]
        self.dns_checks = self._resources[ResourceKind.DNS_CHECK]
        self.certificate_checks = self._resources[ResourceKind.CERTIFICATE_CHECK]
        self.ping_checks = self._resources[ResourceKind.PING_CHECK]
        self.socket_checks = self._resources[ResourceKind.SOCKET_CHECK]
        self.android_journey_checks = self._resources[ResourceKind.ANDROID_JOURNEY_CHECK]
        self.web_journey_checks = self._resources[ResourceKind.WEB_JOURNEY_CHECK]
        self.android_journey_common_steps = self._resources[ResourceKind.ANDROID_JOURNEY_COMMON_STEP]
        self.web_journey_common_steps = self._resources[ResourceKind.WEB_JOURNEY_COMMON_STEP]
        self.check_groups = self._resources[ResourceKind.CHECK_GROUP]
        self.check_hosts = self._resources[ResourceKind.CHECK_HOST]
        self.dashboard_groups = self._resources[ResourceKind.DASHBOARD_GROUP]
        self.host_groups = self._resources[ResourceKind.HOST_GROUP]
        self.proxy_hosts = self._resources[ResourceKind.PROXY_HOST]
        self.maintenance_periods = self._resources[ResourceKind.MAINTENANCE_PERIOD]

    def resource(self, kind: ResourceKind) -> AsyncKindResource:
        return self._resources[kind]

    # -- Generic entry points --------------------------------------------------

    async def search(self, kind: ResourceKind, text: str) -> list[SearchMatch]:
        return await self.resource(kind).search(text)

    async def create(
        self, kind: ResourceKind, attributes: dict[str, Any]
    ) -> RemoteResource:
        return await self.resource(kind).create(attributes)

    async def get(self, kind: ResourceKind, id: int) -> RemoteResource:
        return await self.resource(kind).get(id)

    async def update(
        self, kind: ResourceKind, id: int, attributes: dict[str, Any]
    ) -> RemoteResource:
        return await self.resource(kind).update(id, attributes)

    async def delete(self, kind: ResourceKind, id: int) -> None:
        await self.resource(kind).delete(id)

    # -- Lifecycle -------------------------------------------------------------

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> AsyncClient:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
