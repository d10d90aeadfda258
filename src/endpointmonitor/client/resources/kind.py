"""Per-kind resource accessors - search and CRUD on one API collection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...kinds import ResourceKind
from ..models import RemoteResource, SearchMatch, parse_matches

if TYPE_CHECKING:
    from .._transport import AsyncTransport, SyncTransport


def _require_manageable(kind: ResourceKind) -> None:
    if not kind.manageable:
        raise ValueError(f"{kind.label!r} is search-only and cannot be managed")


def _require_searchable(kind: ResourceKind) -> None:
    if not kind.searchable:
        raise ValueError(f"{kind.label!r} has no search endpoint")


def _body(attributes: dict[str, Any]) -> dict[str, Any]:
    # ids are assigned by the service, never sent
    return {k: v for k, v in attributes.items() if k != "id"}


class KindResource:
    def __init__(self, transport: SyncTransport, kind: ResourceKind) -> None:
        self._t = transport
        self.kind = kind

    def search(self, text: str) -> list[SearchMatch]:
        _require_searchable(self.kind)
        payload = self._t.request(
            "GET", f"{self.kind.path}/search", params={"search": text}
        )
        return parse_matches(payload)

    def create(self, attributes: dict[str, Any]) -> RemoteResource:
        _require_manageable(self.kind)
        payload = self._t.request("POST", self.kind.path, json=_body(attributes))
        return RemoteResource.from_payload(self.kind, payload)

    def get(self, id: int) -> RemoteResource:
        _require_manageable(self.kind)
        payload = self._t.request("GET", f"{self.kind.path}/{id}")
        return RemoteResource.from_payload(self.kind, payload)

    def update(self, id: int, attributes: dict[str, Any]) -> RemoteResource:
        _require_manageable(self.kind)
        payload = self._t.request(
            "PUT", f"{self.kind.path}/{id}", json=_body(attributes)
        )
        if payload is None:
            return RemoteResource(kind=self.kind, id=id, attributes=_body(attributes))
        return RemoteResource.from_payload(self.kind, payload)

    def delete(self, id: int) -> None:
        _require_manageable(self.kind)
        self._t.request("DELETE", f"{self.kind.path}/{id}")


class AsyncKindResource:
    def __init__(self, transport: AsyncTransport, kind: ResourceKind) -> None:
        self._t = transport
        self.kind = kind

    async def search(self, text: str) -> list[SearchMatch]:
        _require_searchable(self.kind)
        payload = await self._t.request(
            "GET", f"{self.kind.path}/search", params={"search": text}
        )
        return parse_matches(payload)

    async def create(self, attributes: dict[str, Any]) -> RemoteResource:
        _require_manageable(self.kind)
        payload = await self._t.request("POST", self.kind.path, json=_body(attributes))
        return RemoteResource.from_payload(self.kind, payload)

    async def get(self, id: int) -> RemoteResource:
        _require_manageable(self.kind)
        payload = await self._t.request("GET", f"{self.kind.path}/{id}")
        return RemoteResource.from_payload(self.kind, payload)

    async def update(self, id: int, attributes: dict[str, Any]) -> RemoteResource:
        _require_manageable(self.kind)
        payload = await self._t.request(
            "PUT", f"{self.kind.path}/{id}", json=_body(attributes)
        )
        if payload is None:
            return RemoteResource(kind=self.kind, id=id, attributes=_body(attributes))
        return RemoteResource.from_payload(self.kind, payload)

    async def delete(self, id: int) -> None:
        _require_manageable(self.kind)
        await self._t.request("DELETE", f"{self.kind.path}/{id}")
