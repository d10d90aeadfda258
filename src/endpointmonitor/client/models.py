"""Pydantic v2 models for EndPointMonitor API payloads.

Search matches use ``extra="allow"`` so new server-side fields don't break
deserialization. Remote objects keep every non-``id`` field in
``attributes``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..exceptions import ProtocolError
from ..kinds import ResourceKind


class _Base(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


# -- Search --------------------------------------------------------------------

class SearchMatch(_Base):
    """One hit from a ``/search`` endpoint."""
    id: int
    display_name: str = Field(default="", alias="name")


def parse_matches(payload: Any) -> list[SearchMatch]:
    """Parse a search response: a bare list, or ``{"results"|"data": [...]}``."""
    if payload is None:
        return []
    if isinstance(payload, dict):
        payload = payload.get("results", payload.get("data", []))
    if not isinstance(payload, list):
        raise ProtocolError(f"Unexpected search response: {payload!r}", body=payload)
    try:
        return [SearchMatch.model_validate(item) for item in payload]
    except ValidationError as exc:
        raise ProtocolError(f"Malformed search result: {exc}", body=payload) from exc


# -- Remote objects ------------------------------------------------------------

class RemoteResource(BaseModel):
    """Transient copy of an object owned by the service."""

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind
    id: int
    attributes: dict[str, Any] = {}

    @classmethod
    def from_payload(cls, kind: ResourceKind, payload: Any) -> RemoteResource:
        if not isinstance(payload, dict) or "id" not in payload:
            raise ProtocolError(
                f"Expected a {kind.label} object with an id, got: {payload!r}",
                body=payload,
            )
        attributes = {k: v for k, v in payload.items() if k != "id"}
        try:
            return cls(kind=kind, id=payload["id"], attributes=attributes)
        except ValidationError as exc:
            raise ProtocolError(f"Malformed {kind.label} id: {exc}", body=payload) from exc

    def to_payload(self) -> dict[str, Any]:
        return {"id": self.id, **self.attributes}
