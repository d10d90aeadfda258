"""Reconciliation of declared resource instances against the remote service.

Each operation moves one instance through its lifecycle::

    PLANNED -> CREATING -> LIVE -> UPDATING -> LIVE -> DELETING -> GONE
                            \\-> READING -> LIVE | GONE

and reports the state it ends in. The in-flight states (``CREATING``,
``READING``, ``UPDATING``, ``DELETING``) are never returned; they are logged
as the ``state`` field when the remote call starts. Instances are reconciled
independently; ordering between dependent resources is up to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel, ConfigDict, model_validator

from .client.models import RemoteResource
from .diagnostics import Diagnostics
from .diff import DiffResult, diff
from .exceptions import NotFoundError, TransportError
from .kinds import ResourceKind

if TYPE_CHECKING:
    from .client import AsyncClient, Client

logger = structlog.get_logger()


class InstanceState(str, Enum):
    PLANNED = "planned"
    CREATING = "creating"
    LIVE = "live"
    READING = "reading"
    UPDATING = "updating"
    DELETING = "deleting"
    GONE = "gone"


class Action(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class ReconciliationRequest(BaseModel):
    """One operation on one declared instance."""

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind
    action: Action
    desired_attributes: dict[str, Any] = {}
    existing_id: int | None = None
    last_known: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _check_identity(self) -> ReconciliationRequest:
        if self.action is Action.CREATE and self.existing_id is not None:
            raise ValueError("create must not carry an existing id")
        if self.action is not Action.CREATE and self.existing_id is None:
            raise ValueError(f"{self.action.value} requires an existing id")
        return self


@dataclass
class ReconcileOutcome:
    """Result of one reconciliation operation.

    ``changes`` holds the attributes pushed by an update, or the drift
    found by a read when desired attributes were supplied.
    """

    state: InstanceState
    resource: RemoteResource | None = None
    changes: DiffResult = field(default_factory=DiffResult)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def ok(self) -> bool:
        return not self.diagnostics.has_error()

    @property
    def id(self) -> int | None:
        return self.resource.id if self.resource is not None else None


# -- Outcome builders shared by the sync and async engines ----------------------

_GERUNDS = {"create": "creating", "read": "reading", "update": "updating", "delete": "deleting"}


def _known_resource(
    kind: ResourceKind, id: int, attributes: dict[str, Any]
) -> RemoteResource:
    return RemoteResource(
        kind=kind, id=id, attributes={k: v for k, v in attributes.items() if k != "id"}
    )


def _failed(
    action: str, kind: ResourceKind, exc: Exception, state: InstanceState
) -> ReconcileOutcome:
    logger.warning(f"{action}_failed", kind=kind.value, error=str(exc))
    outcome = ReconcileOutcome(state)
    outcome.diagnostics.add_error(
        f"Error {_GERUNDS[action]} {kind.label}",
        f"Could not {action} {kind.label}, unexpected error: {exc}",
    )
    return outcome


def _read_done(
    resource: RemoteResource, desired: dict[str, Any] | None
) -> ReconcileOutcome:
    changes = diff(resource.attributes, desired) if desired is not None else DiffResult()
    if changes.has_changes:
        logger.warning(
            "drift_detected", kind=resource.kind.value, id=resource.id, changes=changes.summary
        )
    return ReconcileOutcome(InstanceState.LIVE, resource, changes)


def _read_gone(kind: ResourceKind, id: int) -> ReconcileOutcome:
    logger.warning("remote_object_missing", kind=kind.value, id=id)
    outcome = ReconcileOutcome(InstanceState.GONE)
    outcome.diagnostics.add_warning(
        f"{kind.label.capitalize()} no longer exists",
        f"The {kind.label} with id {id} was not found on the service; it will "
        f"be created again on the next apply.",
    )
    return outcome


def _update_gone(kind: ResourceKind, id: int) -> ReconcileOutcome:
    logger.warning("remote_object_missing", kind=kind.value, id=id)
    outcome = ReconcileOutcome(InstanceState.GONE)
    outcome.diagnostics.add_error(
        f"{kind.label.capitalize()} no longer exists",
        f"The {kind.label} with id {id} was deleted outside of this "
        f"configuration while being updated. Refresh the state and plan again "
        f"to recreate it.",
    )
    return outcome


def _update_payload(
    last_known: dict[str, Any], changes: DiffResult
) -> dict[str, Any]:
    payload = {k: v for k, v in last_known.items() if k != "id"}
    payload.update(changes.changed)
    return payload


class ReconciliationEngine:
    """Create, read, update and delete declared instances through a :class:`Client`.

    Remote failures never raise; they come back as error diagnostics on
    the returned :class:`ReconcileOutcome`.
    """

    def __init__(self, client: Client) -> None:
        self._client = client

    def create(self, kind: ResourceKind, desired: dict[str, Any]) -> ReconcileOutcome:
        logger.debug("create", kind=kind.value, state=InstanceState.CREATING.value)
        try:
            resource = self._client.create(kind, desired)
        except TransportError as exc:
            return _failed("create", kind, exc, InstanceState.PLANNED)
        logger.info("created", kind=kind.value, id=resource.id)
        return ReconcileOutcome(InstanceState.LIVE, resource)

    def read(
        self, kind: ResourceKind, id: int, desired: dict[str, Any] | None = None
    ) -> ReconcileOutcome:
        logger.debug("read", kind=kind.value, id=id, state=InstanceState.READING.value)
        try:
            resource = self._client.get(kind, id)
        except NotFoundError:
            return _read_gone(kind, id)
        except TransportError as exc:
            return _failed("read", kind, exc, InstanceState.LIVE)
        return _read_done(resource, desired)

    def update(
        self,
        kind: ResourceKind,
        id: int,
        desired: dict[str, Any],
        last_known: dict[str, Any],
    ) -> ReconcileOutcome:
        changes = diff(last_known, desired)
        if not changes.has_changes:
            logger.debug("update_noop", kind=kind.value, id=id)
            resource = _known_resource(kind, id, last_known)
            return ReconcileOutcome(InstanceState.LIVE, resource, changes)

        logger.debug(
            "update",
            kind=kind.value,
            id=id,
            changes=changes.summary,
            state=InstanceState.UPDATING.value,
        )
        try:
            resource = self._client.update(kind, id, _update_payload(last_known, changes))
        except NotFoundError:
            return _update_gone(kind, id)
        except TransportError as exc:
            return _failed("update", kind, exc, InstanceState.LIVE)
        return ReconcileOutcome(InstanceState.LIVE, resource, changes)

    def delete(self, kind: ResourceKind, id: int) -> ReconcileOutcome:
        logger.debug("delete", kind=kind.value, id=id, state=InstanceState.DELETING.value)
        try:
            self._client.delete(kind, id)
        except NotFoundError:
            logger.info("already_deleted", kind=kind.value, id=id)
        except TransportError as exc:
            return _failed("delete", kind, exc, InstanceState.LIVE)
        return ReconcileOutcome(InstanceState.GONE)

    def apply(self, request: ReconciliationRequest) -> ReconcileOutcome:
        kind, id = request.kind, request.existing_id
        if request.action is Action.CREATE:
            return self.create(kind, request.desired_attributes)
        if id is None:
            raise ValueError(f"{request.action.value} requires an existing id")
        if request.action is Action.READ:
            return self.read(kind, id, request.desired_attributes or None)
        if request.action is Action.UPDATE:
            return self.update(kind, id, request.desired_attributes, request.last_known or {})
        return self.delete(kind, id)


class AsyncReconciliationEngine:
    """Async twin of :class:`ReconciliationEngine` over an :class:`AsyncClient`."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def create(self, kind: ResourceKind, desired: dict[str, Any]) -> ReconcileOutcome:
        logger.debug("create", kind=kind.value, state=InstanceState.CREATING.value)
        try:
            resource = await self._client.create(kind, desired)
        except TransportError as exc:
            return _failed("create", kind, exc, InstanceState.PLANNED)
        logger.info("created", kind=kind.value, id=resource.id)
        return ReconcileOutcome(InstanceState.LIVE, resource)

    async def read(
        self, kind: ResourceKind, id: int, desired: dict[str, Any] | None = None
    ) -> ReconcileOutcome:
        logger.debug("read", kind=kind.value, id=id, state=InstanceState.READING.value)
        try:
            resource = await self._client.get(kind, id)
        except NotFoundError:
            return _read_gone(kind, id)
        except TransportError as exc:
            return _failed("read", kind, exc, InstanceState.LIVE)
        return _read_done(resource, desired)

    async def update(
        self,
        kind: ResourceKind,
        id: int,
        desired: dict[str, Any],
        last_known: dict[str, Any],
    ) -> ReconcileOutcome:
        changes = diff(last_known, desired)
        if not changes.has_changes:
            logger.debug("update_noop", kind=kind.value, id=id)
            resource = _known_resource(kind, id, last_known)
            return ReconcileOutcome(InstanceState.LIVE, resource, changes)

        logger.debug(
            "update",
            kind=kind.value,
            id=id,
            changes=changes.summary,
            state=InstanceState.UPDATING.value,
        )
        try:
            resource = await self._client.update(
                kind, id, _update_payload(last_known, changes)
            )
        except NotFoundError:
            return _update_gone(kind, id)
        except TransportError as exc:
            return _failed("update", kind, exc, InstanceState.LIVE)
        return ReconcileOutcome(InstanceState.LIVE, resource, changes)

    async def delete(self, kind: ResourceKind, id: int) -> ReconcileOutcome:
        logger.debug("delete", kind=kind.value, id=id, state=InstanceState.DELETING.value)
        try:
            await self._client.delete(kind, id)
        except NotFoundError:
            logger.info("already_deleted", kind=kind.value, id=id)
        except TransportError as exc:
            return _failed("delete", kind, exc, InstanceState.LIVE)
        return ReconcileOutcome(InstanceState.GONE)

    async def apply(self, request: ReconciliationRequest) -> ReconcileOutcome:
        kind, id = request.kind, request.existing_id
        if request.action is Action.CREATE:
            return await self.create(kind, request.desired_attributes)
        if id is None:
            raise ValueError(f"{request.action.value} requires an existing id")
        if request.action is Action.READ:
            return await self.read(kind, id, request.desired_attributes or None)
        if request.action is Action.UPDATE:
            return await self.update(
                kind, id, request.desired_attributes, request.last_known or {}
            )
        return await self.delete(kind, id)
