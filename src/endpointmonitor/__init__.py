"""endpointmonitor - declarative EndPointMonitor configuration, reconciled over REST."""

from .client import AsyncClient, Client, RemoteResource, SearchMatch
from .config import UNKNOWN, ConnectionConfig, resolve_config
from .diagnostics import Diagnostic, Diagnostics, Result, Severity
from .diff import DiffResult, diff
from .identity import AsyncIdentityResolver, IdentityResolver, pick_many, pick_one
from .kinds import ResourceKind
from .provider import DATA_SOURCES, RESOURCES, configure, read_data_source, require_client
from .reconcile import (
    Action,
    AsyncReconciliationEngine,
    InstanceState,
    ReconcileOutcome,
    ReconciliationEngine,
    ReconciliationRequest,
)

__version__ = "0.1.0"

__all__ = [
    "Client",
    "AsyncClient",
    "RemoteResource",
    "SearchMatch",
    "UNKNOWN",
    "ConnectionConfig",
    "resolve_config",
    "Diagnostic",
    "Diagnostics",
    "Result",
    "Severity",
    "DiffResult",
    "diff",
    "IdentityResolver",
    "AsyncIdentityResolver",
    "pick_one",
    "pick_many",
    "ResourceKind",
    "DATA_SOURCES",
    "RESOURCES",
    "configure",
    "read_data_source",
    "require_client",
    "Action",
    "InstanceState",
    "ReconcileOutcome",
    "ReconciliationEngine",
    "AsyncReconciliationEngine",
    "ReconciliationRequest",
]
