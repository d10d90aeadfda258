"""Provider session: configure a client once, hand it to resources and data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import httpx
import structlog

from .client import Client
from .config import DEFAULT_KEY_ENV, DEFAULT_URL_ENV, Declared, resolve_config
from .diagnostics import Diagnostics, Result
from .exceptions import ConfigurationError
from .identity import IdentityResolver
from .kinds import ResourceKind

logger = structlog.get_logger()

TYPE_PREFIX = "endpointmonitor"


@dataclass(frozen=True)
class DataSource:
    kind: ResourceKind
    single: bool
    description: str


def _single(kind: ResourceKind, label: str) -> DataSource:
    return DataSource(
        kind,
        True,
        f"Search for an individual {label}. This will only allow a single result to be returned.",
    )


def _multiple(kind: ResourceKind, label: str) -> DataSource:
    return DataSource(
        kind,
        False,
        f"Search for multiple {label}. A list of ids will be returned for all matches found.",
    )


DATA_SOURCES: dict[str, DataSource] = {
    f"{TYPE_PREFIX}_check_group": _single(ResourceKind.CHECK_GROUP, "Check Group"),
    f"{TYPE_PREFIX}_check_groups": _multiple(ResourceKind.CHECK_GROUP, "Check Groups"),
    f"{TYPE_PREFIX}_check_host": _single(ResourceKind.CHECK_HOST, "Check Host"),
    f"{TYPE_PREFIX}_check_hosts": _multiple(ResourceKind.CHECK_HOST, "Check Hosts"),
    f"{TYPE_PREFIX}_check": _single(ResourceKind.CHECK, "Check"),
    f"{TYPE_PREFIX}_checks": _multiple(ResourceKind.CHECK, "Checks"),
    f"{TYPE_PREFIX}_dashboard_group": _single(ResourceKind.DASHBOARD_GROUP, "Dashboard Group"),
    f"{TYPE_PREFIX}_dashboard_groups": _multiple(ResourceKind.DASHBOARD_GROUP, "Dashboard Groups"),
    f"{TYPE_PREFIX}_host_group": _single(ResourceKind.HOST_GROUP, "Host Group"),
    f"{TYPE_PREFIX}_host_groups": _multiple(ResourceKind.HOST_GROUP, "Host Groups"),
    f"{TYPE_PREFIX}_maintenance_period": _single(ResourceKind.MAINTENANCE_PERIOD, "Maintenance Period"),
    f"{TYPE_PREFIX}_maintenance_periods": _multiple(ResourceKind.MAINTENANCE_PERIOD, "Maintenance Periods"),
    f"{TYPE_PREFIX}_proxy_host": _single(ResourceKind.PROXY_HOST, "Proxy Host"),
    f"{TYPE_PREFIX}_proxy_hosts": _multiple(ResourceKind.PROXY_HOST, "Proxy Hosts"),
    f"{TYPE_PREFIX}_android_journey_common_step": _single(
        ResourceKind.ANDROID_JOURNEY_COMMON_STEP, "Common Android Journey Step"
    ),
    f"{TYPE_PREFIX}_android_journey_common_steps": _multiple(
        ResourceKind.ANDROID_JOURNEY_COMMON_STEP, "Common Android Journey Steps"
    ),
    f"{TYPE_PREFIX}_web_journey_common_step": _single(
        ResourceKind.WEB_JOURNEY_COMMON_STEP, "Common Web Journey Step"
    ),
    f"{TYPE_PREFIX}_web_journey_common_steps": _multiple(
        ResourceKind.WEB_JOURNEY_COMMON_STEP, "Common Web Journey Steps"
    ),
}

RESOURCES: dict[str, ResourceKind] = {
    f"{TYPE_PREFIX}_{kind.value}": kind for kind in ResourceKind if kind.manageable
}


def configure(
    url: Declared = None,
    key: Declared = None,
    env: Mapping[str, str] | None = None,
    *,
    url_env: str = DEFAULT_URL_ENV,
    key_env: str = DEFAULT_KEY_ENV,
    **client_options: Any,
) -> Result[Client]:
    """Resolve connection settings and build the session's client.

    No client is built unless both settings resolved cleanly.
    """
    logger.info("configuring_client")

    resolved = resolve_config(url, key, env, url_env=url_env, key_env=key_env)
    if not resolved.ok:
        return Result(diagnostics=resolved.diagnostics, error_cls=ConfigurationError)
    config = resolved.unwrap()

    log = logger.bind(endpointmonitor_url=config.url, endpointmonitor_key=config.key)
    log.debug("creating_client")

    try:
        client = Client(config, **client_options)
    except (httpx.InvalidURL, ValueError) as exc:
        diags = Diagnostics()
        diags.add_error(
            "Unable to Create EndPointMonitor Client",
            "An unexpected error occurred when creating the EndPointMonitor client. "
            "If the error is not clear, please contact the provider developers.\n\n"
            f"Client Error: {exc}",
        )
        return Result(diagnostics=diags, error_cls=ConfigurationError)

    log.info("configured_client", success=True)
    return Result(client, resolved.diagnostics)


def require_client(provider_data: Any) -> Result[Client]:
    """Check that data handed to a resource or data source is a :class:`Client`.

    ``None`` means the provider has not been configured yet; the caller
    should wait rather than fail, so no diagnostics are produced.
    """
    if provider_data is None or isinstance(provider_data, Client):
        return Result(provider_data)
    diags = Diagnostics()
    diags.add_error(
        "Unexpected Data Source Configure Type",
        f"Expected Client, got: {type(provider_data).__name__}. "
        "Please report this issue to the provider developers.",
    )
    return Result(diagnostics=diags)


def read_data_source(client: Client, name: str, search: str) -> Result[dict[str, Any]]:
    """Read a data source into its state: ``{"search", "id"}`` or ``{"search", "ids"}``."""
    try:
        source = DATA_SOURCES[name]
    except KeyError:
        raise ValueError(f"Unknown data source {name!r}") from None

    resolver = IdentityResolver(client)
    if source.single:
        one = resolver.resolve_one(source.kind, search)
        if not one.ok:
            return Result(diagnostics=one.diagnostics)
        return Result({"search": search, "id": one.value}, one.diagnostics)

    many = resolver.resolve_many(source.kind, search)
    if not many.ok:
        return Result(diagnostics=many.diagnostics)
    return Result({"search": search, "ids": many.value}, many.diagnostics)
