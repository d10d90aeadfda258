"""Catalogue of EndPointMonitor object kinds and where they live on the API."""

from __future__ import annotations

from enum import Enum


class ResourceKind(str, Enum):
    """An EndPointMonitor object kind.

    The value is the type-name suffix used by declarations
    (``endpointmonitor_<value>``).
    """

    CHECK = "check"
    URL_CHECK = "url_check"
    DNS_CHECK = "dns_check"
    CERTIFICATE_CHECK = "certificate_check"
    PING_CHECK = "ping_check"
    SOCKET_CHECK = "socket_check"
    ANDROID_JOURNEY_CHECK = "android_journey_check"
    WEB_JOURNEY_CHECK = "web_journey_check"
    ANDROID_JOURNEY_COMMON_STEP = "android_journey_common_step"
    WEB_JOURNEY_COMMON_STEP = "web_journey_common_step"
    CHECK_GROUP = "check_group"
    CHECK_HOST = "check_host"
    DASHBOARD_GROUP = "dashboard_group"
    HOST_GROUP = "host_group"
    PROXY_HOST = "proxy_host"
    MAINTENANCE_PERIOD = "maintenance_period"

    @property
    def segment(self) -> str:
        """API path segment, e.g. ``check-groups``."""
        return _SEGMENTS[self]

    @property
    def path(self) -> str:
        return f"/api/{self.segment}"

    @property
    def label(self) -> str:
        """Human-readable name used in diagnostics."""
        return self.value.replace("_", " ")

    @property
    def searchable(self) -> bool:
        return self in _SEARCHABLE

    @property
    def manageable(self) -> bool:
        return self is not ResourceKind.CHECK


_SEGMENTS: dict[ResourceKind, str] = {
    ResourceKind.CHECK: "checks",
    ResourceKind.URL_CHECK: "url-checks",
    ResourceKind.DNS_CHECK: "dns-checks",
    ResourceKind.CERTIFICATE_CHECK: "certificate-checks",
    ResourceKind.PING_CHECK: "ping-checks",
    ResourceKind.SOCKET_CHECK: "socket-checks",
    ResourceKind.ANDROID_JOURNEY_CHECK: "android-journey-checks",
    ResourceKind.WEB_JOURNEY_CHECK: "web-journey-checks",
    ResourceKind.ANDROID_JOURNEY_COMMON_STEP: "android-journey-common-steps",
    ResourceKind.WEB_JOURNEY_COMMON_STEP: "web-journey-common-steps",
    ResourceKind.CHECK_GROUP: "check-groups",
    ResourceKind.CHECK_HOST: "check-hosts",
    ResourceKind.DASHBOARD_GROUP: "dashboard-groups",
    ResourceKind.HOST_GROUP: "host-groups",
    ResourceKind.PROXY_HOST: "proxy-hosts",
    ResourceKind.MAINTENANCE_PERIOD: "maintenance-periods",
}

# Kinds with a search endpoint (and hence data sources). Individual check
# types are searched through the catch-all CHECK kind.
_SEARCHABLE = frozenset(
    {
        ResourceKind.CHECK,
        ResourceKind.ANDROID_JOURNEY_COMMON_STEP,
        ResourceKind.WEB_JOURNEY_COMMON_STEP,
        ResourceKind.CHECK_GROUP,
        ResourceKind.CHECK_HOST,
        ResourceKind.DASHBOARD_GROUP,
        ResourceKind.HOST_GROUP,
        ResourceKind.PROXY_HOST,
        ResourceKind.MAINTENANCE_PERIOD,
    }
)
