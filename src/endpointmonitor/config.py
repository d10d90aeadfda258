"""Connection settings: declared values first, environment second."""

from __future__ import annotations

import os
from typing import Final, Mapping, Union

from pydantic import BaseModel, ConfigDict, SecretStr

from .diagnostics import Diagnostics, Result
from .exceptions import ConfigurationError

DEFAULT_URL_ENV = "EPM_URL"
DEFAULT_KEY_ENV = "EPM_API_KEY"


class _Unknown:
    """Marker for a declared value that depends on something not yet computed."""

    _instance: _Unknown | None = None

    def __new__(cls) -> _Unknown:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNKNOWN"

    def __bool__(self) -> bool:
        return False


UNKNOWN: Final = _Unknown()

Declared = Union[str, SecretStr, None, _Unknown]


class ConnectionConfig(BaseModel):
    """Resolved connection parameters, fixed for the provider session."""

    model_config = ConfigDict(frozen=True)

    url: str
    key: SecretStr


def _plain(value: str | SecretStr) -> str:
    if isinstance(value, SecretStr):
        return value.get_secret_value()
    return value


def _resolve_field(
    declared: Declared,
    env: Mapping[str, str],
    env_var: str,
    *,
    attribute: str,
    label: str,
    diags: Diagnostics,
) -> str | None:
    if declared is UNKNOWN:
        diags.add_attribute_error(
            attribute,
            f"Unknown EndPointMonitor {label}",
            f"The provider cannot create the EndPointMonitor client as there is an "
            f"unknown configuration value for the EndPointMonitor {label}. Either "
            f"target apply the source of the value first, set the value statically "
            f"in the configuration, or use the {env_var} environment variable.",
        )
        return None

    value = _plain(declared) if declared is not None else ""
    if not value:
        value = env.get(env_var, "")

    if not value:
        diags.add_attribute_error(
            attribute,
            f"Missing EndPointMonitor {label}",
            f"The provider cannot create the EndPointMonitor client as there is a "
            f"missing or empty value for the EndPointMonitor {label}. Set the "
            f"{attribute} value in the configuration or use the {env_var} "
            f"environment variable. If either is already set, ensure the value "
            f"is not empty.",
        )
        return None
    return value


def resolve_config(
    declared_url: Declared = None,
    declared_key: Declared = None,
    env: Mapping[str, str] | None = None,
    *,
    url_env: str = DEFAULT_URL_ENV,
    key_env: str = DEFAULT_KEY_ENV,
) -> Result[ConnectionConfig]:
    """Resolve the endpoint URL and API key.

    Each field is resolved on its own, so the URL may come from the
    configuration and the key from the environment (or the other way
    round). Problems with both fields are reported together.

    Args:
        declared_url: Value from the configuration, ``None`` when not set,
            or :data:`UNKNOWN` when it cannot be known yet.
        declared_key: Same, for the API key.
        env: Environment lookup; defaults to ``os.environ``.
        url_env: Name of the fallback variable for the URL.
        key_env: Name of the fallback variable for the API key.

    Returns:
        A ``Result`` holding a :class:`ConnectionConfig` only when no error
        diagnostics were collected; unwrapping a failed one raises
        :class:`ConfigurationError`.
    """
    if env is None:
        env = os.environ

    diags = Diagnostics()
    url = _resolve_field(
        declared_url, env, url_env, attribute="url", label="URL", diags=diags
    )
    key = _resolve_field(
        declared_key, env, key_env, attribute="key", label="API Key", diags=diags
    )

    if diags.has_error() or url is None or key is None:
        return Result(diagnostics=diags, error_cls=ConfigurationError)
    return Result(ConnectionConfig(url=url, key=SecretStr(key)), diags)
