"""HTTP transport layer - wraps httpx with auth and error mapping. No retries."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from ..config import ConnectionConfig
from ..exceptions import (
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

logger = structlog.get_logger()

_STATUS_MAP: dict[int, type[TransportError]] = {
    400: ValidationError,
    401: AuthenticationError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    429: RateLimitError,
}

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "endpointmonitor-python/0.1.0"


def _build_headers(config: ConnectionConfig, user_agent: str) -> dict[str, str]:
    return {
        "X-API-Key": config.key.get_secret_value(),
        "Accept": "application/json",
        "User-Agent": user_agent,
    }


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return

    try:
        body = response.json()
    except ValueError:
        body = response.text

    message = body.get("error", response.reason_phrase) if isinstance(body, dict) else str(body)
    status = response.status_code

    if status == 429:
        retry_after = response.headers.get("Retry-After")
        raise RateLimitError(
            message,
            retry_after=float(retry_after) if retry_after else None,
            status_code=status,
            body=body,
        )

    exc_cls = _STATUS_MAP.get(status)
    if exc_cls is None:
        exc_cls = ServerError if status >= 500 else TransportError

    raise exc_cls(message, status_code=status, body=body)


def _decode(response: httpx.Response) -> Any:
    _raise_for_status(response)
    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise ProtocolError(
            f"Invalid JSON from {response.request.method} {response.request.url}",
            status_code=response.status_code,
            body=response.text,
        ) from exc


class SyncTransport:
    """Synchronous HTTP transport using httpx."""

    def __init__(
        self,
        config: ConnectionConfig,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._client = httpx.Client(
            base_url=config.url,
            headers=_build_headers(config, user_agent),
            timeout=timeout,
        )

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any | None = None,
    ) -> Any:
        logger.debug("http_request", method=method, path=path)
        try:
            response = self._client.request(
                method, path, params=_clean_params(params), json=json
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"Connection failed: {exc}") from exc
        return _decode(response)

    def close(self) -> None:
        self._client.close()


class AsyncTransport:
    """Asynchronous HTTP transport using httpx.

    Cancelling the awaiting task aborts the in-flight request and lets
    ``asyncio.CancelledError`` propagate.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=config.url,
            headers=_build_headers(config, user_agent),
            timeout=timeout,
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any | None = None,
    ) -> Any:
        logger.debug("http_request", method=method, path=path)
        try:
            response = await self._client.request(
                method, path, params=_clean_params(params), json=json
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"Connection failed: {exc}") from exc
        return _decode(response)

    async def close(self) -> None:
        await self._client.aclose()


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    if params is None:
        return None
    return {k: v for k, v in params.items() if v is not None}
