"""Search-based identity resolution.

Turns a free-text query into remote identifiers. Singleton lookups must
match exactly one object; zero or several matches is an error and the
first hit is never picked.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import structlog

from .diagnostics import Diagnostics, Result
from .exceptions import AmbiguityError, MatchErrorKind, ProtocolError, TransportError
from .kinds import ResourceKind

if TYPE_CHECKING:
    from .client import AsyncClient, Client, SearchMatch

logger = structlog.get_logger()

INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1
INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1


def pick_one(matches: Sequence[SearchMatch]) -> int:
    """Return the id of the only match, or raise :class:`AmbiguityError`."""
    if len(matches) == 0:
        raise AmbiguityError("no match found", kind=MatchErrorKind.NO_MATCH, count=0)
    if len(matches) > 1:
        raise AmbiguityError(
            f"{len(matches)} matches found",
            kind=MatchErrorKind.AMBIGUOUS_MATCH,
            count=len(matches),
        )
    id = matches[0].id
    if not INT64_MIN <= id <= INT64_MAX:
        raise ProtocolError(f"Identifier {id} does not fit in 64 bits")
    return id


def pick_many(matches: Sequence[SearchMatch]) -> list[int]:
    """Return every match id, in search order."""
    ids = [m.id for m in matches]
    for id in ids:
        if not INT32_MIN <= id <= INT32_MAX:
            raise ProtocolError(f"Identifier {id} does not fit in 32 bits")
    return ids


def _search_failed(kind: ResourceKind, exc: Exception, diags: Diagnostics) -> None:
    diags.add_error(
        f"Error searching {kind.label}",
        f"Could not search {kind.label}, unexpected error: {exc}",
    )


def _reduce_one(
    kind: ResourceKind, text: str, matches: Sequence[SearchMatch]
) -> Result[int]:
    result: Result[int] = Result()
    try:
        result.value = pick_one(matches)
    except AmbiguityError as exc:
        logger.info(
            "singleton_search_failed", kind=kind.value, search=text, matches=exc.count
        )
        result.diagnostics.add_attribute_error(
            "search",
            f"None or more than one matching {kind.label} found",
            f"Searching {kind.label} for {text!r} returned {exc.count} matches; "
            f"exactly one is required. Refine the search text so it matches a "
            f"single {kind.label}.",
        )
    except ProtocolError as exc:
        _search_failed(kind, exc, result.diagnostics)
    return result


def _reduce_many(kind: ResourceKind, matches: Sequence[SearchMatch]) -> Result[list[int]]:
    result: Result[list[int]] = Result()
    try:
        result.value = pick_many(matches)
    except ProtocolError as exc:
        _search_failed(kind, exc, result.diagnostics)
    return result


class IdentityResolver:
    """Resolve search text to ids through a :class:`Client`."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def _search(self, kind: ResourceKind, text: str, diags: Diagnostics) -> list[SearchMatch] | None:
        try:
            return self._client.search(kind, text)
        except TransportError as exc:
            _search_failed(kind, exc, diags)
            return None

    def resolve_one(self, kind: ResourceKind, text: str) -> Result[int]:
        diags = Diagnostics()
        matches = self._search(kind, text, diags)
        if matches is None:
            return Result(diagnostics=diags)
        return _reduce_one(kind, text, matches)

    def resolve_many(self, kind: ResourceKind, text: str) -> Result[list[int]]:
        diags = Diagnostics()
        matches = self._search(kind, text, diags)
        if matches is None:
            return Result(diagnostics=diags)
        return _reduce_many(kind, matches)


class AsyncIdentityResolver:
    """Resolve search text to ids through an :class:`AsyncClient`."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def _search(
        self, kind: ResourceKind, text: str, diags: Diagnostics
    ) -> list[SearchMatch] | None:
        try:
            return await self._client.search(kind, text)
        except TransportError as exc:
            _search_failed(kind, exc, diags)
            return None

    async def resolve_one(self, kind: ResourceKind, text: str) -> Result[int]:
        diags = Diagnostics()
        matches = await self._search(kind, text, diags)
        if matches is None:
            return Result(diagnostics=diags)
        return _reduce_one(kind, text, matches)

    async def resolve_many(self, kind: ResourceKind, text: str) -> Result[list[int]]:
        diags = Diagnostics()
        matches = await self._search(kind, text, diags)
        if matches is None:
            return Result(diagnostics=diags)
        return _reduce_many(kind, matches)
