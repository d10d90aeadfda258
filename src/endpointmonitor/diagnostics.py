"""Structured, attribute-scoped errors and warnings collected per operation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Iterator, TypeVar

from .exceptions import DiagnosticsError

T = TypeVar("T")


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    summary: str
    detail: str
    attribute_path: str | None = None


class Diagnostics:
    """Append-only, ordered batch of diagnostics.

    Identical entries are kept as they are: each one stands for a separate
    check that failed.
    """

    def __init__(self, entries: list[Diagnostic] | None = None) -> None:
        self._entries: list[Diagnostic] = list(entries or [])

    def append(self, diagnostic: Diagnostic) -> None:
        self._entries.append(diagnostic)

    def extend(self, other: Diagnostics | list[Diagnostic]) -> None:
        self._entries.extend(other)

    def add_error(self, summary: str, detail: str) -> None:
        self.append(Diagnostic(Severity.ERROR, summary, detail))

    def add_warning(self, summary: str, detail: str) -> None:
        self.append(Diagnostic(Severity.WARNING, summary, detail))

    def add_attribute_error(self, path: str, summary: str, detail: str) -> None:
        self.append(Diagnostic(Severity.ERROR, summary, detail, attribute_path=path))

    def add_attribute_warning(self, path: str, summary: str, detail: str) -> None:
        self.append(Diagnostic(Severity.WARNING, summary, detail, attribute_path=path))

    def has_error(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self._entries)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self._entries if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._entries if d.severity is Severity.WARNING]

    def raise_on_error(
        self, exc_cls: type[DiagnosticsError] = DiagnosticsError
    ) -> None:
        if self.has_error():
            raise exc_cls(self)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> Diagnostic:
        return self._entries[index]

    def __repr__(self) -> str:
        if not self._entries:
            return "<Diagnostics: empty>"
        return (
            f"<Diagnostics: {len(self.errors)} errors, "
            f"{len(self.warnings)} warnings>"
        )


@dataclass
class Result(Generic[T]):
    """A success value, a diagnostics batch, or both.

    ``value`` is only meaningful when :attr:`ok` is true.
    """

    value: T | None = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    error_cls: type[DiagnosticsError] = field(default=DiagnosticsError, repr=False)

    @property
    def ok(self) -> bool:
        return not self.diagnostics.has_error()

    def unwrap(self) -> T:
        """Return the value, raising :attr:`error_cls` on failure."""
        self.diagnostics.raise_on_error(self.error_cls)
        return self.value  # type: ignore[return-value]
