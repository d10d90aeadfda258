"""Attribute diffing - compare declared attributes with remote state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class AttributeChange:
    name: str
    old_value: Any
    new_value: Any


@dataclass
class DiffResult:
    """Attributes that differ between a baseline and a desired state.

    Only attributes named in the desired state are compared; attributes
    the declarer left out are not treated as removals.
    """

    changes: list[AttributeChange] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)

    @property
    def changed(self) -> dict[str, Any]:
        """``{name: new_value}`` for every changed attribute."""
        return {c.name: c.new_value for c in self.changes}

    @property
    def summary(self) -> str:
        return ", ".join(
            f"{c.name}: {c.old_value!r} -> {c.new_value!r}" for c in self.changes
        )

    def __repr__(self) -> str:
        if not self.has_changes:
            return "<DiffResult: no changes>"
        return f"<DiffResult: {self.summary}>"


def diff(baseline: dict[str, Any], desired: dict[str, Any]) -> DiffResult:
    """Compare ``desired`` against ``baseline``.

    Args:
        baseline: Last-known (or freshly read) remote attributes.
        desired: Declared attributes.

    Returns:
        A ``DiffResult`` listing, in ``desired`` order, each attribute whose
        value is missing from or different in ``baseline``. ``id`` is never
        compared.
    """
    changes = [
        AttributeChange(name, baseline.get(name), value)
        for name, value in desired.items()
        if name != "id" and (name not in baseline or baseline[name] != value)
    ]
    return DiffResult(changes)
