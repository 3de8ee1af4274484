"""
Responsive prop values.

The editor stores a per-breakpoint prop as ``{"mobile": v, "tablet": v,
"desktop": v}`` with any subset of keys present. Mobile is the unwrapped
base; tablet and desktop are ``min-width`` media queries.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from enum import StrEnum
from typing import Any


class Breakpoint(StrEnum):
    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"

    @property
    def min_width(self) -> int | None:
        return BREAKPOINTS[self]


BREAKPOINTS: dict[Breakpoint, int | None] = {
    Breakpoint.MOBILE: None,
    Breakpoint.TABLET: 768,
    Breakpoint.DESKTOP: 1024,
}

# Mobile first
BREAKPOINT_ORDER: tuple[Breakpoint, ...] = (Breakpoint.MOBILE, Breakpoint.TABLET, Breakpoint.DESKTOP)


def is_responsive(value: Any) -> bool:
    """True for a mapping keyed by at least one breakpoint name."""
    return isinstance(value, Mapping) and any(bp.value in value for bp in Breakpoint)


def expand(value: Any) -> Iterator[tuple[Breakpoint, Any]]:
    """
    Yield ``(breakpoint, value)`` for each breakpoint that is explicitly set.

    A plain value counts as mobile only. Unset breakpoints are never filled
    in from their neighbours.
    """
    if not is_responsive(value):
        if value is not None:
            yield Breakpoint.MOBILE, value
        return
    for bp in BREAKPOINT_ORDER:
        item = value.get(bp.value)
        if item is not None:
            yield bp, item


def value_at(value: Any, breakpoint: Breakpoint) -> Any:
    """Effective value at a breakpoint, inheriting from smaller ones."""
    if not is_responsive(value):
        return value
    for bp in reversed(BREAKPOINT_ORDER[: BREAKPOINT_ORDER.index(breakpoint) + 1]):
        item = value.get(bp.value)
        if item is not None:
            return item
    return None


def any_breakpoint(value: Any, predicate: Callable[[Any], bool]) -> bool:
    return any(predicate(item) for _, item in expand(value))
