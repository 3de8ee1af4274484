"""
CSS rule sets and value formatters.

A ``RuleSet`` collects declarations for one component. Declarations for
the same selector and breakpoint share a block, in the order they were
declared; blocks render mobile first, then each ``min-width`` query.
Nothing here depends on dict iteration order of the input props.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pagesmith.css.colors import resolve_style_value
from pagesmith.css.responsive import BREAKPOINT_ORDER, Breakpoint, expand
from pagesmith.themes.resolver import TokenResolver

Formatter = Callable[[Any], str | None]


class RuleSet:
    """
    Declarations for one class name.

    Example:
        rules = RuleSet("box-hero")
        rules.declare("display", "flex")
        rules.responsive("padding", {"mobile": "8px", "desktop": "16px"}, plain)
        css = rules.render()
    """

    def __init__(self, class_name: str):
        self.class_name = class_name
        self._blocks: dict[tuple[Breakpoint, str], list[tuple[str, str]]] = {}

    @property
    def selector(self) -> str:
        return f".{self.class_name}"

    def declare(
        self,
        prop: str,
        value: str | None,
        *,
        breakpoint: Breakpoint = Breakpoint.MOBILE,
        pseudo: str = "",
        important: bool = False,
    ) -> None:
        """Add one declaration; a None or empty value is ignored."""
        if value is None or value == "":
            return
        if important:
            value = f"{value} !important"
        key = (breakpoint, f"{self.selector}{pseudo}")
        self._blocks.setdefault(key, []).append((prop, value))

    def responsive(self, prop: str, value: Any, formatter: Formatter) -> None:
        """Declare ``prop`` once per breakpoint the value explicitly sets."""
        for bp, item in expand(value):
            self.declare(prop, formatter(item), breakpoint=bp)

    def __bool__(self) -> bool:
        return bool(self._blocks)

    def render(self) -> str:
        chunks = []
        for bp in BREAKPOINT_ORDER:
            for (block_bp, selector), declarations in self._blocks.items():
                if block_bp is bp:
                    chunks.append(_render_block(selector, declarations, bp.min_width))
        return "\n".join(chunks)


def _render_block(selector: str, declarations: list[tuple[str, str]], min_width: int | None) -> str:
    if min_width is None:
        body = "".join(f"  {prop}: {value};\n" for prop, value in declarations)
        return f"{selector} {{\n{body}}}"
    body = "".join(f"    {prop}: {value};\n" for prop, value in declarations)
    return f"@media (min-width: {min_width}px) {{\n  {selector} {{\n{body}  }}\n}}"


# =============================================================================
# Value formatters
# =============================================================================

_UNITLESS_KEYWORDS = frozenset({"auto", "inherit", "initial", "unset", "none"})


def plain(value: Any) -> str | None:
    if value is None or value == "" or isinstance(value, Mapping | list):
        return None
    return str(value)


def _number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _with_unit(value: Any, unit: str) -> str:
    text = _number(value)
    if text.lower() in _UNITLESS_KEYWORDS:
        return text.lower()
    if unit == "unitless":
        return text
    return f"{text}{unit}"


def length(value: Any) -> str | None:
    """``{"value": 50, "unit": "%"}``, a bare number (px) or a CSS string."""
    if isinstance(value, Mapping):
        amount = value.get("value")
        if amount is None or amount == "":
            return None
        return _with_unit(amount, str(value.get("unit") or "px"))
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return f"{_number(value)}px"
    return plain(value)


def spacing(value: Any) -> str | None:
    """Four sides as ``top right bottom left``; ``auto`` carries no unit."""
    if isinstance(value, Mapping):
        sides = ("top", "right", "bottom", "left")
        if not any(side in value for side in sides):
            return None
        unit = str(value.get("unit") or "px")
        return " ".join(_with_unit(value.get(side, 0) or 0, unit) for side in sides)
    return length(value)


def opacity(value: Any) -> str | None:
    """Editor opacity is a percentage."""
    try:
        return format(float(value) / 100, "g")
    except (TypeError, ValueError):
        return None


def position(value: Any) -> str | None:
    return None if value == "static" else plain(value)


def overflow(value: Any) -> str | None:
    return None if value == "visible" else plain(value)


def grid_columns(value: Any) -> str | None:
    count = plain(value)
    return f"repeat({count}, 1fr)" if count else None


def grid_gap(value: Any) -> str | None:
    return length(value)


def unit_value(value: Any) -> str | None:
    """``{"value": "1.5", "unit": "unitless"}`` style line-height / letter-spacing."""
    if isinstance(value, Mapping):
        amount = value.get("value")
        if amount is None or amount == "":
            return None
        return _with_unit(amount, str(value.get("unit") or "unitless"))
    return plain(value)


def border_radius(value: Any) -> str | None:
    """Per-corner ``{topLeft, topRight, bottomRight, bottomLeft, unit}`` or one radius."""
    if isinstance(value, Mapping):
        corners = ("topLeft", "topRight", "bottomRight", "bottomLeft")
        if not any(corner in value for corner in corners):
            return None
        unit = str(value.get("unit") or "px")
        values = [_number(value.get(corner, 0) or 0) for corner in corners]
        if all(v == "0" for v in values):
            return None
        if len(set(values)) == 1:
            return _with_unit(values[0], unit)
        return " ".join(_with_unit(v, unit) for v in values)
    if isinstance(value, int | float) and not isinstance(value, bool):
        return f"{_number(value)}px" if value else None
    text = plain(value)
    if text is not None and text.replace(".", "", 1).isdigit():
        return None if float(text) == 0 else f"{text}px"
    return text


SHADOW_PRESETS: dict[str, str] = {
    "sm": "0 1px 2px 0 rgba(0, 0, 0, 0.05)",
    "md": "0 4px 6px -1px rgba(0, 0, 0, 0.1), 0 2px 4px -1px rgba(0, 0, 0, 0.06)",
    "lg": "0 10px 15px -3px rgba(0, 0, 0, 0.1), 0 4px 6px -2px rgba(0, 0, 0, 0.05)",
    "xl": "0 20px 25px -5px rgba(0, 0, 0, 0.1), 0 10px 10px -5px rgba(0, 0, 0, 0.04)",
}


def shadow(value: Any, resolver: TokenResolver) -> str | None:
    """``{"preset": "md"}``, ``{"preset": "custom", "custom": "..."}`` or a token path."""
    if isinstance(value, Mapping):
        preset = value.get("preset")
        if preset in (None, "none"):
            return None
        if preset == "custom":
            return plain(value.get("custom"))
        return SHADOW_PRESETS.get(str(preset))
    return resolve_style_value(value, resolver)


def border(value: Any, resolver: TokenResolver) -> list[tuple[str, str]]:
    """
    Border declarations for a per-side border value.

    Equal sides collapse to one ``border`` shorthand; sides that are unset,
    ``none`` or zero-width are omitted.
    """
    if not isinstance(value, Mapping):
        text = plain(value)
        return [("border", text)] if text else []

    unit = str(value.get("unit") or "px")
    sides = {}
    for side in ("top", "right", "bottom", "left"):
        edge = value.get(side)
        if not isinstance(edge, Mapping):
            sides[side] = None
            continue
        width = _number(edge.get("width", 0) or 0)
        style = edge.get("style") or "solid"
        if style == "none" or width == "0":
            sides[side] = None
            continue
        color = resolve_style_value(edge.get("color"), resolver) or "currentColor"
        sides[side] = f"{_with_unit(width, unit)} {style} {color}"

    distinct = set(sides.values())
    if len(distinct) == 1:
        shorthand = distinct.pop()
        return [("border", shorthand)] if shorthand else []
    return [(f"border-{side}", text) for side, text in sides.items() if text]
