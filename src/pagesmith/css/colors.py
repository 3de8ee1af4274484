"""
Style value resolution.

Colors, font sizes and font weights arrive in three shapes: a bare string
(literal or token path), ``{"type": "custom", "value": v}`` or
``{"type": "theme", "value": "colors.primary.500"}``. Resolution order:

1. explicit literal color
2. explicit custom value
3. theme lookup through the token resolver
4. ``var(--…)`` of the theme path, wrapping the kind's default variable
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pagesmith.specs.component import ComponentKind
from pagesmith.themes.resolver import TokenResolver, is_literal_value, looks_like_token_ref

_LITERAL_PREFIXES = ("#", "rgb", "hsl", "var(")


def is_literal_color(value: str) -> bool:
    return value.startswith(_LITERAL_PREFIXES) or is_literal_value(value)


def default_color_variable(kind: ComponentKind) -> str:
    """Theme-level default text color for a kind, e.g. ``--component-heading-color-default``."""
    return f"var(--component-{kind.css_prefix}-color-default, inherit)"


def resolve_style_value(
    value: Any, resolver: TokenResolver, fallback: str | None = None
) -> str | None:
    """
    Resolve a style prop to CSS text.

    Args:
        value: Prop value in any of the editor's shapes
        resolver: Token resolver for the theme being rendered
        fallback: Innermost fallback inside the generated ``var(--…)``

    Returns:
        CSS value, or None when the prop is effectively unset
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, str):
        return _resolve_reference(value, resolver, fallback)
    if isinstance(value, Mapping):
        inner = value.get("value")
        if inner is None or inner == "":
            return None
        if value.get("type") == "custom":
            return str(inner)
        return _resolve_reference(str(inner), resolver, fallback)
    return None


def resolve_color(
    value: Any, resolver: TokenResolver, kind: ComponentKind | None = None
) -> str | None:
    """Resolve a color prop; unresolved theme paths fall back to the kind's default variable."""
    fallback = default_color_variable(kind) if kind is not None else None
    return resolve_style_value(value, resolver, fallback)


def _resolve_reference(value: str, resolver: TokenResolver, fallback: str | None) -> str:
    if is_literal_color(value) or not looks_like_token_ref(value):
        return value
    resolved = resolver.resolve_scalar(value)
    if resolved is not None:
        return resolved
    return resolver.css_variable(value, fallback)
