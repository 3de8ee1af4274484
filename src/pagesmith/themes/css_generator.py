"""
CSS generator for theme tokens.

Flattens a theme's token tree into CSS custom properties on ``:root``.
Component CSS falls back to these variables when a theme path cannot be
resolved, so both sides share ``css_variable_name``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

# Group names shortened to their singular CSS prefix
_KEY_MAP: dict[str, str] = {
    "colors": "color",
    "shadows": "shadow",
    "components": "component",
    "variants": "variant",
}

# Dropped from variable names: typography.fontSize.xl -> --font-size-xl
_TRANSPARENT_GROUPS = frozenset({"typography"})

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def transform_key(key: str) -> str:
    """
    Convert a token key to its CSS variable segment.

    Examples:
        colors -> color, fontSize -> font-size, borderRadius -> border-radius
    """
    if key in _KEY_MAP:
        return _KEY_MAP[key]
    return _CAMEL_BOUNDARY.sub(r"\1-\2", key).lower()


def css_variable_name(path: str) -> str:
    """
    Custom property name for a dotted token path.

    Args:
        path: Token path such as ``colors.primary.500``

    Returns:
        Property name such as ``--color-primary-500``
    """
    segments = [
        transform_key(part) for part in path.split(".") if part and part not in _TRANSPARENT_GROUPS
    ]
    return "--" + "-".join(segments)


def generate_variables_css(tokens: Mapping[str, Any] | None) -> str:
    """
    Generate the ``:root`` block for a token tree.

    Keys are emitted in tree order; ``None`` leaves are skipped. A leaf
    aliasing another token becomes a ``var()`` reference to it, so the
    cascade follows later overrides of the target.

    Args:
        tokens: Nested token tree

    Returns:
        CSS string with one ``:root`` rule
    """
    variables = flatten_tokens(tokens or {}, root=tokens or {})
    lines = [":root {"]
    for name, value in variables.items():
        lines.append(f"  {name}: {value};")
    lines.append("}")
    return "\n".join(lines)


def flatten_tokens(
    tokens: Mapping[str, Any],
    prefix: str = "",
    root: Mapping[str, Any] | None = None,
) -> dict[str, str]:
    """
    Flatten a token tree into ``{--name: value}``.

    Args:
        tokens: Nested token tree (or a subtree)
        prefix: Variable prefix accumulated so far
        root: Full tree; when given, alias leaves resolving in it become ``var()``

    Returns:
        Ordered mapping of custom property name to value
    """
    result: dict[str, str] = {}
    for key, value in tokens.items():
        key = str(key)
        if key in _TRANSPARENT_GROUPS and isinstance(value, Mapping):
            result.update(flatten_tokens(value, prefix, root))
            continue

        segment = transform_key(key)
        name = f"{prefix}-{segment}" if prefix else segment

        if isinstance(value, Mapping):
            result.update(flatten_tokens(value, name, root))
        elif value is not None:
            result[f"--{name}"] = _format_value(value, root)
    return result


def _format_value(value: Any, root: Mapping[str, Any] | None = None) -> str:
    if root is not None and isinstance(value, str):
        from pagesmith.themes.resolver import is_alias, resolve_token

        if is_alias(value) and not isinstance(resolve_token(value, root, {}), Mapping):
            return f"var({css_variable_name(value)})"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list | tuple):
        return ", ".join(str(v) for v in value)
    return str(value)
