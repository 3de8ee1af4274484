"""
Token resolver.

Resolves dotted paths such as ``colors.primary.500`` against a theme's
token tree. A leaf that is itself a dotted path is an alias and is
followed, up to ``MAX_ALIAS_DEPTH`` hops.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from pagesmith.themes.css_generator import css_variable_name

logger = logging.getLogger(__name__)

MAX_ALIAS_DEPTH = 10

# Values that are final even though they contain a dot
_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_CSS_LENGTH = re.compile(r"^-?\d+(?:\.\d+)?(?:px|rem|em|%|vh|vw)$")
_CSS_KEYWORDS = frozenset({"transparent", "none", "inherit", "auto", "initial", "unset"})

# Shape of an alias leaf: identifier segments joined by dots
_DOTTED_PATH = re.compile(r"^[A-Za-z_][\w-]*(?:\.[\w-]+)+$")

# Which prop strings are treated as token references at all
_TOKEN_REFERENCE = re.compile(r"^(colors|typography|spacing|borderRadius|shadows|components)\.[\w.]+$")

_MISSING = object()


def is_literal_value(value: str) -> bool:
    """True for hex colors, CSS lengths and CSS-wide keywords."""
    return bool(
        _HEX_COLOR.match(value) or _CSS_LENGTH.match(value) or value in _CSS_KEYWORDS
    )


def looks_like_token_ref(value: Any) -> bool:
    """True when a component prop string names a token group path."""
    return isinstance(value, str) and bool(_TOKEN_REFERENCE.match(value))


def is_alias(value: Any) -> bool:
    """True when a token leaf points at another token."""
    return (
        isinstance(value, str)
        and "." in value
        and not is_literal_value(value)
        and bool(_DOTTED_PATH.match(value))
    )


def resolve_token(
    path: str,
    tokens: Mapping[str, Any] | None,
    default: Any = None,
    *,
    max_depth: int = MAX_ALIAS_DEPTH,
) -> Any:
    """
    Resolve a dotted path, following aliases.

    Args:
        path: Dotted token path
        tokens: Token tree to resolve against
        default: Returned when any segment is missing or the alias chain is too long
        max_depth: Maximum number of alias hops

    Returns:
        The resolved leaf (scalar or subtree), or ``default``
    """
    if not tokens or not path:
        return default

    current = path
    for _ in range(max_depth + 1):
        value = _lookup(current, tokens)
        if value is _MISSING:
            return default
        if not is_alias(value):
            return value
        current = value

    logger.warning(
        "Alias chain for %r exceeds %d hops (last hop %r); using default",
        path,
        max_depth,
        current,
    )
    return default


def _lookup(path: str, tokens: Mapping[str, Any]) -> Any:
    node: Any = tokens
    for key in path.split("."):
        if not isinstance(node, Mapping) or key not in node:
            return _MISSING
        node = node[key]
    return node


class TokenResolver:
    """
    Token resolver bound to one theme's token tree.

    A resolver with no tokens resolves nothing: every lookup returns its
    default, and references pass through unchanged.
    """

    def __init__(self, tokens: Mapping[str, Any] | None = None, *, max_depth: int = MAX_ALIAS_DEPTH):
        self.tokens: Mapping[str, Any] = tokens or {}
        self.max_depth = max_depth

    @property
    def available(self) -> bool:
        return bool(self.tokens)

    def resolve(self, path: str, default: Any = None) -> Any:
        return resolve_token(path, self.tokens, default, max_depth=self.max_depth)

    def resolve_scalar(self, path: str) -> str | None:
        """Resolve to a CSS-ready string; None when missing or not a leaf."""
        value = self.resolve(path, _MISSING)
        if value is _MISSING or isinstance(value, Mapping | list) or value is None:
            return None
        return str(value)

    def resolve_reference(self, value: Any) -> Any:
        """
        Resolve a prop value if it is a token reference.

        Non-references, unresolvable references and references to subtrees
        are returned unchanged.
        """
        if not looks_like_token_ref(value):
            return value
        resolved = self.resolve(value, _MISSING)
        if resolved is _MISSING or isinstance(resolved, Mapping | list) or resolved is None:
            return value
        return resolved

    def css_variable(self, path: str, fallback: str | None = None) -> str:
        """``var(--…)`` expression for a path, as emitted in the variables section."""
        name = css_variable_name(path)
        if fallback:
            return f"var({name}, {fallback})"
        return f"var({name})"
