"""
Themes: token resolution, presets, storage and variables CSS.
"""

from pagesmith.themes.css_generator import css_variable_name, generate_variables_css
from pagesmith.themes.resolver import (
    MAX_ALIAS_DEPTH,
    TokenResolver,
    is_literal_value,
    looks_like_token_ref,
    resolve_token,
)
from pagesmith.themes.store import ThemeStore

__all__ = [
    "MAX_ALIAS_DEPTH",
    "ThemeStore",
    "TokenResolver",
    "css_variable_name",
    "generate_variables_css",
    "is_literal_value",
    "looks_like_token_ref",
    "resolve_token",
]
