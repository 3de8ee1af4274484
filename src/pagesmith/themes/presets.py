"""
Theme presets.

Shipped token trees that system themes are seeded from and that
``ThemeStore.reset_to_base`` restores.
"""

from __future__ import annotations

import copy
from typing import Any

DEFAULT_PRESET = "default"

_PRESETS: dict[str, dict[str, Any]] = {
    "default": {
        "colors": {
            "primary": {"500": "#3b82f6", "600": "#2563eb", "700": "#1d4ed8"},
            "secondary": {"500": "#8b5cf6", "600": "#7c3aed"},
            "neutral": {"50": "#f9fafb", "100": "#f3f4f6", "500": "#6b7280", "900": "#111827"},
            "text": "colors.neutral.900",
            "background": "#ffffff",
            "link": "colors.primary.600",
        },
        "typography": {
            "fontFamily": {
                "sans": "Inter, system-ui, sans-serif",
                "serif": "Georgia, serif",
            },
            "fontSize": {
                "sm": "0.875rem",
                "base": "1rem",
                "lg": "1.125rem",
                "xl": "1.25rem",
                "2xl": "1.5rem",
                "3xl": "1.875rem",
                "4xl": "2.25rem",
            },
            "fontWeight": {"normal": "400", "medium": "500", "semibold": "600", "bold": "700"},
            "lineHeight": {"tight": "1.25", "normal": "1.5", "relaxed": "1.75"},
        },
        "spacing": {"xs": "0.25rem", "sm": "0.5rem", "md": "1rem", "lg": "1.5rem", "xl": "2rem"},
        "borderRadius": {"none": "0", "sm": "0.125rem", "md": "0.375rem", "lg": "0.5rem", "full": "9999px"},
        "shadows": {
            "sm": "0 1px 2px 0 rgba(0, 0, 0, 0.05)",
            "md": "0 4px 6px -1px rgba(0, 0, 0, 0.1)",
        },
        "components": {
            "button": {
                "variants": {
                    "primary": {
                        "backgroundColor": "colors.primary.500",
                        "color": "#ffffff",
                    },
                },
            },
            "heading": {"color": {"default": "colors.neutral.900"}},
            "text": {"color": {"default": "colors.neutral.900"}},
        },
    },
    "minimal": {
        "colors": {
            "primary": {"500": "#111111", "600": "#000000"},
            "neutral": {"100": "#f5f5f5", "900": "#111111"},
            "text": "colors.neutral.900",
            "background": "#ffffff",
        },
        "typography": {
            "fontFamily": {"sans": "system-ui, sans-serif"},
            "fontSize": {"sm": "0.875rem", "base": "1rem", "lg": "1.25rem", "xl": "1.5rem"},
            "fontWeight": {"normal": "400", "bold": "600"},
        },
        "spacing": {"sm": "0.5rem", "md": "1rem", "lg": "2rem"},
        "borderRadius": {"none": "0", "md": "0.25rem"},
    },
}


def preset_names() -> list[str]:
    return sorted(_PRESETS)


def get_preset(name: str) -> dict[str, Any] | None:
    """
    Return a copy of a preset's token tree.

    Args:
        name: Preset name

    Returns:
        Token tree, or None if no such preset exists
    """
    tokens = _PRESETS.get(name)
    if tokens is None:
        return None
    return copy.deepcopy(tokens)
