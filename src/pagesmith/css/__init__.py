"""
Component CSS generation shared by the live preview and publishing.
"""

from pagesmith.css.aggregator import (
    ThemeStep,
    build_component_css,
    build_components_css,
    build_preview_css,
    collect_components,
    generate_section_css,
    section_name_for_step,
)
from pagesmith.css.builders import BUILDERS, StyleContext
from pagesmith.css.colors import resolve_color, resolve_style_value
from pagesmith.css.responsive import BREAKPOINTS, Breakpoint
from pagesmith.css.rules import RuleSet

__all__ = [
    "BREAKPOINTS",
    "BUILDERS",
    "Breakpoint",
    "RuleSet",
    "StyleContext",
    "ThemeStep",
    "build_component_css",
    "build_components_css",
    "build_preview_css",
    "collect_components",
    "generate_section_css",
    "resolve_color",
    "resolve_style_value",
    "section_name_for_step",
]
