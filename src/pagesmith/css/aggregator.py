"""
CSS aggregator.

One traversal and one builder table serve both the live preview
(``build_preview_css``) and the batch section generator
(``generate_section_css``), so the two always agree for the same tree and
theme.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pagesmith.css.builders import BUILDERS, StyleContext
from pagesmith.errors import TraversalAnomaly
from pagesmith.logging import log_with_context
from pagesmith.specs.component import (
    MAX_NODE_DEPTH,
    css_class_name,
    is_component_like,
    is_subtree,
    node_id,
    node_kind,
    node_props,
)
from pagesmith.themes.css_generator import generate_variables_css
from pagesmith.themes.resolver import TokenResolver

logger = logging.getLogger(__name__)


class ThemeStep(StrEnum):
    """Theme builder steps, each stored as one CSS section."""

    SETTINGS = "settings"
    HEADER = "header"
    FOOTER = "footer"
    TEMPLATE = "template"


def section_name_for_step(step: ThemeStep, index: int | str | None = None) -> str:
    """
    Section a step's CSS is saved under.

    Examples:
        settings -> variables, header -> header, template + 2 -> template-2
    """
    match step:
        case ThemeStep.SETTINGS:
            return "variables"
        case ThemeStep.HEADER:
            return "header"
        case ThemeStep.FOOTER:
            return "footer"
        case ThemeStep.TEMPLATE:
            if index is None or index == "":
                raise ValueError("Template sections need an index")
            return f"template-{index}"


# =============================================================================
# Traversal
# =============================================================================


def collect_components(tree: Mapping[str, Any] | None) -> list[dict[str, Any]]:
    """
    Every component node in a tree, parents before children, in document order.

    Walks the tree's ``content``, its ``zones`` and ``root.zones``, each
    node's ``zones``, ``props.items``, any other prop holding a node or a
    list of nodes, and nested sub-trees with their own ``content``.
    Nodes nested deeper than MAX_NODE_DEPTH are skipped with a warning.
    """
    collected: list[dict[str, Any]] = []
    if not isinstance(tree, Mapping):
        return collected
    depth = 0

    def visit(node: Any) -> None:
        nonlocal depth
        if not isinstance(node, dict):
            return
        if depth >= MAX_NODE_DEPTH:
            log_with_context(
                logger,
                logging.WARNING,
                f"Component nested deeper than {MAX_NODE_DEPTH} levels, descendants skipped",
                node_id=node_id(node),
            )
            return
        collected.append(node)
        depth += 1
        try:
            visit_children(node)
        finally:
            depth -= 1

    def visit_children(node: dict[str, Any]) -> None:
        zones = node.get("zones")
        if isinstance(zones, Mapping):
            visit_zones(zones)

        props = node.get("props")
        if not isinstance(props, Mapping):
            return
        items = props.get("items")
        if isinstance(items, list):
            for child in items:
                visit(child)
        for key, value in props.items():
            if key == "items":
                continue
            visit_value(value)

    def visit_value(value: Any) -> None:
        if isinstance(value, list):
            for entry in value:
                if is_component_like(entry):
                    visit(entry)
                elif is_subtree(entry):
                    visit_tree(entry)
        elif is_component_like(value):
            visit(value)
        elif is_subtree(value):
            visit_tree(value)

    def visit_zones(zones: Mapping[str, Any]) -> None:
        for zone in zones.values():
            if isinstance(zone, list):
                for child in zone:
                    visit(child)
            elif is_component_like(zone):
                visit(zone)

    def visit_tree(subtree: Mapping[str, Any]) -> None:
        content = subtree.get("content")
        if isinstance(content, list):
            for node in content:
                visit(node)
        zones = subtree.get("zones")
        if isinstance(zones, Mapping):
            visit_zones(zones)
        root = subtree.get("root")
        if isinstance(root, Mapping) and isinstance(root.get("zones"), Mapping):
            visit_zones(root["zones"])

    visit_tree(tree)
    return collected


# =============================================================================
# CSS generation
# =============================================================================


def build_component_css(node: dict[str, Any], resolver: TokenResolver) -> str:
    """
    CSS for a single node, or an empty string.

    Raises:
        TraversalAnomaly: node is malformed or of an unknown type
    """
    props = node_props(node)
    kind = node_kind(node)
    ctx = StyleContext(
        kind=kind,
        class_name=css_class_name(kind, node),
        props=props,
        resolver=resolver,
    )
    return BUILDERS[kind](ctx).render()


def build_components_css(
    tree: Mapping[str, Any] | None, tokens: Mapping[str, Any] | None = None
) -> str:
    """Component CSS for every node in a tree, without theme variables."""
    resolver = TokenResolver(tokens)
    chunks = []
    for node in collect_components(tree):
        try:
            css = build_component_css(node, resolver)
        except TraversalAnomaly as exc:
            log_with_context(
                logger,
                logging.WARNING,
                "Skipping component without CSS",
                node_id=node_id(node),
                error=exc.message,
            )
            continue
        if css:
            chunks.append(css)
    return "\n\n".join(chunks)


def build_preview_css(
    tree: Mapping[str, Any] | None,
    tokens: Mapping[str, Any] | None = None,
    *,
    include_variables: bool = True,
) -> str:
    """
    CSS for the interactive editor preview.

    Args:
        tree: Editor tree (``content``/``root``/``zones``)
        tokens: Theme token tree
        include_variables: Prepend the ``:root`` variables block when tokens exist

    Returns:
        Variables (optional) followed by component CSS, blank-line separated
    """
    parts = []
    if include_variables and tokens:
        parts.append(generate_variables_css(tokens))
    parts.append(build_components_css(tree, tokens))
    return "\n\n".join(part for part in parts if part.strip())


def generate_section_css(
    step: ThemeStep,
    tokens: Mapping[str, Any] | None = None,
    tree: Mapping[str, Any] | None = None,
) -> str:
    """
    CSS for one theme builder step.

    ``settings`` yields the variables block; fragment steps yield component
    CSS only, so variables are not duplicated across sections.
    """
    match step:
        case ThemeStep.SETTINGS:
            return generate_variables_css(tokens) if tokens is not None else ""
        case ThemeStep.HEADER | ThemeStep.FOOTER | ThemeStep.TEMPLATE:
            if tree is None:
                return ""
            return build_components_css(tree, tokens)
