"""
Content compiler.

Turns an editor page into a self-contained render document: the header,
body and footer are merged in render order, token references in props are
replaced with theme values, navigation menus are embedded, and site
metadata is attached at the document root. The public renderer needs no
further queries.

Nothing in here raises for bad content. A missing theme leaves references
unresolved, a missing menu embeds ``None``, and a malformed node is logged
and passed through.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, assert_never

from pagesmith.compiler.metadata import MetadataGatherer
from pagesmith.compiler.stores import ActiveThemeSource, FragmentStore, NavigationStore
from pagesmith.errors import TraversalAnomaly, make_traversal_anomaly
from pagesmith.logging import log_with_context
from pagesmith.specs.component import (
    MAX_NODE_DEPTH,
    ComponentKind,
    is_component_like,
    is_subtree,
    node_id,
    node_kind,
    node_props,
)
from pagesmith.specs.document import (
    CompiledDocument,
    FragmentKind,
    FragmentSpec,
    PageMetadata,
    PageSpec,
)
from pagesmith.specs.theme import ThemeSpec
from pagesmith.themes.resolver import MAX_ALIAS_DEPTH, TokenResolver

logger = logging.getLogger(__name__)


class ContentCompiler:
    """
    Compiles pages, fragments and bare trees.

    Example:
        compiler = ContentCompiler(fragments, navigations, themes, metadata)
        document = compiler.compile(page)
        payload = document.to_dict()
    """

    def __init__(
        self,
        fragments: FragmentStore,
        navigations: NavigationStore,
        themes: ActiveThemeSource,
        metadata: MetadataGatherer | None = None,
        *,
        max_alias_depth: int = MAX_ALIAS_DEPTH,
    ):
        self.fragments = fragments
        self.navigations = navigations
        self.themes = themes
        self.metadata = metadata
        self.max_alias_depth = max_alias_depth

    # =========================================================================
    # Public API
    # =========================================================================

    def compile(self, page: PageSpec, theme: ThemeSpec | None = None) -> CompiledDocument:
        """
        Compile a page into a render document.

        Args:
            page: Page to compile
            theme: Theme to resolve against; defaults to the site's active theme

        Returns:
            CompiledDocument with content in header, body, footer order
        """
        walker = self._walker(page.site_id, theme)
        header, footer = self.resolve_fragments(page)

        content: list[Any] = []
        zones: dict[str, Any] = {}
        for part in (header, page, footer):
            if part is None:
                continue
            content.extend(walker.nodes(part.content))
            zones.update(walker.zones(part.zones))

        metadata = self.metadata.gather(page.site_id) if self.metadata else PageMetadata()

        log_with_context(
            logger,
            logging.DEBUG,
            "Compiled page",
            site_id=page.site_id,
            page_id=page.id,
            nodes=len(content),
            header=header.id if header else None,
            footer=footer.id if footer else None,
        )
        return CompiledDocument(
            content=content,
            root=walker.value(page.root),
            zones=zones,
            metadata=metadata,
        )

    def compile_fragment(
        self, fragment: FragmentSpec, theme: ThemeSpec | None = None
    ) -> dict[str, Any]:
        """Compile a header or footer on its own; no metadata is attached."""
        return self._walker(fragment.site_id, theme).tree(fragment.tree())

    def compile_tree(
        self,
        tree: Mapping[str, Any],
        theme: ThemeSpec | None = None,
        site_id: str | None = None,
    ) -> dict[str, Any]:
        """Compile a bare ``{content, root, zones}`` tree."""
        return self._walker(site_id, theme).tree(tree)

    def fragment_ids(self, page: PageSpec) -> tuple[str | None, str | None]:
        """
        Header and footer ids a page renders with.

        A page-level id wins over the layout's; with neither, there is none.
        """
        layout = self.fragments.get_layout(page.layout_id) if page.layout_id else None
        if page.layout_id and layout is None:
            log_with_context(
                logger, logging.WARNING, "Layout not found", site_id=page.site_id, layout_id=page.layout_id
            )

        return (
            page.header_id or (layout.header_id if layout else None),
            page.footer_id or (layout.footer_id if layout else None),
        )

    def resolve_fragments(
        self, page: PageSpec
    ) -> tuple[FragmentSpec | None, FragmentSpec | None]:
        """Fetch the header and footer for a page; either may be None."""
        header_id, footer_id = self.fragment_ids(page)
        return (
            self._fetch_fragment(header_id, FragmentKind.HEADER, page.site_id),
            self._fetch_fragment(footer_id, FragmentKind.FOOTER, page.site_id),
        )

    # =========================================================================
    # Internals
    # =========================================================================

    def _walker(self, site_id: str | None, theme: ThemeSpec | None) -> _TreeWalker:
        if theme is None:
            theme = self.themes.get_active(site_id)
            if theme is None:
                log_with_context(
                    logger,
                    logging.WARNING,
                    "No active theme, token references left unresolved",
                    site_id=site_id,
                )
        tokens = theme.tokens if theme else None
        resolver = TokenResolver(tokens, max_depth=self.max_alias_depth)
        return _TreeWalker(resolver, self.navigations, site_id)

    def _fetch_fragment(
        self, fragment_id: str | None, kind: FragmentKind, site_id: str | None
    ) -> FragmentSpec | None:
        if not fragment_id:
            return None
        fragment = self.fragments.get_fragment(fragment_id)
        if fragment is None:
            log_with_context(
                logger,
                logging.WARNING,
                f"{kind.value.title()} fragment not found",
                site_id=site_id,
                fragment_id=fragment_id,
            )
        return fragment


class _TreeWalker:
    """One compile pass: a resolver, a navigation source and a site."""

    def __init__(
        self, resolver: TokenResolver, navigations: NavigationStore, site_id: str | None
    ):
        self.resolver = resolver
        self.navigations = navigations
        self.site_id = site_id
        self._depth = 0

    def tree(self, tree: Mapping[str, Any]) -> dict[str, Any]:
        compiled = dict(tree)
        if isinstance(tree.get("content"), list):
            compiled["content"] = self.nodes(tree["content"])
        if "root" in tree:
            compiled["root"] = self.value(tree["root"])
        if "zones" in tree:
            compiled["zones"] = self.zones(tree["zones"])
        return compiled

    def nodes(self, nodes: list[Any]) -> list[Any]:
        return [self.node(node) for node in nodes]

    def zones(self, zones: Any) -> Any:
        if not isinstance(zones, Mapping):
            return zones
        return {
            name: self.nodes(value) if isinstance(value, list) else self.value(value)
            for name, value in zones.items()
        }

    def node(self, node: Any) -> Any:
        if self._depth >= MAX_NODE_DEPTH:
            # Deeper content is returned untouched, not walked.
            self._report(
                node,
                make_traversal_anomaly(f"Component nested deeper than {MAX_NODE_DEPTH} levels"),
                "Component nesting too deep, passed through unresolved",
            )
            return node

        self._depth += 1
        try:
            return self._compile_node(node)
        finally:
            self._depth -= 1

    def _compile_node(self, node: Any) -> Any:
        try:
            props = node_props(node)
            kind = node_kind(node)
        except TraversalAnomaly as exc:
            self._report(node, exc, "Malformed component passed through")
            return self._passthrough(node)

        compiled = dict(node)
        compiled["props"] = self._apply_hook(kind, self.props(props))
        if "zones" in node:
            compiled["zones"] = self.zones(node["zones"])
        return compiled

    def _report(self, node: Any, exc: TraversalAnomaly, message: str) -> None:
        log_with_context(
            logger,
            logging.WARNING,
            message,
            site_id=self.site_id,
            node_id=node_id(node) if isinstance(node, dict) else None,
            error=exc.message,
        )

    def props(self, props: Mapping[str, Any]) -> dict[str, Any]:
        return {key: self.value(value) for key, value in props.items()}

    def value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self.resolver.resolve_reference(value)
        if isinstance(value, list):
            return [self.value(item) for item in value]
        if isinstance(value, Mapping):
            if is_subtree(value):
                return self.tree(value)
            if is_component_like(value):
                return self.node(value)
            return {key: self.value(item) for key, item in value.items()}
        return value

    def _passthrough(self, node: Any) -> Any:
        """Keep a malformed node's own props but still compile its sub-trees."""
        if not isinstance(node, dict):
            return node
        compiled = dict(node)
        props = node.get("props")
        if isinstance(props, dict):
            compiled["props"] = {
                key: self.tree(value) if is_subtree(value) else value for key, value in props.items()
            }
        if "zones" in node:
            compiled["zones"] = self.zones(node["zones"])
        return compiled

    def _apply_hook(self, kind: ComponentKind, props: dict[str, Any]) -> dict[str, Any]:
        match kind:
            case ComponentKind.NAVIGATION:
                return self._embed_navigation(props)
            case (
                ComponentKind.BOX
                | ComponentKind.CARD
                | ComponentKind.IMAGE
                | ComponentKind.ICON
                | ComponentKind.FORM
                | ComponentKind.TEXT_INPUT
                | ComponentKind.TEXTAREA
                | ComponentKind.SELECT
                | ComponentKind.RADIO_GROUP
                | ComponentKind.CHECKBOX
                | ComponentKind.SUBMIT_BUTTON
                | ComponentKind.BUTTON
                | ComponentKind.HEADING
                | ComponentKind.TEXT
                | ComponentKind.LINK
                | ComponentKind.RICH_TEXT
            ):
                return props
            case _:
                assert_never(kind)

    def _embed_navigation(self, props: dict[str, Any]) -> dict[str, Any]:
        raw = props.get("navigationId")
        # Editor external fields wrap the id: {"value": id}
        if isinstance(raw, Mapping):
            raw = raw.get("value")
        if raw is None or raw == "":
            return props

        navigation = self.navigations.find_published(str(raw))
        if navigation is not None and navigation.site_id != self.site_id:
            navigation = None
        if navigation is None:
            log_with_context(
                logger,
                logging.WARNING,
                "Navigation missing or unpublished",
                site_id=self.site_id,
                navigation_id=str(raw),
            )
            return {**props, "navigationData": None}
        return {**props, "navigationData": navigation.embed()}
