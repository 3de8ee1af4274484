"""Tests for spec models, the component vocabulary and error types."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pagesmith.errors import (
    ConfigurationGap,
    ErrorContext,
    MissingSectionsError,
    PagesmithError,
    SettingsUnavailable,
    TraversalAnomaly,
    ValidationFailure,
    make_traversal_anomaly,
)
from pagesmith.specs.component import (
    ComponentFamily,
    ComponentKind,
    css_class_name,
    is_component_like,
    is_subtree,
    node_id,
    node_kind,
    node_props,
    parse_kind,
)
from pagesmith.specs.document import CompiledDocument, NavigationSpec, PageSpec
from pagesmith.specs.theme import ThemeSpec


class TestComponentVocabulary:
    def test_parse_kind(self) -> None:
        assert parse_kind("Heading") is ComponentKind.HEADING
        assert parse_kind("heading") is ComponentKind.HEADING
        assert parse_kind("h2") is ComponentKind.HEADING
        assert parse_kind("rich-text") is ComponentKind.RICH_TEXT
        assert parse_kind("Carousel") is None
        assert parse_kind(None) is None

    def test_families(self) -> None:
        assert ComponentKind.BOX.family is ComponentFamily.CONTAINER
        assert ComponentKind.BUTTON.family is ComponentFamily.INTERACTIVE
        assert ComponentKind.LINK.family is ComponentFamily.TYPOGRAPHY
        assert all(kind.family for kind in ComponentKind)

    def test_class_names(self) -> None:
        assert css_class_name(ComponentKind.HEADING, {"props": {"id": "abc"}}) == "heading-abc"
        assert css_class_name(ComponentKind.TEXT_INPUT, {"id": "x", "props": {}}) == "textinput-x"
        assert css_class_name(ComponentKind.BOX, {"props": {}}) == "box-box"

    def test_node_id_prefers_props(self) -> None:
        assert node_id({"id": "outer", "props": {"id": "inner"}}) == "inner"
        assert node_id({"id": "outer", "props": {}}) == "outer"
        assert node_id({"props": {"id": ""}}) is None

    def test_component_like(self) -> None:
        assert is_component_like({"type": "Text", "props": {}})
        assert is_component_like({"type": "Text"})
        assert is_component_like({"type": "Custom", "props": {}})
        assert not is_component_like({"type": "theme", "value": "colors.text"})
        assert not is_component_like({"mobile": "1px"})
        assert not is_component_like({"type": "image", "url": "/a.png"})
        assert not is_component_like({"type": "h2"})

    def test_subtree(self) -> None:
        assert is_subtree({"content": []})
        assert not is_subtree({"content": "x"})

    def test_malformed_nodes(self) -> None:
        with pytest.raises(TraversalAnomaly):
            node_props("text")
        with pytest.raises(TraversalAnomaly) as exc_info:
            node_kind({"type": "Nope", "props": {"id": "n1"}})
        assert exc_info.value.context.node_id == "n1"
        assert node_props({"type": "Text", "props": None}) == {}


class TestModels:
    def test_theme_is_frozen(self) -> None:
        theme = ThemeSpec(id=1, name="T", slug="t")
        with pytest.raises(ValidationError):
            theme.name = "changed"

    def test_theme_summary(self) -> None:
        theme = ThemeSpec(id=1, name="T", slug="t", version="2.0.0")
        assert theme.summary() == {"id": 1, "name": "T", "slug": "t", "version": "2.0.0"}

    def test_page_tree(self) -> None:
        page = PageSpec(id="p", content=[{"type": "Text"}], root={"props": {}})
        assert page.tree() == {"content": [{"type": "Text"}], "root": {"props": {}}, "zones": {}}

    def test_navigation_embed(self) -> None:
        nav = NavigationSpec(id="n", name="Main", structure=[{"label": "Home"}])
        assert nav.embed() == {"id": "n", "name": "Main", "structure": [{"label": "Home"}]}

    def test_compiled_document_omits_empty_zones(self) -> None:
        data = CompiledDocument().to_dict()
        assert set(data) == {"content", "root", "metadata"}


class TestErrors:
    def test_hierarchy(self) -> None:
        assert issubclass(SettingsUnavailable, ConfigurationGap)
        assert issubclass(MissingSectionsError, ValidationFailure)
        assert issubclass(TraversalAnomaly, PagesmithError)

    def test_context_formatting(self) -> None:
        error = PagesmithError("boom", ErrorContext(site_id="acme", theme_id=3, section="footer"))
        assert str(error) == "site=acme theme=3 section=footer: boom"
        assert ErrorContext().format() == "pagesmith"

    def test_missing_sections(self) -> None:
        error = MissingSectionsError(4, ["header", "footer"])
        assert error.missing == ["header", "footer"]
        assert str(error) == "theme=4: Missing required sections: header, footer"

    def test_make_traversal_anomaly(self) -> None:
        assert make_traversal_anomaly("bad").context is None
        assert make_traversal_anomaly("bad", "n1").context.node_id == "n1"
