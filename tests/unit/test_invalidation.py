"""Tests for recompile-on-change hooks."""

from __future__ import annotations

import logging

import pytest

from pagesmith.compiler.content_compiler import ContentCompiler
from pagesmith.compiler.invalidation import SiteInvalidator
from pagesmith.compiler.metadata import MetadataGatherer
from pagesmith.compiler.stores import (
    InMemoryFragmentStore,
    InMemoryNavigationStore,
    InMemoryPageStore,
    InMemorySettingsStore,
)
from pagesmith.specs.document import (
    FragmentKind,
    FragmentSpec,
    NavigationSpec,
    PageSpec,
    PublishStatus,
)
from pagesmith.specs.theme import ThemeSpec
from pagesmith.themes.store import ThemeStore


@pytest.fixture
def published_pages(page_store: InMemoryPageStore) -> InMemoryPageStore:
    nav_node = {"type": "Navigation", "props": {"id": "n", "navigationId": "main"}}
    page_store.save(PageSpec(id="b", site_id="acme", content=[nav_node], status=PublishStatus.PUBLISHED))
    page_store.save(PageSpec(id="a", site_id="acme", content=[nav_node], status=PublishStatus.PUBLISHED))
    page_store.save(PageSpec(id="draft", site_id="acme", content=[nav_node]))
    page_store.save(PageSpec(id="other", site_id="other", status=PublishStatus.PUBLISHED))
    return page_store


@pytest.fixture
def invalidator(
    metadata: MetadataGatherer,
    compiler: ContentCompiler,
    published_pages: InMemoryPageStore,
    navigation_store: InMemoryNavigationStore,
    settings_store: InMemorySettingsStore,
    theme_store: ThemeStore,
    fragment_store: InMemoryFragmentStore,
) -> SiteInvalidator:
    invalidator = SiteInvalidator(metadata, compiler, published_pages)
    invalidator.attach(
        navigations=navigation_store,
        settings=settings_store,
        themes=theme_store,
        fragments=fragment_store,
    )
    return invalidator


class TestNavigationChange:
    """Publishing a navigation recompiles the site's published pages."""

    def test_recompiles_published_pages_only(
        self, invalidator: SiteInvalidator, published_pages: InMemoryPageStore
    ) -> None:
        assert invalidator.navigation_changed("acme") == 2
        assert published_pages.get("a").compiled is not None
        assert published_pages.get("b").compiled is not None
        assert published_pages.get("draft").compiled is None
        assert published_pages.get("other").compiled is None

    def test_publish_triggers_recompile(
        self,
        invalidator: SiteInvalidator,
        navigation_store: InMemoryNavigationStore,
        published_pages: InMemoryPageStore,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.INFO, logger="pagesmith.compiler.invalidation"):
            navigation_store.save(
                NavigationSpec(
                    id="main",
                    site_id="acme",
                    name="Main",
                    status=PublishStatus.PUBLISHED,
                    structure=[{"label": "New", "url": "/new"}],
                )
            )
        compiled = published_pages.get("a").compiled
        assert compiled["content"][0]["props"]["navigationData"]["structure"] == [
            {"label": "New", "url": "/new"}
        ]
        assert compiled["metadata"]["navigations"][0]["structure"] == [{"label": "New", "url": "/new"}]
        assert "Recompiled 2 pages" in caplog.text

    def test_unpublish_embeds_none(
        self,
        invalidator: SiteInvalidator,
        navigation_store: InMemoryNavigationStore,
        published_pages: InMemoryPageStore,
    ) -> None:
        navigation_store.save(NavigationSpec(id="main", site_id="acme", name="Main"))
        compiled = published_pages.get("a").compiled
        assert compiled["content"][0]["props"]["navigationData"] is None
        assert compiled["metadata"]["navigations"] == []

    def test_draft_save_does_not_recompile(
        self,
        invalidator: SiteInvalidator,
        navigation_store: InMemoryNavigationStore,
        published_pages: InMemoryPageStore,
    ) -> None:
        navigation_store.save(NavigationSpec(id="draft", site_id="acme", name="Still draft"))
        assert published_pages.get("a").compiled is None


class TestOtherChanges:
    def test_settings_change_forgets_metadata(
        self,
        invalidator: SiteInvalidator,
        metadata: MetadataGatherer,
        settings_store: InMemorySettingsStore,
    ) -> None:
        metadata.gather("acme")
        settings_store.put("acme", {"siteName": "Renamed"})
        assert metadata.gather("acme").settings == {"siteName": "Renamed"}

    def test_theme_activation_forgets_metadata(
        self, invalidator: SiteInvalidator, metadata: MetadataGatherer, theme_store: ThemeStore
    ) -> None:
        metadata.gather("acme")
        replacement = theme_store.create("Replacement", site_id="acme")
        theme_store.activate(replacement.id)
        assert metadata.gather("acme").theme["name"] == "Replacement"

    def test_adding_active_theme_forgets_metadata(
        self, invalidator: SiteInvalidator, metadata: MetadataGatherer, theme_store: ThemeStore
    ) -> None:
        theme_store.add(ThemeSpec(id=40, site_id="acme", name="First", slug="first", active=True))
        assert metadata.gather("acme").theme["id"] == 40
        theme_store.add(ThemeSpec(id=41, site_id="acme", name="Second", slug="second", active=True))
        assert theme_store.get_active("acme").id == 41
        assert metadata.gather("acme").theme["id"] == 41

    def test_adding_inactive_theme_keeps_metadata(
        self, invalidator: SiteInvalidator, metadata: MetadataGatherer, theme_store: ThemeStore
    ) -> None:
        before = metadata.gather("acme").theme
        theme_store.add(ThemeSpec(id=42, site_id="acme", name="Spare", slug="spare"))
        assert metadata.gather("acme").theme == before


class TestFragmentChange:
    """Editing a header or footer recompiles the pages that render it."""

    @pytest.fixture
    def fragment_pages(self, published_pages: InMemoryPageStore) -> InMemoryPageStore:
        published_pages.save(
            PageSpec(id="via-layout", site_id="acme", layout_id="default", status=PublishStatus.PUBLISHED)
        )
        published_pages.save(
            PageSpec(id="direct", site_id="acme", footer_id="ftr", status=PublishStatus.PUBLISHED)
        )
        published_pages.save(
            PageSpec(
                id="override",
                site_id="acme",
                layout_id="default",
                header_id="alt",
                footer_id="alt-footer",
                status=PublishStatus.PUBLISHED,
            )
        )
        published_pages.save(PageSpec(id="draft-layout", site_id="acme", layout_id="default"))
        return published_pages

    def test_header_edit_recompiles_layout_pages(
        self,
        invalidator: SiteInvalidator,
        fragment_store: InMemoryFragmentStore,
        fragment_pages: InMemoryPageStore,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        header = FragmentSpec(
            id="hdr",
            site_id="acme",
            kind=FragmentKind.HEADER,
            content=[{"type": "Text", "props": {"id": "banner", "color": "colors.text"}}],
        )
        with caplog.at_level(logging.INFO, logger="pagesmith.compiler.invalidation"):
            fragment_store.add_fragment(header)

        compiled = fragment_pages.get("via-layout").compiled
        assert compiled["content"][0]["props"] == {"id": "banner", "color": "#111827"}
        assert fragment_pages.get("direct").compiled is None
        assert fragment_pages.get("override").compiled is None
        assert fragment_pages.get("draft-layout").compiled is None
        assert fragment_pages.get("a").compiled is None
        assert "Recompiled 1 pages after fragment change" in caplog.text

    def test_footer_edit_reaches_direct_and_layout_pages(
        self, invalidator: SiteInvalidator, fragment_pages: InMemoryPageStore
    ) -> None:
        assert invalidator.fragment_changed("acme", "ftr") == 2
        assert fragment_pages.get("direct").compiled is not None
        assert fragment_pages.get("via-layout").compiled is not None

    def test_delete_drops_fragment_content(
        self,
        invalidator: SiteInvalidator,
        fragment_store: InMemoryFragmentStore,
        fragment_pages: InMemoryPageStore,
    ) -> None:
        assert fragment_store.delete_fragment("hdr") is True
        content = fragment_pages.get("via-layout").compiled["content"]
        assert [node["props"]["id"] for node in content] == ["copy"]
        assert fragment_store.delete_fragment("hdr") is False

    def test_other_site_is_untouched(
        self, invalidator: SiteInvalidator, fragment_pages: InMemoryPageStore
    ) -> None:
        assert invalidator.fragment_changed("other", "hdr") == 0
