"""Shared pytest fixtures for Pagesmith tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

import pytest

from pagesmith.compiler.cache import InMemoryCache
from pagesmith.compiler.content_compiler import ContentCompiler
from pagesmith.compiler.metadata import MetadataGatherer
from pagesmith.compiler.stores import (
    InMemoryFragmentStore,
    InMemoryNavigationStore,
    InMemoryPageStore,
    InMemorySettingsStore,
)
from pagesmith.publish.pipeline import PublishPipeline
from pagesmith.publish.sections import SectionStore
from pagesmith.publish.storage import InMemoryBlobStorage
from pagesmith.specs.document import (
    FragmentKind,
    FragmentSpec,
    LayoutSpec,
    NavigationSpec,
    PublishStatus,
)
from pagesmith.themes.store import ThemeStore


class FakeClock:
    """Manually advanced clock for cache and publish tests."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_pagesmith_logger() -> Iterator[None]:
    """Undo setup_logging() calls made by CLI tests."""
    yield
    logger = logging.getLogger("pagesmith")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def tokens() -> dict[str, Any]:
    """Return a small token tree with one alias."""
    return {
        "colors": {
            "primary": {"500": "#3b82f6", "600": "#2563eb"},
            "neutral": {"900": "#111827"},
            "text": "colors.neutral.900",
        },
        "typography": {
            "fontSize": {"base": "1rem", "xl": "1.25rem"},
            "fontWeight": {"bold": "700"},
        },
        "spacing": {"md": "1rem"},
    }


@pytest.fixture
def theme_store(tokens: dict[str, Any]) -> ThemeStore:
    """Return a store with an active central theme and an active theme for site ``acme``."""
    store = ThemeStore()
    central = store.create("Central", tokens=tokens)
    store.activate(central.id)
    tenant = store.create("Acme", site_id="acme", tokens=tokens)
    store.activate(tenant.id)
    return store


@pytest.fixture
def fragment_store() -> InMemoryFragmentStore:
    header = FragmentSpec(
        id="hdr",
        site_id="acme",
        kind=FragmentKind.HEADER,
        content=[
            {"type": "Navigation", "props": {"id": "nav-1", "navigationId": {"value": "main"}}},
        ],
    )
    footer = FragmentSpec(
        id="ftr",
        site_id="acme",
        kind=FragmentKind.FOOTER,
        content=[{"type": "Text", "props": {"id": "copy", "text": "(c) Acme"}}],
    )
    layout = LayoutSpec(id="default", site_id="acme", header_id="hdr", footer_id="ftr")
    return InMemoryFragmentStore(fragments=[header, footer], layouts=[layout])


@pytest.fixture
def navigation_store() -> InMemoryNavigationStore:
    return InMemoryNavigationStore(
        [
            NavigationSpec(
                id="main",
                site_id="acme",
                name="Main",
                status=PublishStatus.PUBLISHED,
                structure=[{"label": "Home", "url": "/"}],
            ),
            NavigationSpec(id="draft", site_id="acme", name="Draft"),
        ]
    )


@pytest.fixture
def settings_store() -> InMemorySettingsStore:
    return InMemorySettingsStore({"acme": {"siteName": "Acme"}})


@pytest.fixture
def page_store() -> InMemoryPageStore:
    return InMemoryPageStore()


@pytest.fixture
def cache(clock: FakeClock) -> InMemoryCache:
    return InMemoryCache(clock=clock)


@pytest.fixture
def metadata(
    navigation_store: InMemoryNavigationStore,
    settings_store: InMemorySettingsStore,
    theme_store: ThemeStore,
    cache: InMemoryCache,
) -> MetadataGatherer:
    return MetadataGatherer(navigation_store, settings_store, theme_store, cache)


@pytest.fixture
def compiler(
    fragment_store: InMemoryFragmentStore,
    navigation_store: InMemoryNavigationStore,
    theme_store: ThemeStore,
    metadata: MetadataGatherer,
) -> ContentCompiler:
    return ContentCompiler(fragment_store, navigation_store, theme_store, metadata)


@pytest.fixture
def blob_storage() -> InMemoryBlobStorage:
    return InMemoryBlobStorage()


@pytest.fixture
def section_store(blob_storage: InMemoryBlobStorage) -> SectionStore:
    return SectionStore(blob_storage)


@pytest.fixture
def pipeline(section_store: SectionStore, clock: FakeClock) -> PublishPipeline:
    return PublishPipeline(section_store, clock=clock)
