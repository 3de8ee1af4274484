"""
Recompile-on-change hooks.

Compiled pages embed navigation menus, header and footer content, and carry
site metadata, so a change to any of them must reach the cache and the
stored compiled documents.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from pagesmith.compiler.content_compiler import ContentCompiler
from pagesmith.compiler.metadata import MetadataGatherer
from pagesmith.compiler.stores import FragmentListener, PageStore, SiteListener
from pagesmith.logging import log_with_context
from pagesmith.specs.document import PageSpec

logger = logging.getLogger(__name__)


class _ChangeSource(Protocol):
    def on_change(self, listener: SiteListener) -> None: ...


class _FragmentChangeSource(Protocol):
    def on_change(self, listener: FragmentListener) -> None: ...


class SiteInvalidator:
    """
    Keeps cached metadata and compiled pages in step with site changes.

    Example:
        invalidator = SiteInvalidator(metadata, compiler, pages)
        invalidator.attach(navigations=nav_store, settings=settings_store, themes=theme_store)
    """

    def __init__(self, metadata: MetadataGatherer, compiler: ContentCompiler, pages: PageStore):
        self.metadata = metadata
        self.compiler = compiler
        self.pages = pages

    def attach(
        self,
        *,
        navigations: _ChangeSource | None = None,
        settings: _ChangeSource | None = None,
        themes: _ChangeSource | None = None,
        fragments: _FragmentChangeSource | None = None,
    ) -> None:
        """Subscribe to the stores' change callbacks."""
        if navigations is not None:
            navigations.on_change(self.navigation_changed)
        if settings is not None:
            settings.on_change(self.settings_changed)
        if themes is not None:
            themes.on_change(self.theme_changed)
        if fragments is not None:
            fragments.on_change(self.fragment_changed)

    def navigation_changed(self, site_id: str | None) -> int:
        """
        Forget the site's metadata and recompile its published pages.

        Returns:
            Number of pages recompiled
        """
        self.metadata.invalidate(site_id)
        recompiled = self._recompile(self.pages.list_published(site_id))
        if recompiled:
            log_with_context(
                logger,
                logging.INFO,
                f"Recompiled {recompiled} pages after navigation change",
                site_id=site_id,
            )
        return recompiled

    def fragment_changed(self, site_id: str | None, fragment_id: str) -> int:
        """
        Recompile the published pages that render a header or footer.

        A page uses the fragment when its own header/footer id, or its
        layout's, names it.

        Returns:
            Number of pages recompiled
        """
        self.metadata.invalidate(site_id)
        affected = [
            page
            for page in self.pages.list_published(site_id)
            if fragment_id in self.compiler.fragment_ids(page)
        ]
        recompiled = self._recompile(affected)
        if recompiled:
            log_with_context(
                logger,
                logging.INFO,
                f"Recompiled {recompiled} pages after fragment change",
                site_id=site_id,
                fragment_id=fragment_id,
            )
        return recompiled

    def settings_changed(self, site_id: str | None) -> None:
        self.metadata.invalidate(site_id)

    def theme_changed(self, site_id: str | None) -> None:
        self.metadata.invalidate(site_id)

    def _recompile(self, pages: Iterable[PageSpec]) -> int:
        recompiled = 0
        for page in sorted(pages, key=lambda p: p.id):
            document = self.compiler.compile(page)
            self.pages.save(page.model_copy(update={"compiled": document.to_dict()}))
            recompiled += 1
        return recompiled
