"""
Site metadata gathered once per compiled page.

Navigation menus, site settings and the active theme summary are the same
for every page of a site, so they are cached per site and forgotten when
any of them changes.
"""

from __future__ import annotations

import logging
from typing import Any

from pagesmith.compiler.cache import Cache, CacheDomain, CacheKey
from pagesmith.compiler.stores import ActiveThemeSource, NavigationStore, SettingsStore
from pagesmith.errors import SettingsUnavailable
from pagesmith.logging import log_with_context
from pagesmith.specs.document import PageMetadata

logger = logging.getLogger(__name__)

DEFAULT_METADATA_TTL = 3600


class MetadataGatherer:
    """
    Builds and caches ``PageMetadata`` for a site.

    Args:
        navigations: Source of published navigation menus
        settings: Source of site settings
        themes: Source of the active theme
        cache: Cache shared with other per-site consumers
        ttl: Seconds before a cached entry is rebuilt
    """

    def __init__(
        self,
        navigations: NavigationStore,
        settings: SettingsStore,
        themes: ActiveThemeSource,
        cache: Cache,
        ttl: float = DEFAULT_METADATA_TTL,
    ):
        self.navigations = navigations
        self.settings = settings
        self.themes = themes
        self.cache = cache
        self.ttl = ttl

    @staticmethod
    def cache_key(site_id: str | None) -> CacheKey:
        return CacheKey(CacheDomain.PAGE_METADATA, site_id)

    def gather(self, site_id: str | None) -> PageMetadata:
        return self.cache.remember(self.cache_key(site_id), self.ttl, lambda: self._build(site_id))

    def invalidate(self, site_id: str | None) -> None:
        logger.debug("Forgetting page metadata for site %s", site_id)
        self.cache.forget(self.cache_key(site_id))

    def _build(self, site_id: str | None) -> PageMetadata:
        navigations = sorted(
            self.navigations.list_published(site_id), key=lambda n: (n.name, str(n.id))
        )
        theme = self.themes.get_active(site_id)
        if theme is None:
            log_with_context(logger, logging.WARNING, "No active theme", site_id=site_id)

        return PageMetadata(
            navigations=[n.embed() for n in navigations],
            settings=self._load_settings(site_id),
            theme=theme.summary() if theme else None,
        )

    def _load_settings(self, site_id: str | None) -> dict[str, Any] | None:
        try:
            settings = self.settings.get(site_id)
        except SettingsUnavailable as exc:
            log_with_context(
                logger, logging.WARNING, "Site settings unavailable", site_id=site_id, error=exc.message
            )
            return None
        return settings
