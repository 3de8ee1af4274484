"""
Site-wide stylesheet built from every published page's own CSS.
"""

from __future__ import annotations

import logging

from pagesmith.compiler.cache import Cache, CacheDomain, CacheKey
from pagesmith.compiler.stores import PageStore

logger = logging.getLogger(__name__)

DEFAULT_PAGES_CSS_TTL = 3600


class PageCssMerger:
    """
    Merges the ``page_css`` of a site's published pages.

    The result is cached per site; call ``invalidate`` when a page is
    published, unpublished or its CSS regenerated.
    """

    def __init__(self, pages: PageStore, cache: Cache, ttl: float = DEFAULT_PAGES_CSS_TTL):
        self.pages = pages
        self.cache = cache
        self.ttl = ttl

    @staticmethod
    def cache_key(site_id: str | None) -> CacheKey:
        return CacheKey(CacheDomain.PAGES_CSS, site_id)

    def merged_css(self, site_id: str | None) -> str:
        return self.cache.remember(self.cache_key(site_id), self.ttl, lambda: self._merge(site_id))

    def invalidate(self, site_id: str | None) -> None:
        self.cache.forget(self.cache_key(site_id))

    def _merge(self, site_id: str | None) -> str:
        pages = sorted(self.pages.list_published(site_id), key=lambda p: p.id)
        chunks = [p.page_css.strip() for p in pages if p.page_css and p.page_css.strip()]
        logger.debug("Merged CSS of %d pages for site %s", len(chunks), site_id)
        return "\n\n".join(chunks).strip()
