"""
Page compilation: fragment merging, token resolution, metadata.
"""

from pagesmith.compiler.cache import Cache, CacheDomain, CacheKey, InMemoryCache
from pagesmith.compiler.content_compiler import ContentCompiler
from pagesmith.compiler.invalidation import SiteInvalidator
from pagesmith.compiler.metadata import DEFAULT_METADATA_TTL, MetadataGatherer
from pagesmith.compiler.stores import (
    InMemoryFragmentStore,
    InMemoryNavigationStore,
    InMemoryPageStore,
    InMemorySettingsStore,
)

__all__ = [
    "Cache",
    "CacheDomain",
    "CacheKey",
    "ContentCompiler",
    "DEFAULT_METADATA_TTL",
    "InMemoryCache",
    "InMemoryFragmentStore",
    "InMemoryNavigationStore",
    "InMemoryPageStore",
    "InMemorySettingsStore",
    "MetadataGatherer",
    "SiteInvalidator",
]
