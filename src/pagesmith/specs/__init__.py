"""
Pagesmith model types.

Pydantic models for themes, pages, fragments and compiled documents, plus
the closed component vocabulary.
"""

from pagesmith.specs.component import ComponentFamily, ComponentKind, parse_kind
from pagesmith.specs.document import (
    CompiledDocument,
    FragmentKind,
    FragmentSpec,
    LayoutSpec,
    NavigationSpec,
    PageMetadata,
    PageSpec,
    PublishStatus,
)
from pagesmith.specs.theme import ThemeSpec

__all__ = [
    # Components
    "ComponentFamily",
    "ComponentKind",
    "parse_kind",
    # Documents
    "CompiledDocument",
    "FragmentKind",
    "FragmentSpec",
    "LayoutSpec",
    "NavigationSpec",
    "PageMetadata",
    "PageSpec",
    "PublishStatus",
    # Themes
    "ThemeSpec",
]
