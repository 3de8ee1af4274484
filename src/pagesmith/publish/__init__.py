"""
Theme section storage and stylesheet publishing.
"""

from pagesmith.publish.page_css import PageCssMerger
from pagesmith.publish.pipeline import (
    PublishPipeline,
    PublishResult,
    PublishValidation,
    ThemeStylesheetBuilder,
)
from pagesmith.publish.sections import REQUIRED_SECTIONS, SectionStore, validate_section_name
from pagesmith.publish.storage import BlobStorage, InMemoryBlobStorage, LocalBlobStorage

__all__ = [
    "BlobStorage",
    "InMemoryBlobStorage",
    "LocalBlobStorage",
    "PageCssMerger",
    "PublishPipeline",
    "PublishResult",
    "PublishValidation",
    "REQUIRED_SECTIONS",
    "SectionStore",
    "ThemeStylesheetBuilder",
    "validate_section_name",
]
