"""
Theme publish pipeline.

Publishing validates that the required sections exist, concatenates every
section in cascade order (variables, header, footer, then templates sorted
by name) and writes one master stylesheet per theme. The returned URL
carries a cache-busting version that strictly increases per theme.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pagesmith.css.aggregator import ThemeStep, generate_section_css, section_name_for_step
from pagesmith.errors import MissingSectionsError
from pagesmith.logging import log_with_context
from pagesmith.publish.sections import REQUIRED_SECTIONS, SectionStore, master_path
from pagesmith.publish.storage import BlobStorage
from pagesmith.specs.theme import ThemeSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishValidation:
    """Outcome of a publish precondition check."""

    missing_sections: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing_sections

    def to_dict(self) -> dict[str, Any]:
        return {"missingSections": list(self.missing_sections)}


@dataclass(frozen=True)
class PublishResult:
    """A published master stylesheet."""

    theme_id: int | str
    path: str
    url: str
    version: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "themeId": self.theme_id,
            "path": self.path,
            "url": self.url,
            "version": self.version,
        }


class PublishPipeline:
    """
    Validates, merges and publishes theme sections.

    Args:
        sections: Section store the theme's CSS was saved to
        storage: Storage the master stylesheet is written to
        clock: Wall clock in seconds; the URL version derives from it
    """

    def __init__(
        self,
        sections: SectionStore,
        storage: BlobStorage | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.sections = sections
        self.storage = storage if storage is not None else sections.storage
        self.clock = clock
        self._versions: dict[str, int] = {}
        self._lock = threading.Lock()

    def validate_required_sections(self, theme_id: int | str) -> list[str]:
        """Required sections not yet saved; empty means publishable."""
        return [s for s in REQUIRED_SECTIONS if not self.sections.exists(theme_id, s)]

    def validate(self, theme_id: int | str) -> PublishValidation:
        return PublishValidation(missing_sections=self.validate_required_sections(theme_id))

    def cascade(self, theme_id: int | str) -> list[str]:
        """Section names in the order they are concatenated."""
        return [*REQUIRED_SECTIONS, *self.sections.template_sections(theme_id)]

    def merge_sections(self, theme_id: int | str) -> str:
        """
        Concatenate all sections in cascade order.

        Empty or absent sections are skipped; the rest are separated by a
        blank line. The result depends only on section contents, never on
        the order they were saved in.
        """
        chunks = []
        for section in self.cascade(theme_id):
            css = self.sections.get(theme_id, section)
            if css and css.strip():
                chunks.append(css.strip())
        return "\n\n".join(chunks).strip()

    def publish(self, theme_id: int | str) -> PublishResult:
        """
        Publish a theme's master stylesheet.

        Raises:
            MissingSectionsError: a required section is missing (nothing is written)
            StorageError: the master stylesheet could not be written
        """
        missing = self.validate_required_sections(theme_id)
        if missing:
            log_with_context(
                logger,
                logging.WARNING,
                "Theme not publishable",
                theme_id=theme_id,
                missing=missing,
            )
            raise MissingSectionsError(theme_id, missing)

        css = self.merge_sections(theme_id)
        path = master_path(theme_id)
        self.storage.put(path, css)
        version = self._next_version(theme_id)
        url = f"{self.storage.get_url(path)}?v={version}"

        log_with_context(
            logger,
            logging.INFO,
            "Published theme stylesheet",
            theme_id=theme_id,
            path=path,
            version=version,
            size=len(css),
        )
        return PublishResult(theme_id=theme_id, path=path, url=url, version=version)

    def _next_version(self, theme_id: int | str) -> int:
        key = str(theme_id)
        with self._lock:
            now = int(self.clock())
            last = self._versions.get(key)
            version = now if last is None else max(now, last + 1)
            self._versions[key] = version
            return version


class ThemeStylesheetBuilder:
    """
    Generate every section for a theme and publish it in one call.

    Sections are produced by the same CSS module the editor preview uses:
    variables from the theme tokens, component CSS for each fragment tree.

    Example:
        builder = ThemeStylesheetBuilder(pipeline)
        result = builder.build(theme, header=header_tree, footer=footer_tree,
                               templates={"blog": blog_tree})
    """

    def __init__(self, pipeline: PublishPipeline):
        self.pipeline = pipeline

    @property
    def sections(self) -> SectionStore:
        return self.pipeline.sections

    def save_step(
        self,
        theme: ThemeSpec,
        step: ThemeStep,
        tree: Mapping[str, Any] | None = None,
        index: int | str | None = None,
    ) -> str:
        """Generate and save one step's section; returns the section name."""
        section = section_name_for_step(step, index)
        css = generate_section_css(step, theme.tokens, tree)
        self.sections.save(theme.id, section, css)
        return section

    def build(
        self,
        theme: ThemeSpec,
        *,
        header: Mapping[str, Any] | None = None,
        footer: Mapping[str, Any] | None = None,
        templates: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> PublishResult:
        """
        Save variables plus any given fragment sections, then publish.

        Fragments left as None keep whatever section was saved before.

        Raises:
            MissingSectionsError: header or footer never saved
            StorageError: a write failed
        """
        self.save_step(theme, ThemeStep.SETTINGS)
        if header is not None:
            self.save_step(theme, ThemeStep.HEADER, header)
        if footer is not None:
            self.save_step(theme, ThemeStep.FOOTER, footer)
        for name, tree in sorted((templates or {}).items()):
            self.save_step(theme, ThemeStep.TEMPLATE, tree, index=name)
        return self.pipeline.publish(theme.id)
