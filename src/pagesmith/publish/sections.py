"""
Per-theme CSS section store.

Each theme builder step saves its CSS as one section file under the theme's
folder: ``themes/{id}/{id}_{section}.css``. Section names are
``variables``, ``header``, ``footer`` or ``template-<name>``.
"""

from __future__ import annotations

import logging
import re
import threading

from pagesmith.errors import ErrorContext, InvalidSectionError, StorageError
from pagesmith.logging import log_with_context
from pagesmith.publish.storage import BlobStorage

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS: tuple[str, ...] = ("variables", "header", "footer")
TEMPLATE_PREFIX = "template-"

_SECTION_NAME = re.compile(r"^(variables|header|footer|template-[A-Za-z0-9_-]+)$")


def validate_section_name(section: str) -> str:
    """
    Check a section name against the naming convention.

    Raises:
        InvalidSectionError: name is not a known section or ``template-*``
    """
    if not _SECTION_NAME.match(section):
        raise InvalidSectionError(
            f"Invalid section name: {section!r}", ErrorContext(section=section)
        )
    return section


def theme_folder(theme_id: int | str) -> str:
    return f"themes/{theme_id}"


def section_path(theme_id: int | str, section: str) -> str:
    return f"{theme_folder(theme_id)}/{theme_id}_{section}.css"


def master_path(theme_id: int | str) -> str:
    return f"{theme_folder(theme_id)}/{theme_id}.css"


class SectionStore:
    """
    Stores generated CSS sections for themes.

    Writes are last-writer-wins. Writes to the same (theme, section) pair
    are serialized; different sections never wait on each other.
    """

    REQUIRED_SECTIONS = REQUIRED_SECTIONS

    def __init__(self, storage: BlobStorage):
        self.storage = storage
        self._locks: dict[tuple[str, str], threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, theme_id: int | str, section: str) -> threading.Lock:
        key = (str(theme_id), section)
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def save(self, theme_id: int | str, section: str, css: str) -> str:
        """
        Save (overwrite) one section.

        Returns:
            Storage key the section was written to

        Raises:
            InvalidSectionError: section name is not valid
            StorageError: write failed
        """
        validate_section_name(section)
        path = section_path(theme_id, section)
        with self._lock_for(theme_id, section):
            self.storage.put(path, css)
        logger.debug(f"Saved section {section} for theme {theme_id} ({len(css)} bytes)")
        return path

    def get(self, theme_id: int | str, section: str) -> str | None:
        validate_section_name(section)
        return self.storage.get(section_path(theme_id, section))

    def exists(self, theme_id: int | str, section: str) -> bool:
        validate_section_name(section)
        return self.storage.exists(section_path(theme_id, section))

    def list_section_files(self, theme_id: int | str) -> list[str]:
        """File names matching ``{theme_id}_*.css`` in the theme folder."""
        pattern = re.compile(rf"^{re.escape(str(theme_id))}_.*\.css$")
        return [name for name in self.storage.list_files(theme_folder(theme_id)) if pattern.match(name)]

    def list_sections(self, theme_id: int | str) -> list[str]:
        """Section names present for a theme, in file-name order."""
        prefix = f"{theme_id}_"
        sections = []
        for name in self.list_section_files(theme_id):
            section = name[len(prefix) : -len(".css")]
            if _SECTION_NAME.match(section):
                sections.append(section)
        return sections

    def template_sections(self, theme_id: int | str) -> list[str]:
        """Saved ``template-*`` sections, sorted lexically."""
        return sorted(s for s in self.list_sections(theme_id) if s.startswith(TEMPLATE_PREFIX))

    def delete(self, theme_id: int | str, section: str) -> bool:
        """Best-effort delete of one section; True if it was removed."""
        validate_section_name(section)
        try:
            with self._lock_for(theme_id, section):
                return self.storage.delete(section_path(theme_id, section))
        except StorageError as exc:
            log_with_context(
                logger,
                logging.WARNING,
                "Failed to delete section",
                theme_id=theme_id,
                section=section,
                error=exc.message,
            )
            return False

    def delete_all(self, theme_id: int | str) -> bool:
        """Best-effort delete of every section; True only if all were removed."""
        ok = True
        for section in self.list_sections(theme_id):
            ok = self.delete(theme_id, section) and ok
        return ok

    def delete_theme_folder(self, theme_id: int | str) -> bool:
        """Remove the theme folder, sections and master stylesheet included."""
        try:
            return self.storage.delete_folder(theme_folder(theme_id))
        except StorageError as exc:
            log_with_context(
                logger,
                logging.WARNING,
                "Failed to delete theme folder",
                theme_id=theme_id,
                error=exc.message,
            )
            return False
