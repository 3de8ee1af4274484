"""
In-memory theme store.

Holds every theme for every scope (the central site is ``site_id=None``).
All mutations run under one lock, so a scope never has zero or two active
themes while an activation is in progress.
"""

from __future__ import annotations

import copy
import logging
import re
import threading
from collections.abc import Callable, Mapping
from typing import Any

from pagesmith.errors import ErrorContext, ThemeNotFoundError
from pagesmith.specs.theme import ThemeSpec
from pagesmith.themes.presets import get_preset, preset_names

logger = logging.getLogger(__name__)

ThemeListener = Callable[[str | None], None]


def slugify(text: str) -> str:
    """Convert a display name to a URL-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "theme"


def deep_merge(base: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merge ``updates`` into a copy of ``base``.

    Nested mappings merge key by key; any other value replaces the old one.
    """
    merged = copy.deepcopy(dict(base))
    for key, value in updates.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class ThemeStore:
    """
    Theme registry with scope-exclusive activation.

    Example:
        store = ThemeStore()
        store.seed_presets()
        theme = store.get_or_create_default("acme")
    """

    def __init__(self) -> None:
        self._themes: dict[int, ThemeSpec] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self._listeners: list[ThemeListener] = []

    def on_change(self, listener: ThemeListener) -> None:
        """Register a callback fired with the site id when the active theme may have changed."""
        self._listeners.append(listener)

    # =========================================================================
    # Lookups
    # =========================================================================

    def get(self, theme_id: int) -> ThemeSpec | None:
        return self._themes.get(theme_id)

    def require(self, theme_id: int) -> ThemeSpec:
        theme = self._themes.get(theme_id)
        if theme is None:
            raise ThemeNotFoundError(
                f"Theme {theme_id} not found", ErrorContext(theme_id=theme_id)
            )
        return theme

    def list(self, site_id: str | None = None) -> list[ThemeSpec]:
        """Themes owned by a scope, ordered by id."""
        with self._lock:
            themes = [t for t in self._themes.values() if t.site_id == site_id]
        return sorted(themes, key=lambda t: t.id)

    def get_active(self, site_id: str | None = None) -> ThemeSpec | None:
        with self._lock:
            for theme in self._themes.values():
                if theme.site_id == site_id and theme.active:
                    return theme
        return None

    # =========================================================================
    # Mutations
    # =========================================================================

    def add(self, theme: ThemeSpec) -> ThemeSpec:
        """
        Store a theme as given, replacing any theme with the same id.

        Adding an active theme deactivates its siblings.
        """
        with self._lock:
            if theme.active:
                self._deactivate_scope(theme.site_id)
            self._themes[theme.id] = theme
            self._next_id = max(self._next_id, theme.id + 1)
        if theme.active:
            self._notify(theme.site_id)
        return theme

    def create(
        self,
        name: str,
        *,
        site_id: str | None = None,
        tokens: Mapping[str, Any] | None = None,
        base_theme: str | None = None,
        description: str | None = None,
        author: str | None = None,
        version: str = "1.0.0",
        is_system: bool = False,
        slug: str | None = None,
    ) -> ThemeSpec:
        """Create an inactive theme with the next free id and a unique slug."""
        with self._lock:
            theme = ThemeSpec(
                id=self._allocate_id(),
                site_id=site_id,
                name=name,
                slug=self._unique_slug(slug or slugify(name), site_id),
                tokens=copy.deepcopy(dict(tokens or {})),
                base_theme=base_theme,
                description=description,
                author=author,
                version=version,
                is_system=is_system,
            )
            self._themes[theme.id] = theme
        logger.debug("Created theme %s (%s) for site %s", theme.id, theme.slug, site_id)
        return theme

    def seed_presets(self) -> list[ThemeSpec]:
        """Create one central system theme per preset that is not present yet."""
        existing = {t.slug for t in self.list(None) if t.is_system}
        created = []
        for name in preset_names():
            if name in existing:
                continue
            created.append(
                self.create(
                    name.title(),
                    tokens=get_preset(name),
                    base_theme=name,
                    is_system=True,
                    slug=name,
                )
            )
        return created

    def activate(self, theme_id: int) -> ThemeSpec:
        """
        Make a theme the only active one in its scope.

        Raises:
            ThemeNotFoundError: theme_id is unknown
        """
        with self._lock:
            theme = self.require(theme_id)
            self._deactivate_scope(theme.site_id)
            theme = theme.model_copy(update={"active": True})
            self._themes[theme.id] = theme

        logger.info("Activated theme %s (%s) for site %s", theme.id, theme.slug, theme.site_id)
        self._notify(theme.site_id)
        return theme

    def get_or_create_default(self, site_id: str | None = None) -> ThemeSpec | None:
        """
        Return the scope's active theme, activating a system theme if needed.

        A tenant scope receives its own copy of the first system theme; the
        central scope activates the system theme itself. Returns None when
        no system theme exists.
        """
        active = self.get_active(site_id)
        if active is not None:
            return active

        system = next((t for t in self.list(None) if t.is_system), None)
        if system is None:
            logger.warning("No system theme available to activate for site %s", site_id)
            return None

        if site_id is None:
            return self.activate(system.id)

        copy_ = self.create(
            system.name,
            site_id=site_id,
            tokens=system.tokens,
            base_theme=system.base_theme,
            description=system.description,
            author=system.author,
            version=system.version,
            slug=system.slug,
        )
        return self.activate(copy_.id)

    def update_tokens(self, theme_id: int, updates: Mapping[str, Any]) -> ThemeSpec:
        """Deep-merge ``updates`` into a theme's token tree."""
        with self._lock:
            theme = self.require(theme_id)
            theme = theme.model_copy(update={"tokens": deep_merge(theme.tokens, updates)})
            self._themes[theme.id] = theme
        if theme.active:
            self._notify(theme.site_id)
        return theme

    def duplicate(self, theme_id: int, new_name: str) -> ThemeSpec:
        """Copy a theme within its scope under a new name; the copy is inactive."""
        source = self.require(theme_id)
        return self.create(
            new_name,
            site_id=source.site_id,
            tokens=source.tokens,
            base_theme=source.base_theme,
            description=source.description,
            author=source.author,
            version=source.version,
        )

    def export(self, theme_id: int) -> dict[str, Any]:
        theme = self.require(theme_id)
        return {
            "name": theme.name,
            "description": theme.description,
            "author": theme.author,
            "version": theme.version,
            "data": copy.deepcopy(theme.tokens),
        }

    def import_theme(self, data: Mapping[str, Any], site_id: str | None = None) -> ThemeSpec:
        """
        Create a theme from exported data.

        Accepts either the ``export`` format or a bare token tree. Imported
        themes have no base preset.
        """
        tokens = data.get("data")
        if not isinstance(tokens, Mapping):
            tokens = data
        return self.create(
            str(data.get("name") or "Imported Theme"),
            site_id=site_id,
            tokens=tokens,
            description=data.get("description"),
            author=data.get("author"),
            version=str(data.get("version") or "1.0.0"),
        )

    def reset_to_base(self, theme_id: int) -> bool:
        """
        Restore a theme's tokens from its base preset.

        Returns:
            False when the theme has no base or the preset is unknown
        """
        with self._lock:
            theme = self.require(theme_id)
            tokens = get_preset(theme.base_theme) if theme.base_theme else None
            if tokens is None:
                return False
            theme = theme.model_copy(update={"tokens": tokens})
            self._themes[theme.id] = theme
        if theme.active:
            self._notify(theme.site_id)
        return True

    # =========================================================================
    # Internals (callers hold the lock)
    # =========================================================================

    def _deactivate_scope(self, site_id: str | None) -> None:
        for other in list(self._themes.values()):
            if other.site_id == site_id and other.active:
                self._themes[other.id] = other.model_copy(update={"active": False})

    def _allocate_id(self) -> int:
        theme_id = self._next_id
        self._next_id += 1
        return theme_id

    def _unique_slug(self, slug: str, site_id: str | None) -> str:
        taken = {t.slug for t in self._themes.values() if t.site_id == site_id}
        candidate = slug
        counter = 1
        while candidate in taken:
            candidate = f"{slug}-{counter}"
            counter += 1
        return candidate

    def _notify(self, site_id: str | None) -> None:
        for listener in self._listeners:
            listener(site_id)
