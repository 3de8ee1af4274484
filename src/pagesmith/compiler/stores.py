"""
Collaborator stores consumed by the compiler.

The persistence layer is supplied by the host application; these protocols
name what the compiler reads, and the in-memory implementations back the
CLI and the tests.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Callable
from typing import Any, Protocol

from pagesmith.errors import SettingsUnavailable
from pagesmith.specs.document import (
    FragmentSpec,
    LayoutSpec,
    NavigationSpec,
    PageSpec,
    PublishStatus,
)
from pagesmith.specs.theme import ThemeSpec

SiteListener = Callable[[str | None], None]
FragmentListener = Callable[[str | None, str], None]


# =============================================================================
# Protocols
# =============================================================================


class FragmentStore(Protocol):
    def get_fragment(self, fragment_id: str) -> FragmentSpec | None: ...

    def get_layout(self, layout_id: str) -> LayoutSpec | None: ...


class NavigationStore(Protocol):
    def find_published(self, navigation_id: str) -> NavigationSpec | None: ...

    def list_published(self, site_id: str | None) -> list[NavigationSpec]: ...


class SettingsStore(Protocol):
    def get(self, site_id: str | None) -> dict[str, Any] | None: ...


class PageStore(Protocol):
    def list_published(self, site_id: str | None) -> list[PageSpec]: ...

    def save(self, page: PageSpec) -> None: ...


class ActiveThemeSource(Protocol):
    """Satisfied by ``pagesmith.themes.store.ThemeStore``."""

    def get_active(self, site_id: str | None = None) -> ThemeSpec | None: ...


# =============================================================================
# In-memory implementations
# =============================================================================


class _Notifier:
    def __init__(self) -> None:
        self._listeners: list[SiteListener] = []

    def on_change(self, listener: SiteListener) -> None:
        self._listeners.append(listener)

    def _notify(self, site_id: str | None) -> None:
        for listener in self._listeners:
            listener(site_id)


class InMemoryFragmentStore:
    """
    Headers, footers and layouts keyed by id.

    Listeners fire with ``(site_id, fragment_id)`` after a fragment is saved
    or deleted.
    """

    def __init__(
        self,
        fragments: list[FragmentSpec] | None = None,
        layouts: list[LayoutSpec] | None = None,
    ):
        self._fragments = {f.id: f for f in fragments or []}
        self._layouts = {layout.id: layout for layout in layouts or []}
        self._lock = threading.Lock()
        self._listeners: list[FragmentListener] = []

    def on_change(self, listener: FragmentListener) -> None:
        self._listeners.append(listener)

    def add_fragment(self, fragment: FragmentSpec) -> None:
        with self._lock:
            self._fragments[fragment.id] = fragment
        self._notify(fragment.site_id, fragment.id)

    def delete_fragment(self, fragment_id: str) -> bool:
        with self._lock:
            previous = self._fragments.pop(fragment_id, None)
        if previous is None:
            return False
        self._notify(previous.site_id, previous.id)
        return True

    def add_layout(self, layout: LayoutSpec) -> None:
        self._layouts[layout.id] = layout

    def get_fragment(self, fragment_id: str) -> FragmentSpec | None:
        return self._fragments.get(fragment_id)

    def get_layout(self, layout_id: str) -> LayoutSpec | None:
        return self._layouts.get(layout_id)

    def _notify(self, site_id: str | None, fragment_id: str) -> None:
        for listener in self._listeners:
            listener(site_id, fragment_id)


class InMemoryNavigationStore(_Notifier):
    """
    Navigation menus keyed by id.

    Listeners fire when a save changes what is published for a site.
    """

    def __init__(self, navigations: list[NavigationSpec] | None = None):
        super().__init__()
        self._navigations = {n.id: n for n in navigations or []}
        self._lock = threading.Lock()

    def save(self, navigation: NavigationSpec) -> None:
        with self._lock:
            previous = self._navigations.get(navigation.id)
            self._navigations[navigation.id] = navigation
        was_published = previous is not None and previous.status == PublishStatus.PUBLISHED
        if was_published or navigation.status == PublishStatus.PUBLISHED:
            self._notify(navigation.site_id)

    def delete(self, navigation_id: str) -> None:
        with self._lock:
            previous = self._navigations.pop(navigation_id, None)
        if previous is not None and previous.status == PublishStatus.PUBLISHED:
            self._notify(previous.site_id)

    def find_published(self, navigation_id: str) -> NavigationSpec | None:
        navigation = self._navigations.get(str(navigation_id))
        if navigation is None or navigation.status != PublishStatus.PUBLISHED:
            return None
        return navigation

    def list_published(self, site_id: str | None) -> list[NavigationSpec]:
        with self._lock:
            navigations = list(self._navigations.values())
        return [
            n for n in navigations if n.site_id == site_id and n.status == PublishStatus.PUBLISHED
        ]


class InMemorySettingsStore(_Notifier):
    """
    Per-site settings.

    A site listed in ``unavailable`` raises SettingsUnavailable, standing in
    for a settings backend that has not been initialized.
    """

    def __init__(self, settings: dict[str | None, dict[str, Any]] | None = None):
        super().__init__()
        self._settings: dict[str | None, dict[str, Any]] = dict(settings or {})
        self.unavailable: set[str | None] = set()

    def get(self, site_id: str | None) -> dict[str, Any] | None:
        if site_id in self.unavailable:
            raise SettingsUnavailable(f"Settings for site {site_id or 'central'} are not initialized")
        settings = self._settings.get(site_id)
        return copy.deepcopy(settings) if settings is not None else None

    def put(self, site_id: str | None, settings: dict[str, Any]) -> None:
        self._settings[site_id] = copy.deepcopy(settings)
        self._notify(site_id)


class InMemoryPageStore:
    def __init__(self, pages: list[PageSpec] | None = None):
        self._pages = {p.id: p for p in pages or []}
        self._lock = threading.Lock()

    def get(self, page_id: str) -> PageSpec | None:
        return self._pages.get(page_id)

    def save(self, page: PageSpec) -> None:
        with self._lock:
            self._pages[page.id] = page

    def list_published(self, site_id: str | None) -> list[PageSpec]:
        with self._lock:
            pages = list(self._pages.values())
        return [p for p in pages if p.site_id == site_id and p.status == PublishStatus.PUBLISHED]
