"""Tests for the theme store and presets."""

from __future__ import annotations

import threading

import pytest

from pagesmith.errors import ThemeNotFoundError
from pagesmith.specs.theme import ThemeSpec
from pagesmith.themes.presets import DEFAULT_PRESET, get_preset, preset_names
from pagesmith.themes.store import ThemeStore, deep_merge, slugify


class TestHelpers:
    def test_slugify(self) -> None:
        assert slugify("My Fancy Theme!") == "my-fancy-theme"
        assert slugify("***") == "theme"

    def test_deep_merge(self) -> None:
        base = {"colors": {"primary": "#000", "secondary": "#111"}, "spacing": {"md": "1rem"}}
        merged = deep_merge(base, {"colors": {"primary": "#fff"}, "radius": "4px"})
        assert merged == {
            "colors": {"primary": "#fff", "secondary": "#111"},
            "spacing": {"md": "1rem"},
            "radius": "4px",
        }
        assert base["colors"]["primary"] == "#000"


class TestPresets:
    def test_preset_names(self) -> None:
        assert DEFAULT_PRESET in preset_names()
        assert preset_names() == sorted(preset_names())

    def test_get_preset_returns_copy(self) -> None:
        preset = get_preset(DEFAULT_PRESET)
        assert preset is not None
        preset["colors"]["primary"]["500"] = "changed"
        assert get_preset(DEFAULT_PRESET)["colors"]["primary"]["500"] != "changed"

    def test_unknown_preset(self) -> None:
        assert get_preset("nope") is None


class TestActivation:
    """At most one active theme per scope."""

    def test_activate_is_exclusive(self) -> None:
        store = ThemeStore()
        first = store.create("One")
        second = store.create("Two")
        store.activate(first.id)
        store.activate(second.id)

        active = [t for t in store.list(None) if t.active]
        assert [t.id for t in active] == [second.id]
        assert store.get_active(None).id == second.id

    def test_scopes_are_independent(self) -> None:
        store = ThemeStore()
        central = store.create("Central")
        tenant = store.create("Tenant", site_id="acme")
        store.activate(central.id)
        store.activate(tenant.id)

        assert store.get_active(None).id == central.id
        assert store.get_active("acme").id == tenant.id

    def test_activate_unknown_theme(self) -> None:
        with pytest.raises(ThemeNotFoundError):
            ThemeStore().activate(99)

    def test_activate_notifies_listeners(self) -> None:
        store = ThemeStore()
        theme = store.create("T", site_id="acme")
        seen: list[str | None] = []
        store.on_change(seen.append)
        store.activate(theme.id)
        assert seen == ["acme"]

    def test_concurrent_activation_leaves_one_active(self) -> None:
        store = ThemeStore()
        themes = [store.create(f"Theme {i}") for i in range(8)]
        threads = [threading.Thread(target=store.activate, args=(t.id,)) for t in themes]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert sum(1 for t in store.list(None) if t.active) == 1

    def test_add_active_theme_deactivates_siblings(self) -> None:
        store = ThemeStore()
        existing = store.create("Existing")
        store.activate(existing.id)
        store.add(ThemeSpec(id=50, name="Added", slug="added", active=True))
        assert store.get_active(None).id == 50
        assert not store.get(existing.id).active


class TestDefaults:
    """Seeding and default activation."""

    def test_seed_presets(self) -> None:
        store = ThemeStore()
        created = store.seed_presets()
        assert sorted(t.slug for t in created) == preset_names()
        assert all(t.is_system and t.site_id is None for t in created)
        assert store.seed_presets() == []

    def test_tenant_gets_copy_of_system_theme(self) -> None:
        store = ThemeStore()
        store.seed_presets()
        theme = store.get_or_create_default("acme")

        assert theme is not None
        assert theme.site_id == "acme"
        assert theme.active
        assert not theme.is_system
        assert theme.base_theme == DEFAULT_PRESET
        assert store.get_or_create_default("acme").id == theme.id

    def test_central_activates_system_theme(self) -> None:
        store = ThemeStore()
        store.seed_presets()
        theme = store.get_or_create_default(None)
        assert theme.is_system
        assert theme.active

    def test_no_system_theme(self) -> None:
        assert ThemeStore().get_or_create_default("acme") is None


class TestMutations:
    def test_update_tokens_deep_merges(self) -> None:
        store = ThemeStore()
        theme = store.create("T", tokens={"colors": {"a": "#000", "b": "#111"}})
        updated = store.update_tokens(theme.id, {"colors": {"a": "#fff"}})
        assert updated.tokens == {"colors": {"a": "#fff", "b": "#111"}}

    def test_update_active_theme_notifies(self) -> None:
        store = ThemeStore()
        theme = store.create("T", site_id="acme")
        store.activate(theme.id)
        seen: list[str | None] = []
        store.on_change(seen.append)
        store.update_tokens(theme.id, {"x": "1"})
        assert seen == ["acme"]

    def test_duplicate_gets_unique_slug(self) -> None:
        store = ThemeStore()
        theme = store.create("Brand")
        first = store.duplicate(theme.id, "Brand")
        second = store.duplicate(theme.id, "Brand")
        assert (theme.slug, first.slug, second.slug) == ("brand", "brand-1", "brand-2")
        assert not first.active

    def test_export_import_round_trip(self) -> None:
        store = ThemeStore()
        theme = store.create("Export Me", tokens={"colors": {"a": "#000"}}, author="Ann")
        exported = store.export(theme.id)
        assert exported["data"] == {"colors": {"a": "#000"}}

        imported = store.import_theme(exported, site_id="acme")
        assert imported.tokens == theme.tokens
        assert imported.site_id == "acme"
        assert imported.author == "Ann"
        assert imported.base_theme is None

    def test_import_bare_token_tree(self) -> None:
        imported = ThemeStore().import_theme({"colors": {"a": "#000"}})
        assert imported.name == "Imported Theme"
        assert imported.tokens == {"colors": {"a": "#000"}}

    def test_reset_to_base(self) -> None:
        store = ThemeStore()
        store.seed_presets()
        theme = store.get_or_create_default("acme")
        store.update_tokens(theme.id, {"colors": {"primary": {"500": "#000000"}}})

        assert store.reset_to_base(theme.id) is True
        assert store.get(theme.id).tokens == get_preset(DEFAULT_PRESET)

    def test_reset_without_base(self) -> None:
        store = ThemeStore()
        theme = store.create("No base")
        assert store.reset_to_base(theme.id) is False
