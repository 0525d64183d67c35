"""
Tests for PresetStore and the key-value backends.

Covers:
- Validation before persistence
- Cascading deletes
- Favorites, recently-used and recent colors
- Backups, restore and cleanup
- Recovery from corrupt stored values
- SQLite durability across instances
"""

import json

import pytest

from stylekit.persistence import (
    MemoryKeyValueStore,
    PresetStore,
    SqliteKeyValueStore,
    STORAGE_KEYS,
)
from stylekit.persistence.errors import RecoverableStorageError
from stylekit.persistence.store import BACKUP_KEY_PREFIX, BACKUP_VERSION, MAX_BACKUPS
from stylekit.presets import NotFoundError, ValidationError
from stylekit.presets.catalog import PresetCatalog


THEME_DATA = {
    "name": "Harbor",
    "colors": {
        "primary": "#0ea5e9",
        "secondary": "#0369a1",
        "accent": "#f59e0b",
        "background": "#ffffff",
        "text": "#1f2937",
        "success": "#10b981",
        "warning": "#f59e0b",
        "error": "#ef4444",
    },
    "typography": {
        "headingFont": "Arial, sans-serif",
        "bodyFont": "Arial, sans-serif",
        "monoFont": "Monaco, monospace",
    },
}


@pytest.fixture
def quiet_store(kv):
    """Store with auto-backup disabled."""
    store = PresetStore(kv)
    store.update_settings({"autoBackup": False})
    return store


class TestPresetPersistence:

    def test_create_assigns_id_and_timestamps(self, quiet_store, draft):
        preset = quiet_store.create_preset(draft)
        assert preset.id
        assert preset.created == preset.modified
        assert preset.is_custom is True
        assert preset.tags == ["blue", "calm"]
        assert quiet_store.get_preset_by_id(preset.id) == preset

    def test_invalid_preset_is_not_written(self, quiet_store, draft):
        draft["style"] = {"fill": "not-a-color"}
        with pytest.raises(ValidationError) as exc_info:
            quiet_store.create_preset(draft)
        assert "Invalid fill color" in exc_info.value.errors
        assert quiet_store.get_presets() == []

    def test_all_problems_are_reported(self, quiet_store):
        with pytest.raises(ValidationError) as exc_info:
            quiet_store.create_preset({"name": "  "})
        assert exc_info.value.errors == ["Name is required", "Style is required", "Category is required"]

    def test_warnings_do_not_block(self, quiet_store, draft):
        draft["style"]["fontSize"] = 200
        preset = quiet_store.create_preset(draft)
        assert preset.style.font_size == 200

    def test_update_preserves_id_and_created(self, quiet_store, draft):
        preset = quiet_store.create_preset(draft)
        updated = quiet_store.update_preset(preset.id, {"name": "Deep Ocean", "id": "hijack", "created": "x"})
        assert updated.id == preset.id
        assert updated.created == preset.created
        assert updated.name == "Deep Ocean"

    def test_update_rejects_unknown_fields(self, quiet_store, draft):
        preset = quiet_store.create_preset(draft)
        with pytest.raises(ValidationError) as exc_info:
            quiet_store.update_preset(preset.id, {"colour": "red"})
        assert exc_info.value.errors == ["Unknown field: colour"]

    def test_update_missing_preset(self, quiet_store):
        with pytest.raises(NotFoundError):
            quiet_store.update_preset("missing", {"name": "x"})

    def test_delete_purges_references(self, quiet_store, draft):
        preset = quiet_store.create_preset(draft)
        other = quiet_store.create_preset(dict(draft, name="Other"))
        quiet_store.add_to_favorites(preset.id)
        quiet_store.add_to_recently_used(preset.id)
        quiet_store.add_to_recently_used(other.id)
        collection = quiet_store.create_collection({"name": "Set", "presets": [preset, other]})

        quiet_store.delete_preset(preset.id)

        assert preset.id not in quiet_store.get_favorites()
        assert quiet_store.get_recently_used() == [other.id]
        assert quiet_store.get_collection_by_id(collection.id).preset_ids() == [other.id]

    def test_delete_missing_preset(self, quiet_store):
        with pytest.raises(NotFoundError):
            quiet_store.delete_preset("missing")


class TestPreferences:

    def test_favorites_are_deduplicated(self, store):
        store.add_to_favorites("a")
        store.add_to_favorites("a")
        assert store.get_favorites() == ["a"]
        store.remove_from_favorites("a")
        assert store.get_favorites() == []

    def test_recently_used_is_most_recent_first(self, store):
        for preset_id in ("a", "b", "a"):
            store.add_to_recently_used(preset_id)
        assert store.get_recently_used() == ["a", "b"]

    def test_recently_used_is_bounded(self, store):
        for i in range(15):
            store.add_to_recently_used(f"p{i}")
        recent = store.get_recently_used()
        assert len(recent) == 10
        assert recent[0] == "p14"

    def test_shrinking_the_limit_truncates(self, store):
        for i in range(6):
            store.add_to_recently_used(f"p{i}")
        store.update_settings({"maxRecentlyUsed": 3})
        assert store.get_recently_used() == ["p5", "p4", "p3"]

    def test_invalid_setting_rejected(self, store):
        with pytest.raises(ValidationError):
            store.update_settings({"maxRecentlyUsed": 0})

    def test_recent_colors(self, store):
        store.add_recent_color("#FF0000")
        store.add_recent_color("#00ff00")
        assert store.add_recent_color("#ff0000") == ["#ff0000", "#00ff00"]
        with pytest.raises(ValidationError):
            store.add_recent_color("nope")
        store.clear_recent_colors()
        assert store.get_recent_colors() == []

    def test_recent_colors_are_bounded(self, store):
        for i in range(12):
            store.add_recent_color(f"#0000{i:02x}")
        assert len(store.get_recent_colors()) == 10

    def test_current_theme_pointer(self, store):
        assert store.get_current_theme() is None
        store.set_current_theme("theme-dark")
        assert store.get_current_theme() == "theme-dark"
        store.clear_current_theme()
        assert store.get_current_theme() is None


class TestBackups:

    def test_backup_snapshot_contents(self, quiet_store, draft):
        quiet_store.create_preset(draft)
        quiet_store.add_to_favorites("business-professional")
        snapshot = quiet_store.create_backup()
        assert snapshot["version"] == BACKUP_VERSION
        assert len(snapshot["presets"]) == 1
        assert snapshot["favorites"] == ["business-professional"]
        assert "timestamp" in snapshot
        assert len(quiet_store.list_backups()) == 1

    def test_auto_backup_keeps_five(self, store, draft):
        for i in range(7):
            store.create_preset(dict(draft, name=f"Preset {i}"))
        backups = store.list_backups()
        assert len(backups) == MAX_BACKUPS
        for entry in backups:
            assert store.get_backup(entry["key"]) is not None

    def test_restore_round_trip(self, quiet_store, draft):
        preset = quiet_store.create_preset(draft)
        quiet_store.add_to_favorites(preset.id)
        snapshot = quiet_store.create_backup()

        quiet_store.delete_preset(preset.id)
        assert quiet_store.get_presets() == []

        quiet_store.restore_from_backup(snapshot)
        assert [p.id for p in quiet_store.get_presets()] == [preset.id]
        assert quiet_store.get_favorites() == [preset.id]

    def test_restore_requires_version_and_presets(self, quiet_store):
        with pytest.raises(ValidationError) as exc_info:
            quiet_store.restore_from_backup({"favorites": []})
        assert len(exc_info.value.errors) == 2

    def test_malformed_restore_writes_nothing(self, quiet_store, draft):
        preset = quiet_store.create_preset(draft)
        bad = {"version": "1.0.0", "presets": [], "themes": [{"name": "broken"}]}
        with pytest.raises(ValidationError):
            quiet_store.restore_from_backup(bad)
        assert [p.id for p in quiet_store.get_presets()] == [preset.id]

    def test_restore_leaves_absent_fields_untouched(self, quiet_store):
        collection = quiet_store.create_collection({"name": "Boxes"})
        theme = quiet_store.create_theme(THEME_DATA)
        quiet_store.set_current_theme(theme.id)
        quiet_store.add_to_favorites("business-professional")
        settings = quiet_store.update_settings({"maxRecentlyUsed": 7})

        quiet_store.restore_from_backup({"version": "1.0.0", "presets": []})

        assert [c.id for c in quiet_store.get_collections()] == [collection.id]
        assert [t.id for t in quiet_store.get_themes()] == [theme.id]
        assert quiet_store.get_current_theme() == theme.id
        assert quiet_store.get_favorites() == ["business-professional"]
        assert quiet_store.get_settings() == settings

    def test_restore_rejects_repeated_and_builtin_ids(self, quiet_store, draft):
        PresetCatalog(quiet_store)
        preset = quiet_store.create_preset(draft).to_wire()
        collection = quiet_store.create_collection({"name": "Boxes"}).to_wire()
        theme = quiet_store.create_theme(THEME_DATA).to_wire()
        backup = {
            "version": "1.0.0",
            "presets": [
                dict(preset, id="dup", name="Alpha"),
                dict(preset, id="dup", name="alpha"),
                dict(preset, id="business-professional", name="Beta"),
            ],
            "collections": [collection, collection],
            "themes": [dict(theme, id="theme-dark")],
        }

        with pytest.raises(ValidationError) as exc_info:
            quiet_store.restore_from_backup(backup)

        assert exc_info.value.errors == [
            "presets[1]: duplicate id: dup",
            "presets[1]: duplicate name: alpha",
            "presets[2]: id belongs to a built-in: business-professional",
            f"collections[1]: duplicate id: {collection['id']}",
            "themes[0]: id belongs to a built-in: theme-dark",
        ]
        assert [p.id for p in quiet_store.get_presets()] == [preset["id"]]

    def test_unreadable_backup_index_is_rebuilt(self, kv, quiet_store):
        for _ in range(4):
            quiet_store.create_backup()
        kv.set(STORAGE_KEYS["backup_index"], b"{not json")
        for _ in range(4):
            quiet_store.create_backup()

        def stored_backup_keys():
            return sorted(
                key for key in kv.keys()
                if key.startswith(BACKUP_KEY_PREFIX) and key != STORAGE_KEYS["backup_index"]
            )

        all_keys = stored_backup_keys()
        assert len(all_keys) == 8

        assert quiet_store.cleanup()["backups_removed"] == 3
        assert stored_backup_keys() == all_keys[-MAX_BACKUPS:]
        assert sorted(e["key"] for e in quiet_store.list_backups()) == all_keys[-MAX_BACKUPS:]
        assert any(w.key == STORAGE_KEYS["backup_index"] for w in quiet_store.storage_warnings)

    def test_cleanup_drops_dangling_ids(self, quiet_store, draft):
        preset = quiet_store.create_preset(draft)
        quiet_store.external_preset_ids = {"business-professional"}
        quiet_store.set_favorites([preset.id, "ghost", "business-professional"])
        quiet_store.set_recently_used(["ghost", preset.id])

        result = quiet_store.cleanup()

        assert result == {"favorites_removed": 1, "recently_used_removed": 1, "backups_removed": 0}
        assert quiet_store.get_favorites() == [preset.id, "business-professional"]
        assert quiet_store.cleanup()["favorites_removed"] == 0

    def test_storage_stats(self, quiet_store, draft):
        quiet_store.create_preset(draft)
        quiet_store.create_backup()
        stats = quiet_store.get_storage_stats()
        assert stats.presets_count == 1
        assert stats.backups_count == 1
        assert stats.total_size > 0
        assert stats.last_backup is not None


class TestCorruptStorage:

    def test_unparseable_value_yields_default(self):
        kv = MemoryKeyValueStore({STORAGE_KEYS["presets"]: b"{not json"})
        store = PresetStore(kv)
        assert store.get_presets() == []
        assert len(store.storage_warnings) == 1
        assert isinstance(store.storage_warnings[0], RecoverableStorageError)
        assert store.storage_warnings[0].key == STORAGE_KEYS["presets"]

    def test_bad_records_are_skipped(self, draft):
        kv = MemoryKeyValueStore()
        store = PresetStore(kv)
        store.update_settings({"autoBackup": False})
        good = store.create_preset(draft)
        records = json.loads(kv.get(STORAGE_KEYS["presets"]))
        records.append({"id": "broken"})
        kv.set(STORAGE_KEYS["presets"], json.dumps(records).encode("utf-8"))

        assert [p.id for p in store.get_presets()] == [good.id]
        assert store.storage_warnings

    def test_invalid_settings_fall_back_to_defaults(self):
        kv = MemoryKeyValueStore({STORAGE_KEYS["settings"]: b'{"maxRecentlyUsed": -1}'})
        store = PresetStore(kv)
        assert store.get_settings().max_recently_used == 10
        assert store.storage_warnings


class TestSqliteKeyValueStore:

    def test_values_survive_reopen(self, tmp_path):
        db_path = str(tmp_path / "stylekit.db")
        kv = SqliteKeyValueStore(db_path=db_path)
        kv.set("alpha", b"1")
        kv.set("alpha", b"2")

        reopened = SqliteKeyValueStore(db_path=db_path)
        assert reopened.get("alpha") == b"2"
        assert reopened.keys() == ["alpha"]

    def test_missing_and_deleted_keys(self, tmp_path):
        kv = SqliteKeyValueStore(db_path=str(tmp_path / "stylekit.db"))
        assert kv.get("nope") is None
        kv.set("beta", b"x")
        kv.delete("beta")
        assert kv.get("beta") is None

    def test_store_over_sqlite(self, tmp_path, draft):
        db_path = str(tmp_path / "stylekit.db")
        preset = PresetStore(SqliteKeyValueStore(db_path=db_path)).create_preset(draft)

        fresh = PresetStore(SqliteKeyValueStore(db_path=db_path))
        assert fresh.get_preset_by_id(preset.id) == preset
