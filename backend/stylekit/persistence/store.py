"""
Durable storage for user presets, collections and themes.

Design:
- Everything lives under namespaced keys of a KeyValueStore as JSON
- Writes validate first; nothing is written when validation fails
- Reads never fail: a missing or unreadable key yields its empty default
  and the problem is recorded in storage_warnings
- Built-ins are not stored here; PresetCatalog layers them on top
"""

import json
import logging
import time
from typing import AbstractSet, Any, Callable, Dict, Iterable, List, Mapping, Optional, Set, Type, TypeVar, Union

from ..colors import is_valid_color
from ..presets.errors import NotFoundError, ValidationError
from ..presets.models import (
    PresetCollection,
    PresetDraft,
    PresetSettings,
    StyleKitModel,
    StylePreset,
    StyleTheme,
    new_id,
    utc_now,
)
from ..presets.validation import (
    ValidationReport,
    parse_model,
    validate_collection,
    validate_preset,
    validate_theme,
)
from .errors import PersistenceError, RecoverableStorageError, StorageWriteError
from .kv import KeyValueStore

logger = logging.getLogger(__name__)


KEY_PREFIX = "stylekit_"

STORAGE_KEYS = {
    "presets": f"{KEY_PREFIX}style_presets",
    "collections": f"{KEY_PREFIX}preset_collections",
    "themes": f"{KEY_PREFIX}style_themes",
    "favorites": f"{KEY_PREFIX}preset_favorites",
    "recently_used": f"{KEY_PREFIX}preset_recently_used",
    "current_theme": f"{KEY_PREFIX}current_theme",
    "settings": f"{KEY_PREFIX}preset_settings",
    "recent_colors": f"{KEY_PREFIX}recent_colors",
    "backup_index": f"{KEY_PREFIX}backup_index",
}

BACKUP_KEY_PREFIX = f"{KEY_PREFIX}backup_"
BACKUP_VERSION = "1.0.0"
MAX_BACKUPS = 5
MAX_RECENT_COLORS = 10

# Assigned by the store on create; ignored when present in a draft
STORE_MANAGED_FIELDS = frozenset({
    "id", "created", "modified", "isCustom", "is_custom", "usageCount", "usage_count",
})

ModelT = TypeVar("ModelT", bound=StyleKitModel)


class StorageStats(StyleKitModel):
    presets_count: int
    collections_count: int
    themes_count: int
    favorites_count: int
    backups_count: int
    total_size: int
    last_backup: Optional[str] = None


def _dedupe(ids: Iterable[str]) -> List[str]:
    result: List[str] = []
    for item in ids:
        if item not in result:
            result.append(item)
    return result


def _field_name(model_cls: Type[StyleKitModel], key: str) -> Optional[str]:
    """Map a snake_case or camelCase key to the model's field name."""
    if key in model_cls.model_fields:
        return key
    for name, info in model_cls.model_fields.items():
        if info.alias == key:
            return name
    return None


def _merge_updates(
    record: StyleKitModel,
    updates: Mapping[str, Any],
    protected: Iterable[str],
) -> Dict[str, Any]:
    """
    Existing field values overlaid with updates, keyed by field name.

    Protected fields keep their stored value. Unknown keys are rejected.
    """
    model_cls = type(record)
    merged = record.model_dump()
    unknown = []
    for key, value in updates.items():
        name = _field_name(model_cls, key)
        if name is None:
            unknown.append(f"Unknown field: {key}")
            continue
        if name in protected:
            continue
        if isinstance(value, StyleKitModel):
            value = value.model_dump()
        elif isinstance(value, list):
            value = [item.model_dump() if isinstance(item, StyleKitModel) else item for item in value]
        merged[name] = value
    if unknown:
        raise ValidationError(unknown)
    return merged


class PresetStore:
    """
    Persistence for custom presets, collections, themes and preferences.

    Constructed with any KeyValueStore. Callers serialize mutating calls;
    concurrent writers resolve last-write-wins at the storage boundary.
    """

    def __init__(self, kv: KeyValueStore):
        self.kv = kv
        self.storage_warnings: List[RecoverableStorageError] = []
        # Built-in ids live outside the store. Favorites may reference them;
        # a restore may not reuse them
        self.external_preset_ids: Set[str] = set()
        self.external_theme_ids: Set[str] = set()

    # Raw access

    def _record_warning(self, key: str, reason: str) -> None:
        warning = RecoverableStorageError(key, reason)
        logger.warning(str(warning))
        self.storage_warnings.append(warning)

    def clear_storage_warnings(self) -> None:
        self.storage_warnings = []

    def _read_json(self, key: str, default: Any) -> Any:
        try:
            raw = self.kv.get(key)
        except (PersistenceError, OSError) as e:
            self._record_warning(key, f"read failed: {e}")
            return default
        if raw is None:
            return default
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            self._record_warning(key, f"unparseable value: {e}")
            return default

    def _write_json(self, key: str, value: Any) -> None:
        try:
            self.kv.set(key, json.dumps(value).encode("utf-8"))
        except (PersistenceError, OSError) as e:
            raise StorageWriteError(f"Failed to save {key}: {e}") from e

    def _delete_key(self, key: str) -> None:
        try:
            self.kv.delete(key)
        except (PersistenceError, OSError) as e:
            raise StorageWriteError(f"Failed to delete {key}: {e}") from e

    def _read_records(self, key: str, model_cls: Type[ModelT]) -> List[ModelT]:
        raw = self._read_json(key, [])
        if not isinstance(raw, list):
            self._record_warning(key, "expected a list")
            return []
        records = []
        for index, item in enumerate(raw):
            try:
                records.append(parse_model(model_cls, item))
            except ValidationError as e:
                self._record_warning(key, f"skipped record {index}: {e}")
        return records

    def _write_records(self, key: str, records: Iterable[StyleKitModel]) -> None:
        self._write_json(key, [record.to_wire() for record in records])

    def _read_id_list(self, key: str) -> List[str]:
        raw = self._read_json(key, [])
        if not isinstance(raw, list):
            self._record_warning(key, "expected a list")
            return []
        return [item for item in raw if isinstance(item, str)]

    # Presets

    def get_presets(self) -> List[StylePreset]:
        return self._read_records(STORAGE_KEYS["presets"], StylePreset)

    def get_preset_by_id(self, preset_id: str) -> Optional[StylePreset]:
        for preset in self.get_presets():
            if preset.id == preset_id:
                return preset
        return None

    def create_preset(
        self,
        draft: Union[PresetDraft, Mapping[str, Any]],
        preset_id: Optional[str] = None,
        usage_count: Optional[int] = None,
    ) -> StylePreset:
        """
        Validate and persist a new custom preset.

        Args:
            draft: Preset fields without id or timestamps
            preset_id: Explicit id to use; a fresh one is generated otherwise
            usage_count: Initial usage counter, if any

        Raises:
            ValidationError: If the draft breaks any preset rule or the id is taken
        """
        if isinstance(draft, Mapping):
            draft = {k: v for k, v in draft.items() if k not in STORE_MANAGED_FIELDS}
        draft = parse_model(PresetDraft, draft)
        report = validate_preset(draft)
        report.raise_if_invalid()

        presets = self.get_presets()
        preset_id = preset_id or new_id()
        if any(p.id == preset_id for p in presets):
            raise ValidationError([f"Preset id already exists: {preset_id}"])

        now = utc_now()
        data = draft.model_dump()
        data.update(
            id=preset_id,
            name=draft.name.strip(),
            created=now,
            modified=now,
            is_custom=True,
            usage_count=usage_count,
        )
        preset = parse_model(StylePreset, data)

        self._write_records(STORAGE_KEYS["presets"], presets + [preset])
        self._log_warnings("preset", preset.id, report)
        logger.info(f"Created preset {preset.id} ({preset.name})")

        if self.get_settings().auto_backup:
            self.create_backup()
            self._prune_backups()

        return preset

    def update_preset(self, preset_id: str, updates: Mapping[str, Any]) -> StylePreset:
        """
        Apply partial updates to a stored preset.

        id and created are preserved; modified is refreshed.

        Raises:
            NotFoundError: If no stored preset has this id
            ValidationError: If the updated preset breaks any rule
        """
        presets = self.get_presets()
        index = self._index_of(presets, preset_id, "preset")
        updated = self._apply_preset_updates(presets[index], updates)

        presets[index] = updated
        self._write_records(STORAGE_KEYS["presets"], presets)
        return updated

    def preview_preset_update(self, preset_id: str, updates: Mapping[str, Any]) -> StylePreset:
        """
        The preset update_preset would produce, without writing it.

        Raises:
            NotFoundError: If no stored preset has this id
            ValidationError: If the updated preset breaks any rule
        """
        presets = self.get_presets()
        index = self._index_of(presets, preset_id, "preset")
        return self._apply_preset_updates(presets[index], updates)

    def _apply_preset_updates(self, preset: StylePreset, updates: Mapping[str, Any]) -> StylePreset:
        merged = _merge_updates(preset, updates, protected=("id", "created", "is_custom"))
        merged["modified"] = utc_now()
        updated = parse_model(StylePreset, merged)
        report = validate_preset(updated)
        report.raise_if_invalid()
        self._log_warnings("preset", preset.id, report)
        return updated

    def delete_preset(self, preset_id: str) -> None:
        """
        Remove a preset and every reference to it.

        Favorites, recently-used and collections embedding the preset are
        purged in the same call.

        Raises:
            NotFoundError: If no stored preset has this id
        """
        presets = self.get_presets()
        index = self._index_of(presets, preset_id, "preset")
        del presets[index]
        self._write_records(STORAGE_KEYS["presets"], presets)

        self.set_favorites([pid for pid in self.get_favorites() if pid != preset_id])
        self.set_recently_used([pid for pid in self.get_recently_used() if pid != preset_id])

        collections = self.get_collections()
        changed = False
        for i, collection in enumerate(collections):
            if preset_id in collection.preset_ids():
                collections[i] = collection.model_copy(update={
                    "presets": [p for p in collection.presets if p.id != preset_id],
                    "modified": utc_now(),
                })
                changed = True
        if changed:
            self._write_records(STORAGE_KEYS["collections"], collections)

        logger.info(f"Deleted preset {preset_id}")

    # Collections

    def get_collections(self) -> List[PresetCollection]:
        return self._read_records(STORAGE_KEYS["collections"], PresetCollection)

    def get_collection_by_id(self, collection_id: str) -> Optional[PresetCollection]:
        for collection in self.get_collections():
            if collection.id == collection_id:
                return collection
        return None

    def create_collection(self, data: Mapping[str, Any]) -> PresetCollection:
        """
        Raises:
            ValidationError: If the collection is malformed or has no name
        """
        now = utc_now()
        fields = dict(data)
        for protected in ("id", "created", "modified"):
            fields.pop(protected, None)
        fields.update(id=new_id(), created=now, modified=now)
        collection = parse_model(PresetCollection, fields)
        validate_collection(collection).raise_if_invalid()

        self._write_records(
            STORAGE_KEYS["collections"], self.get_collections() + [collection]
        )
        logger.info(f"Created collection {collection.id} ({collection.name})")
        return collection

    def update_collection(self, collection_id: str, updates: Mapping[str, Any]) -> PresetCollection:
        collections = self.get_collections()
        index = self._index_of(collections, collection_id, "collection")

        merged = _merge_updates(collections[index], updates, protected=("id", "created"))
        merged["modified"] = utc_now()
        updated = parse_model(PresetCollection, merged)
        validate_collection(updated).raise_if_invalid()

        collections[index] = updated
        self._write_records(STORAGE_KEYS["collections"], collections)
        return updated

    def delete_collection(self, collection_id: str) -> None:
        collections = self.get_collections()
        index = self._index_of(collections, collection_id, "collection")
        del collections[index]
        self._write_records(STORAGE_KEYS["collections"], collections)
        logger.info(f"Deleted collection {collection_id}")

    # Themes

    def get_themes(self) -> List[StyleTheme]:
        return self._read_records(STORAGE_KEYS["themes"], StyleTheme)

    def get_theme_by_id(self, theme_id: str) -> Optional[StyleTheme]:
        for theme in self.get_themes():
            if theme.id == theme_id:
                return theme
        return None

    def create_theme(self, data: Mapping[str, Any], theme_id: Optional[str] = None) -> StyleTheme:
        """
        Raises:
            ValidationError: If the theme is malformed, has no name or invalid colors
        """
        fields = dict(data)
        for protected in ("id", "created", "isBuiltIn", "is_built_in"):
            fields.pop(protected, None)
        themes = self.get_themes()
        theme_id = theme_id or new_id()
        if any(t.id == theme_id for t in themes):
            raise ValidationError([f"Theme id already exists: {theme_id}"])
        fields.update(id=theme_id, created=utc_now(), is_built_in=False)
        theme = parse_model(StyleTheme, fields)
        validate_theme(theme).raise_if_invalid()

        self._write_records(STORAGE_KEYS["themes"], themes + [theme])
        logger.info(f"Created theme {theme.id} ({theme.name})")
        return theme

    def update_theme(self, theme_id: str, updates: Mapping[str, Any]) -> StyleTheme:
        themes = self.get_themes()
        index = self._index_of(themes, theme_id, "theme")

        merged = _merge_updates(themes[index], updates, protected=("id", "created", "is_built_in"))
        updated = parse_model(StyleTheme, merged)
        validate_theme(updated).raise_if_invalid()

        themes[index] = updated
        self._write_records(STORAGE_KEYS["themes"], themes)
        return updated

    def delete_theme(self, theme_id: str) -> None:
        themes = self.get_themes()
        index = self._index_of(themes, theme_id, "theme")
        del themes[index]
        self._write_records(STORAGE_KEYS["themes"], themes)
        if self.get_current_theme() == theme_id:
            self.clear_current_theme()
        logger.info(f"Deleted theme {theme_id}")

    # Favorites and recently used

    def get_favorites(self) -> List[str]:
        return self._read_id_list(STORAGE_KEYS["favorites"])

    def set_favorites(self, favorites: Iterable[str]) -> None:
        self._write_json(STORAGE_KEYS["favorites"], _dedupe(favorites))

    def add_to_favorites(self, preset_id: str) -> None:
        favorites = self.get_favorites()
        if preset_id not in favorites:
            self.set_favorites(favorites + [preset_id])

    def remove_from_favorites(self, preset_id: str) -> None:
        self.set_favorites([pid for pid in self.get_favorites() if pid != preset_id])

    def get_recently_used(self) -> List[str]:
        return self._read_id_list(STORAGE_KEYS["recently_used"])

    def set_recently_used(self, recently_used: Iterable[str]) -> None:
        """Persist most-recent-first, de-duplicated, truncated to the configured maximum."""
        limit = self.get_settings().max_recently_used
        self._write_json(STORAGE_KEYS["recently_used"], _dedupe(recently_used)[:limit])

    def add_to_recently_used(self, preset_id: str) -> None:
        self.set_recently_used([preset_id] + self.get_recently_used())

    # Current theme

    def get_current_theme(self) -> Optional[str]:
        value = self._read_json(STORAGE_KEYS["current_theme"], None)
        return value if isinstance(value, str) else None

    def set_current_theme(self, theme_id: str) -> None:
        self._write_json(STORAGE_KEYS["current_theme"], theme_id)

    def clear_current_theme(self) -> None:
        self._delete_key(STORAGE_KEYS["current_theme"])

    # Settings

    def get_settings(self) -> PresetSettings:
        raw = self._read_json(STORAGE_KEYS["settings"], None)
        if raw is None:
            return PresetSettings()
        try:
            return parse_model(PresetSettings, raw)
        except ValidationError as e:
            self._record_warning(STORAGE_KEYS["settings"], f"invalid settings: {e}")
            return PresetSettings()

    def update_settings(self, updates: Mapping[str, Any]) -> PresetSettings:
        """
        Raises:
            ValidationError: On unknown settings or invalid values
        """
        current = self.get_settings()
        merged = _merge_updates(current, updates, protected=())
        updated = parse_model(PresetSettings, merged)
        self._write_json(STORAGE_KEYS["settings"], updated.to_wire())

        if updated.max_recently_used < current.max_recently_used:
            self.set_recently_used(self.get_recently_used())
        return updated

    # Recent colors

    def get_recent_colors(self) -> List[str]:
        return self._read_id_list(STORAGE_KEYS["recent_colors"])

    def add_recent_color(self, color: str) -> List[str]:
        """
        Push a color to the front of the recent list (max ten).

        Raises:
            ValidationError: If color is not a recognized color string
        """
        if not is_valid_color(color):
            raise ValidationError([f"Invalid color: {color}"])
        existing = [c for c in self.get_recent_colors() if c.lower() != color.lower()]
        colors = ([color] + existing)[:MAX_RECENT_COLORS]
        self._write_json(STORAGE_KEYS["recent_colors"], colors)
        return colors

    def clear_recent_colors(self) -> None:
        self._delete_key(STORAGE_KEYS["recent_colors"])

    # Backup and restore

    def _snapshot(self) -> Dict[str, Any]:
        snapshot = {
            "presets": [p.to_wire() for p in self.get_presets()],
            "collections": [c.to_wire() for c in self.get_collections()],
            "themes": [t.to_wire() for t in self.get_themes()],
            "favorites": self.get_favorites(),
            "recentlyUsed": self.get_recently_used(),
            "settings": self.get_settings().to_wire(),
            "version": BACKUP_VERSION,
        }
        current_theme = self.get_current_theme()
        if current_theme is not None:
            snapshot["currentTheme"] = current_theme
        return snapshot

    def _read_backup_index(self) -> List[Dict[str, str]]:
        index_key = STORAGE_KEYS["backup_index"]
        warnings_before = len(self.storage_warnings)
        raw = self._read_json(index_key, None)
        if raw is None:
            # Missing or unparseable; the backup keys themselves are the record
            return self._rebuild_backup_index(repair=len(self.storage_warnings) > warnings_before)
        if not isinstance(raw, list):
            self._record_warning(index_key, "expected a list")
            return self._rebuild_backup_index(repair=True)
        index = [
            entry for entry in raw
            if isinstance(entry, dict)
            and isinstance(entry.get("key"), str)
            and isinstance(entry.get("timestamp"), str)
        ]
        if len(index) != len(raw):
            self._record_warning(index_key, "malformed index entries")
            return self._rebuild_backup_index(repair=True)
        return index

    def _backup_keys(self) -> List[str]:
        try:
            keys = self.kv.keys()
        except (PersistenceError, OSError) as e:
            self._record_warning(STORAGE_KEYS["backup_index"], f"key scan failed: {e}")
            return []
        return [
            key for key in keys
            if key.startswith(BACKUP_KEY_PREFIX) and key != STORAGE_KEYS["backup_index"]
        ]

    def _rebuild_backup_index(self, repair: bool) -> List[Dict[str, str]]:
        """Index every stored backup by the timestamp inside its snapshot."""
        index = []
        for key in self._backup_keys():
            backup = self.get_backup(key)
            timestamp = backup.get("timestamp") if backup else None
            index.append({"key": key, "timestamp": timestamp if isinstance(timestamp, str) else ""})
        if index or repair:
            self._write_json(STORAGE_KEYS["backup_index"], index)
            logger.warning(f"Rebuilt backup index from {len(index)} stored backup(s)")
        return index

    def create_backup(self) -> Dict[str, Any]:
        """
        Snapshot all stored state under a time-stamped key.

        Returns:
            The snapshot, including version and timestamp
        """
        snapshot = self._snapshot()
        snapshot["timestamp"] = utc_now()

        index = self._read_backup_index()
        taken = {entry["key"] for entry in index}
        millis = int(time.time() * 1000)
        key = f"{BACKUP_KEY_PREFIX}{millis}"
        while key in taken:
            millis += 1
            key = f"{BACKUP_KEY_PREFIX}{millis}"

        self._write_json(key, snapshot)
        index.append({"key": key, "timestamp": snapshot["timestamp"]})
        self._write_json(STORAGE_KEYS["backup_index"], index)
        logger.info(f"Created backup {key}")
        return snapshot

    def list_backups(self) -> List[Dict[str, str]]:
        """Backup index entries, newest first."""
        return sorted(
            self._read_backup_index(),
            key=lambda entry: (entry["timestamp"], entry["key"]),
            reverse=True,
        )

    def get_backup(self, key: str) -> Optional[Dict[str, Any]]:
        value = self._read_json(key, None)
        return value if isinstance(value, dict) else None

    def _prune_backups(self, keep: int = MAX_BACKUPS) -> int:
        backups = self.list_backups()
        stale = backups[keep:]
        for entry in stale:
            self._delete_key(entry["key"])
        if stale:
            self._write_json(STORAGE_KEYS["backup_index"], backups[:keep])
            logger.info(f"Removed {len(stale)} old backup(s)")
        return len(stale)

    def _parse_list(self, data: Mapping[str, Any], key: str, parser: Callable[[Any], Any]) -> List[Any]:
        value = data[key]
        if not isinstance(value, list):
            raise ValidationError([f"Backup field '{key}' must be a list"])
        errors = []
        parsed = []
        for index, item in enumerate(value):
            try:
                parsed.append(parser(item))
            except ValidationError as e:
                errors.extend(f"{key}[{index}]: {msg}" for msg in e.errors)
        if errors:
            raise ValidationError(errors)
        return parsed

    @staticmethod
    def _parse_id(item: Any) -> str:
        if not isinstance(item, str):
            raise ValidationError(["expected a string id"])
        return item

    def _check_restored_records(
        self,
        records: List[Any],
        key: str,
        reserved_ids: AbstractSet[str] = frozenset(),
        unique_names: bool = False,
    ) -> List[str]:
        errors = []
        seen_ids: Set[str] = set()
        seen_names: Set[str] = set()
        for index, record in enumerate(records):
            if record.id in reserved_ids:
                errors.append(f"{key}[{index}]: id belongs to a built-in: {record.id}")
            elif record.id in seen_ids:
                errors.append(f"{key}[{index}]: duplicate id: {record.id}")
            seen_ids.add(record.id)
            if unique_names:
                name = record.name.strip().lower()
                if name in seen_names:
                    errors.append(f"{key}[{index}]: duplicate name: {record.name.strip()}")
                seen_names.add(name)
        return errors

    def restore_from_backup(self, data: Mapping[str, Any]) -> None:
        """
        Overwrite stored state from a backup snapshot.

        Every field present in the backup is parsed before anything is
        written. Fields absent from the backup are left untouched.

        Raises:
            ValidationError: If version or presets is missing, any field is
                malformed, or records repeat an id, a preset name or a
                built-in id
        """
        if not isinstance(data, Mapping):
            raise ValidationError(["Invalid backup format: expected an object"])
        missing = [key for key in ("version", "presets") if data.get(key) is None or data.get(key) == ""]
        if missing:
            raise ValidationError([f"Invalid backup format: missing {key}" for key in missing])

        presets = self._parse_list(data, "presets", lambda i: parse_model(StylePreset, i))
        collections = None
        if data.get("collections") is not None:
            collections = self._parse_list(data, "collections", lambda i: parse_model(PresetCollection, i))
        themes = None
        if data.get("themes") is not None:
            themes = self._parse_list(data, "themes", lambda i: parse_model(StyleTheme, i))

        errors = self._check_restored_records(
            presets, "presets", reserved_ids=self.external_preset_ids, unique_names=True,
        )
        if collections is not None:
            errors.extend(self._check_restored_records(collections, "collections"))
        if themes is not None:
            errors.extend(self._check_restored_records(themes, "themes", reserved_ids=self.external_theme_ids))
        if errors:
            raise ValidationError(errors)

        writes: Dict[str, Any] = {}
        writes[STORAGE_KEYS["presets"]] = [p.to_wire() for p in presets]
        if collections is not None:
            writes[STORAGE_KEYS["collections"]] = [c.to_wire() for c in collections]
        if themes is not None:
            writes[STORAGE_KEYS["themes"]] = [t.to_wire() for t in themes]
        if data.get("favorites") is not None:
            writes[STORAGE_KEYS["favorites"]] = _dedupe(self._parse_list(data, "favorites", self._parse_id))
        if data.get("recentlyUsed") is not None:
            writes[STORAGE_KEYS["recently_used"]] = _dedupe(self._parse_list(data, "recentlyUsed", self._parse_id))
        if data.get("currentTheme") is not None:
            writes[STORAGE_KEYS["current_theme"]] = self._parse_id(data["currentTheme"])
        if data.get("settings") is not None:
            writes[STORAGE_KEYS["settings"]] = parse_model(PresetSettings, data["settings"]).to_wire()

        for key, value in writes.items():
            self._write_json(key, value)
        logger.info(f"Restored backup version {data['version']} ({len(writes)} field(s))")

    def cleanup(self) -> Dict[str, int]:
        """
        Drop dangling favorite and recently-used ids; keep five newest backups.

        Safe to call repeatedly.
        """
        valid = {p.id for p in self.get_presets()} | self.external_preset_ids

        favorites = self.get_favorites()
        kept_favorites = [pid for pid in favorites if pid in valid]
        if len(kept_favorites) != len(favorites):
            self.set_favorites(kept_favorites)

        recently_used = self.get_recently_used()
        kept_recent = [pid for pid in recently_used if pid in valid]
        if len(kept_recent) != len(recently_used):
            self.set_recently_used(kept_recent)

        removed_backups = self._prune_backups()

        return {
            "favorites_removed": len(favorites) - len(kept_favorites),
            "recently_used_removed": len(recently_used) - len(kept_recent),
            "backups_removed": removed_backups,
        }

    # Bulk export and stats

    def export_all(self) -> Dict[str, Any]:
        snapshot = self._snapshot()
        snapshot["exportedAt"] = utc_now()
        return snapshot

    def import_all(self, data: Mapping[str, Any]) -> None:
        self.restore_from_backup(data)

    def get_storage_stats(self) -> StorageStats:
        total_size = 0
        for key in STORAGE_KEYS.values():
            try:
                raw = self.kv.get(key)
            except (PersistenceError, OSError) as e:
                self._record_warning(key, f"read failed: {e}")
                continue
            if raw:
                total_size += len(raw)

        backups = self.list_backups()
        return StorageStats(
            presets_count=len(self.get_presets()),
            collections_count=len(self.get_collections()),
            themes_count=len(self.get_themes()),
            favorites_count=len(self.get_favorites()),
            backups_count=len(backups),
            total_size=total_size,
            last_backup=backups[0]["timestamp"] if backups else None,
        )

    # Helpers

    @staticmethod
    def _index_of(records: List[Any], record_id: str, resource: str) -> int:
        for index, record in enumerate(records):
            if record.id == record_id:
                return index
        raise NotFoundError(resource, record_id)

    @staticmethod
    def _log_warnings(resource: str, record_id: str, report: ValidationReport) -> None:
        for warning in report.warnings:
            logger.warning(f"{resource.capitalize()} {record_id}: {warning}")
