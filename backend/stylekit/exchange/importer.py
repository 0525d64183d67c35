"""
Import of exported presets, collections and themes.

Preset import runs in two stages:
1. Structure: every record must be an object with a name and a style.
   Any failure here rejects the whole batch with ImportBatchError.
2. Persistence: records are created one by one through the catalog.
   A record the catalog refuses (bad color, duplicate name, ...) is
   reported in ImportResult.errors; the rest are still imported.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..presets.catalog import PresetCatalog
from ..presets.errors import ImportBatchError, ValidationError
from ..presets.models import PresetCollection, StylePreset, StyleTheme
from .envelope import EXPORT_TYPES

logger = logging.getLogger(__name__)


# Reset on import regardless of what the file says
_RESET_FIELDS = ("isShared", "is_shared", "isCustom", "is_custom", "usageCount", "usage_count")


@dataclass
class ImportRecordError:
    index: int
    message: str
    name: Optional[str] = None

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "name": self.name, "message": self.message}


@dataclass
class ImportResult:
    imported: List[StylePreset] = field(default_factory=list)
    errors: List[ImportRecordError] = field(default_factory=list)

    @property
    def imported_count(self) -> int:
        return len(self.imported)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "imported": [preset.to_wire() for preset in self.imported],
            "errors": [err.to_dict() for err in self.errors],
        }


def _extract_preset_records(payload: Any) -> List[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        if payload.get("data") is not None:
            data = payload["data"]
            return data if isinstance(data, list) else [data]
        if payload.get("presets") is not None:
            presets = payload["presets"]
            if isinstance(presets, list):
                return presets
    raise ValidationError(["Invalid import format - no preset data found"])


def check_preset_records(records: Sequence[Any]) -> None:
    """
    Raises:
        ImportBatchError: Listing every record without a name or style
    """
    problems: List[ImportRecordError] = []
    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            problems.append(ImportRecordError(index, f"Preset {index + 1} is not an object"))
            continue
        name = record.get("name")
        if not isinstance(name, str) or not name.strip():
            problems.append(ImportRecordError(index, f"Preset {index + 1} is missing a name"))
            continue
        if not isinstance(record.get("style"), Mapping):
            problems.append(ImportRecordError(index, f'Preset "{name}" is missing style data', name))
    if problems:
        raise ImportBatchError(problems)


def import_presets(catalog: PresetCatalog, payload: Any) -> ImportResult:
    """
    Import presets from a bare array, an export envelope or {presets: [...]}.

    Imported presets are always custom and unshared, with usage reset.
    An id that is already taken is replaced by a fresh one.

    Raises:
        ValidationError: If no preset data can be found
        ImportBatchError: If any record lacks a name or style
    """
    if not payload:
        raise ValidationError(["No data provided for import"])
    records = _extract_preset_records(payload)
    check_preset_records(records)

    result = ImportResult()
    for index, record in enumerate(records):
        fields = {k: v for k, v in record.items() if k not in _RESET_FIELDS}
        fields["is_shared"] = False

        preset_id = fields.get("id")
        if not isinstance(preset_id, str) or catalog.get_preset(preset_id) is not None:
            preset_id = None

        try:
            preset = catalog.create_preset(fields, preset_id=preset_id)
        except ValidationError as e:
            logger.warning(f"Skipping imported preset {index + 1} ({record['name']}): {e}")
            result.errors.append(ImportRecordError(index, str(e), record["name"]))
            continue
        result.imported.append(preset)

    logger.info(f"Imported {result.imported_count} presets ({len(result.errors)} rejected)")
    return result


def _unwrap(payload: Any, expected_type: str) -> Mapping[str, Any]:
    if isinstance(payload, Mapping) and payload.get("type") == expected_type and "data" in payload:
        payload = payload["data"]
    if not isinstance(payload, Mapping):
        raise ValidationError([f"Invalid {expected_type} data"])
    return payload


def import_collection(catalog: PresetCatalog, payload: Any) -> PresetCollection:
    """
    Create a collection from exported collection data. A new id is assigned.

    Raises:
        ValidationError: If name or presets are missing, or the collection is invalid
    """
    data = _unwrap(payload, "collection")
    errors = []
    if not data.get("name"):
        errors.append("Collection is missing a name")
    if not isinstance(data.get("presets"), list):
        errors.append("Collection is missing presets")
    if errors:
        raise ValidationError(errors)
    collection = catalog.create_collection(data)
    logger.info(f"Imported collection {collection.id} ({collection.name})")
    return collection


def import_theme(catalog: PresetCatalog, payload: Any) -> StyleTheme:
    """
    Create a custom theme from exported theme data. A new id is assigned.

    Raises:
        ValidationError: If name, colors or typography are missing, or the theme is invalid
    """
    data = _unwrap(payload, "theme")
    missing = [key for key in ("name", "colors", "typography") if not data.get(key)]
    if missing:
        raise ValidationError([f"Theme is missing {key}" for key in missing])
    theme = catalog.create_theme(data)
    logger.info(f"Imported theme {theme.id} ({theme.name})")
    return theme


def import_envelope(catalog: PresetCatalog, payload: Any):
    """
    Import any export envelope, dispatching on its type.

    Returns an ImportResult for presets, the created record otherwise.

    Raises:
        ValidationError: If the envelope is incomplete or its type unsupported
    """
    if not isinstance(payload, Mapping):
        raise ValidationError(["Export envelope must be an object"])
    missing = [key for key in ("version", "type", "data") if payload.get(key) is None]
    if missing:
        raise ValidationError([f"Export envelope is missing {key}" for key in missing])

    export_type = payload["type"]
    if export_type not in EXPORT_TYPES:
        raise ValidationError([f"Unsupported export type: {export_type}"])
    if export_type == "collection":
        return import_collection(catalog, payload)
    if export_type == "theme":
        return import_theme(catalog, payload)
    return import_presets(catalog, payload)
