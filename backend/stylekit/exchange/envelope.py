"""
JSON export envelope.

Every JSON export is wrapped as:
    {version, type: preset|collection|theme, data, metadata}
so a file can be recognized and dispatched on import.
"""

import json
import logging
from typing import Any, Dict, Literal, Optional, Sequence

from ..presets.catalog import PresetCatalog
from ..presets.errors import ValidationError
from ..presets.models import PresetCollection, StyleKitModel, StylePreset, StyleTheme, utc_now

logger = logging.getLogger(__name__)


EXPORT_VERSION = "1.0.0"
APPLICATION_NAME = "OpenChart"

ExportType = Literal["preset", "collection", "theme"]
EXPORT_TYPES = ("preset", "collection", "theme")


class ExportMetadata(StyleKitModel):
    exported_at: str
    exported_by: Optional[str] = None
    application: str = APPLICATION_NAME
    version: str = EXPORT_VERSION


class ExportEnvelope(StyleKitModel):
    version: str = EXPORT_VERSION
    type: ExportType
    data: Any
    metadata: ExportMetadata


def _envelope(export_type: str, data: Any, exported_by: Optional[str]) -> Dict[str, Any]:
    envelope = ExportEnvelope(
        type=export_type,
        data=data,
        metadata=ExportMetadata(exported_at=utc_now(), exported_by=exported_by),
    )
    return envelope.to_wire()


def export_presets(presets: Sequence[StylePreset], exported_by: Optional[str] = None) -> Dict[str, Any]:
    """
    Raises:
        ValidationError: If no presets are given
    """
    if not presets:
        raise ValidationError(["No presets selected for export"])
    logger.info(f"Exporting {len(presets)} presets")
    return _envelope("preset", [preset.to_wire() for preset in presets], exported_by)


def export_presets_by_id(
    catalog: PresetCatalog,
    preset_ids: Sequence[str],
    exported_by: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Raises:
        NotFoundError: If any id is unknown
        ValidationError: If no ids are given
    """
    presets = [catalog.get_preset_or_raise(preset_id) for preset_id in preset_ids]
    return export_presets(presets, exported_by)


def export_collection(collection: PresetCollection, exported_by: Optional[str] = None) -> Dict[str, Any]:
    return _envelope("collection", collection.to_wire(), exported_by)


def export_theme(theme: StyleTheme, exported_by: Optional[str] = None) -> Dict[str, Any]:
    return _envelope("theme", theme.to_wire(), exported_by)


def dumps_envelope(envelope: Any, indent: int = 2) -> str:
    return json.dumps(envelope, indent=indent)


def loads_payload(text: str) -> Any:
    """
    Raises:
        ValidationError: If the text is not valid JSON
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError([f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})"]) from e
