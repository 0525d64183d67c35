"""
Import, export, backup and maintenance endpoints.
"""

import logging
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Body, HTTPException, Request
from fastapi.responses import PlainTextResponse

from ..exchange import (
    export_collection,
    export_design_tokens,
    export_presets,
    export_presets_as_css,
    export_theme,
    import_envelope,
    import_preset_from_css,
    import_presets,
)
from ..exchange.importer import ImportResult
from ..presets.errors import ImportBatchError, PresetError, ValidationError
from ..presets.models import PresetCategory, StyleTheme
from .errors import to_http_exception
from .schemas import ApiRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/exchange", tags=["exchange"])


class ExportRequest(ApiRequest):
    preset_ids: List[str]
    format: Literal["json", "css", "tokens"] = "json"
    exported_by: Optional[str] = None


class CssImportRequest(ApiRequest):
    css: str
    name: str
    category: PresetCategory = PresetCategory.CUSTOM
    save: bool = False


class RestoreRequest(ApiRequest):
    key: Optional[str] = None
    backup: Optional[Dict[str, Any]] = None


@router.post("/export")
async def export_presets_endpoint(request: Request, body: ExportRequest):
    """
    Export presets as a JSON envelope, CSS text or design tokens.

    Raises:
        400: No presets selected
        404: Unknown preset id
    """
    catalog = request.app.state.catalog
    try:
        presets = [catalog.get_preset_or_raise(preset_id) for preset_id in body.preset_ids]
        if body.format == "css":
            if not presets:
                raise ValidationError(["No presets selected for export"])
            return PlainTextResponse(export_presets_as_css(presets), media_type="text/css")
        if body.format == "tokens":
            return export_design_tokens(presets)
        return export_presets(presets, body.exported_by)
    except PresetError as e:
        raise to_http_exception(e) from e


@router.get("/collections/{collection_id}")
async def export_collection_endpoint(collection_id: str, request: Request):
    try:
        collection = request.app.state.catalog.get_collection_or_raise(collection_id)
    except PresetError as e:
        raise to_http_exception(e) from e
    return export_collection(collection)


@router.get("/themes/{theme_id}")
async def export_theme_endpoint(theme_id: str, request: Request):
    try:
        theme = request.app.state.catalog.get_theme_or_raise(theme_id)
    except PresetError as e:
        raise to_http_exception(e) from e
    return export_theme(theme)


@router.post("/import")
async def import_endpoint(request: Request, payload: Any = Body(...)):
    """
    Import an export envelope, a bare preset array or {presets: [...]}.

    Raises:
        400: Structurally invalid payload (the whole batch is rejected)
    """
    catalog = request.app.state.catalog
    try:
        if isinstance(payload, dict) and "type" in payload:
            result = import_envelope(catalog, payload)
        else:
            result = import_presets(catalog, payload)
    except ImportBatchError as e:
        logger.warning(f"Import rejected: {e}")
        raise to_http_exception(e) from e
    except PresetError as e:
        raise to_http_exception(e) from e

    if isinstance(result, ImportResult):
        return {"type": "preset", **result.to_dict()}
    kind = "theme" if isinstance(result, StyleTheme) else "collection"
    return {"type": kind, "data": result.to_wire()}


@router.post("/import/css")
async def import_css_endpoint(request: Request, body: CssImportRequest):
    try:
        draft = import_preset_from_css(body.css, body.name, body.category)
        if body.save:
            preset = request.app.state.catalog.create_preset(draft)
            return {"saved": True, "preset": preset.to_wire()}
    except PresetError as e:
        raise to_http_exception(e) from e
    return {"saved": False, "preset": draft.to_wire()}


@router.post("/backup", status_code=201)
async def create_backup_endpoint(request: Request):
    snapshot = request.app.state.catalog.store.create_backup()
    return {"timestamp": snapshot["timestamp"], "presets": len(snapshot["presets"])}


@router.get("/backups")
async def list_backups_endpoint(request: Request):
    return {"backups": request.app.state.catalog.store.list_backups()}


@router.post("/restore")
async def restore_endpoint(request: Request, body: RestoreRequest):
    """
    Restore from a stored backup (by key) or from an uploaded snapshot.

    Raises:
        400: Malformed snapshot, or neither key nor backup given
        404: Unknown backup key
    """
    store = request.app.state.catalog.store
    if body.key is not None:
        data = store.get_backup(body.key)
        if data is None:
            raise HTTPException(status_code=404, detail=f"Backup not found: {body.key}")
    elif body.backup is not None:
        data = body.backup
    else:
        raise HTTPException(status_code=400, detail="Provide a backup key or backup data")

    try:
        store.restore_from_backup(data)
    except PresetError as e:
        raise to_http_exception(e) from e
    return {"success": True, "message": f"Restored backup version {data['version']}"}


@router.post("/cleanup")
async def cleanup_endpoint(request: Request):
    return request.app.state.catalog.garbage_collect()


@router.get("/stats")
async def storage_stats_endpoint(request: Request):
    return request.app.state.catalog.store.get_storage_stats().to_wire()
