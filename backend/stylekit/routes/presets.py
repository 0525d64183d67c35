"""
Preset endpoints.

Thin HTTP adapter over PresetCatalog. Request bodies use camelCase or
snake_case keys; responses are camelCase.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, HTTPException, Query, Request
from pydantic import Field

from ..presets.errors import PresetError
from ..presets.models import ElementStyle
from ..presets.search import sort_presets
from ..presets.validation import parse_model
from .errors import to_http_exception
from .schemas import ApiRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/presets", tags=["presets"])


class ApplyPresetRequest(ApiRequest):
    """Request body for applying a preset to one element."""

    style: Dict[str, Any] = Field(default_factory=dict)
    mode: Optional[str] = None


class ApplyToElementsRequest(ApiRequest):
    """Request body for applying a preset to several elements."""

    styles: Dict[str, Dict[str, Any]]
    mode: Optional[str] = None


class DuplicatePresetRequest(ApiRequest):
    new_name: Optional[str] = None


class BulkUpdateRequest(ApiRequest):
    preset_ids: List[str]
    updates: Dict[str, Any]


class BulkDeleteRequest(ApiRequest):
    preset_ids: List[str]


class SuggestionRequest(ApiRequest):
    styles: List[Dict[str, Any]]
    max_suggestions: int = Field(default=5, ge=1)


def _wire(presets) -> List[Dict[str, Any]]:
    return [preset.to_wire() for preset in presets]


@router.get("")
async def list_presets_endpoint(
    request: Request,
    search: Optional[str] = None,
    category: Optional[str] = None,
    tag: Optional[List[str]] = Query(default=None),
    author: Optional[str] = None,
    is_custom: Optional[bool] = None,
    is_shared: Optional[bool] = None,
    min_rating: Optional[float] = None,
    sort_by: Optional[str] = None,
    order: str = "asc",
):
    """
    List presets, built-ins first, optionally filtered and sorted.

    Raises:
        400: Invalid filter or sort field
    """
    catalog = request.app.state.catalog
    filters = {
        "search_term": search,
        "category": category,
        "tags": tag,
        "author": author,
        "is_custom": is_custom,
        "is_shared": is_shared,
        "min_rating": min_rating,
    }
    filters = {key: value for key, value in filters.items() if value is not None}
    try:
        presets = catalog.search(filters)
        if sort_by:
            presets = sort_presets(presets, sort_by, order)
    except PresetError as e:
        raise to_http_exception(e) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return {"presets": _wire(presets)}


@router.get("/categories")
async def list_categories_endpoint(request: Request):
    return {"categories": request.app.state.catalog.list_categories()}


@router.get("/quick-styles")
async def list_quick_styles_endpoint(request: Request):
    return {"quickStyles": [q.to_wire() for q in request.app.state.catalog.list_quick_styles()]}


@router.post("/quick-styles/{quick_style_id}/apply")
async def apply_quick_style_endpoint(quick_style_id: str, request: Request, body: ApplyPresetRequest):
    try:
        current = parse_model(ElementStyle, body.style)
        merged = request.app.state.catalog.apply_quick_style(quick_style_id, current)
    except PresetError as e:
        raise to_http_exception(e) from e
    return {"style": merged.to_wire()}


@router.get("/favorites")
async def list_favorites_endpoint(request: Request):
    return {"presets": _wire(request.app.state.catalog.get_favorites())}


@router.get("/recent")
async def list_recently_used_endpoint(request: Request):
    return {"presets": _wire(request.app.state.catalog.get_recently_used())}


@router.get("/insights")
async def usage_insights_endpoint(request: Request):
    insights = request.app.state.catalog.analyze_usage()
    insights["most_used"] = _wire(insights["most_used"])
    return insights


@router.post("/suggestions")
async def suggest_presets_endpoint(request: Request, body: SuggestionRequest):
    try:
        styles = [parse_model(ElementStyle, style) for style in body.styles]
    except PresetError as e:
        raise to_http_exception(e) from e
    suggestions = request.app.state.catalog.suggest_presets(styles, body.max_suggestions)
    return {"presets": _wire(suggestions)}


@router.get("/settings")
async def get_settings_endpoint(request: Request):
    return request.app.state.catalog.get_settings().to_wire()


@router.patch("/settings")
async def update_settings_endpoint(request: Request, updates: Dict[str, Any] = Body(...)):
    try:
        settings = request.app.state.catalog.update_settings(updates)
    except PresetError as e:
        raise to_http_exception(e) from e
    return settings.to_wire()


@router.post("/bulk-update")
async def bulk_update_endpoint(request: Request, body: BulkUpdateRequest):
    """
    Raises:
        400: Any resulting preset is invalid (nothing is written)
        404: Any id is unknown
        409: Any id is a built-in preset
    """
    try:
        updated = request.app.state.catalog.bulk_update_presets(body.preset_ids, body.updates)
    except PresetError as e:
        raise to_http_exception(e) from e
    return {"presets": _wire(updated)}


@router.post("/bulk-delete")
async def bulk_delete_endpoint(request: Request, body: BulkDeleteRequest):
    try:
        request.app.state.catalog.bulk_delete_presets(body.preset_ids)
    except PresetError as e:
        raise to_http_exception(e) from e
    return {"success": True, "deleted": len(body.preset_ids)}


@router.post("", status_code=201)
async def create_preset_endpoint(request: Request, draft: Dict[str, Any] = Body(...)):
    """
    Create a custom preset.

    Raises:
        400: Validation failed (missing name, style or category, bad colors, duplicate name)
    """
    try:
        preset = request.app.state.catalog.create_preset(draft)
    except PresetError as e:
        raise to_http_exception(e) from e
    logger.info(f"Preset created: {preset.id} ({preset.name})")
    return preset.to_wire()


@router.get("/{preset_id}")
async def get_preset_endpoint(preset_id: str, request: Request):
    try:
        preset = request.app.state.catalog.get_preset_or_raise(preset_id)
    except PresetError as e:
        raise to_http_exception(e) from e
    return preset.to_wire()


@router.patch("/{preset_id}")
async def update_preset_endpoint(preset_id: str, request: Request, updates: Dict[str, Any] = Body(...)):
    """
    Raises:
        400: Updated preset is invalid
        404: Preset not found
        409: Preset is built in
    """
    try:
        preset = request.app.state.catalog.update_preset(preset_id, updates)
    except PresetError as e:
        raise to_http_exception(e) from e
    return preset.to_wire()


@router.delete("/{preset_id}")
async def delete_preset_endpoint(preset_id: str, request: Request):
    try:
        request.app.state.catalog.delete_preset(preset_id)
    except PresetError as e:
        raise to_http_exception(e) from e
    return {"success": True, "message": f"Preset {preset_id} deleted"}


@router.post("/{preset_id}/duplicate", status_code=201)
async def duplicate_preset_endpoint(
    preset_id: str,
    request: Request,
    body: Optional[DuplicatePresetRequest] = None,
):
    new_name = body.new_name if body else None
    try:
        preset = request.app.state.catalog.duplicate_preset(preset_id, new_name)
    except PresetError as e:
        raise to_http_exception(e) from e
    logger.info(f"Preset duplicated: {preset_id} -> {preset.id} ({preset.name})")
    return preset.to_wire()


@router.post("/{preset_id}/apply")
async def apply_preset_endpoint(preset_id: str, request: Request, body: ApplyPresetRequest):
    """
    Merge a preset onto an element style and return the result.

    The caller writes the returned style back to its element.
    """
    try:
        current = parse_model(ElementStyle, body.style)
        merged = request.app.state.catalog.apply_preset(preset_id, current, body.mode)
    except PresetError as e:
        raise to_http_exception(e) from e
    return {"style": merged.to_wire()}


@router.post("/{preset_id}/apply-elements")
async def apply_preset_to_elements_endpoint(preset_id: str, request: Request, body: ApplyToElementsRequest):
    try:
        styles = {
            element_id: parse_model(ElementStyle, style)
            for element_id, style in body.styles.items()
        }
        merged = request.app.state.catalog.apply_preset_to_elements(preset_id, styles, body.mode)
    except PresetError as e:
        raise to_http_exception(e) from e
    return {"styles": {element_id: style.to_wire() for element_id, style in merged.items()}}


@router.post("/{preset_id}/favorite")
async def toggle_favorite_endpoint(preset_id: str, request: Request):
    try:
        favorite = request.app.state.catalog.toggle_favorite(preset_id)
    except PresetError as e:
        raise to_http_exception(e) from e
    return {"presetId": preset_id, "favorite": favorite}
