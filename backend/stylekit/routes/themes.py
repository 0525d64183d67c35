"""
Theme endpoints.

CRUD goes through PresetCatalog; palette derivation, validation and
accessibility checks through ThemeManager.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Request

from ..presets.errors import PresetError
from ..presets.models import ThemeColors
from ..presets.validation import parse_model
from ..themes import generate_color_palette, validate_theme_colors
from .errors import to_http_exception
from .schemas import ApiRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/themes", tags=["themes"])


class CurrentThemeRequest(ApiRequest):
    theme_id: str


class PaletteRequest(ApiRequest):
    seed: str


class ThemeColorsRequest(ApiRequest):
    colors: Dict[str, Any]
    level: str = "AA"


class ThemeFromCurrentRequest(ApiRequest):
    name: str
    description: Optional[str] = None
    base_theme_id: Optional[str] = None
    save: bool = False


class PresetFromThemeRequest(ApiRequest):
    name: str
    save: bool = False


class DuplicateThemeRequest(ApiRequest):
    new_name: Optional[str] = None


@router.get("")
async def list_themes_endpoint(request: Request):
    return {"themes": [t.to_wire() for t in request.app.state.catalog.list_themes()]}


@router.get("/current")
async def get_current_theme_endpoint(request: Request):
    theme = request.app.state.catalog.get_current_theme()
    return {"theme": theme.to_wire() if theme else None}


@router.put("/current")
async def set_current_theme_endpoint(request: Request, body: CurrentThemeRequest):
    try:
        theme = request.app.state.theme_manager.apply_theme(body.theme_id)
    except PresetError as e:
        raise to_http_exception(e) from e
    return {"theme": theme.to_wire()}


@router.delete("/current")
async def clear_current_theme_endpoint(request: Request):
    request.app.state.catalog.clear_current_theme()
    return {"theme": None}


@router.post("/palette")
async def generate_palette_endpoint(body: PaletteRequest):
    """Full theme palette derived from one seed color."""
    try:
        colors = generate_color_palette(body.seed)
    except PresetError as e:
        raise to_http_exception(e) from e
    return {"colors": colors.to_wire()}


@router.post("/validate")
async def validate_colors_endpoint(body: ThemeColorsRequest):
    try:
        colors = parse_model(ThemeColors, body.colors)
    except PresetError as e:
        raise to_http_exception(e) from e
    errors = validate_theme_colors(colors)
    return {"isValid": not errors, "errors": errors}


@router.post("/accessibility")
async def check_accessibility_endpoint(request: Request, body: ThemeColorsRequest):
    try:
        colors = parse_model(ThemeColors, body.colors)
        report = request.app.state.theme_manager.check_accessibility(colors, body.level)
    except PresetError as e:
        raise to_http_exception(e) from e
    return {"level": body.level, "roles": report}


@router.post("/from-current")
async def theme_from_current_endpoint(request: Request, body: ThemeFromCurrentRequest):
    """
    Derive a theme from a base theme or the catalog's presets.

    With save the theme is created and returned; otherwise only the
    derived fields are returned.
    """
    try:
        data = request.app.state.theme_manager.create_theme_from_current(
            body.name, body.description, body.base_theme_id, save=body.save
        )
    except PresetError as e:
        raise to_http_exception(e) from e
    if body.save:
        return {"saved": True, "theme": data}
    return {
        "saved": False,
        "theme": {
            "name": data["name"],
            "description": data["description"],
            "presets": [],
            "colors": data["colors"].to_wire(),
            "typography": data["typography"].to_wire(),
        },
    }


@router.post("", status_code=201)
async def create_theme_endpoint(request: Request, data: Dict[str, Any] = Body(...)):
    """
    Raises:
        400: Missing name, invalid colors or typography
    """
    try:
        theme = request.app.state.catalog.create_theme(data)
    except PresetError as e:
        raise to_http_exception(e) from e
    logger.info(f"Theme created: {theme.id} ({theme.name})")
    return theme.to_wire()


@router.get("/{theme_id}")
async def get_theme_endpoint(theme_id: str, request: Request):
    try:
        theme = request.app.state.catalog.get_theme_or_raise(theme_id)
    except PresetError as e:
        raise to_http_exception(e) from e
    return theme.to_wire()


@router.patch("/{theme_id}")
async def update_theme_endpoint(theme_id: str, request: Request, updates: Dict[str, Any] = Body(...)):
    try:
        theme = request.app.state.catalog.update_theme(theme_id, updates)
    except PresetError as e:
        raise to_http_exception(e) from e
    return theme.to_wire()


@router.delete("/{theme_id}")
async def delete_theme_endpoint(theme_id: str, request: Request):
    try:
        request.app.state.catalog.delete_theme(theme_id)
    except PresetError as e:
        raise to_http_exception(e) from e
    return {"success": True, "message": f"Theme {theme_id} deleted"}


@router.post("/{theme_id}/duplicate", status_code=201)
async def duplicate_theme_endpoint(
    theme_id: str,
    request: Request,
    body: Optional[DuplicateThemeRequest] = None,
):
    new_name = body.new_name if body else None
    try:
        theme = request.app.state.catalog.duplicate_theme(theme_id, new_name)
    except PresetError as e:
        raise to_http_exception(e) from e
    return theme.to_wire()


@router.get("/{theme_id}/usage")
async def theme_usage_endpoint(theme_id: str, request: Request):
    try:
        return request.app.state.theme_manager.analyze_theme_usage(theme_id)
    except PresetError as e:
        raise to_http_exception(e) from e


@router.post("/{theme_id}/preset")
async def preset_from_theme_endpoint(theme_id: str, request: Request, body: PresetFromThemeRequest):
    """Preset draft styled from a theme, created as a custom preset when save is set."""
    try:
        result = request.app.state.theme_manager.generate_preset_from_theme(theme_id, body.name, save=body.save)
    except PresetError as e:
        raise to_http_exception(e) from e
    return {"saved": body.save, "preset": result.to_wire()}
