"""
Collection endpoints.

Collections embed presets by value; membership changes go through the
add/remove endpoints so that the embedded copies come from the catalog.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Request

from ..presets.errors import PresetError
from .errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/collections", tags=["collections"])


@router.get("")
async def list_collections_endpoint(request: Request):
    collections = request.app.state.catalog.list_collections()
    return {"collections": [c.to_wire() for c in collections]}


@router.post("", status_code=201)
async def create_collection_endpoint(request: Request, data: Dict[str, Any] = Body(...)):
    """
    Create a collection.

    `presetIds` (optional) embeds existing catalog presets by id.

    Raises:
        400: Missing name or invalid collection
        404: A referenced preset does not exist
    """
    fields = dict(data)
    preset_ids = fields.pop("presetIds", None) or fields.pop("preset_ids", None)
    try:
        collection = request.app.state.catalog.create_collection(fields, preset_ids=preset_ids)
    except PresetError as e:
        raise to_http_exception(e) from e
    logger.info(f"Collection created: {collection.id} ({collection.name})")
    return collection.to_wire()


@router.get("/{collection_id}")
async def get_collection_endpoint(collection_id: str, request: Request):
    try:
        collection = request.app.state.catalog.get_collection_or_raise(collection_id)
    except PresetError as e:
        raise to_http_exception(e) from e
    return collection.to_wire()


@router.patch("/{collection_id}")
async def update_collection_endpoint(collection_id: str, request: Request, updates: Dict[str, Any] = Body(...)):
    try:
        collection = request.app.state.catalog.update_collection(collection_id, updates)
    except PresetError as e:
        raise to_http_exception(e) from e
    return collection.to_wire()


@router.delete("/{collection_id}")
async def delete_collection_endpoint(collection_id: str, request: Request):
    try:
        request.app.state.catalog.delete_collection(collection_id)
    except PresetError as e:
        raise to_http_exception(e) from e
    return {"success": True, "message": f"Collection {collection_id} deleted"}


@router.post("/{collection_id}/presets/{preset_id}")
async def add_preset_endpoint(collection_id: str, preset_id: str, request: Request):
    try:
        collection = request.app.state.catalog.add_preset_to_collection(collection_id, preset_id)
    except PresetError as e:
        raise to_http_exception(e) from e
    return collection.to_wire()


@router.delete("/{collection_id}/presets/{preset_id}")
async def remove_preset_endpoint(collection_id: str, preset_id: str, request: Request):
    try:
        collection = request.app.state.catalog.remove_preset_from_collection(collection_id, preset_id)
    except PresetError as e:
        raise to_http_exception(e) from e
    return collection.to_wire()
