"""
Health endpoint.
"""

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request):
    """
    Liveness plus a count of storage problems seen since startup.

    Returns:
        {"status": "ok" | "degraded", "service": ..., "storageWarnings": n}
    """
    catalog = request.app.state.catalog
    warnings = len(catalog.storage_warnings)
    return {
        "status": "degraded" if warnings else "ok",
        "service": request.app.state.config.app_name,
        "storageWarnings": warnings,
    }
