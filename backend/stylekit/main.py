"""
StyleKit HTTP service: preset, collection and theme management.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import StyleKitConfig, load_config
from .persistence import PresetStore, SqliteKeyValueStore
from .presets.catalog import PresetCatalog
from .routes import collections, exchange, health, presets, themes
from .routes.errors import register_exception_handlers
from .themes import ThemeManager

logger = logging.getLogger(__name__)


def build_catalog(config: StyleKitConfig) -> PresetCatalog:
    """Catalog over the SQLite store named in the configuration."""
    store = PresetStore(SqliteKeyValueStore(db_path=config.db_path))
    return PresetCatalog(store)


def create_app(
    config: Optional[StyleKitConfig] = None,
    catalog: Optional[PresetCatalog] = None,
) -> FastAPI:
    """
    Create the StyleKit API application.

    Args:
        config: Runtime configuration. Loaded from the environment if not provided.
        catalog: Catalog to serve. Built over config.db_path if not provided.

    Returns:
        FastAPI application with all routers mounted
    """
    config = config or load_config()
    catalog = catalog or build_catalog(config)

    app = FastAPI(title=f"{config.app_name} API", version=__version__)

    # CORS middleware for frontend access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.catalog = catalog
    app.state.theme_manager = ThemeManager(catalog)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(presets.router)
    app.include_router(collections.router)
    app.include_router(themes.router)
    app.include_router(exchange.router)

    @app.get("/")
    async def root():
        return {"service": "stylekit", "status": "running"}

    logger.info(f"{config.app_name} API ready (db: {config.db_path})")
    return app


def run_server(config: Optional[StyleKitConfig] = None) -> None:
    """
    Run the API with uvicorn.

    Args:
        config: Runtime configuration. Loaded from the environment if not provided.
    """
    import uvicorn

    config = config or load_config()
    app = create_app(config)

    logger.info(f"Starting {config.app_name} API on {config.host}:{config.port}")
    if config.host == "0.0.0.0":
        logger.warning("Binding to all interfaces. No authentication is configured.")

    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
