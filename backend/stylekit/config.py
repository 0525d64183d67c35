"""
Runtime configuration.

Defaults suit a local single-user install: SQLite file in the working
directory, HTTP bound to localhost, CORS open to the Vite dev server.
Each setting can be overridden through a STYLEKIT_* environment variable.
Invalid overrides are logged and ignored.
"""

import logging
import os
from pathlib import Path
from typing import List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


DEFAULT_HOST = "127.0.0.1"  # Localhost only by default
DEFAULT_PORT = 8085
DEFAULT_DB_FILENAME = "stylekit.db"
DEFAULT_CORS_ORIGINS = ["http://localhost:5173"]  # Vite dev server

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_DB_PATH = "STYLEKIT_DB_PATH"
ENV_HOST = "STYLEKIT_HOST"
ENV_PORT = "STYLEKIT_PORT"
ENV_LOG_LEVEL = "STYLEKIT_LOG_LEVEL"
ENV_APP_NAME = "STYLEKIT_APP_NAME"
ENV_CORS_ORIGINS = "STYLEKIT_CORS_ORIGINS"


class StyleKitConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    db_path: str = Field(default_factory=lambda: str(Path.cwd() / DEFAULT_DB_FILENAME))
    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    log_level: str = "INFO"
    app_name: str = "StyleKit"
    cors_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))


def _parse_port(raw: str) -> Optional[int]:
    try:
        port = int(raw)
    except ValueError:
        logger.warning(f"Ignoring {ENV_PORT}={raw!r}: not an integer")
        return None
    if not 1 <= port <= 65535:
        logger.warning(f"Ignoring {ENV_PORT}={raw!r}: out of range")
        return None
    return port


def load_config(environ: Optional[Mapping[str, str]] = None) -> StyleKitConfig:
    """
    Build configuration from defaults and environment overrides.

    Args:
        environ: Variables to read; os.environ when omitted
    """
    env = os.environ if environ is None else environ
    overrides = {}

    db_path = env.get(ENV_DB_PATH, "").strip()
    if db_path:
        overrides["db_path"] = db_path

    host = env.get(ENV_HOST, "").strip()
    if host:
        overrides["host"] = host

    raw_port = env.get(ENV_PORT, "").strip()
    if raw_port:
        port = _parse_port(raw_port)
        if port is not None:
            overrides["port"] = port

    level = env.get(ENV_LOG_LEVEL, "").strip().upper()
    if level:
        if level in LOG_LEVELS:
            overrides["log_level"] = level
        else:
            logger.warning(f"Ignoring {ENV_LOG_LEVEL}={level!r}. Valid levels: {list(LOG_LEVELS)}")

    app_name = env.get(ENV_APP_NAME, "").strip()
    if app_name:
        overrides["app_name"] = app_name

    origins = env.get(ENV_CORS_ORIGINS, "")
    if origins.strip():
        overrides["cors_origins"] = [o.strip() for o in origins.split(",") if o.strip()]

    return StyleKitConfig(**overrides)
