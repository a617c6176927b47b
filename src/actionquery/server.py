"""Uvicorn entry point."""

from pathlib import Path

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from actionquery.config import settings

__all__ = ["run"]


_PACKAGE_DIR = Path(__file__).parent


def run() -> None:
    """Serve the app, production logging is left to loguru."""
    is_production = settings.app_env == "production"

    uvicorn.run(
        "actionquery:app",
        host=settings.host_binding,
        port=settings.port,
        reload=settings.reload,
        reload_dirs=[str(_PACKAGE_DIR)] if settings.reload else None,
        server_header=False,
        access_log=not is_production,
        log_config=None if is_production else LOGGING_CONFIG,
        log_level=settings.log_level.lower(),
    )
