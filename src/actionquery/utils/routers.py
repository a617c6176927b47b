"""Router registration."""

from fastapi import APIRouter, FastAPI

from actionquery.actions.router import router as actions_router
from actionquery.common.router import router as common_router

__all__ = ["register_routers"]


_ROUTERS: tuple[tuple[APIRouter, str], ...] = (
    (common_router, ""),
    (actions_router, "/actions"),
)


def register_routers(app: FastAPI) -> None:
    """Mount the service routers under their prefixes."""
    for router, prefix in _ROUTERS:
        app.include_router(router, prefix=prefix)
