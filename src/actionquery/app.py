"""Main application module for the actionquery service."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Final

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from prometheus_fastapi_instrumentator import Instrumentator
from sqlmodel import SQLModel

from actionquery.config import config_logger, engine, settings
from actionquery.utils.error_handler import register_exception_handlers
from actionquery.utils.prometheus import add_prometheus_metrics
from actionquery.utils.routers import register_routers

config_logger()


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncGenerator[None]:
    """Initialize resources on startup."""
    if settings.create_tables_on_start:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    logger.info(
        "actionquery started",
        env=settings.app_env,
        engine=settings.db_url.split("://")[0],
        version=settings.version,
    )
    yield
    await engine.dispose()


app: Final = FastAPI(
    title="actionquery",
    description="Query service for scheduled actions",
    version=settings.version,
    lifespan=lifespan,
)


# --------------------------------------------------------
# P R O M E T H E U S
# --------------------------------------------------------
Instrumentator().instrument(app).expose(app, include_in_schema=False)
add_prometheus_metrics(app)


# --------------------------------------------------------
# C O R S
# --------------------------------------------------------
if settings.app_env != "production":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origin,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# --------------------------------------------------------
# R O U T E R S
# --------------------------------------------------------
register_routers(app)


# --------------------------------------------------------
# E X C E P T I O N S
# --------------------------------------------------------
register_exception_handlers(app)
