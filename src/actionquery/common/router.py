"""Common router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response
from sqlmodel import text
from sqlmodel.ext.asyncio.session import AsyncSession

from actionquery.config.db import get_session

__all__ = ["router"]


router = APIRouter(tags=["Common", "Health"])


@router.get("/", include_in_schema=False, summary="Root endpoint")
async def root() -> Response:
    """Root endpoint."""
    return Response("OK")


@router.get("/health", include_in_schema=False, summary="Health check endpoint")
async def health(db: Annotated[AsyncSession, Depends(get_session)]) -> Response:
    """Health check endpoint, verifies the action store is reachable."""
    await db.exec(text("SELECT 1"))  # type: ignore[call-overload]
    return Response(status_code=204)
