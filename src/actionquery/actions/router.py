"""Actions router."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from loguru import logger
from sqlmodel.ext.asyncio.session import AsyncSession

from actionquery.config.db import get_session

from .schemas import ActionFilters, ActionsModel, OrderBy
from .service import cancel_action_by_id, count_actions_svc, search_actions_svc

__all__ = ["router"]


router = APIRouter(tags=["Actions"])


async def get_action_filters(  # noqa: PLR0913, PLR0917
    hook: Annotated[list[str] | None, Query()] = None,
    status_filter: Annotated[list[str] | None, Query(alias="status")] = None,
    group: Annotated[str, Query(max_length=255)] = "",
    date: Annotated[datetime | None, Query()] = None,
    date_compare: Annotated[str, Query()] = "<=",
    modified: Annotated[datetime | None, Query()] = None,
    modified_compare: Annotated[str, Query()] = "<=",
    claimed: Annotated[bool | None, Query()] = None,
    claim_id: Annotated[int | None, Query(ge=1)] = None,
    search: Annotated[str, Query(max_length=191, alias="s")] = "",
    per_page: Annotated[int | None, Query(ge=0, le=1000)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
    orderby: Annotated[OrderBy, Query()] = OrderBy.DATE,
    order: Annotated[str, Query()] = "ASC",
) -> ActionFilters:
    """Collect the filter query parameters.

    Args:
        hook: Hooks to match, any of them.
        status_filter: Statuses to match, any of them.
        group: Group slug to match.
        date: Scheduled date to compare with.
        date_compare: Comparator for the scheduled date.
        modified: Last attempt date to compare with.
        modified_compare: Comparator for the last attempt date.
        claimed: Only claimed (true) or unclaimed (false) actions.
        claim_id: Only actions held by this claim, overrides ``claimed``.
        search: Free text matched against hook, args and claim ID.
        per_page: Page size, 0 returns every match.
        offset: Number of records to skip.
        orderby: Column to order by.
        order: Sort direction.

    Returns:
        Filter specification for the actions query.
    """
    page = {"per_page": per_page} if per_page is not None else {}
    return ActionFilters(
        hook=hook or [],
        status=status_filter or [],
        group=group,
        date=date,
        date_compare=date_compare,
        modified=modified,
        modified_compare=modified_compare,
        claimed=claim_id if claim_id is not None else claimed,
        search=search,
        offset=offset,
        orderby=orderby,
        order=order,
        **page,
    )


@router.get("", summary="Search scheduled actions")
async def get_actions(
    db: Annotated[AsyncSession, Depends(get_session)],
    filters: Annotated[ActionFilters, Depends(get_action_filters)],
) -> list[ActionsModel]:
    """Search scheduled actions with filtering, ordering and pagination.

    Args:
        db: Database session for queries.
        filters: Filter specification built from the query parameters.

    Returns:
        Matching actions in query order.
    """
    logger.debug("Fetching actions with parameters", filters=str(filters))
    actions = await search_actions_svc(db, filters)
    return [
        ActionsModel(id=action_id, **action.model_dump())
        for action_id, action in actions.items()
    ]


@router.get("/count", summary="Count scheduled actions")
async def get_actions_count(
    db: Annotated[AsyncSession, Depends(get_session)],
    filters: Annotated[ActionFilters, Depends(get_action_filters)],
) -> int:
    """Count the actions matching the filters, pagination is ignored."""
    return await count_actions_svc(db, filters)


@router.delete(
    "/{action_id}",
    summary="Cancel a scheduled action",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_action(
    db: Annotated[AsyncSession, Depends(get_session)], action_id: int
) -> Response:
    """Cancel the action with the given ID.

    Args:
        db: Database session for queries.
        action_id: ID of the action to cancel.

    Returns:
        Empty response with status 204.
    """
    await cancel_action_by_id(db, action_id)
    logger.debug("Action canceled via API", action_id=action_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
