"""Auto-engage activity log endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from engage_dashboard.api.deps import CurrentUserDep, JsonBody, StoreDep
from engage_dashboard.domain.schemas import EngageActivity, InsertEngageActivity, validate_payload
from engage_dashboard.logging import get_logger

router = APIRouter(prefix="/engage-activities", tags=["Auto-Engage"])
logger = get_logger(__name__)


@router.get(
    "",
    response_model=list[EngageActivity],
    summary="List activities",
    description="Most recent auto-engage actions first.",
)
async def list_engage_activities(
    store: StoreDep,
    user: CurrentUserDep,
    limit: Annotated[int | None, Query(ge=1, le=500)] = None,
    platform: str | None = None,
    activity_type: Annotated[str | None, Query(alias="type")] = None,
) -> list[EngageActivity]:
    return store.get_engage_activities(
        user.id, platform=platform, activity_type=activity_type, limit=limit
    )


@router.post(
    "",
    response_model=EngageActivity,
    status_code=status.HTTP_201_CREATED,
    summary="Log activity",
)
async def create_engage_activity(
    body: JsonBody, store: StoreDep, user: CurrentUserDep
) -> EngageActivity:
    activity = validate_payload(InsertEngageActivity, {**body, "userId": user.id})
    logged = store.create_engage_activity(activity)
    logger.info("engage_activity_logged", activity_id=logged.id, type=str(logged.type))
    return logged
