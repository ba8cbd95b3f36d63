"""Analytics endpoints."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Query, status

from engage_dashboard.api.deps import CurrentUserDep, JsonBody, StoreDep
from engage_dashboard.domain.schemas import AnalyticsData, InsertAnalyticsData, validate_payload

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get(
    "",
    response_model=list[AnalyticsData],
    summary="List analytics",
)
async def list_analytics(
    store: StoreDep,
    user: CurrentUserDep,
    platform: str | None = None,
    start_date: Annotated[datetime | None, Query(alias="startDate")] = None,
    end_date: Annotated[datetime | None, Query(alias="endDate")] = None,
    post_id: Annotated[int | None, Query(alias="postId")] = None,
) -> list[AnalyticsData]:
    return store.get_analytics(
        user.id,
        platform=platform,
        post_id=post_id,
        start_date=start_date,
        end_date=end_date,
    )


@router.post(
    "",
    response_model=AnalyticsData,
    status_code=status.HTTP_201_CREATED,
    summary="Record analytics",
    description="Record one day of metrics. A post has at most one record per day.",
)
async def create_analytics(body: JsonBody, store: StoreDep, user: CurrentUserDep) -> AnalyticsData:
    record = validate_payload(InsertAnalyticsData, {**body, "userId": user.id})
    return store.create_analytics(record)
