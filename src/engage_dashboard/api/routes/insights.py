"""AI insight endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from engage_dashboard.api.deps import CurrentUserDep, JsonBody, StoreDep
from engage_dashboard.domain.schemas import Insight, InsightAcknowledgement, validate_payload

router = APIRouter(prefix="/insights", tags=["Insights"])


@router.get(
    "",
    response_model=list[Insight],
    summary="List insights",
)
async def list_insights(
    store: StoreDep,
    user: CurrentUserDep,
    insight_type: Annotated[str | None, Query(alias="type")] = None,
    is_read: Annotated[bool | None, Query(alias="isRead")] = None,
    is_applied: Annotated[bool | None, Query(alias="isApplied")] = None,
) -> list[Insight]:
    return store.get_insights(
        user.id, insight_type=insight_type, is_read=is_read, is_applied=is_applied
    )


@router.put(
    "/{insight_id}",
    response_model=Insight,
    summary="Acknowledge insight",
    description="Mark an insight read and/or applied. No other field may change.",
)
async def acknowledge_insight(
    insight_id: int, body: JsonBody, store: StoreDep, user: CurrentUserDep
) -> Insight:
    ack = validate_payload(InsightAcknowledgement, body)
    insight = store.insights.get(insight_id)
    if insight is None or insight.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Insight not found",
        )
    updated = store.acknowledge_insight(insight_id, ack)
    if updated is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Insight not found",
        )
    return updated
