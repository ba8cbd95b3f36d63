"""Monetization ledger endpoints."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Query, status

from engage_dashboard.api.deps import CurrentUserDep, JsonBody, StoreDep
from engage_dashboard.domain.schemas import (
    InsertMonetizationRecord,
    MonetizationRecord,
    validate_payload,
)
from engage_dashboard.logging import get_logger

router = APIRouter(prefix="/monetization", tags=["Monetization"])
logger = get_logger(__name__)


@router.get(
    "",
    response_model=list[MonetizationRecord],
    summary="List monetization records",
)
async def list_monetization_records(
    store: StoreDep,
    user: CurrentUserDep,
    platform: str | None = None,
    source: str | None = None,
    start_date: Annotated[datetime | None, Query(alias="startDate")] = None,
    end_date: Annotated[datetime | None, Query(alias="endDate")] = None,
) -> list[MonetizationRecord]:
    return store.get_monetization_records(
        user.id,
        platform=platform,
        source=source,
        start_date=start_date,
        end_date=end_date,
    )


@router.post(
    "",
    response_model=MonetizationRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Record revenue",
)
async def create_monetization_record(
    body: JsonBody, store: StoreDep, user: CurrentUserDep
) -> MonetizationRecord:
    record = validate_payload(InsertMonetizationRecord, {**body, "userId": user.id})
    stored = store.create_monetization_record(record)
    logger.info("monetization_recorded", record_id=stored.id, amount=stored.amount)
    return stored
