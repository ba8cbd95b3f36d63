"""Dashboard aggregate endpoints."""

from fastapi import APIRouter

from engage_dashboard.api.deps import CurrentUserDep, StoreDep
from engage_dashboard.domain.dashboard import DashboardStats, MonetizationSummary, PlatformROI

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get(
    "/stats",
    response_model=DashboardStats,
    summary="Headline stats",
    description="Followers, engagement rate, revenue and scheduled post count.",
)
async def get_dashboard_stats(store: StoreDep, user: CurrentUserDep) -> DashboardStats:
    return store.dashboard_stats(user.id)


@router.get(
    "/monetization",
    response_model=MonetizationSummary,
    summary="Monetization summary",
)
async def get_monetization_summary(store: StoreDep, user: CurrentUserDep) -> MonetizationSummary:
    return store.monetization_summary(user.id)


@router.get(
    "/platform-roi",
    response_model=list[PlatformROI],
    summary="Revenue by platform",
)
async def get_platform_roi(store: StoreDep, user: CurrentUserDep) -> list[PlatformROI]:
    return store.platform_roi(user.id)
