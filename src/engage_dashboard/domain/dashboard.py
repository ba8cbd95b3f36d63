"""Dashboard aggregate shapes returned by the dashboard endpoints."""

from pydantic import Field

from engage_dashboard.domain.base import CamelModel


class DashboardStats(CamelModel):
    """Headline numbers for the dashboard cards."""

    total_followers: int = 0
    engagement_rate: float = 0.0
    revenue_generated: float = 0.0
    scheduled_posts: int = 0


class RevenueSource(CamelModel):
    """One row of the top revenue sources table."""

    name: str
    amount: float
    conversions: int = 0
    change: float = 0.0
    logo_url: str | None = None


class MonetizationSummary(CamelModel):
    """Revenue rollup for the monetization panel."""

    total_revenue: float = 0.0
    affiliate_sales: int = 0
    sponsored_posts: int = 0
    top_revenue_sources: list[RevenueSource] = Field(default_factory=list)


class PlatformROI(CamelModel):
    """Revenue share of a single platform."""

    platform: str
    revenue: float
    percentage: float = Field(ge=0, le=100)
