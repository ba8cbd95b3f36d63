"""Validated domain entities.

Each entity has an insert variant (what a caller may supply at creation time)
and a read variant (what the system stores and returns). Insert variants
silently drop identity, system timestamps and system-computed fields, so a
caller can never forge them.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from engage_dashboard.domain.base import CamelModel
from engage_dashboard.domain.enums import (
    EngageActivityType,
    InsightSeverity,
    Platform,
    PostStatus,
    PostVisibility,
    VerificationStatus,
)
from engage_dashboard.domain.preferences import UserPreferences
from engage_dashboard.errors import SchemaValidationError

MAX_ENGAGEMENT_SCORE = 100.0
MAX_SHADOWBAN_RISK = 10.0

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_payload(schema: type[ModelT], data: Mapping[str, Any]) -> ModelT:
    """Validate ``data`` against ``schema`` or raise SchemaValidationError."""
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise SchemaValidationError.from_pydantic(e) from e


# =============================================================================
# Users
# =============================================================================


class InsertUser(CamelModel):
    """User registration payload."""

    username: str = Field(min_length=3)
    password: str = Field(min_length=6)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+$")
    full_name: str = Field(min_length=1)
    avatar_url: str | None = None
    preferences: UserPreferences = Field(default_factory=UserPreferences)


class User(InsertUser):
    """Stored user."""

    id: int
    created_at: datetime | None = None

    def public(self) -> dict[str, Any]:
        """Wire representation without the password."""
        return self.to_wire(exclude={"password"})


class LoginCredentials(CamelModel):
    """Login form payload."""

    username: str = Field(min_length=3)
    password: str = Field(min_length=6)


# =============================================================================
# Social accounts
# =============================================================================


class InsertSocialAccount(CamelModel):
    """A social account being linked to a user."""

    user_id: int
    platform: Platform
    username: str = Field(min_length=1)
    display_name: str | None = None
    profile_url: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    follower_count: int = Field(default=0, ge=0)
    following_count: int = Field(default=0, ge=0)
    access_token: str | None = None
    refresh_token: str | None = None
    token_expiry: datetime | None = None
    is_active: bool = True
    is_primary: bool = False
    last_synced: datetime | None = None
    account_category: str | None = None  # business, personal, creator
    verification_status: VerificationStatus | None = None
    account_created_at: datetime | None = None
    account_health: float | None = Field(default=None, ge=0, le=1)
    api_version: str | None = None
    webhook_url: str | None = None
    scopes: list[str] | None = None


class SocialAccount(InsertSocialAccount):
    """Stored social account. Deactivated rather than deleted."""

    id: int


# =============================================================================
# Posts
# =============================================================================


class _PostFields(CamelModel):
    """Fields a user may author."""

    user_id: int
    social_account_id: int | None = None
    content: str = Field(min_length=1)
    media_urls: list[str] | None = None
    scheduled_at: datetime | None = None
    status: PostStatus
    tags: list[str] | None = None
    categories: list[str] | None = None
    platform: Platform
    is_monetized: bool = False
    monetization_details: dict[str, Any] | None = None
    ai_generated: bool = False
    ai_prompt: str | None = None
    post_url: str | None = None
    visibility: PostVisibility = PostVisibility.PUBLIC
    external_post_id: str | None = None


class InsertPost(_PostFields):
    """Creation payload. System fields in the input are discarded."""

    model_config = ConfigDict(extra="ignore")


class ExtendedPost(_PostFields):
    """Full post including system-computed fields, for system write-back."""

    engagement_score: float | None = Field(default=None, ge=0, le=MAX_ENGAGEMENT_SCORE)
    shadowban_risk: float | None = Field(default=None, ge=0, le=MAX_SHADOWBAN_RISK)
    audience_match: float | None = Field(default=None, ge=0, le=1)
    published_at: datetime | None = None
    post_analysis: dict[str, Any] | None = None
    last_updated: datetime | None = None


class Post(ExtendedPost):
    """Stored post as returned by the API."""

    id: int


class PostUpdate(CamelModel):
    """Partial update of user-authored post fields."""

    model_config = ConfigDict(extra="ignore")

    social_account_id: int | None = None
    content: str | None = Field(default=None, min_length=1)
    media_urls: list[str] | None = None
    scheduled_at: datetime | None = None
    status: PostStatus | None = None
    tags: list[str] | None = None
    categories: list[str] | None = None
    platform: Platform | None = None
    is_monetized: bool | None = None
    monetization_details: dict[str, Any] | None = None
    visibility: PostVisibility | None = None
    post_url: str | None = None


def enrich_post(
    post: InsertPost,
    *,
    engagement_score: float | None = None,
    shadowban_risk: float | None = None,
    audience_match: float | None = None,
    post_analysis: dict[str, Any] | None = None,
    published_at: datetime | None = None,
    last_updated: datetime | None = None,
) -> ExtendedPost:
    """Attach system-generated fields to an accepted insert payload.

    Raises:
        SchemaValidationError: if a system field is out of range.
    """
    data = post.model_dump()
    data.update(
        engagement_score=engagement_score,
        shadowban_risk=shadowban_risk,
        audience_match=audience_match,
        post_analysis=post_analysis,
        published_at=published_at,
        last_updated=last_updated,
    )
    return validate_payload(ExtendedPost, data)


class ContentAnalysis(CamelModel):
    """AI content analysis attached to a post on request."""

    engagement_score: float = Field(ge=0, le=MAX_ENGAGEMENT_SCORE)
    shadowban_risk: float = Field(ge=0, le=MAX_SHADOWBAN_RISK)
    audience_match: float | None = Field(default=None, ge=0, le=1)
    recommendations: list[str] = Field(default_factory=list)
    optimized_content: str | None = None
    risks: list[str] | None = None
    best_time_to_post: str | None = None


# =============================================================================
# Analytics
# =============================================================================


class InsertAnalyticsData(CamelModel):
    """One day of metrics for a post/account. Immutable once recorded."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    social_account_id: int | None = None
    post_id: int | None = None
    date: datetime
    # Engagement
    likes: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)
    shares: int = Field(default=0, ge=0)
    saves: int = Field(default=0, ge=0)
    bookmarks: int = Field(default=0, ge=0)
    reactions: int = Field(default=0, ge=0)
    # Reach
    impressions: int = Field(default=0, ge=0)
    reach: int = Field(default=0, ge=0)
    views: int = Field(default=0, ge=0)
    view_duration: float = Field(default=0, ge=0)
    # Conversion
    clicks: int = Field(default=0, ge=0)
    link_clicks: int = Field(default=0, ge=0)
    profile_visits: int = Field(default=0, ge=0)
    followers_gained: int = Field(default=0, ge=0)
    conversion: float = Field(default=0, ge=0)
    # Revenue
    revenue: float = Field(default=0, ge=0)
    ad_revenue: float = Field(default=0, ge=0)
    audience_data: dict[str, Any] | None = None
    content_score: float = 0
    sentiment_score: float | None = Field(default=None, ge=-1, le=1)
    best_performing_time_slot: str | None = None
    platform: Platform
    data_source: str | None = None
    comparison_to_avg: float | None = None

    @property
    def engagements(self) -> int:
        return self.likes + self.comments + self.shares + self.saves + self.reactions


class AnalyticsData(InsertAnalyticsData):
    """Stored analytics record."""

    id: int


# =============================================================================
# Auto-engage
# =============================================================================


class InsertEngageActivity(CamelModel):
    """An auto-engagement action to log."""

    user_id: int
    social_account_id: int | None = None
    post_id: int | None = None
    type: EngageActivityType
    content: str | None = None
    target_username: str | None = None
    target_content: str | None = None
    platform: Platform


class EngageActivity(InsertEngageActivity):
    """Logged auto-engagement action."""

    id: int
    performed_at: datetime | None = None


# =============================================================================
# Insights
# =============================================================================


class InsertInsight(CamelModel):
    """An AI-generated recommendation."""

    user_id: int
    social_account_id: int | None = None
    type: str = Field(min_length=1)  # engagement, shadowban, monetization, ...
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    severity: InsightSeverity | None = None
    related_post_id: int | None = None
    is_read: bool = False
    is_applied: bool = False
    metadata: dict[str, Any] | None = None


class Insight(InsertInsight):
    """Stored insight."""

    id: int
    created_at: datetime | None = None


class InsightAcknowledgement(CamelModel):
    """The only mutation a user may apply to an insight."""

    model_config = ConfigDict(extra="forbid")

    is_read: bool | None = None
    is_applied: bool | None = None


def acknowledge_insight(insight: Insight, ack: InsightAcknowledgement) -> Insight:
    """Return a copy of ``insight`` with acknowledgement flags applied."""
    changes = ack.model_dump(exclude_none=True)
    return insight.model_copy(update=changes)


# =============================================================================
# Monetization
# =============================================================================


class InsertMonetizationRecord(CamelModel):
    """A revenue or campaign ledger entry."""

    user_id: int
    post_id: int | None = None
    source: str = Field(min_length=1)  # affiliate, sponsored, product
    amount: float
    currency: str = Field(default="USD", min_length=3, max_length=3)
    date: datetime
    platform: Platform
    # Conversion
    conversion_count: int = Field(default=1, ge=0)
    conversion_value: float = 0
    conversion_rate: float | None = None
    # Partner
    partner_name: str | None = None
    partner_category: str | None = None
    partner_contact_info: str | None = None
    partner_tier: str | None = None
    # Campaign
    campaign_id: str | None = None
    campaign_name: str | None = None
    campaign_start_date: datetime | None = None
    campaign_end_date: datetime | None = None
    campaign_budget: float | None = None
    campaign_type: str | None = None
    campaign_goal: str | None = None
    # Transaction
    status: str = "completed"
    payment_method: str | None = None
    payment_due_date: datetime | None = None
    invoice_number: str | None = None
    tax_rate: float = Field(default=0, ge=0)
    tax_amount: float = Field(default=0, ge=0)
    # Performance
    roi: float | None = None
    cost_per_conversion: float | None = None
    revenue_per_post: float | None = None
    notes: str | None = None
    tags: list[str] | None = None
    contract_url: str | None = None
    metrics: dict[str, Any] | None = None


class MonetizationRecord(InsertMonetizationRecord):
    """Stored monetization record."""

    id: int


class PostCreated(CamelModel):
    """Response to a post creation, with the analysis when one was requested."""

    post: Post
    analysis: ContentAnalysis | None = None
