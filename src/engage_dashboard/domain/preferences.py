"""User preferences document: validation and defaulting.

Every section and every field inside a section has a documented default, so
validating a partial (or empty) document always produces a fully populated
``UserPreferences``. Present fields are checked against their type, range and
enum constraints; unknown fields are rejected.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ConfigDict, Field, ValidationError, field_validator

from engage_dashboard.domain.base import CamelModel
from engage_dashboard.domain.enums import (
    KPI,
    AnalyticsView,
    DashboardPeriod,
    DashboardWidget,
    EngagementFrequency,
    MonetizationType,
    NotificationType,
    Platform,
    ReportSchedule,
)
from engage_dashboard.errors import PreferencesValidationError

MAX_DAILY_INTERACTIONS = 100

# "all" is accepted on top of the platform names for the dashboard filter
ALL_PLATFORMS = "all"


class _Section(CamelModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class DashboardPreferences(_Section):
    """Default dashboard view settings."""

    default_period: DashboardPeriod = DashboardPeriod.LAST_30_DAYS
    default_platform: str = ALL_PLATFORMS
    enabled_widgets: list[DashboardWidget] = Field(
        default_factory=lambda: [
            DashboardWidget.PERFORMANCE,
            DashboardWidget.UPCOMING_POSTS,
            DashboardWidget.AI_INSIGHTS,
            DashboardWidget.AUTO_ENGAGE,
        ]
    )

    @field_validator("default_platform")
    @classmethod
    def _platform_or_all(cls, value: str) -> str:
        if value == ALL_PLATFORMS:
            return value
        return Platform(value)


class ContentPreferences(_Section):
    """Content creation preferences."""

    default_platform: Platform = Platform.TWITTER
    auto_analyze_content: bool = True
    preferred_post_times: dict[Platform, list[str]] | None = None
    default_hashtags: dict[Platform, list[str]] | None = None
    content_suggestion_topics: list[str] | None = None


class AutoEngagePreferences(_Section):
    """Auto-engage policy."""

    enabled: bool = False
    reply_to_comments: bool = True
    like_relevant_content: bool = True
    follow_back_users: bool = False
    engagement_frequency: EngagementFrequency = EngagementFrequency.MEDIUM
    blacklisted_keywords: list[str] | None = None
    max_daily_interactions: int = Field(default=20, ge=0, le=MAX_DAILY_INTERACTIONS)
    platforms: list[Platform] = Field(
        default_factory=lambda: [Platform.TWITTER, Platform.INSTAGRAM]
    )


class MonetizationPreferences(_Section):
    """Monetization policy."""

    enabled_types: list[MonetizationType] = Field(
        default_factory=lambda: [MonetizationType.AFFILIATE, MonetizationType.SPONSORED]
    )
    min_revenue_threshold: float = Field(default=50, ge=0)
    target_revenue_goals: dict[Platform, float] | None = None
    preferred_partners: list[str] | None = None
    blacklisted_partners: list[str] | None = None
    automatic_suggestions: bool = True


class AnalyticsPreferences(_Section):
    """Analytics page preferences."""

    default_view: AnalyticsView = AnalyticsView.OVERVIEW
    kpi_priorities: list[KPI] = Field(
        default_factory=lambda: [KPI.ENGAGEMENT, KPI.FOLLOWERS, KPI.REVENUE]
    )
    custom_report_schedule: ReportSchedule = ReportSchedule.WEEKLY
    email_reports: bool = True


class NotificationPreferences(_Section):
    """Notification toggles."""

    email: bool = True
    in_app: bool = True
    types: list[NotificationType] = Field(
        default_factory=lambda: [
            NotificationType.INSIGHTS,
            NotificationType.SHADOWBAN_RISK,
            NotificationType.MONETIZATION,
        ]
    )


class UserPreferences(_Section):
    """The full, defaulted preferences document stored on a user."""

    dashboard: DashboardPreferences = Field(default_factory=DashboardPreferences)
    content: ContentPreferences = Field(default_factory=ContentPreferences)
    auto_engage: AutoEngagePreferences = Field(default_factory=AutoEngagePreferences)
    monetization: MonetizationPreferences = Field(default_factory=MonetizationPreferences)
    analytics: AnalyticsPreferences = Field(default_factory=AnalyticsPreferences)
    notifications: NotificationPreferences = Field(default_factory=NotificationPreferences)


def default_preferences() -> UserPreferences:
    """Preferences with every field at its default."""
    return UserPreferences()


def validate_preferences(data: Mapping[str, Any] | None) -> UserPreferences:
    """Validate a partial preferences document and fill in defaults.

    Raises:
        PreferencesValidationError: listing the dotted path of every rejected field.
    """
    if data is None:
        return default_preferences()
    try:
        return UserPreferences.model_validate(data)
    except ValidationError as e:
        raise PreferencesValidationError.from_pydantic(e) from e


def _section_keys() -> dict[str, str]:
    keys = {}
    for name, field in UserPreferences.model_fields.items():
        keys[name] = name
        if field.alias:
            keys[field.alias] = name
    return keys


def merge_preferences(
    current: UserPreferences | Mapping[str, Any] | None,
    update: Mapping[str, Any],
) -> UserPreferences:
    """Apply a partial update section by section.

    A section present in ``update`` replaces the stored section (missing fields
    inside it fall back to defaults); sections absent from ``update`` are kept.
    """
    if not isinstance(current, UserPreferences):
        current = validate_preferences(current)
    validated = validate_preferences(update)

    section_keys = _section_keys()
    replaced = {section_keys[key] for key in update if key in section_keys}

    merged = {
        name: getattr(validated if name in replaced else current, name)
        for name in UserPreferences.model_fields
    }
    return UserPreferences(**merged)
