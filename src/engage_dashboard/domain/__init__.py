"""Domain models and validation rules."""

from engage_dashboard.domain.dashboard import (
    DashboardStats,
    MonetizationSummary,
    PlatformROI,
    RevenueSource,
)
from engage_dashboard.domain.engagement_model import (
    ContentAttributes,
    ContentPattern,
    ContentPatterns,
    EngagementModel,
    TimingWindow,
    parse_lookback,
)
from engage_dashboard.domain.enums import (
    LookbackPeriod,
    Platform,
    PostStatus,
    TrainingState,
)
from engage_dashboard.domain.preferences import (
    UserPreferences,
    merge_preferences,
    validate_preferences,
)
from engage_dashboard.domain.results import ApiResult, Empty, Failure, Success
from engage_dashboard.domain.schemas import (
    AnalyticsData,
    EngageActivity,
    ExtendedPost,
    Insight,
    InsertPost,
    MonetizationRecord,
    Post,
    SocialAccount,
    User,
    enrich_post,
)

__all__ = [
    "AnalyticsData",
    "ApiResult",
    "ContentAttributes",
    "ContentPattern",
    "ContentPatterns",
    "DashboardStats",
    "Empty",
    "EngageActivity",
    "EngagementModel",
    "ExtendedPost",
    "Failure",
    "Insight",
    "InsertPost",
    "LookbackPeriod",
    "MonetizationRecord",
    "MonetizationSummary",
    "Platform",
    "PlatformROI",
    "Post",
    "PostStatus",
    "RevenueSource",
    "SocialAccount",
    "Success",
    "TimingWindow",
    "TrainingState",
    "User",
    "UserPreferences",
    "enrich_post",
    "merge_preferences",
    "parse_lookback",
    "validate_preferences",
]
