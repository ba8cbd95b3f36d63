"""Domain enumerations."""

from enum import IntEnum, StrEnum


class Platform(StrEnum):
    """Supported social platforms."""

    TWITTER = "twitter"
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    LINKEDIN = "linkedin"
    TIKTOK = "tiktok"
    YOUTUBE = "youtube"
    PINTEREST = "pinterest"
    SNAPCHAT = "snapchat"
    THREADS = "threads"
    REDDIT = "reddit"
    DISCORD = "discord"
    WHATSAPP = "whatsapp"
    TELEGRAM = "telegram"
    MEDIUM = "medium"
    TUMBLR = "tumblr"
    MASTODON = "mastodon"


class PostStatus(StrEnum):
    """Lifecycle status of a post."""

    DRAFT = "draft"
    SCHEDULED = "scheduled"
    PUBLISHED = "published"
    FAILED = "failed"


class PostVisibility(StrEnum):
    """Audience a post is visible to."""

    PUBLIC = "public"
    PRIVATE = "private"
    FOLLOWERS_ONLY = "followers-only"


class EngageActivityType(StrEnum):
    """Kinds of auto-engagement actions."""

    REPLY = "reply"
    LIKE = "like"
    FOLLOW = "follow"
    COMMENT = "comment"
    SHARE = "share"
    MENTION = "mention"


class InsightSeverity(StrEnum):
    """How urgently an insight should be surfaced."""

    INFO = "info"
    WARNING = "warning"
    OPPORTUNITY = "opportunity"


class VerificationStatus(StrEnum):
    """Platform verification state of a social account."""

    VERIFIED = "verified"
    UNVERIFIED = "unverified"
    PENDING = "pending"


class MonetizationType(StrEnum):
    """Revenue source categories."""

    AFFILIATE = "affiliate"
    SPONSORED = "sponsored"
    PRODUCT = "product"
    SUBSCRIPTION = "subscription"
    DONATION = "donation"


class DashboardPeriod(StrEnum):
    """Default reporting period on the dashboard."""

    LAST_7_DAYS = "7days"
    LAST_30_DAYS = "30days"
    LAST_90_DAYS = "90days"
    YEAR = "year"


class DashboardWidget(StrEnum):
    """Widgets that can be enabled on the dashboard."""

    PERFORMANCE = "performance"
    MONETIZATION = "monetization"
    UPCOMING_POSTS = "upcoming-posts"
    AI_INSIGHTS = "ai-insights"
    ROI_BREAKDOWN = "roi-breakdown"
    AUTO_ENGAGE = "auto-engage"


class EngagementFrequency(StrEnum):
    """How aggressively auto-engage acts."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AnalyticsView(StrEnum):
    """Default analytics page view."""

    OVERVIEW = "overview"
    ENGAGEMENT = "engagement"
    AUDIENCE = "audience"


class KPI(StrEnum):
    """Key performance indicators a user can prioritise."""

    FOLLOWERS = "followers"
    IMPRESSIONS = "impressions"
    ENGAGEMENT = "engagement"
    COMMENTS = "comments"
    REVENUE = "revenue"


class ReportSchedule(StrEnum):
    """Custom report delivery schedule."""

    NEVER = "never"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class NotificationType(StrEnum):
    """Notification categories."""

    INSIGHTS = "insights"
    ENGAGEMENT = "engagement"
    SHADOWBAN_RISK = "shadowban-risk"
    MONETIZATION = "monetization"
    PERFORMANCE = "performance"
    SCHEDULED_POSTS = "scheduled-posts"


class LookbackPeriod(IntEnum):
    """Historical window (days) used to train an engagement model."""

    DAYS_30 = 30
    DAYS_90 = 90
    DAYS_180 = 180
    DAYS_365 = 365


class TrainingState(StrEnum):
    """States of the engagement-model training flow."""

    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"
