"""In-memory store behind the reference API.

Single-process and single-user: records live in dictionaries keyed by id and
disappear with the process. Datetimes are compared as UTC; naive values are
taken to be UTC already.
"""

from collections import defaultdict
from datetime import UTC, datetime, timedelta
from typing import Any

from engage_dashboard.domain.dashboard import (
    DashboardStats,
    MonetizationSummary,
    PlatformROI,
    RevenueSource,
)
from engage_dashboard.domain.enums import LookbackPeriod, MonetizationType, PostStatus
from engage_dashboard.domain.preferences import UserPreferences, merge_preferences
from engage_dashboard.domain.schemas import (
    AnalyticsData,
    EngageActivity,
    ExtendedPost,
    InsertAnalyticsData,
    InsertEngageActivity,
    InsertInsight,
    InsertMonetizationRecord,
    InsertPost,
    InsertSocialAccount,
    InsertUser,
    Insight,
    InsightAcknowledgement,
    MonetizationRecord,
    Post,
    PostUpdate,
    SocialAccount,
    User,
    acknowledge_insight,
    validate_payload,
)
from engage_dashboard.errors import DuplicateRecordError
from engage_dashboard.logging import get_logger

logger = get_logger(__name__)

TOP_REVENUE_SOURCES = 5


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _in_range(value: datetime | None, start: datetime | None, end: datetime | None) -> bool:
    """Inclusive range check; a missing value never matches a bounded range."""
    if start is None and end is None:
        return True
    if value is None:
        return False
    value = _utc(value)
    if start is not None and value < _utc(start):
        return False
    if end is not None and value > _utc(end):
        return False
    return True


def _now() -> datetime:
    return datetime.now(UTC)


class MemoryStore:
    """Dictionary-backed storage for every entity the API serves."""

    def __init__(self) -> None:
        self.users: dict[int, User] = {}
        self.social_accounts: dict[int, SocialAccount] = {}
        self.posts: dict[int, Post] = {}
        self.analytics: dict[int, AnalyticsData] = {}
        self.engage_activities: dict[int, EngageActivity] = {}
        self.insights: dict[int, Insight] = {}
        self.monetization_records: dict[int, MonetizationRecord] = {}
        self._ids: defaultdict[str, int] = defaultdict(int)

    def _next_id(self, kind: str) -> int:
        self._ids[kind] += 1
        return self._ids[kind]

    # -------------------------------------------------------------------------
    # Users and preferences
    # -------------------------------------------------------------------------

    def create_user(self, user: InsertUser) -> User:
        if self.get_user_by_username(user.username) is not None:
            raise DuplicateRecordError(f"Username already taken: {user.username}")
        stored = User(**user.model_dump(), id=self._next_id("user"), created_at=_now())
        self.users[stored.id] = stored
        return stored

    def get_user(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        return next((u for u in self.users.values() if u.username == username), None)

    def get_preferences(self, user_id: int) -> UserPreferences | None:
        user = self.get_user(user_id)
        return user.preferences if user else None

    def update_preferences(self, user_id: int, update: dict[str, Any]) -> UserPreferences | None:
        """Merge a partial update into the stored preferences.

        Raises:
            PreferencesValidationError: if the update is invalid; nothing is saved.
        """
        user = self.get_user(user_id)
        if user is None:
            return None
        merged = merge_preferences(user.preferences, update)
        self.users[user_id] = user.model_copy(update={"preferences": merged})
        logger.info("preferences_updated", user_id=user_id, sections=sorted(update))
        return merged

    # -------------------------------------------------------------------------
    # Social accounts
    # -------------------------------------------------------------------------

    def get_social_accounts(self, user_id: int, include_inactive: bool = False) -> list[SocialAccount]:
        return [
            a
            for a in self.social_accounts.values()
            if a.user_id == user_id and (include_inactive or a.is_active)
        ]

    def get_social_account(self, account_id: int) -> SocialAccount | None:
        return self.social_accounts.get(account_id)

    def create_social_account(self, account: InsertSocialAccount) -> SocialAccount:
        stored = SocialAccount(**account.model_dump(), id=self._next_id("social_account"))
        self.social_accounts[stored.id] = stored
        return stored

    def update_social_account(self, account_id: int, changes: dict[str, Any]) -> SocialAccount | None:
        account = self.social_accounts.get(account_id)
        if account is None:
            return None
        updated = account.model_copy(update=changes)
        self.social_accounts[account_id] = updated
        return updated

    def deactivate_social_account(self, account_id: int) -> bool:
        """Soft delete: accounts are flagged inactive, never removed."""
        return self.update_social_account(account_id, {"is_active": False}) is not None

    # -------------------------------------------------------------------------
    # Posts
    # -------------------------------------------------------------------------

    def get_posts(
        self,
        user_id: int,
        platform: str | None = None,
        status: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[Post]:
        """Posts of a user; a date bound excludes posts with no ``scheduled_at``."""
        return [
            p
            for p in self.posts.values()
            if p.user_id == user_id
            and (platform is None or p.platform == platform)
            and (status is None or p.status == status)
            and _in_range(p.scheduled_at, start_date, end_date)
        ]

    def get_scheduled_posts(self, user_id: int) -> list[Post]:
        return self.get_posts(user_id, status=PostStatus.SCHEDULED)

    def get_post(self, post_id: int) -> Post | None:
        return self.posts.get(post_id)

    def create_post(self, post: InsertPost | ExtendedPost) -> Post:
        """Store an accepted post. Insert payloads start unscored."""
        data = post.model_dump()
        data["last_updated"] = _now()
        stored = Post(**data, id=self._next_id("post"))
        self.posts[stored.id] = stored
        logger.info("post_created", post_id=stored.id, platform=str(stored.platform))
        return stored

    def update_post(self, post_id: int, update: PostUpdate) -> Post | None:
        """Apply a partial update.

        Raises:
            SchemaValidationError: if the result would not be a valid post.
        """
        post = self.posts.get(post_id)
        if post is None:
            return None
        changes = update.model_dump(exclude_unset=True)
        changes["last_updated"] = _now()
        updated = validate_payload(Post, {**post.model_dump(), **changes})
        self.posts[post_id] = updated
        return updated

    def delete_post(self, post_id: int) -> bool:
        return self.posts.pop(post_id, None) is not None

    # -------------------------------------------------------------------------
    # Analytics
    # -------------------------------------------------------------------------

    def get_analytics(
        self,
        user_id: int,
        platform: str | None = None,
        post_id: int | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[AnalyticsData]:
        return [
            a
            for a in self.analytics.values()
            if a.user_id == user_id
            and (platform is None or a.platform == platform)
            and (post_id is None or a.post_id == post_id)
            and _in_range(a.date, start_date, end_date)
        ]

    def create_analytics(self, record: InsertAnalyticsData) -> AnalyticsData:
        """Record one day of metrics. One record per post per day.

        Raises:
            DuplicateRecordError: if the post already has a record for that day.
        """
        if record.post_id is not None:
            day = _utc(record.date).date()
            for existing in self.analytics.values():
                if existing.post_id == record.post_id and _utc(existing.date).date() == day:
                    raise DuplicateRecordError(
                        f"Analytics for post {record.post_id} on {day} already recorded"
                    )
        stored = AnalyticsData(**record.model_dump(), id=self._next_id("analytics"))
        self.analytics[stored.id] = stored
        return stored

    # -------------------------------------------------------------------------
    # Auto-engage activity
    # -------------------------------------------------------------------------

    def get_engage_activities(
        self,
        user_id: int,
        platform: str | None = None,
        activity_type: str | None = None,
        limit: int | None = None,
    ) -> list[EngageActivity]:
        """Most recent first."""
        activities = [
            a
            for a in self.engage_activities.values()
            if a.user_id == user_id
            and (platform is None or a.platform == platform)
            and (activity_type is None or a.type == activity_type)
        ]
        activities.sort(key=lambda a: _utc(a.performed_at or datetime.min), reverse=True)
        return activities[:limit] if limit is not None else activities

    def create_engage_activity(self, activity: InsertEngageActivity) -> EngageActivity:
        stored = EngageActivity(
            **activity.model_dump(),
            id=self._next_id("engage_activity"),
            performed_at=_now(),
        )
        self.engage_activities[stored.id] = stored
        return stored

    # -------------------------------------------------------------------------
    # Insights
    # -------------------------------------------------------------------------

    def get_insights(
        self,
        user_id: int,
        insight_type: str | None = None,
        is_read: bool | None = None,
        is_applied: bool | None = None,
    ) -> list[Insight]:
        return [
            i
            for i in self.insights.values()
            if i.user_id == user_id
            and (insight_type is None or i.type == insight_type)
            and (is_read is None or i.is_read == is_read)
            and (is_applied is None or i.is_applied == is_applied)
        ]

    def create_insight(self, insight: InsertInsight) -> Insight:
        stored = Insight(**insight.model_dump(), id=self._next_id("insight"), created_at=_now())
        self.insights[stored.id] = stored
        return stored

    def acknowledge_insight(self, insight_id: int, ack: InsightAcknowledgement) -> Insight | None:
        insight = self.insights.get(insight_id)
        if insight is None:
            return None
        updated = acknowledge_insight(insight, ack)
        self.insights[insight_id] = updated
        return updated

    # -------------------------------------------------------------------------
    # Monetization
    # -------------------------------------------------------------------------

    def get_monetization_records(
        self,
        user_id: int,
        platform: str | None = None,
        source: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[MonetizationRecord]:
        return [
            r
            for r in self.monetization_records.values()
            if r.user_id == user_id
            and (platform is None or r.platform == platform)
            and (source is None or r.source == source)
            and _in_range(r.date, start_date, end_date)
        ]

    def create_monetization_record(self, record: InsertMonetizationRecord) -> MonetizationRecord:
        stored = MonetizationRecord(**record.model_dump(), id=self._next_id("monetization"))
        self.monetization_records[stored.id] = stored
        return stored

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    def dashboard_stats(self, user_id: int) -> DashboardStats:
        followers = sum(a.follower_count for a in self.get_social_accounts(user_id))
        analytics = self.get_analytics(user_id)
        impressions = sum(a.impressions for a in analytics)
        engagements = sum(a.engagements for a in analytics)
        revenue = sum(r.amount for r in self.get_monetization_records(user_id))
        return DashboardStats(
            total_followers=followers,
            engagement_rate=round(engagements / impressions, 4) if impressions else 0.0,
            revenue_generated=round(revenue, 2),
            scheduled_posts=len(self.get_scheduled_posts(user_id)),
        )

    def monetization_summary(self, user_id: int) -> MonetizationSummary:
        records = self.get_monetization_records(user_id)

        by_source: dict[str, list[MonetizationRecord]] = defaultdict(list)
        for record in records:
            by_source[record.partner_name or record.source].append(record)

        sources = [
            RevenueSource(
                name=name,
                amount=round(sum(r.amount for r in group), 2),
                conversions=sum(r.conversion_count for r in group),
                logo_url=f"https://logo.clearbit.com/{name.lower().replace(' ', '')}.com",
            )
            for name, group in by_source.items()
        ]
        sources.sort(key=lambda s: s.amount, reverse=True)

        return MonetizationSummary(
            total_revenue=round(sum(r.amount for r in records), 2),
            affiliate_sales=sum(1 for r in records if r.source == MonetizationType.AFFILIATE),
            sponsored_posts=sum(1 for r in records if r.source == MonetizationType.SPONSORED),
            top_revenue_sources=sources[:TOP_REVENUE_SOURCES],
        )

    def platform_roi(self, user_id: int) -> list[PlatformROI]:
        """Revenue per platform, highest first, with its share of the total in percent."""
        revenue: dict[str, float] = defaultdict(float)
        for record in self.get_monetization_records(user_id):
            revenue[str(record.platform)] += record.amount

        total = sum(revenue.values())
        rows = [
            PlatformROI(
                platform=platform,
                revenue=round(amount, 2),
                percentage=round(amount / total * 100, 2) if total > 0 else 0.0,
            )
            for platform, amount in revenue.items()
        ]
        return sorted(rows, key=lambda r: r.revenue, reverse=True)

    def training_window(
        self,
        user_id: int,
        lookback_period: LookbackPeriod,
        now: datetime | None = None,
    ) -> tuple[list[Post], list[AnalyticsData]]:
        """Posts that went out, and analytics recorded, in the last ``lookback_period`` days."""
        end = _utc(now or _now())
        start = end - timedelta(days=int(lookback_period))
        posts = [
            p
            for p in self.posts.values()
            if p.user_id == user_id and _in_range(p.published_at or p.scheduled_at, start, end)
        ]
        return posts, self.get_analytics(user_id, start_date=start, end_date=end)


# =============================================================================
# Demo data
# =============================================================================

DEMO_USERNAME = "demo"

_DEMO_ACCOUNTS: list[tuple[str, int, int]] = [
    ("twitter", 12400, 1350),
    ("instagram", 18250, 1720),
    ("facebook", 9800, 1100),
]

# (platform, days ago, hour, content, tags, categories, media)
_DEMO_PUBLISHED: list[tuple[str, int, int, str, list[str], list[str], list[str]]] = [
    (
        "instagram", 3, 18,
        "Five tools I use every day to plan a week of content. Which one is new to you?",
        ["contentplanning", "productivity"], ["marketing"],
        ["https://cdn.example.com/media/tools.jpg"],
    ),
    (
        "twitter", 8, 9,
        "Hot take: consistency beats virality. Post less, but post every week.",
        ["growth"], ["strategy"], [],
    ),
    (
        "facebook", 15, 12,
        "New guide is live! Everything we learned running paid campaigns for small shops.",
        ["ads", "smallbusiness"], ["business"],
        ["https://cdn.example.com/media/guide-cover.png"],
    ),
    (
        "instagram", 22, 19,
        "Behind the scenes of a product shoot on a tiny budget.",
        ["behindthescenes", "photography"], ["creator"],
        ["https://cdn.example.com/media/bts.mp4"],
    ),
    (
        "twitter", 35, 17,
        "Thread: how we grew an account from zero to 10k followers without ads.",
        ["growth", "socialmedia"], ["strategy"], [],
    ),
    (
        "instagram", 50, 8,
        "Morning routine for creators who also have a day job.",
        ["routine"], ["lifestyle"],
        ["https://cdn.example.com/media/routine.jpg"],
    ),
]

_DEMO_SCHEDULED: list[tuple[str, int, int, str]] = [
    ("instagram", 2, 18, "Carousel: the three hooks that doubled our saves."),
    ("twitter", 5, 9, "Poll: what should the next deep-dive cover?"),
    ("facebook", 9, 12, "Live Q&A this Friday. Bring your questions about ads!"),
]


def seed_demo_data(store: MemoryStore, now: datetime | None = None) -> User:
    """Fill ``store`` with a demo user and a few weeks of content around ``now``."""
    now = _utc(now or _now())

    user = store.create_user(
        InsertUser(
            username=DEMO_USERNAME,
            password="password123",
            email="demo@example.com",
            full_name="Alex Morgan",
            avatar_url="https://randomuser.me/api/portraits/women/42.jpg",
            preferences=UserPreferences.model_validate(
                {
                    "dashboard": {"defaultPeriod": "30days", "defaultPlatform": "all"},
                    "content": {"defaultPlatform": "instagram"},
                    "autoEngage": {
                        "enabled": True,
                        "maxDailyInteractions": 25,
                        "platforms": ["instagram", "twitter"],
                    },
                    "monetization": {
                        "enabledTypes": ["affiliate", "sponsored", "product"],
                        "minRevenueThreshold": 100,
                    },
                }
            ),
        )
    )

    accounts = {}
    for platform, followers, following in _DEMO_ACCOUNTS:
        accounts[platform] = store.create_social_account(
            InsertSocialAccount(
                user_id=user.id,
                platform=platform,
                username=f"alex_{platform}",
                display_name=f"Alex Morgan on {platform.capitalize()}",
                profile_url=f"https://{platform}.com/alex_{platform}",
                follower_count=followers,
                following_count=following,
                is_primary=platform == "instagram",
                last_synced=now,
                account_category="business" if platform == "facebook" else "creator",
                verification_status="verified" if platform == "twitter" else "unverified",
                account_health=0.9,
                api_version="v2",
                scopes=["read", "write", "profile"],
            )
        )

    for rank, (platform, days_ago, hour, content, tags, categories, media) in enumerate(
        _DEMO_PUBLISHED
    ):
        at = (now - timedelta(days=days_ago)).replace(hour=hour, minute=0, second=0, microsecond=0)
        post = store.create_post(
            ExtendedPost(
                user_id=user.id,
                social_account_id=accounts[platform].id,
                content=content,
                media_urls=media or None,
                scheduled_at=at,
                published_at=at,
                status=PostStatus.PUBLISHED,
                tags=tags,
                categories=categories,
                platform=platform,
                engagement_score=85.0 - rank * 8,
                shadowban_risk=1.0,
            )
        )
        base = 400 - rank * 50
        for offset in (0, 1):
            store.create_analytics(
                InsertAnalyticsData(
                    user_id=user.id,
                    social_account_id=post.social_account_id,
                    post_id=post.id,
                    date=at + timedelta(days=offset),
                    likes=base // (offset + 1),
                    comments=base // (10 * (offset + 1)),
                    shares=base // (20 * (offset + 1)),
                    impressions=base * 12,
                    reach=base * 9,
                    views=base * 15,
                    platform=platform,
                    data_source="demo",
                )
            )

    for platform, days_ahead, hour, content in _DEMO_SCHEDULED:
        store.create_post(
            InsertPost(
                user_id=user.id,
                social_account_id=accounts[platform].id,
                content=content,
                scheduled_at=(now + timedelta(days=days_ahead)).replace(
                    hour=hour, minute=0, second=0, microsecond=0
                ),
                status=PostStatus.SCHEDULED,
                platform=platform,
            )
        )

    store.create_post(
        InsertPost(
            user_id=user.id,
            content="Draft: notes for the spring launch announcement.",
            status=PostStatus.DRAFT,
            platform="instagram",
        )
    )

    for activity_type, platform, target in [
        ("reply", "instagram", "jamie.creates"),
        ("like", "twitter", "growthnerd"),
        ("follow", "twitter", "smallbiz_sam"),
        ("comment", "instagram", "studio.lena"),
    ]:
        store.create_engage_activity(
            InsertEngageActivity(
                user_id=user.id,
                social_account_id=accounts[platform].id,
                type=activity_type,
                content="Thanks for sharing this!" if activity_type in ("reply", "comment") else None,
                target_username=target,
                platform=platform,
            )
        )

    for insight_type, title, description, severity in [
        (
            "engagement",
            "Evening posts perform best",
            "Instagram posts published after 6 PM get 40% more saves.",
            "opportunity",
        ),
        (
            "shadowban",
            "Hashtag limit",
            "Posts with more than ten hashtags show lower reach on Instagram.",
            "warning",
        ),
        (
            "monetization",
            "Affiliate links convert on Twitter",
            "Threads with one affiliate link convert twice as often as single tweets.",
            "info",
        ),
    ]:
        store.create_insight(
            InsertInsight(
                user_id=user.id,
                type=insight_type,
                title=title,
                description=description,
                severity=severity,
            )
        )

    for source, platform, amount, partner, days_ago in [
        ("affiliate", "instagram", 420.0, "Amazon", 4),
        ("sponsored", "instagram", 1200.0, "Nike", 12),
        ("affiliate", "twitter", 180.5, "Shopify", 20),
        ("product", "facebook", 310.0, None, 30),
    ]:
        store.create_monetization_record(
            InsertMonetizationRecord(
                user_id=user.id,
                source=source,
                amount=amount,
                date=now - timedelta(days=days_ago),
                platform=platform,
                partner_name=partner,
            )
        )

    logger.info(
        "demo_data_seeded",
        user_id=user.id,
        posts=len(store.posts),
        analytics=len(store.analytics),
    )
    return user


def build_store(seed: bool = True, now: datetime | None = None) -> MemoryStore:
    store = MemoryStore()
    if seed:
        seed_demo_data(store, now=now)
    return store

