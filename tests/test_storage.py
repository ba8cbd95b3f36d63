"""Tests for the in-memory store."""

from datetime import UTC, datetime, timedelta

import pytest

from engage_dashboard.domain.enums import LookbackPeriod, PostStatus
from engage_dashboard.domain.schemas import (
    InsertAnalyticsData,
    InsertPost,
    InsertUser,
    InsightAcknowledgement,
    PostUpdate,
)
from engage_dashboard.errors import (
    DuplicateRecordError,
    PreferencesValidationError,
    SchemaValidationError,
)
from engage_dashboard.services.storage import DEMO_USERNAME, seed_demo_data


@pytest.fixture
def demo(store, now):
    return seed_demo_data(store, now=now)


def _insert_post(user_id: int, scheduled_at: datetime | None = None, **kwargs) -> InsertPost:
    return InsertPost(
        user_id=user_id,
        content=kwargs.pop("content", "Hello"),
        status=kwargs.pop("status", PostStatus.SCHEDULED if scheduled_at else PostStatus.DRAFT),
        platform=kwargs.pop("platform", "twitter"),
        scheduled_at=scheduled_at,
        **kwargs,
    )


class TestSeed:
    def test_seed_counts(self, store, demo) -> None:
        assert demo.username == DEMO_USERNAME
        assert len(store.social_accounts) == 3
        assert len(store.posts) == 10
        assert len(store.analytics) == 12
        assert len(store.engage_activities) == 4
        assert len(store.insights) == 3
        assert len(store.monetization_records) == 4

    def test_seed_preferences_are_complete(self, demo) -> None:
        assert demo.preferences.auto_engage.max_daily_interactions == 25
        assert demo.preferences.notifications.in_app is True

    def test_duplicate_username_rejected(self, store, demo) -> None:
        with pytest.raises(DuplicateRecordError):
            store.create_user(
                InsertUser(
                    username=DEMO_USERNAME,
                    password="secret1",
                    email="other@example.com",
                    full_name="Other",
                )
            )


class TestPosts:
    def test_date_range_excludes_unscheduled(self, store) -> None:
        june = datetime(2024, 6, 10, 9, 0, tzinfo=UTC)
        store.create_post(_insert_post(1, june))
        store.create_post(_insert_post(1))

        in_range = store.get_posts(
            1, start_date=datetime(2024, 6, 1, tzinfo=UTC), end_date=datetime(2024, 6, 30, tzinfo=UTC)
        )

        assert [p.scheduled_at for p in in_range] == [june]
        assert len(store.get_posts(1)) == 2

    def test_naive_bounds_are_utc(self, store) -> None:
        store.create_post(_insert_post(1, datetime(2024, 6, 10, 23, 0, tzinfo=UTC)))

        assert store.get_posts(1, end_date=datetime(2024, 6, 10, 23, 0))
        assert not store.get_posts(1, end_date=datetime(2024, 6, 10, 22, 59))

    def test_posts_scoped_to_user(self, store) -> None:
        store.create_post(_insert_post(1))
        store.create_post(_insert_post(2))

        assert len(store.get_posts(1)) == 1

    def test_update_applies_only_given_fields(self, store) -> None:
        post = store.create_post(_insert_post(1, tags=["a"]))

        updated = store.update_post(post.id, PostUpdate(content="Changed"))

        assert updated.content == "Changed"
        assert updated.tags == ["a"]
        assert updated.last_updated >= post.last_updated

    def test_invalid_update_leaves_post_untouched(self, store) -> None:
        post = store.create_post(_insert_post(1))

        with pytest.raises(SchemaValidationError):
            store.update_post(post.id, PostUpdate(status=None))

        assert store.get_post(post.id) == post

    def test_update_missing_post(self, store) -> None:
        assert store.update_post(404, PostUpdate(content="x")) is None


class TestAnalytics:
    def test_one_record_per_post_per_day(self, store) -> None:
        record = InsertAnalyticsData(
            user_id=1, post_id=7, date=datetime(2024, 6, 1, 8, 0, tzinfo=UTC), platform="twitter"
        )
        store.create_analytics(record)

        with pytest.raises(DuplicateRecordError):
            store.create_analytics(record.model_copy(update={"date": datetime(2024, 6, 1, 20, 0, tzinfo=UTC)}))

        store.create_analytics(record.model_copy(update={"date": datetime(2024, 6, 2, 8, 0, tzinfo=UTC)}))
        assert len(store.analytics) == 2

    def test_account_level_records_not_limited(self, store) -> None:
        record = InsertAnalyticsData(user_id=1, date=datetime(2024, 6, 1, tzinfo=UTC), platform="twitter")

        store.create_analytics(record)
        store.create_analytics(record)

        assert len(store.analytics) == 2


class TestPreferences:
    def test_merge_keeps_other_sections(self, store, demo) -> None:
        merged = store.update_preferences(demo.id, {"notifications": {"email": False}})

        assert merged.notifications.email is False
        assert merged.auto_engage.max_daily_interactions == 25
        assert store.get_preferences(demo.id) == merged

    def test_invalid_update_saves_nothing(self, store, demo) -> None:
        before = store.get_preferences(demo.id)

        with pytest.raises(PreferencesValidationError):
            store.update_preferences(demo.id, {"content": {"defaultPlatform": "myspace"}})

        assert store.get_preferences(demo.id) == before

    def test_unknown_user(self, store) -> None:
        assert store.update_preferences(99, {}) is None


class TestInsightsAndAccounts:
    def test_acknowledge_sets_only_given_flags(self, store, demo) -> None:
        insight = store.get_insights(demo.id)[0]

        updated = store.acknowledge_insight(insight.id, InsightAcknowledgement(is_applied=True))

        assert updated.is_applied is True
        assert updated.is_read is False
        assert updated.title == insight.title

    def test_deactivated_accounts_hidden(self, store, demo) -> None:
        account = store.get_social_accounts(demo.id)[0]

        assert store.deactivate_social_account(account.id) is True

        assert account.id not in [a.id for a in store.get_social_accounts(demo.id)]
        assert len(store.get_social_accounts(demo.id, include_inactive=True)) == 3
        assert store.deactivate_social_account(999) is False


class TestAggregates:
    def test_dashboard_stats(self, store, demo) -> None:
        stats = store.dashboard_stats(demo.id)

        assert stats.total_followers == 40450
        assert stats.revenue_generated == 2110.5
        assert stats.scheduled_posts == 3

    def test_inactive_accounts_not_counted(self, store, demo) -> None:
        twitter = next(a for a in store.get_social_accounts(demo.id) if a.platform == "twitter")
        store.deactivate_social_account(twitter.id)

        assert store.dashboard_stats(demo.id).total_followers == 40450 - 12400

    def test_empty_store_stats(self, store) -> None:
        stats = store.dashboard_stats(1)

        assert stats.engagement_rate == 0.0
        assert stats.total_followers == 0
        assert store.platform_roi(1) == []

    def test_platform_roi_shares(self, store, demo) -> None:
        rows = store.platform_roi(demo.id)

        assert [r.platform for r in rows] == ["instagram", "facebook", "twitter"]
        assert sum(r.percentage for r in rows) == pytest.approx(100, abs=0.02)


class TestTrainingWindow:
    def test_window_selects_recent_posts_and_analytics(self, store, demo, now) -> None:
        posts, analytics = store.training_window(demo.id, LookbackPeriod.DAYS_30, now=now)

        assert len(posts) == 4
        assert all(p.status == PostStatus.PUBLISHED for p in posts)
        assert len(analytics) == 8
        assert all(now - timedelta(days=30) <= a.date <= now for a in analytics)

    def test_full_year(self, store, demo, now) -> None:
        posts, analytics = store.training_window(demo.id, LookbackPeriod.DAYS_365, now=now)

        assert len(posts) == 6
        assert len(analytics) == 12

    def test_future_posts_excluded(self, store, demo, now) -> None:
        posts, _ = store.training_window(demo.id, LookbackPeriod.DAYS_365, now=now)

        assert all(p.scheduled_at <= now for p in posts)
