"""Tests for the typed dashboard API client."""

import json
from datetime import UTC, datetime

import httpx
import pytest

from engage_dashboard.client import DashboardClient
from engage_dashboard.domain.engagement_model import EngagementModel
from engage_dashboard.domain.results import Empty, Failure, Success
from engage_dashboard.domain.schemas import InsertPost, PostUpdate
from engage_dashboard.errors import PreferencesValidationError, SchemaValidationError


def _client_for(handler) -> DashboardClient:
    """Client whose requests are answered by ``handler``."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://testserver")
    return DashboardClient(http_client=http)


class TestTransportOutcomes:
    """Every response maps onto exactly one result type."""

    @pytest.mark.asyncio
    async def test_server_error_is_failure(self) -> None:
        client = _client_for(lambda request: httpx.Response(500, text="boom"))

        result = await client.fetch_dashboard_stats()

        assert isinstance(result, Failure)
        assert result.status_code == 500

    @pytest.mark.asyncio
    async def test_network_error_is_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = await _client_for(handler).fetch_posts()

        assert isinstance(result, Failure)
        assert result.status_code is None
        assert isinstance(result.error, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_invalid_json_is_failure(self) -> None:
        client = _client_for(lambda request: httpx.Response(200, text="<html>"))

        assert isinstance(await client.fetch_posts(), Failure)

    @pytest.mark.asyncio
    async def test_invalid_payload_is_failure(self) -> None:
        client = _client_for(lambda request: httpx.Response(200, json=[{"id": "not-a-post"}]))

        result = await client.fetch_posts()

        assert isinstance(result, Failure)
        assert "Post" in result.reason

    @pytest.mark.asyncio
    async def test_null_body_is_empty(self) -> None:
        client = _client_for(
            lambda request: httpx.Response(
                200, content=b"null", headers={"content-type": "application/json"}
            )
        )

        assert isinstance(await client.fetch_dashboard_stats(), Empty)

    @pytest.mark.asyncio
    async def test_no_content_is_empty(self) -> None:
        client = _client_for(lambda request: httpx.Response(204))

        assert isinstance(await client.fetch_preferences(), Empty)


class TestQueryParameters:
    @pytest.mark.asyncio
    async def test_posts_filters_are_camel_case_and_drop_all(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        await _client_for(handler).fetch_posts(
            start_date=datetime(2024, 6, 1, tzinfo=UTC),
            platform="all",
            status="scheduled",
        )

        params = seen[0].url.params
        assert params["startDate"] == "2024-06-01T00:00:00+00:00"
        assert params["status"] == "scheduled"
        assert "platform" not in params
        assert "endDate" not in params

    @pytest.mark.asyncio
    async def test_insight_filters_serialize_booleans(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        await _client_for(handler).fetch_insights(is_read=False)

        assert seen[0].url.params["isRead"] == "false"


class TestTrainEngagementModel:
    """Training response handling."""

    @pytest.mark.asyncio
    async def test_sends_lookback_body(self, model_payload) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"model": model_payload()})

        result = await _client_for(handler).train_engagement_model(90)

        assert seen[0].method == "POST"
        assert seen[0].url.path == "/api/ai/train-engagement-model"
        assert json.loads(seen[0].content) == {"lookbackPeriod": 90}
        assert isinstance(result, Success)
        assert isinstance(result.value, EngagementModel)
        assert result.value.platforms == ["instagram", "twitter", "facebook"]

    @pytest.mark.asyncio
    async def test_bare_model_accepted(self, model_payload) -> None:
        client = _client_for(lambda request: httpx.Response(200, json=model_payload()))

        assert isinstance(await client.train_engagement_model(30), Success)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{"model": None}, {}, None])
    async def test_no_model_is_empty(self, body) -> None:
        client = _client_for(lambda request: httpx.Response(200, json=body))

        assert isinstance(await client.train_engagement_model(90), Empty)

    @pytest.mark.asyncio
    async def test_malformed_model_is_failure(self, model_payload) -> None:
        client = _client_for(
            lambda request: httpx.Response(200, json={"model": model_payload(platforms=[])})
        )

        assert isinstance(await client.train_engagement_model(90), Failure)

    @pytest.mark.asyncio
    async def test_invalid_lookback_raises_without_request(self) -> None:
        calls = []
        client = _client_for(lambda request: calls.append(request) or httpx.Response(200))

        with pytest.raises(SchemaValidationError):
            await client.train_engagement_model(14)

        assert calls == []


class TestAgainstReferenceApi:
    """The client and the bundled API agree on the wire format."""

    @pytest.mark.asyncio
    async def test_fetch_posts(self, dashboard_client: DashboardClient) -> None:
        result = await dashboard_client.fetch_posts()

        assert isinstance(result, Success)
        assert len(result.value) == 10

    @pytest.mark.asyncio
    async def test_create_post_with_analysis(self, dashboard_client: DashboardClient) -> None:
        post = InsertPost(
            user_id=1,
            content="What is your favourite planning tool? #productivity",
            status="draft",
            platform="twitter",
        )

        result = await dashboard_client.create_post(post, analyze=True)

        assert isinstance(result, Success)
        assert result.value.analysis is not None
        assert result.value.post.engagement_score == result.value.analysis.engagement_score
        assert 0 <= result.value.post.shadowban_risk <= 10

    @pytest.mark.asyncio
    async def test_update_and_delete_post(self, dashboard_client: DashboardClient) -> None:
        created = await dashboard_client.create_post(
            InsertPost(user_id=1, content="Draft", status="draft", platform="instagram")
        )
        post_id = created.unwrap().post.id

        updated = await dashboard_client.update_post(post_id, PostUpdate(content="Edited"))
        assert updated.unwrap().content == "Edited"

        assert isinstance(await dashboard_client.delete_post(post_id), Success)
        missing = await dashboard_client.fetch_post(post_id)
        assert isinstance(missing, Failure)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_train_engagement_model(self, dashboard_client: DashboardClient) -> None:
        result = await dashboard_client.train_engagement_model(90)

        assert isinstance(result, Success)
        assert result.value.lookback_period == 90
        assert set(result.value.platforms) == {"instagram", "twitter", "facebook"}

    @pytest.mark.asyncio
    async def test_update_preferences_validates_locally(
        self, dashboard_client: DashboardClient
    ) -> None:
        with pytest.raises(PreferencesValidationError):
            await dashboard_client.update_preferences({"autoEngage": {"maxDailyInteractions": 150}})

        prefs = await dashboard_client.fetch_preferences()
        assert prefs.unwrap().auto_engage.max_daily_interactions == 25

    @pytest.mark.asyncio
    async def test_update_preferences(self, dashboard_client: DashboardClient) -> None:
        result = await dashboard_client.update_preferences({"notifications": {"email": False}})

        prefs = result.unwrap()
        assert prefs.notifications.email is False
        assert prefs.auto_engage.max_daily_interactions == 25

    @pytest.mark.asyncio
    async def test_acknowledge_insight(self, dashboard_client: DashboardClient) -> None:
        insights = (await dashboard_client.fetch_insights(is_read=False)).unwrap()

        result = await dashboard_client.acknowledge_insight(insights[0].id, is_read=True)

        assert result.unwrap().is_read is True
        remaining = (await dashboard_client.fetch_insights(is_read=False)).unwrap()
        assert len(remaining) == len(insights) - 1

    @pytest.mark.asyncio
    async def test_dashboard_aggregates(self, dashboard_client: DashboardClient) -> None:
        stats = (await dashboard_client.fetch_dashboard_stats()).unwrap()
        summary = (await dashboard_client.fetch_monetization_summary()).unwrap()
        roi = (await dashboard_client.fetch_platform_roi()).unwrap()

        assert stats.total_followers == 12400 + 18250 + 9800
        assert stats.scheduled_posts == 3
        assert summary.total_revenue == stats.revenue_generated
        assert roi[0].platform == "instagram"
        assert sum(row.percentage for row in roi) == pytest.approx(100, abs=0.05)
