"""Typed async client for the dashboard REST API.

One method per endpoint. Every method returns an ``ApiResult``: ``Success``
with a validated payload, ``Empty`` when the server answered without a usable
payload, or ``Failure`` for transport errors, error statuses and payloads that
do not validate. Transport problems never raise out of the client.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from engage_dashboard.config import settings
from engage_dashboard.domain.dashboard import DashboardStats, MonetizationSummary, PlatformROI
from engage_dashboard.domain.engagement_model import EngagementModel, parse_lookback
from engage_dashboard.domain.enums import Platform, PostStatus
from engage_dashboard.domain.preferences import UserPreferences, validate_preferences
from engage_dashboard.domain.results import ApiResult, Empty, Failure, Success
from engage_dashboard.domain.schemas import (
    AnalyticsData,
    EngageActivity,
    Insight,
    InsightAcknowledgement,
    InsertPost,
    MonetizationRecord,
    Post,
    PostCreated,
    PostUpdate,
    SocialAccount,
)
from engage_dashboard.logging import get_logger

logger = get_logger(__name__)

API_PREFIX = "/api"
TRAIN_ENGAGEMENT_MODEL_PATH = f"{API_PREFIX}/ai/train-engagement-model"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _query(**params: Any) -> dict[str, Any]:
    """Drop unset parameters and stringify the rest."""
    query = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        query[key] = str(value)
    return query


class DashboardClient:
    """Client for the dashboard REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root; defaults to ``settings.api_base_url``.
            timeout: Request timeout in seconds.
            http_client: Pre-built client (used to route requests in-process).
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout or settings.api_timeout_seconds
        self._client = http_client
        self._owns_client = http_client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "DashboardClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> ApiResult[Any]:
        client = await self._get_client()
        try:
            response = await client.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            logger.warning("api_request_failed", method=method, path=path, error=str(e))
            return Failure(reason=f"Request failed: {e}", error=e)

        if response.is_error:
            logger.warning(
                "api_error_response",
                method=method,
                path=path,
                status=response.status_code,
                body=response.text[:500],
            )
            return Failure(
                reason=f"{response.status_code}: {response.text or response.reason_phrase}",
                status_code=response.status_code,
            )

        if not response.content:
            return Empty()

        try:
            data = response.json()
        except ValueError as e:
            logger.warning("api_invalid_json", method=method, path=path)
            return Failure(reason="Response was not valid JSON", error=e)

        if data is None:
            return Empty()
        return Success(data)

    @staticmethod
    def _parse(result: ApiResult[Any], schema: type[ModelT]) -> ApiResult[ModelT]:
        if not isinstance(result, Success):
            return result
        try:
            return Success(schema.model_validate(result.value))
        except ValidationError as e:
            logger.warning("api_invalid_payload", schema=schema.__name__, errors=e.error_count())
            return Failure(reason=f"Invalid {schema.__name__} payload", error=e)

    @staticmethod
    def _parse_list(result: ApiResult[Any], schema: type[ModelT]) -> ApiResult[list[ModelT]]:
        if not isinstance(result, Success):
            return result
        try:
            return Success(TypeAdapter(list[schema]).validate_python(result.value))
        except ValidationError as e:
            logger.warning("api_invalid_payload", schema=schema.__name__, errors=e.error_count())
            return Failure(reason=f"Invalid {schema.__name__} list payload", error=e)

    # -------------------------------------------------------------------------
    # Posts
    # -------------------------------------------------------------------------

    async def fetch_posts(
        self,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        platform: Platform | str | None = None,
        status: PostStatus | str | None = None,
    ) -> ApiResult[list[Post]]:
        """List posts, optionally filtered by scheduled date range, platform and status."""
        params = _query(
            startDate=_iso(start_date),
            endDate=_iso(end_date),
            platform=None if platform == "all" else platform,
            status=status,
        )
        result = await self._request("GET", f"{API_PREFIX}/posts", params=params)
        return self._parse_list(result, Post)

    async def fetch_scheduled_posts(self) -> ApiResult[list[Post]]:
        result = await self._request("GET", f"{API_PREFIX}/posts/scheduled")
        return self._parse_list(result, Post)

    async def fetch_post(self, post_id: int) -> ApiResult[Post]:
        result = await self._request("GET", f"{API_PREFIX}/posts/{post_id}")
        return self._parse(result, Post)

    async def create_post(self, post: InsertPost, analyze: bool = False) -> ApiResult[PostCreated]:
        """Create a post; with ``analyze`` the server also scores it."""
        params = _query(analyze=True) if analyze else None
        result = await self._request(
            "POST", f"{API_PREFIX}/posts", params=params, json=post.to_wire()
        )
        return self._parse(result, PostCreated)

    async def update_post(self, post_id: int, update: PostUpdate) -> ApiResult[Post]:
        result = await self._request(
            "PUT", f"{API_PREFIX}/posts/{post_id}", json=update.to_wire(exclude_unset=True)
        )
        return self._parse(result, Post)

    async def delete_post(self, post_id: int) -> ApiResult[bool]:
        result = await self._request("DELETE", f"{API_PREFIX}/posts/{post_id}")
        if isinstance(result, Failure):
            return result
        return Success(True)

    # -------------------------------------------------------------------------
    # Accounts, analytics, activities
    # -------------------------------------------------------------------------

    async def fetch_social_accounts(self) -> ApiResult[list[SocialAccount]]:
        result = await self._request("GET", f"{API_PREFIX}/social-accounts")
        return self._parse_list(result, SocialAccount)

    async def fetch_analytics(
        self,
        platform: Platform | str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        post_id: int | None = None,
    ) -> ApiResult[list[AnalyticsData]]:
        params = _query(
            platform=platform,
            startDate=_iso(start_date),
            endDate=_iso(end_date),
            postId=post_id,
        )
        result = await self._request("GET", f"{API_PREFIX}/analytics", params=params)
        return self._parse_list(result, AnalyticsData)

    async def fetch_engage_activities(
        self,
        limit: int | None = None,
        platform: Platform | str | None = None,
        activity_type: str | None = None,
    ) -> ApiResult[list[EngageActivity]]:
        params = _query(limit=limit, platform=platform, type=activity_type)
        result = await self._request("GET", f"{API_PREFIX}/engage-activities", params=params)
        return self._parse_list(result, EngageActivity)

    # -------------------------------------------------------------------------
    # Insights
    # -------------------------------------------------------------------------

    async def fetch_insights(
        self,
        insight_type: str | None = None,
        is_read: bool | None = None,
        is_applied: bool | None = None,
    ) -> ApiResult[list[Insight]]:
        params = _query(type=insight_type, isRead=is_read, isApplied=is_applied)
        result = await self._request("GET", f"{API_PREFIX}/insights", params=params)
        return self._parse_list(result, Insight)

    async def acknowledge_insight(
        self,
        insight_id: int,
        is_read: bool | None = None,
        is_applied: bool | None = None,
    ) -> ApiResult[Insight]:
        """Mark an insight read and/or applied."""
        ack = InsightAcknowledgement(is_read=is_read, is_applied=is_applied)
        result = await self._request(
            "PUT", f"{API_PREFIX}/insights/{insight_id}", json=ack.to_wire(exclude_none=True)
        )
        return self._parse(result, Insight)

    # -------------------------------------------------------------------------
    # Dashboard aggregates
    # -------------------------------------------------------------------------

    async def fetch_dashboard_stats(self) -> ApiResult[DashboardStats]:
        result = await self._request("GET", f"{API_PREFIX}/dashboard/stats")
        return self._parse(result, DashboardStats)

    async def fetch_monetization_summary(self) -> ApiResult[MonetizationSummary]:
        result = await self._request("GET", f"{API_PREFIX}/dashboard/monetization")
        return self._parse(result, MonetizationSummary)

    async def fetch_platform_roi(self) -> ApiResult[list[PlatformROI]]:
        result = await self._request("GET", f"{API_PREFIX}/dashboard/platform-roi")
        return self._parse_list(result, PlatformROI)

    async def fetch_monetization_records(
        self,
        platform: Platform | str | None = None,
        source: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> ApiResult[list[MonetizationRecord]]:
        params = _query(
            platform=platform,
            source=source,
            startDate=_iso(start_date),
            endDate=_iso(end_date),
        )
        result = await self._request("GET", f"{API_PREFIX}/monetization", params=params)
        return self._parse_list(result, MonetizationRecord)

    # -------------------------------------------------------------------------
    # Preferences
    # -------------------------------------------------------------------------

    async def fetch_preferences(self) -> ApiResult[UserPreferences]:
        result = await self._request("GET", f"{API_PREFIX}/user/preferences")
        return self._parse(result, UserPreferences)

    async def update_preferences(self, update: Mapping[str, Any]) -> ApiResult[UserPreferences]:
        """Send a partial preferences update.

        Raises:
            PreferencesValidationError: before any request is made, if the
                update is invalid.
        """
        validate_preferences(update)
        result = await self._request("PATCH", f"{API_PREFIX}/user/preferences", json=dict(update))
        return self._parse(result, UserPreferences)

    # -------------------------------------------------------------------------
    # AI
    # -------------------------------------------------------------------------

    async def train_engagement_model(self, lookback_period: int) -> ApiResult[EngagementModel]:
        """Train an engagement model over the last ``lookback_period`` days.

        Returns ``Empty`` when the server produced no model.

        Raises:
            SchemaValidationError: if the lookback window is not supported.
        """
        lookback = parse_lookback(lookback_period)
        result = await self._request(
            "POST",
            TRAIN_ENGAGEMENT_MODEL_PATH,
            json={"lookbackPeriod": int(lookback)},
        )
        if not isinstance(result, Success):
            return result

        data = result.value
        payload = None
        if isinstance(data, dict):
            payload = data["model"] if "model" in data else data
        if not payload:
            logger.info("engagement_model_empty", lookback_period=int(lookback))
            return Empty(reason="Training produced no model")
        return self._parse(Success(payload), EngagementModel)
