"""AI endpoints: engagement-model training and content analysis."""

from typing import Any

from fastapi import APIRouter, Body

from engage_dashboard.api.deps import AIProviderDep, CurrentUserDep, JsonBody, StoreDep
from engage_dashboard.config import settings
from engage_dashboard.domain.base import CamelModel
from engage_dashboard.domain.engagement_model import EngagementModel, parse_lookback
from engage_dashboard.domain.schemas import ContentAnalysis, InsertPost, validate_payload
from engage_dashboard.logging import get_logger

router = APIRouter(prefix="/ai", tags=["AI"])
logger = get_logger(__name__)


class TrainingResponse(CamelModel):
    """Result of a training run; ``model`` is null when there was nothing to train on."""

    model: EngagementModel | None = None


@router.post(
    "/train-engagement-model",
    response_model=TrainingResponse,
    summary="Train engagement model",
    description="Train a fresh engagement model on the user's posts in the lookback window.",
)
async def train_engagement_model(
    store: StoreDep,
    user: CurrentUserDep,
    provider: AIProviderDep,
    body: dict[str, Any] | None = Body(default=None),
) -> TrainingResponse:
    raw = (body or {}).get("lookbackPeriod", settings.default_lookback_period)
    lookback = parse_lookback(raw)

    posts, analytics = store.training_window(user.id, lookback)
    logger.info(
        "training_requested",
        user_id=user.id,
        lookback_period=int(lookback),
        posts=len(posts),
        analytics=len(analytics),
        provider=provider.name,
    )
    model = await provider.train_engagement_model(posts, analytics, lookback)
    return TrainingResponse(model=model)


@router.post(
    "/analyze-content",
    response_model=ContentAnalysis,
    summary="Analyze content",
    description="Score a draft post without storing it.",
)
async def analyze_content(body: JsonBody, user: CurrentUserDep, provider: AIProviderDep) -> ContentAnalysis:
    post = validate_payload(InsertPost, {"status": "draft", **body, "userId": user.id})
    return await provider.analyze_content(post)
