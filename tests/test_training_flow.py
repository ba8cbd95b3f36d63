"""Tests for the engagement-model training flow."""

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from engage_dashboard.client import DashboardClient
from engage_dashboard.domain.engagement_model import EngagementModel
from engage_dashboard.domain.enums import LookbackPeriod, TrainingState
from engage_dashboard.domain.results import Empty, Failure, Success
from engage_dashboard.errors import SchemaValidationError
from engage_dashboard.services.training import (
    TRAINING_FAILED_MESSAGE,
    TrainingFlow,
    TrainingReadiness,
    TrainingViewState,
    check_training_readiness,
)


class ControlledTrainer:
    """Trainer whose responses the test releases by hand."""

    def __init__(self) -> None:
        self.calls: list[int] = []
        self._pending: list[asyncio.Future] = []

    async def train_engagement_model(self, lookback_period: int):
        self.calls.append(lookback_period)
        future = asyncio.get_running_loop().create_future()
        self._pending.append(future)
        return await future

    def release(self, result, index: int = -1) -> None:
        self._pending[index].set_result(result)


@pytest.fixture
def model(model_payload) -> EngagementModel:
    return EngagementModel.model_validate(model_payload())


@pytest.mark.asyncio
async def test_success_replaces_model(model: EngagementModel) -> None:
    """Test that a successful run shows the new model."""
    client = AsyncMock()
    client.train_engagement_model.return_value = Success(model)
    flow = TrainingFlow(client)

    result = await flow.trigger(90)

    assert result == Success(model)
    client.train_engagement_model.assert_awaited_once_with(90)
    state = flow.snapshot()
    assert state.state == TrainingState.SUCCESS
    assert state.model == model
    assert state.model.platforms == ["instagram", "twitter", "facebook"]
    assert state.lookback_period == LookbackPeriod.DAYS_90
    assert state.error is None
    assert state.is_empty is False


@pytest.mark.asyncio
async def test_second_trigger_while_pending_sends_nothing(model: EngagementModel) -> None:
    """Test that only one request is in flight at a time."""
    trainer = ControlledTrainer()
    flow = TrainingFlow(trainer)

    first = asyncio.create_task(flow.trigger(90))
    await asyncio.sleep(0)

    assert flow.state == TrainingState.PENDING
    assert flow.snapshot().can_trigger is False
    assert await flow.trigger(90) is None
    assert await flow.trigger(30) is None

    trainer.release(Success(model))
    await first

    assert trainer.calls == [90]
    assert flow.requests_sent == 1
    assert flow.state == TrainingState.SUCCESS


@pytest.mark.asyncio
async def test_failure_keeps_previous_model(model: EngagementModel) -> None:
    """Test that a failed run leaves the last model on screen."""
    client = AsyncMock()
    client.train_engagement_model.side_effect = [
        Success(model),
        Failure(reason="500: boom", status_code=500),
    ]
    flow = TrainingFlow(client)

    await flow.trigger(90)
    await flow.trigger(180)

    state = flow.snapshot()
    assert state.state == TrainingState.ERROR
    assert state.error == TRAINING_FAILED_MESSAGE
    assert state.model == model
    assert state.can_trigger is True


@pytest.mark.asyncio
async def test_retry_after_failure(model: EngagementModel) -> None:
    """Test that the action is re-enabled and clears the error after a retry."""
    client = AsyncMock()
    client.train_engagement_model.side_effect = [Failure(reason="timeout"), Success(model)]
    flow = TrainingFlow(client)

    await flow.trigger(90)
    assert flow.state == TrainingState.ERROR

    await flow.trigger(90)
    state = flow.snapshot()
    assert state.state == TrainingState.SUCCESS
    assert state.error is None
    assert state.model == model


@pytest.mark.asyncio
async def test_empty_result_shows_untrained_state(model: EngagementModel) -> None:
    """Test that no model yields an explicit empty state, not a placeholder."""
    client = AsyncMock()
    client.train_engagement_model.side_effect = [Success(model), Empty()]
    flow = TrainingFlow(client)

    await flow.trigger(90)
    await flow.trigger(30)

    state = flow.snapshot()
    assert state.state == TrainingState.SUCCESS
    assert state.is_empty is True
    assert state.model is None
    assert state.error is None


@pytest.mark.asyncio
async def test_invalid_lookback_rejected_before_request() -> None:
    """Test that unsupported windows never reach the client."""
    client = AsyncMock()
    flow = TrainingFlow(client)

    with pytest.raises(SchemaValidationError):
        await flow.trigger(45)

    client.train_engagement_model.assert_not_awaited()
    assert flow.state == TrainingState.IDLE
    assert flow.requests_sent == 0


@pytest.mark.asyncio
async def test_client_exception_becomes_error_state() -> None:
    """Test that an unexpected exception is reported, not raised."""
    client = AsyncMock()
    client.train_engagement_model.side_effect = RuntimeError("connection reset")
    flow = TrainingFlow(client)

    result = await flow.trigger(90)

    assert isinstance(result, Failure)
    assert result.reason == "connection reset"
    assert flow.state == TrainingState.ERROR


@pytest.mark.asyncio
async def test_on_change_sees_every_transition(model: EngagementModel) -> None:
    """Test that observers get idle -> pending -> success snapshots."""
    client = AsyncMock()
    client.train_engagement_model.return_value = Success(model)
    seen: list[TrainingViewState] = []
    flow = TrainingFlow(client, on_change=seen.append)

    await flow.trigger(365)

    assert [s.state for s in seen] == [TrainingState.PENDING, TrainingState.SUCCESS]
    assert seen[0].model is None
    assert seen[1].model == model


@pytest.mark.asyncio
async def test_response_after_close_discarded(model: EngagementModel) -> None:
    """Test that a run resolving after the view closed leaves state untouched."""
    trainer = ControlledTrainer()
    seen: list[TrainingViewState] = []
    flow = TrainingFlow(trainer, on_change=seen.append)

    task = asyncio.create_task(flow.trigger(90))
    await asyncio.sleep(0)
    flow.close()

    trainer.release(Success(model))
    result = await task

    assert result == Success(model)
    assert flow.model is None
    assert flow.state == TrainingState.PENDING
    assert [s.state for s in seen] == [TrainingState.PENDING]


@pytest.mark.asyncio
async def test_trigger_after_close_sends_nothing() -> None:
    client = AsyncMock()
    flow = TrainingFlow(client)
    flow.close()

    assert await flow.trigger(90) is None
    client.train_engagement_model.assert_not_awaited()


@pytest.mark.asyncio
async def test_reset_blocked_while_pending(model: EngagementModel) -> None:
    """Test that reset cannot interrupt a running request."""
    trainer = ControlledTrainer()
    flow = TrainingFlow(trainer)

    task = asyncio.create_task(flow.trigger(90))
    await asyncio.sleep(0)

    assert flow.reset() is False

    trainer.release(Success(model))
    await task

    assert flow.reset() is True
    assert flow.snapshot() == TrainingViewState(
        state=TrainingState.IDLE, lookback_period=LookbackPeriod.DAYS_90
    )


@pytest.mark.asyncio
async def test_dismiss_error_keeps_model(model: EngagementModel) -> None:
    client = AsyncMock()
    client.train_engagement_model.side_effect = [Success(model), Failure(reason="boom")]
    flow = TrainingFlow(client)
    await flow.trigger(90)
    await flow.trigger(90)

    flow.dismiss_error()

    assert flow.snapshot().error is None
    assert flow.model == model


class TestReadiness:
    """Readiness is advisory and never blocks training."""

    def test_enough_data(self) -> None:
        readiness = TrainingReadiness(post_count=5, analytics_count=10)

        assert readiness.has_enough_data is True
        assert readiness.message is None

    @pytest.mark.parametrize("posts, analytics", [(4, 10), (5, 9), (0, 0)])
    def test_not_enough_data(self, posts: int, analytics: int) -> None:
        readiness = TrainingReadiness(post_count=posts, analytics_count=analytics)

        assert readiness.has_enough_data is False
        assert "at least 5 posts and 10 analytics" in readiness.message

    @pytest.mark.asyncio
    async def test_check_counts_records(self) -> None:
        client = AsyncMock()
        client.fetch_posts.return_value = Success([object()] * 6)
        client.fetch_analytics.return_value = Success([object()] * 12)

        readiness = await check_training_readiness(client)

        assert readiness.post_count == 6
        assert readiness.analytics_count == 12
        assert readiness.has_enough_data is True

    @pytest.mark.asyncio
    async def test_failed_fetch_counts_as_zero(self) -> None:
        client = AsyncMock()
        client.fetch_posts.return_value = Failure(reason="offline")
        client.fetch_analytics.return_value = Empty()

        readiness = await check_training_readiness(client)

        assert readiness.post_count == 0
        assert readiness.analytics_count == 0


@pytest.mark.asyncio
async def test_displayed_platforms_follow_response_order(model_payload) -> None:
    """Test the flow end to end over HTTP with a mocked training response."""
    payload = model_payload(platforms=["instagram", "twitter", "tiktok"])
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"model": payload}))
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        flow = TrainingFlow(DashboardClient(http_client=http))
        await flow.trigger(90)

    assert flow.snapshot().model.platforms == ["instagram", "twitter", "tiktok"]
