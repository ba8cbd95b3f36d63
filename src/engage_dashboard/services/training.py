"""Engagement-model training flow.

Per-view state machine for the "train engagement model" action::

    idle -> pending -> success | error
              ^                    |
              +---- trigger() -----+

- At most one request is in flight; ``trigger`` while pending is a no-op.
- A successful run replaces the displayed model wholesale. A run that
  produced no model leaves the view in an explicit empty ("untrained") state.
- A failed run keeps the previously displayed model and sets a non-blocking
  error message.
- Every request carries a sequence number; resolutions that are not for the
  latest request are discarded. ``close()`` detaches the view and invalidates
  the run in flight, so its late response never reaches the view.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from engage_dashboard.client.api import DashboardClient
from engage_dashboard.config import settings
from engage_dashboard.domain.engagement_model import EngagementModel, parse_lookback
from engage_dashboard.domain.enums import LookbackPeriod, TrainingState
from engage_dashboard.domain.results import ApiResult, Empty, Failure, Success
from engage_dashboard.logging import get_logger

logger = get_logger(__name__)

TRAINING_FAILED_MESSAGE = "Failed to train engagement model. Please try again later."


class EngagementModelTrainer(Protocol):
    """The slice of the API client the flow depends on."""

    async def train_engagement_model(self, lookback_period: int) -> ApiResult[EngagementModel]:
        ...


@dataclass(frozen=True)
class TrainingViewState:
    """Immutable snapshot of what the training view should render."""

    state: TrainingState
    lookback_period: LookbackPeriod | None = None
    model: EngagementModel | None = None
    error: str | None = None
    is_empty: bool = False

    @property
    def is_pending(self) -> bool:
        return self.state == TrainingState.PENDING

    @property
    def can_trigger(self) -> bool:
        return not self.is_pending


@dataclass(frozen=True)
class TrainingReadiness:
    """Whether there is enough history for reliable training. Advisory only."""

    post_count: int
    analytics_count: int
    min_posts: int = 5
    min_analytics: int = 10

    @property
    def has_enough_data(self) -> bool:
        return self.post_count >= self.min_posts and self.analytics_count >= self.min_analytics

    @property
    def message(self) -> str | None:
        if self.has_enough_data:
            return None
        return (
            f"You need at least {self.min_posts} posts and {self.min_analytics} analytics "
            "records for effective model training. The model can still be trained, "
            "but results may be less accurate."
        )

    @classmethod
    def from_counts(cls, post_count: int, analytics_count: int) -> "TrainingReadiness":
        return cls(
            post_count=post_count,
            analytics_count=analytics_count,
            min_posts=settings.min_posts_for_training,
            min_analytics=settings.min_analytics_for_training,
        )


class TrainingFlow:
    """Drives one view's training requests and holds its display state."""

    def __init__(
        self,
        client: EngagementModelTrainer,
        on_change: Callable[[TrainingViewState], None] | None = None,
    ) -> None:
        self._client = client
        self._on_change = on_change
        self._state = TrainingState.IDLE
        self._lookback: LookbackPeriod | None = None
        self._model: EngagementModel | None = None
        self._error: str | None = None
        self._is_empty = False
        self._sequence = 0
        self.requests_sent = 0
        self._closed = False

    @property
    def state(self) -> TrainingState:
        return self._state

    @property
    def model(self) -> EngagementModel | None:
        return self._model

    def snapshot(self) -> TrainingViewState:
        return TrainingViewState(
            state=self._state,
            lookback_period=self._lookback,
            model=self._model,
            error=self._error,
            is_empty=self._is_empty,
        )

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.snapshot())

    async def trigger(self, lookback_period: int) -> ApiResult[EngagementModel] | None:
        """Start a training run.

        Returns the run's result, or ``None`` when a run is already pending.

        Raises:
            SchemaValidationError: if the lookback window is not supported.
        """
        lookback = parse_lookback(lookback_period)

        if self._closed:
            logger.info("training_trigger_ignored", reason="closed", lookback_period=int(lookback))
            return None

        if self._state == TrainingState.PENDING:
            logger.info("training_trigger_ignored", reason="pending", lookback_period=int(lookback))
            return None

        self._sequence += 1
        sequence = self._sequence
        self._state = TrainingState.PENDING
        self._lookback = lookback
        self._error = None
        self.requests_sent += 1
        logger.info("training_started", lookback_period=int(lookback), sequence=sequence)
        self._notify()

        try:
            result = await self._client.train_engagement_model(int(lookback))
        except Exception as e:
            logger.exception("training_request_raised", sequence=sequence)
            result = Failure(reason=str(e) or type(e).__name__, error=e)

        self._resolve(sequence, result)
        return result

    def _resolve(self, sequence: int, result: ApiResult[EngagementModel]) -> None:
        if sequence != self._sequence:
            logger.info("training_response_discarded", sequence=sequence, latest=self._sequence)
            return

        if isinstance(result, Success):
            self._model = result.value
            self._is_empty = False
            self._error = None
            self._state = TrainingState.SUCCESS
            logger.info("training_succeeded", model_id=result.value.model_id)
        elif isinstance(result, Empty):
            self._model = None
            self._is_empty = True
            self._error = None
            self._state = TrainingState.SUCCESS
            logger.info("training_returned_no_model", reason=result.reason)
        else:
            # Previous model stays on screen
            self._error = TRAINING_FAILED_MESSAGE
            self._state = TrainingState.ERROR
            logger.warning(
                "training_failed", reason=result.reason, status_code=result.status_code
            )
        self._notify()

    def reset(self) -> bool:
        """Return to idle and clear the displayed model.

        Not allowed while a run is pending; returns False in that case.
        """
        if self._state == TrainingState.PENDING:
            return False
        self._state = TrainingState.IDLE
        self._model = None
        self._error = None
        self._is_empty = False
        self._notify()
        return True

    def close(self) -> None:
        """Detach the view. A run still in flight resolves without touching state."""
        self._closed = True
        self._sequence += 1
        self._on_change = None
        logger.debug("training_flow_closed", sequence=self._sequence)

    def dismiss_error(self) -> None:
        """Hide the error banner without touching the displayed model."""
        self._error = None
        self._notify()


async def check_training_readiness(client: DashboardClient) -> TrainingReadiness:
    """Count the user's posts and analytics records.

    A failed fetch counts as zero records; readiness never blocks training.
    """
    posts = await client.fetch_posts()
    analytics = await client.fetch_analytics()
    post_count = len(posts.value) if isinstance(posts, Success) else 0
    analytics_count = len(analytics.value) if isinstance(analytics, Success) else 0
    readiness = TrainingReadiness.from_counts(post_count, analytics_count)
    logger.debug(
        "training_readiness_checked",
        posts=post_count,
        analytics=analytics_count,
        ready=readiness.has_enough_data,
    )
    return readiness
