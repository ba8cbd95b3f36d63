"""Base interface for AI providers."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from engage_dashboard.domain.engagement_model import EngagementModel
from engage_dashboard.domain.enums import LookbackPeriod
from engage_dashboard.domain.schemas import AnalyticsData, ContentAnalysis, InsertPost, Post


class AIProvider(ABC):
    """Abstract base class for AI providers.

    Implementations:
    - StubAIProvider: Deterministic heuristics, no external calls
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name identifier."""
        ...

    @abstractmethod
    async def train_engagement_model(
        self,
        posts: Sequence[Post],
        analytics: Sequence[AnalyticsData],
        lookback_period: LookbackPeriod,
    ) -> EngagementModel | None:
        """Learn engagement patterns from a user's recent content.

        Args:
            posts: The user's posts inside the lookback window
            analytics: Analytics records inside the lookback window
            lookback_period: Window size, recorded on the model

        Returns:
            A complete new model, or None when there is nothing to learn from
        """
        ...

    @abstractmethod
    async def analyze_content(self, post: InsertPost) -> ContentAnalysis:
        """Score a post before it is published."""
        ...

    async def health_check(self) -> bool:
        """Check if the provider is available."""
        return True
