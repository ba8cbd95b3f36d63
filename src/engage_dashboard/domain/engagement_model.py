"""Engagement model produced by a training run.

The model is transient and immutable: each training run produces a complete
new model that replaces the previous one; there is no partial merge. A trained
model never carries an empty list.
"""

from datetime import datetime
from typing import Annotated

from pydantic import ConfigDict, Field, field_validator

from engage_dashboard.domain.base import CamelModel
from engage_dashboard.domain.enums import LookbackPeriod
from engage_dashboard.errors import FieldError, SchemaValidationError

NonEmptyStrList = Annotated[list[str], Field(min_length=1)]


def parse_lookback(value: int) -> LookbackPeriod:
    """Coerce a lookback window in days, rejecting unsupported windows."""
    try:
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            raise ValueError(value)
        return LookbackPeriod(int(value))
    except (TypeError, ValueError) as e:
        allowed = ", ".join(str(p.value) for p in LookbackPeriod)
        raise SchemaValidationError(
            [FieldError(path="lookbackPeriod", message=f"Must be one of: {allowed}")]
        ) from e


class _Frozen(CamelModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())


class TimingWindow(_Frozen):
    """When a pattern tends to occur."""

    days_of_week: NonEmptyStrList
    time_of_day: NonEmptyStrList


class ContentAttributes(_Frozen):
    """Shape of the content in a pattern."""

    length: str = Field(min_length=1)
    media_types: NonEmptyStrList
    tone_attributes: NonEmptyStrList


class ContentPattern(_Frozen):
    """Topics, formats, timing and attributes shared by a group of posts."""

    topics: NonEmptyStrList
    formats: NonEmptyStrList
    timing: TimingWindow
    content_attributes: ContentAttributes


class ContentPatterns(_Frozen):
    """High- and low-engagement patterns side by side."""

    high_engagement: ContentPattern
    low_engagement: ContentPattern


class EngagementModel(_Frozen):
    """Result of training on a user's content history."""

    model_id: str = Field(min_length=1)
    trained_on: datetime
    lookback_period: LookbackPeriod | None = None
    platforms: NonEmptyStrList
    content_patterns: ContentPatterns
    audience_affinities: NonEmptyStrList
    predicted_performance_factors: NonEmptyStrList

    @field_validator("platforms")
    @classmethod
    def _unique_platforms(cls, platforms: list[str]) -> list[str]:
        """Drop repeated platforms, keeping first-seen order."""
        return list(dict.fromkeys(platforms))

    @property
    def short_id(self) -> str:
        return self.model_id[:8]

    @property
    def top_performance_factor(self) -> str:
        return self.predicted_performance_factors[0]
