"""Stub AI provider with deterministic heuristics."""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from uuid import uuid4

from engage_dashboard.adapters.ai.base import AIProvider
from engage_dashboard.domain.engagement_model import (
    ContentAttributes,
    ContentPattern,
    ContentPatterns,
    EngagementModel,
    TimingWindow,
)
from engage_dashboard.domain.enums import LookbackPeriod
from engage_dashboard.domain.schemas import (
    MAX_ENGAGEMENT_SCORE,
    MAX_SHADOWBAN_RISK,
    AnalyticsData,
    ContentAnalysis,
    InsertPost,
    Post,
)
from engage_dashboard.logging import get_logger

logger = get_logger(__name__)

VIDEO_EXTENSIONS = (".mp4", ".mov", ".webm", ".m4v")

# Phrases platforms are known to down-rank
RISKY_PHRASES = (
    "follow for follow",
    "follow4follow",
    "f4f",
    "like4like",
    "free money",
    "giveaway",
    "click the link",
    "dm me",
    "guaranteed",
)


def _unique(values: Iterable[str], limit: int | None = None) -> list[str]:
    seen = list(dict.fromkeys(v for v in values if v))
    return seen[:limit] if limit is not None else seen


def _media_type(url: str) -> str:
    return "video" if url.lower().endswith(VIDEO_EXTENSIONS) else "image"


def _post_formats(post: InsertPost | Post) -> list[str]:
    if not post.media_urls:
        return ["text"]
    return _unique(_media_type(url) for url in post.media_urls)


def _time_of_day(hour: int) -> str:
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    return "night"


def _length_bucket(posts: Sequence[Post]) -> str:
    average = sum(len(p.content) for p in posts) / len(posts)
    if average < 100:
        return "short"
    if average < 280:
        return "medium"
    return "long"


def _tones(post: InsertPost | Post) -> list[str]:
    tones = []
    if "?" in post.content:
        tones.append("inquisitive")
    if "!" in post.content:
        tones.append("enthusiastic")
    return tones or ["informative"]


def _posted_at(post: Post) -> datetime | None:
    return post.published_at or post.scheduled_at


class StubAIProvider(AIProvider):
    """Stub provider that scores and profiles content without a model."""

    @property
    def name(self) -> str:
        return "stub"

    async def train_engagement_model(
        self,
        posts: Sequence[Post],
        analytics: Sequence[AnalyticsData],
        lookback_period: LookbackPeriod,
    ) -> EngagementModel | None:
        """Split posts into high and low performers and profile each half."""
        if not posts:
            logger.info("stub_training_skipped", reason="no_posts", lookback_period=int(lookback_period))
            return None

        engagements: dict[int, int] = defaultdict(int)
        for record in analytics:
            if record.post_id is not None:
                engagements[record.post_id] += record.engagements

        def score(post: Post) -> float:
            if post.id in engagements:
                return float(engagements[post.id])
            return post.engagement_score or 0.0

        # Stable sort keeps input order among ties
        ranked = sorted(posts, key=score, reverse=True)
        split = (len(ranked) + 1) // 2
        high = ranked[:split]
        low = ranked[split:] or ranked[-1:]

        high_pattern = self._pattern(high)
        model = EngagementModel(
            model_id=uuid4().hex,
            trained_on=datetime.now(UTC),
            lookback_period=lookback_period,
            platforms=[str(p.platform) for p in posts],
            content_patterns=ContentPatterns(
                high_engagement=high_pattern,
                low_engagement=self._pattern(low),
            ),
            audience_affinities=self._affinities(high),
            predicted_performance_factors=self._factors(high_pattern),
        )

        logger.info(
            "stub_training_complete",
            model_id=model.model_id,
            posts=len(posts),
            analytics=len(analytics),
            platforms=model.platforms,
        )
        return model

    def _pattern(self, posts: Sequence[Post]) -> ContentPattern:
        topics = _unique(
            (tag for p in posts for tag in [*(p.tags or []), *(p.categories or [])]),
            limit=5,
        )
        formats = _unique(fmt for p in posts for fmt in _post_formats(p))
        moments = [at for at in map(_posted_at, posts) if at is not None]
        media = _unique(
            _media_type(url) for p in posts for url in (p.media_urls or [])
        )

        return ContentPattern(
            topics=topics or ["general"],
            formats=formats,
            timing=TimingWindow(
                days_of_week=_unique(at.strftime("%A") for at in moments) or ["any"],
                time_of_day=_unique(_time_of_day(at.hour) for at in moments) or ["any"],
            ),
            content_attributes=ContentAttributes(
                length=_length_bucket(posts),
                media_types=media or ["none"],
                tone_attributes=_unique(tone for p in posts for tone in _tones(p)),
            ),
        )

    def _affinities(self, posts: Sequence[Post]) -> list[str]:
        categories = _unique((c for p in posts for c in (p.categories or [])), limit=5)
        return categories or [f"{p.platform} followers" for p in posts][:1]

    def _factors(self, pattern: ContentPattern) -> list[str]:
        timing = pattern.timing
        return [
            f"Posting on {timing.days_of_week[0]} {timing.time_of_day[0]}",
            f"{pattern.formats[0].capitalize()} format",
            f"Topics around {pattern.topics[0]}",
            f"{pattern.content_attributes.length.capitalize()} captions",
        ]

    async def analyze_content(self, post: InsertPost) -> ContentAnalysis:
        """Score a post from its hashtags, media and wording."""
        text = post.content.lower()
        hashtags = text.count("#")
        risky = [phrase for phrase in RISKY_PHRASES if phrase in text]

        engagement = 40.0 + min(hashtags, 5) * 4
        recommendations = []
        if post.media_urls:
            engagement += 15
        else:
            recommendations.append("Add an image or video to lift engagement")
        if "?" in post.content:
            engagement += 5
        else:
            recommendations.append("End with a question to invite replies")
        if hashtags == 0:
            recommendations.append("Add two or three relevant hashtags")
        elif hashtags > 10:
            engagement -= 10
            recommendations.append("Trim hashtags; more than ten reads as spam")

        shadowban = min(len(risky) * 3 + max(hashtags - 10, 0), MAX_SHADOWBAN_RISK)
        if risky:
            recommendations.append("Reword phrases platforms tend to down-rank")

        analysis = ContentAnalysis(
            engagement_score=max(0.0, min(engagement, MAX_ENGAGEMENT_SCORE)),
            shadowban_risk=float(shadowban),
            audience_match=round(min(1.0, 0.5 + 0.1 * len(post.tags or [])), 2),
            recommendations=recommendations,
            risks=risky or None,
        )
        logger.info(
            "stub_content_analyzed",
            platform=str(post.platform),
            engagement_score=analysis.engagement_score,
            shadowban_risk=analysis.shadowban_risk,
        )
        return analysis
