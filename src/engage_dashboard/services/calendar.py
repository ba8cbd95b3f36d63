"""Content calendar: month filtering and day grouping of posts.

Timezone policy is local-to-viewer: a timezone-aware ``scheduled_at`` is
converted to the viewer's timezone before its calendar date is taken; a naive
``scheduled_at`` is treated as already local. The viewer timezone is the
explicit ``tz`` argument, else ``settings.display_timezone``, else the system
local zone. Posts without ``scheduled_at`` never appear on the calendar.
"""

from calendar import monthrange
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from typing import TypeVar
from zoneinfo import ZoneInfo

from engage_dashboard.client.api import DashboardClient
from engage_dashboard.config import settings
from engage_dashboard.domain.enums import Platform
from engage_dashboard.domain.results import ApiResult, Failure, Success
from engage_dashboard.domain.schemas import ExtendedPost
from engage_dashboard.logging import get_logger

logger = get_logger(__name__)

ALL_PLATFORMS = "all"

PostT = TypeVar("PostT", bound=ExtendedPost)


def viewer_timezone(tz: tzinfo | str | None = None) -> tzinfo:
    """Resolve the timezone posts are displayed in."""
    if isinstance(tz, str):
        return ZoneInfo(tz)
    if tz is not None:
        return tz
    if settings.display_timezone:
        return ZoneInfo(settings.display_timezone)
    return datetime.now().astimezone().tzinfo or UTC


def local_date(value: datetime, tz: tzinfo | str | None = None) -> date:
    """Calendar date of ``value`` as seen by the viewer."""
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(viewer_timezone(tz)).date()


def month_bounds(month: date) -> tuple[date, date]:
    """First and last day (inclusive) of the month containing ``month``."""
    first = month.replace(day=1)
    last = first.replace(day=monthrange(first.year, first.month)[1])
    return first, last


def month_days(month: date) -> list[date]:
    first, last = month_bounds(month)
    return [first + timedelta(days=offset) for offset in range((last - first).days + 1)]


def shift_month(month: date, delta: int) -> date:
    """First day of the month ``delta`` months away."""
    index = month.year * 12 + (month.month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


def _platform_filter(platform: Platform | str | None) -> str | None:
    if platform is None or platform == ALL_PLATFORMS:
        return None
    return str(platform)


def filter_posts(
    posts: Iterable[PostT],
    start: date,
    end: date,
    platform: Platform | str | None = None,
    tz: tzinfo | str | None = None,
) -> list[PostT]:
    """Posts scheduled between ``start`` and ``end`` inclusive, in input order."""
    wanted_platform = _platform_filter(platform)
    zone = viewer_timezone(tz)

    selected = []
    for post in posts:
        if post.scheduled_at is None:
            continue
        if wanted_platform is not None and str(post.platform) != wanted_platform:
            continue
        if start <= local_date(post.scheduled_at, zone) <= end:
            selected.append(post)
    return selected


def group_by_day(
    posts: Iterable[PostT],
    month: date,
    tz: tzinfo | str | None = None,
) -> dict[date, list[PostT]]:
    """Map every day of the month to the posts scheduled on exactly that day."""
    zone = viewer_timezone(tz)
    days: dict[date, list[PostT]] = {day: [] for day in month_days(month)}
    for post in posts:
        if post.scheduled_at is None:
            continue
        day = local_date(post.scheduled_at, zone)
        if day in days:
            days[day].append(post)
    return days


@dataclass(frozen=True)
class CalendarMonth:
    """A month grid of posts."""

    month: date
    platform: str | None
    days: dict[date, list[ExtendedPost]] = field(default_factory=dict)

    def posts_on(self, day: int) -> list[ExtendedPost]:
        return self.days.get(self.month.replace(day=day), [])

    @property
    def total_posts(self) -> int:
        return sum(len(posts) for posts in self.days.values())

    @property
    def busy_days(self) -> list[date]:
        return [day for day, posts in self.days.items() if posts]


def build_month_view(
    posts: Iterable[ExtendedPost],
    month: date,
    platform: Platform | str | None = None,
    tz: tzinfo | str | None = None,
) -> CalendarMonth:
    """Filter ``posts`` to the month and platform, then group them by day."""
    first, last = month_bounds(month)
    zone = viewer_timezone(tz)
    selected = filter_posts(posts, first, last, platform=platform, tz=zone)
    return CalendarMonth(
        month=first,
        platform=_platform_filter(platform),
        days=group_by_day(selected, first, tz=zone),
    )


class CalendarView:
    """Month calendar backed by the API; the latest load wins."""

    def __init__(
        self,
        client: DashboardClient,
        month: date | None = None,
        platform: Platform | str | None = None,
        tz: tzinfo | str | None = None,
    ) -> None:
        self._client = client
        self._tz = viewer_timezone(tz)
        self.month = month_bounds(month or datetime.now(self._tz).date())[0]
        self.platform = _platform_filter(platform)
        self.current: CalendarMonth | None = None
        self.error: str | None = None
        self._sequence = 0

    async def load(
        self,
        month: date | None = None,
        platform: Platform | str | None = None,
    ) -> ApiResult[CalendarMonth] | None:
        """Fetch and group the posts for a month.

        Returns ``None`` when a newer load superseded this one.
        """
        if month is not None:
            self.month = month_bounds(month)[0]
        if platform is not None:
            self.platform = _platform_filter(platform)

        self._sequence += 1
        sequence = self._sequence
        target_month, target_platform = self.month, self.platform
        first, last = month_bounds(target_month)

        result = await self._client.fetch_posts(
            start_date=datetime.combine(first, time.min, tzinfo=self._tz),
            end_date=datetime.combine(last, time.max, tzinfo=self._tz),
            platform=target_platform,
        )

        if sequence != self._sequence:
            logger.info("calendar_response_discarded", month=str(target_month), sequence=sequence)
            return None

        if isinstance(result, Failure):
            self.error = "Failed to load posts for this month."
            logger.warning("calendar_load_failed", month=str(target_month), reason=result.reason)
            return result

        posts = result.value if isinstance(result, Success) else []
        view = build_month_view(posts, target_month, platform=target_platform, tz=self._tz)
        self.current = view
        self.error = None
        return Success(view)

    async def next_month(self) -> ApiResult[CalendarMonth] | None:
        return await self.load(month=shift_month(self.month, 1))

    async def previous_month(self) -> ApiResult[CalendarMonth] | None:
        return await self.load(month=shift_month(self.month, -1))
