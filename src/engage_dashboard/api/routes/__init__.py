"""API route modules."""

from engage_dashboard.api.routes import (
    ai,
    analytics,
    dashboard,
    engage_activities,
    health,
    insights,
    monetization,
    posts,
    preferences,
    social_accounts,
)

__all__ = [
    "ai",
    "analytics",
    "dashboard",
    "engage_activities",
    "health",
    "insights",
    "monetization",
    "posts",
    "preferences",
    "social_accounts",
]
