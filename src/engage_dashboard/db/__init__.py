"""Declarative table definitions."""

from engage_dashboard.db.models import (
    AnalyticsDataModel,
    Base,
    EngageActivityModel,
    InsightModel,
    MonetizationRecordModel,
    PostModel,
    SocialAccountModel,
    UserModel,
)

__all__ = [
    "Base",
    "AnalyticsDataModel",
    "EngageActivityModel",
    "InsightModel",
    "MonetizationRecordModel",
    "PostModel",
    "SocialAccountModel",
    "UserModel",
]
