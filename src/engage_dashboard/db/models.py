"""SQLAlchemy ORM table definitions.

Declarative only: the tables are consumed by an external database and
migration tooling. Ownership is a strict tree rooted at ``users``.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class UserModel(Base):
    """User ORM model."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    preferences: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    social_accounts: Mapped[list["SocialAccountModel"]] = relationship(
        "SocialAccountModel", back_populates="user"
    )
    posts: Mapped[list["PostModel"]] = relationship("PostModel", back_populates="user")
    insights: Mapped[list["InsightModel"]] = relationship("InsightModel", back_populates="user")
    monetization_records: Mapped[list["MonetizationRecordModel"]] = relationship(
        "MonetizationRecordModel", back_populates="user"
    )


class SocialAccountModel(Base):
    """Linked social account ORM model. Soft-deleted via ``is_active``."""

    __tablename__ = "social_accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    platform: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    profile_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    follower_count: Mapped[int] = mapped_column(Integer, server_default="0")
    following_count: Mapped[int] = mapped_column(Integer, server_default="0")
    access_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    token_expiry: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, server_default="true", index=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, server_default="false")
    last_synced: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    account_category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    verification_status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    account_created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    account_health: Mapped[float | None] = mapped_column(Float, nullable=True)  # 0-1
    api_version: Mapped[str | None] = mapped_column(String(50), nullable=True)
    webhook_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    scopes: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)

    # Relationships
    user: Mapped["UserModel"] = relationship("UserModel", back_populates="social_accounts")


class PostModel(Base):
    """Post ORM model."""

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    social_account_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("social_accounts.id"), nullable=True, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    media_urls: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    scheduled_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    # Written by the system only
    engagement_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    shadowban_risk: Mapped[float | None] = mapped_column(Float, nullable=True)
    audience_match: Mapped[float | None] = mapped_column(Float, nullable=True)
    tags: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    categories: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    platform: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    is_monetized: Mapped[bool] = mapped_column(Boolean, server_default="false")
    monetization_details: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)
    ai_generated: Mapped[bool] = mapped_column(Boolean, server_default="false")
    ai_prompt: Mapped[str | None] = mapped_column(Text, nullable=True)
    post_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    post_analysis: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)
    visibility: Mapped[str] = mapped_column(String(50), server_default="public")
    last_updated: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    external_post_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Relationships
    user: Mapped["UserModel"] = relationship("UserModel", back_populates="posts")
    analytics: Mapped[list["AnalyticsDataModel"]] = relationship(
        "AnalyticsDataModel", back_populates="post"
    )
    engage_activities: Mapped[list["EngageActivityModel"]] = relationship(
        "EngageActivityModel", back_populates="post"
    )


class AnalyticsDataModel(Base):
    """Daily analytics ORM model. Rows are append-only."""

    __tablename__ = "analytics_data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    social_account_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("social_accounts.id"), nullable=True
    )
    post_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("posts.id"), nullable=True, index=True
    )
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    # Engagement
    likes: Mapped[int] = mapped_column(Integer, server_default="0")
    comments: Mapped[int] = mapped_column(Integer, server_default="0")
    shares: Mapped[int] = mapped_column(Integer, server_default="0")
    saves: Mapped[int] = mapped_column(Integer, server_default="0")
    bookmarks: Mapped[int] = mapped_column(Integer, server_default="0")
    reactions: Mapped[int] = mapped_column(Integer, server_default="0")
    # Reach
    impressions: Mapped[int] = mapped_column(Integer, server_default="0")
    reach: Mapped[int] = mapped_column(Integer, server_default="0")
    views: Mapped[int] = mapped_column(Integer, server_default="0")
    view_duration: Mapped[float] = mapped_column(Float, server_default="0")
    # Conversion
    clicks: Mapped[int] = mapped_column(Integer, server_default="0")
    link_clicks: Mapped[int] = mapped_column(Integer, server_default="0")
    profile_visits: Mapped[int] = mapped_column(Integer, server_default="0")
    followers_gained: Mapped[int] = mapped_column(Integer, server_default="0")
    conversion: Mapped[float] = mapped_column("conversion_rate", Float, server_default="0")
    # Revenue
    revenue: Mapped[float] = mapped_column(Float, server_default="0")
    ad_revenue: Mapped[float] = mapped_column(Float, server_default="0")
    audience_data: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)
    content_score: Mapped[float] = mapped_column(Float, server_default="0")
    sentiment_score: Mapped[float | None] = mapped_column(Float, nullable=True)  # -1 to 1
    best_performing_time_slot: Mapped[str | None] = mapped_column(String(50), nullable=True)
    platform: Mapped[str] = mapped_column(String(50), nullable=False)
    data_source: Mapped[str | None] = mapped_column(String(50), nullable=True)
    comparison_to_avg: Mapped[float | None] = mapped_column(Float, nullable=True)

    __table_args__ = (UniqueConstraint("post_id", "date", name="uq_analytics_post_date"),)

    # Relationships
    post: Mapped["PostModel | None"] = relationship("PostModel", back_populates="analytics")


class EngageActivityModel(Base):
    """Auto-engage activity log ORM model."""

    __tablename__ = "engage_activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    social_account_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("social_accounts.id"), nullable=True
    )
    post_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("posts.id"), nullable=True, index=True
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_username: Mapped[str | None] = mapped_column(String(255), nullable=True)
    target_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    performed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )
    platform: Mapped[str] = mapped_column(String(50), nullable=False)

    # Relationships
    post: Mapped["PostModel | None"] = relationship("PostModel", back_populates="engage_activities")


class InsightModel(Base):
    """AI insight ORM model."""

    __tablename__ = "insights"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    social_account_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("social_accounts.id"), nullable=True
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    severity: Mapped[str | None] = mapped_column(String(50), nullable=True)
    related_post_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("posts.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    is_read: Mapped[bool] = mapped_column(Boolean, server_default="false")
    is_applied: Mapped[bool] = mapped_column(Boolean, server_default="false")
    metadata_: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSONB, nullable=True)

    # Relationships
    user: Mapped["UserModel"] = relationship("UserModel", back_populates="insights")


class MonetizationRecordModel(Base):
    """Revenue ledger ORM model."""

    __tablename__ = "monetization_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    post_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("posts.id"), nullable=True)
    source: Mapped[str] = mapped_column(String(50), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), server_default="USD")
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    platform: Mapped[str] = mapped_column(String(50), nullable=False)
    # Conversion
    conversion_count: Mapped[int] = mapped_column(Integer, server_default="1")
    conversion_value: Mapped[float] = mapped_column(Float, server_default="0")
    conversion_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    # Partner
    partner_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    partner_category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    partner_contact_info: Mapped[str | None] = mapped_column(Text, nullable=True)
    partner_tier: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # Campaign
    campaign_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    campaign_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    campaign_start_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    campaign_end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    campaign_budget: Mapped[float | None] = mapped_column(Float, nullable=True)
    campaign_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    campaign_goal: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # Transaction
    status: Mapped[str] = mapped_column(String(50), server_default="completed")
    payment_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    payment_due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    invoice_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    tax_rate: Mapped[float] = mapped_column(Float, server_default="0")
    tax_amount: Mapped[float] = mapped_column(Float, server_default="0")
    # Performance
    roi: Mapped[float | None] = mapped_column(Float, nullable=True)
    cost_per_conversion: Mapped[float | None] = mapped_column(Float, nullable=True)
    revenue_per_post: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    contract_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    metrics: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)

    # Relationships
    user: Mapped["UserModel"] = relationship("UserModel", back_populates="monetization_records")
