"""Shop model: installed storefronts and their mirrored subscription state."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Integer, String

from llmstxt.db.base import Base

ACTIVE_SUBSCRIPTION_STATUS = "ACTIVE"


class Shop(Base):
    __tablename__ = "shops"

    id = Column(Integer, primary_key=True, autoincrement=True)
    shop_domain = Column(String(255), unique=True, nullable=False, index=True)  # e.g. shop-a.myshopify.com

    # Offline Admin API token, written by the install flow
    access_token = Column(String(255), nullable=False)

    # Subscription (mirrored from app_subscriptions/update webhooks)
    plan_name = Column(String(50), nullable=True)  # "Basic Plan", "Pro Plan"
    subscription_id = Column(String(255), nullable=True)
    subscription_status = Column(String(50), nullable=True)  # ACTIVE, CANCELLED, FROZEN, ...

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    @property
    def active_plan(self) -> str | None:
        """Plan name when the subscription is active, otherwise None (free tier)."""
        if self.subscription_status == ACTIVE_SUBSCRIPTION_STATUS:
            return self.plan_name
        return None
