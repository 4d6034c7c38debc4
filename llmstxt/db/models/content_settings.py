"""ContentSettings model: per-shop toggles for llms.txt sections."""

from datetime import UTC, datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from llmstxt.db.base import Base
from llmstxt.pipeline.resources import ResourceType


class ContentSettings(Base):
    __tablename__ = "content_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    shop_domain = Column(String(255), unique=True, nullable=False, index=True)

    include_products = Column(Boolean, nullable=False, default=True)
    include_collections = Column(Boolean, nullable=False, default=True)
    include_articles = Column(Boolean, nullable=False, default=True)
    include_pages = Column(Boolean, nullable=False, default=True)

    # Picked up by scripts/regenerate_llms_txt.py
    auto_sync_enabled = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    def excluded_resources(self) -> frozenset[ResourceType]:
        toggles = {
            ResourceType.PRODUCTS: self.include_products,
            ResourceType.COLLECTIONS: self.include_collections,
            ResourceType.ARTICLES: self.include_articles,
            ResourceType.PAGES: self.include_pages,
        }
        # Unflushed rows have None until the column default applies
        return frozenset(rt for rt, included in toggles.items() if included is False)
