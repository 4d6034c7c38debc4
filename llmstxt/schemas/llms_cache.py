"""Pydantic schemas for llms.txt cache and content settings endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CacheStatusResponse(BaseModel):
    """Whether a shop has generated content, and how fresh it is."""

    model_config = ConfigDict(populate_by_name=True)

    shop: str
    exists: bool
    updated_at: datetime | None = Field(None, alias="updatedAt")
    char_count: int = Field(0, alias="charCount")


class ContentSettingsPayload(BaseModel):
    """Per-shop section toggles; omitted fields keep their current value."""

    include_products: bool | None = None
    include_collections: bool | None = None
    include_articles: bool | None = None
    include_pages: bool | None = None
    auto_sync_enabled: bool | None = None


class ContentSettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    shop_domain: str
    include_products: bool = True
    include_collections: bool = True
    include_articles: bool = True
    include_pages: bool = True
    auto_sync_enabled: bool = True
