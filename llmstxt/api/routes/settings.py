"""Content settings routes: which resource types a shop includes in llms.txt."""

import structlog
from fastapi import APIRouter
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from llmstxt.db.base import get_session_factory
from llmstxt.db.models.content_settings import ContentSettings
from llmstxt.schemas.llms_cache import ContentSettingsPayload, ContentSettingsResponse

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/{shop}", response_model=ContentSettingsResponse)
async def get_content_settings(shop: str):
    """Return the shop's settings, or defaults when none were saved."""
    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(ContentSettings).where(ContentSettings.shop_domain == shop))
        settings = result.scalar_one_or_none()

    if settings is None:
        return ContentSettingsResponse(shop_domain=shop)
    return ContentSettingsResponse.model_validate(settings)


@router.put("/{shop}", response_model=ContentSettingsResponse)
async def update_content_settings(shop: str, body: ContentSettingsPayload):
    """Create or update the shop's settings."""
    changes = body.model_dump(exclude_none=True)

    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(ContentSettings).where(ContentSettings.shop_domain == shop))
        settings = result.scalar_one_or_none()

        if settings is None:
            settings = ContentSettings(shop_domain=shop, **changes)
            session.add(settings)
        else:
            for field, value in changes.items():
                setattr(settings, field, value)

        try:
            await session.commit()
        except IntegrityError:
            # Concurrent request created the row, apply changes on top of it
            await session.rollback()
            result = await session.execute(select(ContentSettings).where(ContentSettings.shop_domain == shop))
            settings = result.scalar_one()
            for field, value in changes.items():
                setattr(settings, field, value)
            await session.commit()

        await session.refresh(settings)

    logger.info("content_settings_saved", shop=shop, changes=changes)
    return ContentSettingsResponse.model_validate(settings)
