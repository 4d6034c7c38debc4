"""LlmsTxtService: the idempotent "regenerate now" operation.

Follows the constructor-injection pattern used across services:
- session_factory for shop/settings lookups
- LlmsCacheStore for the upsert
- client_factory building an Admin API client per shop
- LlmsTxtAssembler configured with an explicit PipelineConfig

Failures never leave a partial document in the cache: assembly completes
fully before the single upsert.
"""

from collections.abc import Callable
from typing import Literal

import structlog
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from llmstxt.core.exceptions import CacheWriteFailed, OriginError, ShopNotInstalled
from llmstxt.db.models.content_settings import ContentSettings
from llmstxt.db.models.shop import Shop
from llmstxt.integrations.shopify import ShopifyAdminClient
from llmstxt.pipeline.assembler import LlmsTxtAssembler
from llmstxt.pipeline.resources import ResourceType
from llmstxt.services.cache_store import LlmsCacheStore

logger = structlog.get_logger(__name__)

ClientFactory = Callable[[str, str], ShopifyAdminClient]

SUCCESS_MESSAGE = "LLMs.txt cache updated."


class RegenerationResult(BaseModel):
    """Outcome of a regeneration, serialized as {success, message, charCount} or {success, error, errorKind}."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str | None = None
    char_count: int | None = Field(None, alias="charCount")
    error: str | None = None
    error_kind: Literal["origin", "cache", "database", "internal"] | None = Field(None, alias="errorKind")

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class LlmsTxtService:
    """Regenerates and caches llms.txt for installed shops."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        store: LlmsCacheStore,
        assembler: LlmsTxtAssembler,
        client_factory: ClientFactory = ShopifyAdminClient,
    ):
        self.session_factory = session_factory
        self.store = store
        self.assembler = assembler
        self.client_factory = client_factory

    async def regenerate(self, shop_domain: str) -> RegenerationResult:
        """Assemble llms.txt from the origin and upsert it into the cache.

        Every failure other than a missing installation is reported as an
        unsuccessful RegenerationResult; the cache is only written on success.

        Raises:
            ShopNotInstalled: no installation record for shop_domain
        """
        log = logger.bind(shop=shop_domain)
        try:
            return await self._regenerate(shop_domain, log)
        except ShopNotInstalled:
            raise
        except SQLAlchemyError as e:
            log.error("llms_txt_database_failed", error=str(e), error_type=type(e).__name__)
            return RegenerationResult(
                success=False,
                error=f"Failed to load shop data for {shop_domain}",
                error_kind="database",
            )
        except Exception as e:
            log.error("llms_txt_regeneration_failed", error=str(e), error_type=type(e).__name__, exc_info=True)
            return RegenerationResult(success=False, error=f"Failed to generate llms.txt: {e}", error_kind="internal")

    async def _regenerate(self, shop_domain: str, log) -> RegenerationResult:
        shop = await self._load_shop(shop_domain)
        excluded = await self._load_exclusions(shop_domain)
        log.info("llms_txt_regeneration_started", plan=shop.active_plan)

        try:
            async with self.client_factory(shop.shop_domain, shop.access_token) as client:
                document = await self.assembler.assemble(
                    client,
                    shop.shop_domain,
                    plan_name=shop.active_plan,
                    excluded=excluded,
                )
        except OriginError as e:
            log.error("llms_txt_origin_failed", resource=e.resource, error=str(e))
            return RegenerationResult(success=False, error=str(e), error_kind="origin")

        content = document.render()

        try:
            await self.store.upsert(shop.shop_domain, content)
        except CacheWriteFailed as e:
            log.error("llms_txt_cache_write_failed", error=str(e), cause=str(e.__cause__) if e.__cause__ else None)
            return RegenerationResult(success=False, error=str(e), error_kind="cache")

        log.info("llms_txt_regeneration_complete", char_count=len(content))
        return RegenerationResult(success=True, message=SUCCESS_MESSAGE, char_count=len(content))

    async def _load_shop(self, shop_domain: str) -> Shop:
        async with self.session_factory() as session:
            result = await session.execute(select(Shop).where(Shop.shop_domain == shop_domain))
            shop = result.scalar_one_or_none()
        if shop is None:
            raise ShopNotInstalled(shop_domain)
        return shop

    async def _load_exclusions(self, shop_domain: str) -> frozenset[ResourceType]:
        async with self.session_factory() as session:
            result = await session.execute(select(ContentSettings).where(ContentSettings.shop_domain == shop_domain))
            settings = result.scalar_one_or_none()
        if settings is None:
            return frozenset()
        return settings.excluded_resources()
