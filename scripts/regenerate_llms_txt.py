"""Regenerate cached llms.txt for installed shops.

Usage:
    python -m scripts.regenerate_llms_txt                 # every shop with auto sync on
    python -m scripts.regenerate_llms_txt shop-a.myshopify.com shop-b.myshopify.com
"""

import argparse
import asyncio
import sys

from llmstxt.core.logging import configure_structlog

configure_structlog(log_level="INFO", json_logs=False)

import structlog
from sqlalchemy import select

from llmstxt.api.deps import get_llms_txt_service
from llmstxt.core.config import get_settings
from llmstxt.core.exceptions import ShopNotInstalled
from llmstxt.db import close_db, close_redis, get_session_factory, init_db, init_redis
from llmstxt.db.models import ContentSettings, Shop

logger = structlog.get_logger(__name__)


async def auto_sync_shops() -> list[str]:
    """Installed shops whose auto sync is on (shops without settings default to on)."""
    async with get_session_factory()() as session:
        result = await session.execute(
            select(Shop.shop_domain)
            .outerjoin(ContentSettings, ContentSettings.shop_domain == Shop.shop_domain)
            .where((ContentSettings.id.is_(None)) | (ContentSettings.auto_sync_enabled.is_(True)))
            .order_by(Shop.shop_domain)
        )
        return list(result.scalars().all())


async def main(shops: list[str]) -> int:
    settings = get_settings()
    await init_db()
    if settings.cache_upsert_lock_enabled:
        await init_redis()

    failures = 0
    try:
        targets = shops or await auto_sync_shops()
        print(f"Regenerating llms.txt for {len(targets)} shop(s)")

        service = get_llms_txt_service()
        for shop in targets:
            try:
                result = await service.regenerate(shop)
            except ShopNotInstalled as e:
                print(f"  {shop} | skipped: {e}")
                failures += 1
                continue

            if result.success:
                print(f"  {shop} | ok | {result.char_count} chars")
            else:
                print(f"  {shop} | {result.error_kind} error | {result.error}")
                failures += 1
    finally:
        await close_redis()
        await close_db()

    logger.info("llms_txt_batch_regeneration_complete", shops=len(targets), failures=failures)
    return 1 if failures else 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("shops", nargs="*", help="myshopify.com domains (default: all with auto sync)")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.shops)))
