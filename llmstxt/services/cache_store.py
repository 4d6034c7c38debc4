"""LlmsCacheStore: keyed upsert persistence of generated llms.txt content.

- One row per shop, overwritten in place (no history)
- Optional per-shop Redis lock serializes concurrent upserts
- Storage failures surface as CacheWriteFailed / CacheReadFailed
"""

from dataclasses import dataclass
from datetime import UTC, datetime

import structlog
from redis.exceptions import RedisError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from llmstxt.core.exceptions import CacheReadFailed, CacheWriteFailed
from llmstxt.core.locking import TenantLock
from llmstxt.db.models.llm_content_cache import LlmContentCache

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    shop: str
    content: str
    updated_at: datetime


def _to_entry(row: LlmContentCache) -> CacheEntry:
    return CacheEntry(shop=row.shop, content=row.content, updated_at=row.updated_at)


class LlmsCacheStore:
    """Tenant-keyed cache of llms.txt documents."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        lock: TenantLock | None = None,
        lock_ttl: int = 30,
        lock_wait_timeout: float = 10.0,
    ):
        """Initialize with a session factory and optional per-shop lock.

        Args:
            session_factory: SQLAlchemy async session factory
            lock: TenantLock used to serialize upserts per shop (None = last writer wins)
            lock_ttl: Lock expiry in seconds
            lock_wait_timeout: Seconds to wait for a busy lock before failing
        """
        self.session_factory = session_factory
        self.lock = lock
        self.lock_ttl = lock_ttl
        self.lock_wait_timeout = lock_wait_timeout

    async def upsert(self, shop: str, content: str) -> CacheEntry:
        """Create or overwrite the cache entry for a shop.

        Raises:
            CacheWriteFailed: store or lock unavailable
        """
        if self.lock is None:
            return await self._write(shop, content)

        try:
            async with self.lock.lock(shop, ttl=self.lock_ttl, wait_timeout=self.lock_wait_timeout) as acquired:
                if not acquired:
                    raise CacheWriteFailed(shop, f"Timed out waiting for cache lock on {shop}")
                return await self._write(shop, content)
        except RedisError as e:
            raise CacheWriteFailed(shop, f"Cache lock unavailable: {e}") from e

    async def _write(self, shop: str, content: str) -> CacheEntry:
        now = datetime.now(UTC)
        try:
            async with self.session_factory() as session:
                row = await self._get_row(session, shop)
                if row is None:
                    row = LlmContentCache(shop=shop, content=content, created_at=now, updated_at=now)
                    session.add(row)
                else:
                    row.content = content
                    row.updated_at = now

                try:
                    await session.commit()
                except IntegrityError:
                    # Concurrent first write created the row, overwrite it
                    await session.rollback()
                    row = await self._get_row(session, shop)
                    if row is None:
                        raise
                    row.content = content
                    row.updated_at = now
                    await session.commit()

                entry = _to_entry(row)
        except SQLAlchemyError as e:
            logger.error("llms_cache_write_error", shop=shop, error=str(e), error_type=type(e).__name__)
            raise CacheWriteFailed(shop, f"Failed to save llms.txt for {shop}") from e

        logger.info("llms_cache_upserted", shop=shop, char_count=len(content))
        return entry

    async def read(self, shop: str) -> CacheEntry | None:
        """Return the cache entry for a shop, or None on a miss.

        Raises:
            CacheReadFailed: store unavailable
        """
        try:
            async with self.session_factory() as session:
                row = await self._get_row(session, shop)
                return _to_entry(row) if row is not None else None
        except SQLAlchemyError as e:
            raise CacheReadFailed(shop, f"Failed to read llms.txt for {shop}") from e

    @staticmethod
    async def _get_row(session: AsyncSession, shop: str) -> LlmContentCache | None:
        result = await session.execute(select(LlmContentCache).where(LlmContentCache.shop == shop))
        return result.scalar_one_or_none()
