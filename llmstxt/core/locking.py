"""Per-shop distributed locking using Redis.

Serializes cache upserts for the same shop key so concurrent regenerations
apply in acquisition order instead of racing inside the database.
"""

import asyncio
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import redis.asyncio as redis

from llmstxt.db.redis import get_redis


class TenantLock:
    """Manages per-shop locks using Redis SET NX with expiry."""

    LOCK_PREFIX = "llmstxt:lock:"
    DEFAULT_TTL = 30  # seconds
    POLL_INTERVAL = 0.1

    def __init__(self, redis_client: redis.Redis | None = None, namespace: str = "cache"):
        self._redis = redis_client
        self.namespace = namespace

    def _get_redis(self) -> redis.Redis:
        return self._redis if self._redis is not None else get_redis()

    def _lock_key(self, shop: str) -> str:
        return f"{self.LOCK_PREFIX}{self.namespace}:{shop}"

    async def acquire(self, shop: str, owner: str, ttl: int | None = None) -> bool:
        """Attempt to acquire the lock for a shop.

        Args:
            shop: Shop domain (tenant key)
            owner: Identifier of the lock holder
            ttl: Lock time-to-live in seconds

        Returns:
            True if acquired (or already held by owner), False otherwise
        """
        r = self._get_redis()
        key = self._lock_key(shop)
        ttl = ttl or self.DEFAULT_TTL

        lock_value = f"{owner}|{datetime.now(UTC).isoformat()}"
        if await r.set(key, lock_value, nx=True, ex=ttl):
            return True

        current = await r.get(key)
        if current and current.startswith(f"{owner}|"):
            await r.expire(key, ttl)
            return True

        return False

    async def release(self, shop: str, owner: str) -> bool:
        """Release the lock if it is held by owner."""
        r = self._get_redis()
        key = self._lock_key(shop)

        current = await r.get(key)
        if current and current.startswith(f"{owner}|"):
            await r.delete(key)
            return True

        return False

    async def is_locked(self, shop: str) -> dict | None:
        """Return lock info for a shop, or None when unlocked."""
        r = self._get_redis()
        key = self._lock_key(shop)

        current = await r.get(key)
        if not current:
            return None

        owner, _, locked_at = current.partition("|")
        return {
            "shop": shop,
            "owner": owner,
            "locked_at": locked_at or None,
            "expires_in": await r.ttl(key),
        }

    @asynccontextmanager
    async def lock(
        self,
        shop: str,
        owner: str | None = None,
        ttl: int | None = None,
        wait: bool = True,
        wait_timeout: float = 10.0,
    ) -> AsyncGenerator[bool, None]:
        """Context manager for per-shop locking.

        Yields:
            True if the lock was acquired

        Example:
            async with tenant_lock.lock("shop-a.myshopify.com") as acquired:
                if acquired:
                    ...
        """
        owner = owner or uuid.uuid4().hex
        acquired = False
        try:
            if wait:
                loop = asyncio.get_running_loop()
                deadline = loop.time() + wait_timeout
                while True:
                    acquired = await self.acquire(shop, owner, ttl)
                    if acquired or loop.time() >= deadline:
                        break
                    await asyncio.sleep(self.POLL_INTERVAL)
            else:
                acquired = await self.acquire(shop, owner, ttl)

            yield acquired

        finally:
            if acquired:
                await self.release(shop, owner)
