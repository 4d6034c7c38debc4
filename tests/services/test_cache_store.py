"""Tests for LlmsCacheStore upsert/read semantics."""

import asyncio

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from llmstxt.core.exceptions import CacheReadFailed, CacheWriteFailed
from llmstxt.core.locking import TenantLock
from llmstxt.db.models import LlmContentCache
from llmstxt.services.cache_store import LlmsCacheStore

pytestmark = pytest.mark.integration

SHOP = "shop-a.myshopify.com"


@pytest.fixture
def store(session_factory) -> LlmsCacheStore:
    return LlmsCacheStore(session_factory)


@pytest.fixture
async def tableless_factory(tmp_path):
    """Session factory over an empty database: every query fails."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


async def _row_count(session_factory, shop: str) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(LlmContentCache).where(LlmContentCache.shop == shop))
        return result.scalar_one()


async def test_read_miss_returns_none(store):
    assert await store.read(SHOP) is None


async def test_upsert_creates_entry(store):
    entry = await store.upsert(SHOP, "# [Shop A](https://shop-a.example.com)")

    assert entry.shop == SHOP
    cached = await store.read(SHOP)
    assert cached.content == "# [Shop A](https://shop-a.example.com)"


async def test_upsert_overwrites_in_place(store, session_factory):
    await store.upsert(SHOP, "old")
    await store.upsert(SHOP, "new")

    assert (await store.read(SHOP)).content == "new"
    assert await _row_count(session_factory, SHOP) == 1


async def test_entries_are_isolated_per_shop(store):
    await store.upsert(SHOP, "a")
    await store.upsert("shop-b.myshopify.com", "b")

    assert (await store.read(SHOP)).content == "a"
    assert (await store.read("shop-b.myshopify.com")).content == "b"


async def test_write_failure_raises_cache_write_failed(tableless_factory):
    store = LlmsCacheStore(tableless_factory)

    with pytest.raises(CacheWriteFailed) as exc_info:
        await store.upsert(SHOP, "content")

    assert exc_info.value.shop == SHOP
    assert exc_info.value.__cause__ is not None


async def test_read_failure_raises_cache_read_failed(tableless_factory):
    store = LlmsCacheStore(tableless_factory)

    with pytest.raises(CacheReadFailed):
        await store.read(SHOP)


# ============================================================================
# Locked upserts
# ============================================================================


async def test_locked_upsert_releases_lock(session_factory, redis):
    lock = TenantLock(redis)
    store = LlmsCacheStore(session_factory, lock=lock)

    await store.upsert(SHOP, "content")

    assert (await store.read(SHOP)).content == "content"
    assert await lock.is_locked(SHOP) is None


async def test_concurrent_upserts_leave_one_row(session_factory, redis):
    store = LlmsCacheStore(session_factory, lock=TenantLock(redis))

    await asyncio.gather(*(store.upsert(SHOP, f"version {i}") for i in range(5)))

    assert await _row_count(session_factory, SHOP) == 1
    assert (await store.read(SHOP)).content.startswith("version ")


async def test_busy_lock_times_out(session_factory, redis):
    lock = TenantLock(redis)
    store = LlmsCacheStore(session_factory, lock=lock, lock_wait_timeout=0.2)
    await store.upsert(SHOP, "old")
    await lock.acquire(SHOP, owner="other-worker", ttl=30)

    with pytest.raises(CacheWriteFailed, match="Timed out"):
        await store.upsert(SHOP, "new")

    assert (await store.read(SHOP)).content == "old"


class UnavailableRedis:
    async def set(self, *args, **kwargs):
        raise RedisConnectionError("Connection refused")

    async def get(self, *args, **kwargs):
        raise RedisConnectionError("Connection refused")


async def test_lock_backend_down_raises_cache_write_failed(session_factory):
    store = LlmsCacheStore(session_factory, lock=TenantLock(UnavailableRedis()))

    with pytest.raises(CacheWriteFailed, match="lock unavailable"):
        await store.upsert(SHOP, "content")

    assert await store.read(SHOP) is None
