"""Redis client backing the per-shop cache upsert lock."""

import redis.asyncio as redis

from llmstxt.core.config import get_settings

_redis: redis.Redis | None = None


async def init_redis(url: str | None = None, *, verify: bool = True) -> None:
    """Open the shared client; verify=True pings so a bad URL fails at startup."""
    global _redis

    if _redis is not None:
        return

    settings = get_settings()
    _redis = redis.from_url(
        url or settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=settings.redis_socket_timeout,
    )
    if verify:
        await _redis.ping()


async def close_redis() -> None:
    global _redis

    if _redis is not None:
        await _redis.aclose()
        _redis = None


def get_redis() -> redis.Redis:
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


async def ping_redis() -> None:
    await get_redis().ping()
