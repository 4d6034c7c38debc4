"""Serving path for the public llms.txt app proxy.

Every outcome maps to a concrete plain-text document and status code:
hit -> 200 cached content, miss -> 200 placeholder, store error -> 500,
missing shop parameter -> 400. Nothing raises past serve_llms_txt().
"""

from dataclasses import dataclass, field

import structlog

from llmstxt.core.exceptions import CacheReadFailed
from llmstxt.services.cache_store import LlmsCacheStore

logger = structlog.get_logger(__name__)

PLAIN_TEXT = "text/plain; charset=utf-8"


@dataclass(frozen=True)
class ServedDocument:
    status_code: int
    content: str
    headers: dict[str, str] = field(default_factory=dict)


def missing_shop_document() -> ServedDocument:
    return ServedDocument(status_code=400, content="# Error: Shop domain missing from request.")


def placeholder_document(shop: str) -> ServedDocument:
    return ServedDocument(
        status_code=200,
        content=f"# {shop}\n# Content is being generated. Please try again later.",
    )


def error_document(shop: str) -> ServedDocument:
    return ServedDocument(status_code=500, content=f"# {shop}\n# Error retrieving content.")


async def serve_llms_txt(store: LlmsCacheStore, shop: str | None, max_age: int = 3600) -> ServedDocument:
    """Resolve the llms.txt response for a shop."""
    if not shop or not shop.strip():
        logger.error("llms_proxy_shop_missing")
        return missing_shop_document()

    shop = shop.strip()
    try:
        entry = await store.read(shop)
    except CacheReadFailed as e:
        logger.error("llms_proxy_cache_read_failed", shop=shop, error=str(e.__cause__ or e))
        return error_document(shop)
    except Exception as e:
        logger.error("llms_proxy_unexpected_error", shop=shop, error=str(e), error_type=type(e).__name__, exc_info=True)
        return error_document(shop)

    if entry is None or not entry.content:
        logger.warning("llms_proxy_cache_miss", shop=shop)
        return placeholder_document(shop)

    return ServedDocument(
        status_code=200,
        content=entry.content,
        headers={"Cache-Control": f"public, max-age={max_age}"},
    )
