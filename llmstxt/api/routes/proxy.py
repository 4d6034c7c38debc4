"""Public app-proxy route serving the cached llms.txt."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from llmstxt.api.deps import get_proxy_cache_store
from llmstxt.core.config import get_settings
from llmstxt.services.cache_store import LlmsCacheStore
from llmstxt.services.serving import PLAIN_TEXT, error_document, missing_shop_document, serve_llms_txt

router = APIRouter()


@router.get("/proxy/llms.txt", response_class=PlainTextResponse)
async def llms_txt_proxy(
    shop: str | None = Query(None, description="myshopify.com domain appended by the app proxy"),
    store: LlmsCacheStore | None = Depends(get_proxy_cache_store),
):
    """Serve llms.txt for a shop from the cache without querying the origin."""
    settings = get_settings()
    if store is not None:
        document = await serve_llms_txt(store, shop, max_age=settings.proxy_cache_max_age)
    elif shop:
        document = error_document(shop)
    else:
        document = missing_shop_document()

    return PlainTextResponse(
        content=document.content,
        status_code=document.status_code,
        headers=document.headers,
        media_type=PLAIN_TEXT,
    )
