"""llms.txt cache routes: regenerate trigger and cache status.

ShopNotInstalled and CacheReadFailed propagate to the app's LlmsTxtError
handler (404 / 503).
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from llmstxt.api.deps import get_cache_store, get_llms_txt_service
from llmstxt.schemas.llms_cache import CacheStatusResponse
from llmstxt.services.cache_store import LlmsCacheStore
from llmstxt.services.llms_txt_service import LlmsTxtService

router = APIRouter()


@router.post("/{shop}/regenerate")
async def regenerate_llms_txt(
    shop: str,
    service: LlmsTxtService = Depends(get_llms_txt_service),
):
    """Regenerate llms.txt for a shop and overwrite its cache entry.

    Returns {success, message, charCount} on success, or 500 with
    {success: false, error, errorKind} when fetching or saving failed.
    """
    result = await service.regenerate(shop)
    return JSONResponse(status_code=200 if result.success else 500, content=result.to_response())


@router.get("/{shop}", response_model=CacheStatusResponse)
async def get_cache_status(
    shop: str,
    store: LlmsCacheStore = Depends(get_cache_store),
):
    entry = await store.read(shop)
    if entry is None:
        return CacheStatusResponse(shop=shop, exists=False)

    return CacheStatusResponse(
        shop=shop,
        exists=True,
        updated_at=entry.updated_at,
        char_count=len(entry.content),
    )
