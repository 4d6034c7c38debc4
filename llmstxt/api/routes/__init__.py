from fastapi import APIRouter

from llmstxt.api.routes import health, llms_cache, proxy, settings

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(llms_cache.router, prefix="/llms-cache", tags=["llms-cache"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])

# Mounted at the application root: the app proxy forwards /apps/llmstxt/llms.txt here
proxy_router = APIRouter()
proxy_router.include_router(proxy.router, tags=["proxy"])
