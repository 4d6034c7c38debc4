"""FastAPI dependencies for llms.txt services.

Override these in tests via app.dependency_overrides.
"""

from llmstxt.core.config import get_settings
from llmstxt.core.locking import TenantLock
from llmstxt.db.base import get_session_factory
from llmstxt.pipeline.assembler import LlmsTxtAssembler
from llmstxt.pipeline.config import PipelineConfig
from llmstxt.services.cache_store import LlmsCacheStore
from llmstxt.services.llms_txt_service import LlmsTxtService


def get_cache_store() -> LlmsCacheStore:
    """Cache store bound to the shared session factory (and Redis lock when enabled)."""
    settings = get_settings()
    lock = TenantLock() if settings.cache_upsert_lock_enabled else None
    return LlmsCacheStore(
        get_session_factory(),
        lock=lock,
        lock_ttl=settings.cache_lock_ttl_seconds,
        lock_wait_timeout=settings.cache_lock_wait_seconds,
    )


def get_llms_txt_service() -> LlmsTxtService:
    return LlmsTxtService(
        session_factory=get_session_factory(),
        store=get_cache_store(),
        assembler=LlmsTxtAssembler(PipelineConfig.from_settings()),
    )


def get_proxy_cache_store() -> LlmsCacheStore | None:
    """Cache store for the public proxy; None when the database is not initialized."""
    try:
        return get_cache_store()
    except RuntimeError:
        return None
