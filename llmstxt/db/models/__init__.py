"""Re-export all models so Base.metadata sees them."""

from llmstxt.db.models.content_settings import ContentSettings
from llmstxt.db.models.llm_content_cache import LlmContentCache
from llmstxt.db.models.shop import Shop

__all__ = [
    "ContentSettings",
    "LlmContentCache",
    "Shop",
]
