"""LlmContentCache model: the generated llms.txt document per shop."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from llmstxt.db.base import Base


class LlmContentCache(Base):
    """One row per shop, overwritten in place on every successful generation.

    Written only by the generation pipeline, read only by the app proxy.
    """

    __tablename__ = "llm_content_cache"

    id = Column(Integer, primary_key=True, autoincrement=True)
    shop = Column(String(255), unique=True, nullable=False, index=True)
    content = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
