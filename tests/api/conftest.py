"""API-specific test fixtures.

Requests go through httpx.AsyncClient + ASGITransport in the pytest-asyncio
loop, so route handlers share the global session factory installed by the
engine fixture.
"""

import httpx
import pytest
from fastapi import FastAPI

from llmstxt.api.deps import get_cache_store, get_llms_txt_service, get_proxy_cache_store
from llmstxt.db.base import get_session_factory
from llmstxt.db.models import Shop
from llmstxt.pipeline.assembler import LlmsTxtAssembler
from llmstxt.services.cache_store import LlmsCacheStore
from llmstxt.services.llms_txt_service import LlmsTxtService
from tests.fakes import FakeShopifyClient, article_node, product_node


@pytest.fixture
def fake_origin() -> FakeShopifyClient:
    return FakeShopifyClient(
        resources={
            "products": [product_node(i) for i in range(1, 4)],
            "articles": [article_node(1), article_node(2)],
        }
    )


@pytest.fixture
def app(engine, fake_origin) -> FastAPI:
    """Application with the Redis lock and the real Admin API swapped out."""
    from llmstxt.main import create_app

    app = create_app()

    def cache_store() -> LlmsCacheStore:
        return LlmsCacheStore(get_session_factory())

    def llms_txt_service() -> LlmsTxtService:
        return LlmsTxtService(
            session_factory=get_session_factory(),
            store=cache_store(),
            assembler=LlmsTxtAssembler(),
            client_factory=lambda shop_domain, access_token: fake_origin,
        )

    app.dependency_overrides[get_cache_store] = cache_store
    app.dependency_overrides[get_proxy_cache_store] = cache_store
    app.dependency_overrides[get_llms_txt_service] = llms_txt_service
    return app


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def install_shop(session_factory):
    """Insert an installed shop row."""

    async def _install(shop_domain: str, plan_name: str | None = None, status: str | None = None) -> None:
        async with session_factory() as session:
            session.add(
                Shop(
                    shop_domain=shop_domain,
                    access_token="shpat_test",
                    plan_name=plan_name,
                    subscription_status=status,
                )
            )
            await session.commit()

    return _install
