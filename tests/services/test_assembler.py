"""Tests for LlmsTxtAssembler: quota-driven sections, ordering and failures."""

import pytest

from llmstxt.core.exceptions import OriginDataMissing, OriginQueryFailed
from llmstxt.pipeline.assembler import LlmsTxtAssembler
from llmstxt.pipeline.config import PipelineConfig
from llmstxt.pipeline.resources import ResourceType
from tests.fakes import FakeShopifyClient, article_node, collection_node, page_node, product_node

pytestmark = pytest.mark.unit

SHOP = "shop-a.myshopify.com"


@pytest.fixture
def shop_a() -> FakeShopifyClient:
    """3 products, no collections, 2 articles, no pages."""
    return FakeShopifyClient(
        resources={
            "products": [product_node(i) for i in range(1, 4)],
            "collections": [],
            "articles": [article_node(1), article_node(2)],
            "pages": [],
        }
    )


async def test_shop_a_document(shop_a):
    document = await LlmsTxtAssembler().assemble(shop_a, SHOP)

    assert document.section_types() == [ResourceType.PRODUCTS, ResourceType.ARTICLES]
    content = document.render()
    assert content.startswith("# [Shop A](https://shop-a.example.com)\n\n> Handmade goods.")
    assert content.count("  Price: ") == 3
    assert "## Products" in content
    assert "## Articles" in content
    assert "## Collections" not in content
    assert "- [Article 2](https://shop-a.example.com/blogs/news/article-2)" in content
    assert content.index("## Products") < content.index("## Articles")


async def test_free_tier_caps_requests(shop_a):
    await LlmsTxtAssembler().assemble(shop_a, SHOP)

    assert shop_a.calls_for("products") == [("products", 50, None)]
    assert shop_a.calls_for("articles") == [("articles", 5, None)]


async def test_caps_truncate_large_catalogs():
    client = FakeShopifyClient(
        resources={
            "products": [product_node(i) for i in range(150)],
            "collections": [collection_node(i) for i in range(20)],
        }
    )

    document = await LlmsTxtAssembler().assemble(client, SHOP)

    products, collections = document.sections
    # two lines per product (link + price)
    assert len(products.lines) == 200
    assert len(collections.lines) == 5
    assert [call[1] for call in client.calls_for("products")] == [50, 50]


async def test_pro_plan_fetches_everything():
    client = FakeShopifyClient(resources={"products": [product_node(i) for i in range(120)]})

    document = await LlmsTxtAssembler().assemble(client, SHOP, plan_name="Pro Plan")

    assert len(document.sections[0].lines) == 240
    assert [call[1] for call in client.calls_for("products")] == [50, 50, 50]


async def test_excluded_types_are_never_requested(shop_a):
    excluded = frozenset({ResourceType.ARTICLES, ResourceType.PAGES})

    document = await LlmsTxtAssembler().assemble(shop_a, SHOP, excluded=excluded)

    assert document.section_types() == [ResourceType.PRODUCTS]
    assert shop_a.calls_for("articles") == []
    assert shop_a.calls_for("pages") == []


async def test_unknown_plan_uses_free_limits():
    client = FakeShopifyClient(resources={"pages": [page_node(i) for i in range(10)]})

    document = await LlmsTxtAssembler().assemble(client, SHOP, plan_name="Legacy Gold")

    assert len(document.sections[0].lines) == 5


async def test_assembly_is_idempotent(shop_a):
    assembler = LlmsTxtAssembler()

    first = (await assembler.assemble(shop_a, SHOP)).render()
    second = (await assembler.assemble(shop_a, SHOP)).render()

    assert first == second


async def test_configured_section_order():
    client = FakeShopifyClient(
        resources={"products": [product_node(1)], "pages": [page_node(1)], "articles": [article_node(1)]}
    )
    config = PipelineConfig(
        section_order=(ResourceType.PAGES, ResourceType.ARTICLES, ResourceType.COLLECTIONS, ResourceType.PRODUCTS)
    )

    document = await LlmsTxtAssembler(config).assemble(client, SHOP)

    assert document.section_types() == [ResourceType.PAGES, ResourceType.ARTICLES, ResourceType.PRODUCTS]


async def test_parallel_fetch_preserves_order(shop_a):
    sequential = await LlmsTxtAssembler().assemble(shop_a, SHOP)
    parallel = await LlmsTxtAssembler(PipelineConfig(parallel_fetch=True)).assemble(shop_a, SHOP)

    assert parallel.render() == sequential.render()


@pytest.mark.parametrize("parallel", [False, True])
async def test_failure_mid_pagination_aborts(parallel):
    client = FakeShopifyClient(
        resources={"products": [product_node(i) for i in range(150)], "articles": [article_node(1)]},
        fail_on=("products", 2),
    )
    assembler = LlmsTxtAssembler(PipelineConfig(parallel_fetch=parallel))

    with pytest.raises(OriginQueryFailed) as exc_info:
        await assembler.assemble(client, SHOP, plan_name="Pro Plan")

    assert exc_info.value.resource == "products"


async def test_identity_fallbacks():
    client = FakeShopifyClient(shop={"name": "", "description": None, "primaryDomain": None})

    document = await LlmsTxtAssembler().assemble(client, SHOP)

    assert document.title == "shop-a"
    assert document.url == "https://shop-a.myshopify.com"
    assert document.render() == "# [shop-a](https://shop-a.myshopify.com)"


async def test_identity_must_be_object():
    client = FakeShopifyClient(shop="not-an-object")

    with pytest.raises(OriginDataMissing):
        await LlmsTxtAssembler().assemble(client, SHOP)
