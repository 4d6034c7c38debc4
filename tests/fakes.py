"""In-memory stand-ins for the Admin API used across test groups."""

from typing import Any

from llmstxt.core.exceptions import OriginQueryFailed

DEFAULT_SHOP = {
    "name": "Shop A",
    "description": "Handmade goods.",
    "primaryDomain": {"url": "https://shop-a.example.com/"},
}


def product_node(i: int, *, options: list[dict] | None = None, url: str | None = None) -> dict:
    return {
        "id": f"gid://shopify/Product/{i}",
        "title": f"Product {i}",
        "handle": f"product-{i}",
        "onlineStoreUrl": url,
        "productType": "Widget",
        "priceRangeV2": {"minVariantPrice": {"amount": f"{i}.00", "currencyCode": "USD"}},
        "options": options or [],
    }


def collection_node(i: int) -> dict:
    return {"id": f"gid://shopify/Collection/{i}", "title": f"Collection {i}", "handle": f"collection-{i}"}


def article_node(i: int, blog: str = "news") -> dict:
    return {
        "id": f"gid://shopify/Article/{i}",
        "title": f"Article {i}",
        "handle": f"article-{i}",
        "blog": {"handle": blog},
    }


def page_node(i: int) -> dict:
    return {"id": f"gid://shopify/Page/{i}", "title": f"Page {i}", "handle": f"page-{i}"}


class FakeShopifyClient:
    """Serves connection pages out of in-memory node lists.

    Cursors are the 1-based position of the edge, so `after` is the offset of
    the next page. Set fail_on=(resource, n) to fail the n-th page request of
    a resource.
    """

    def __init__(
        self,
        shop: dict | None = None,
        resources: dict[str, list[dict]] | None = None,
        fail_on: tuple[str, int] | None = None,
    ):
        self.shop = DEFAULT_SHOP if shop is None else shop
        self.resources = resources or {}
        self.fail_on = fail_on
        self.calls: list[tuple[str, int | None, str | None]] = []

    async def __aenter__(self) -> "FakeShopifyClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    def calls_for(self, resource: str) -> list[tuple[str, int | None, str | None]]:
        return [call for call in self.calls if call[0] == resource]

    async def graphql(self, query: str, variables: dict[str, Any] | None = None, *, resource: str) -> dict:
        variables = variables or {}
        if resource == "shop":
            self.calls.append(("shop", None, None))
            return {"shop": self.shop}

        first = variables["first"]
        after = variables.get("after")
        self.calls.append((resource, first, after))

        if self.fail_on == (resource, len(self.calls_for(resource))):
            raise OriginQueryFailed(resource, "HTTP 503: upstream unavailable")

        nodes = self.resources.get(resource, [])
        start = int(after) if after else 0
        batch = nodes[start : start + first]
        edges = [{"cursor": str(start + i + 1), "node": node} for i, node in enumerate(batch)]
        return {
            resource: {
                "edges": edges,
                "pageInfo": {"hasNextPage": start + len(batch) < len(nodes)},
            }
        }
