"""Per-resource fetchers for the storefront Admin API.

Each fetcher is one variant of a closed set selected by ResourceType. It
declares the exact connection key holding `edges` and `pageInfo`, the node
model used to validate edges, and how a node renders into llms.txt lines.
"""

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import Any, ClassVar, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from llmstxt.core.exceptions import OriginDataMissing
from llmstxt.pipeline.paginator import Page


class ResourceType(StrEnum):
    """Resource types aggregated into llms.txt."""

    PRODUCTS = "products"
    COLLECTIONS = "collections"
    ARTICLES = "articles"
    PAGES = "pages"


# Fixed section order of the document (header always comes first)
SECTION_ORDER: tuple[ResourceType, ...] = (
    ResourceType.PRODUCTS,
    ResourceType.COLLECTIONS,
    ResourceType.ARTICLES,
    ResourceType.PAGES,
)

COLOR_OPTION_NAME = "color"


class GraphQLClient(Protocol):
    async def graphql(self, query: str, variables: dict[str, Any] | None = None, *, resource: str) -> dict: ...


# ==================== NODE MODELS ====================


class _Node(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    title: str = Field(..., min_length=1)
    handle: str = Field(..., min_length=1)


class Money(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: str
    currency_code: str = Field(..., alias="currencyCode")


class PriceRange(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    min_variant_price: Money = Field(..., alias="minVariantPrice")


class ProductOption(BaseModel):
    name: str
    values: list[str] = Field(default_factory=list)


class ProductNode(_Node):
    online_store_url: str | None = Field(None, alias="onlineStoreUrl")
    product_type: str = Field("", alias="productType")
    price_range: PriceRange = Field(..., alias="priceRangeV2")
    options: list[ProductOption] | None = None


class CollectionNode(_Node):
    pass


class BlogRef(BaseModel):
    handle: str = Field(..., min_length=1)


class ArticleNode(_Node):
    blog: BlogRef


class PageNode(_Node):
    pass


# ==================== QUERIES ====================

PRODUCTS_QUERY = """#graphql
  query GetProducts($first: Int!, $after: String, $query: String) {
    products(first: $first, after: $after, query: $query) {
      edges {
        cursor
        node {
          id
          title
          handle
          onlineStoreUrl
          productType
          priceRangeV2 {
            minVariantPrice {
              amount
              currencyCode
            }
          }
          options(first: 3) {
            name
            values
          }
        }
      }
      pageInfo {
        hasNextPage
      }
    }
  }
"""

COLLECTIONS_QUERY = """#graphql
  query GetCollections($first: Int!, $after: String) {
    collections(first: $first, after: $after) {
      edges {
        cursor
        node {
          id
          title
          handle
        }
      }
      pageInfo {
        hasNextPage
      }
    }
  }
"""

ARTICLES_QUERY = """#graphql
  query GetArticles($first: Int!, $after: String) {
    articles(first: $first, after: $after) {
      edges {
        cursor
        node {
          id
          title
          handle
          blog {
            handle
          }
        }
      }
      pageInfo {
        hasNextPage
      }
    }
  }
"""

PAGES_QUERY = """#graphql
  query GetPages($first: Int!, $after: String) {
    pages(first: $first, after: $after) {
      edges {
        cursor
        node {
          id
          title
          handle
        }
      }
      pageInfo {
        hasNextPage
      }
    }
  }
"""


# ==================== FETCHERS ====================


class ResourceFetcher(ABC):
    """Fetch one page of a resource type and render its nodes."""

    resource_type: ClassVar[ResourceType]
    heading: ClassVar[str]
    query: ClassVar[str]
    connection: ClassVar[str]
    node_model: ClassVar[type[_Node]]
    extra_variables: ClassVar[dict[str, Any]] = {}

    async def fetch_page(self, client: GraphQLClient, limit: int, cursor: str | None) -> Page:
        resource = self.resource_type.value
        variables = {**self.extra_variables, "first": limit, "after": cursor}
        data = await client.graphql(self.query, variables, resource=resource)

        connection = data.get(self.connection)
        if not isinstance(connection, dict):
            raise OriginDataMissing(resource, f"'{self.connection}' missing from response data")
        edges = connection.get("edges")
        page_info = connection.get("pageInfo")
        if not isinstance(edges, list) or not isinstance(page_info, dict):
            raise OriginDataMissing(resource, f"'{self.connection}' has no edges/pageInfo")

        try:
            nodes = [self.node_model.model_validate(edge["node"]) for edge in edges]
        except (KeyError, TypeError, ValidationError) as e:
            raise OriginDataMissing(resource, f"malformed edge: {e}") from e

        next_cursor = edges[-1].get("cursor") if edges else None
        return Page(items=nodes, next_cursor=next_cursor, has_more=bool(page_info.get("hasNextPage")))

    @abstractmethod
    def render(self, node: Any, site_url: str) -> list[str]:
        """Render a node into llms.txt lines."""


class ProductFetcher(ResourceFetcher):
    resource_type = ResourceType.PRODUCTS
    heading = "Products"
    query = PRODUCTS_QUERY
    connection = "products"
    node_model = ProductNode
    extra_variables = {"query": "status:active"}

    def render(self, node: ProductNode, site_url: str) -> list[str]:
        url = node.online_store_url or f"{site_url}/products/{node.handle}"
        price = node.price_range.min_variant_price
        lines = [
            f"- [{node.title}]({url})",
            f"  Price: {price.amount} {price.currency_code}",
        ]
        color = next(
            (opt for opt in node.options or [] if opt.name.lower() == COLOR_OPTION_NAME and opt.values),
            None,
        )
        if color is not None:
            lines.append(f"  {color.name}: {', '.join(color.values)}")
        return lines


class CollectionFetcher(ResourceFetcher):
    resource_type = ResourceType.COLLECTIONS
    heading = "Collections"
    query = COLLECTIONS_QUERY
    connection = "collections"
    node_model = CollectionNode

    def render(self, node: CollectionNode, site_url: str) -> list[str]:
        return [f"- [{node.title}]({site_url}/collections/{node.handle})"]


class ArticleFetcher(ResourceFetcher):
    resource_type = ResourceType.ARTICLES
    heading = "Articles"
    query = ARTICLES_QUERY
    connection = "articles"
    node_model = ArticleNode

    def render(self, node: ArticleNode, site_url: str) -> list[str]:
        return [f"- [{node.title}]({site_url}/blogs/{node.blog.handle}/{node.handle})"]


class PageFetcher(ResourceFetcher):
    resource_type = ResourceType.PAGES
    heading = "Pages"
    query = PAGES_QUERY
    connection = "pages"
    node_model = PageNode

    def render(self, node: PageNode, site_url: str) -> list[str]:
        return [f"- [{node.title}]({site_url}/pages/{node.handle})"]


FETCHERS: dict[ResourceType, ResourceFetcher] = {
    ResourceType.PRODUCTS: ProductFetcher(),
    ResourceType.COLLECTIONS: CollectionFetcher(),
    ResourceType.ARTICLES: ArticleFetcher(),
    ResourceType.PAGES: PageFetcher(),
}


def get_fetcher(resource_type: ResourceType) -> ResourceFetcher:
    return FETCHERS[ResourceType(resource_type)]
