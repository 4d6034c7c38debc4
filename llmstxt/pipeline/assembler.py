"""LlmsTxtAssembler: drains the origin API into one llms.txt document.

Steps:
1. Resolve shop identity (name, description, public site URL)
2. Resolve per-resource quota limits from the subscription tier
3. For each resource type in the configured order: skip when the limit is 0,
   otherwise paginate with its fetcher and render every node
4. Build the document from the non-empty sections

All-or-nothing: any origin failure aborts the whole assembly.
"""

import asyncio
from dataclasses import dataclass
from typing import Any

import structlog

from llmstxt.artifacts.document import DocumentSection, LlmsTxtDocument
from llmstxt.core.exceptions import OriginDataMissing
from llmstxt.domain.quota import QuotaLimits, apply_exclusions, is_known_tier, normalize_tier, resolve_quota
from llmstxt.pipeline.config import PipelineConfig
from llmstxt.pipeline.paginator import paginate
from llmstxt.pipeline.resources import GraphQLClient, ResourceType, get_fetcher

logger = structlog.get_logger(__name__)

SHOP_QUERY = """#graphql
  query GetShopData {
    shop {
      name
      description
      primaryDomain {
        url
      }
    }
  }
"""


@dataclass(frozen=True)
class ShopIdentity:
    name: str
    description: str | None
    site_url: str


class LlmsTxtAssembler:
    """Orchestrates quota resolution, pagination and rendering for one shop."""

    def __init__(self, config: PipelineConfig | None = None):
        self.config = config or PipelineConfig()

    async def assemble(
        self,
        client: GraphQLClient,
        shop_domain: str,
        plan_name: str | None = None,
        excluded: frozenset[ResourceType] = frozenset(),
    ) -> LlmsTxtDocument:
        """Fetch every enabled resource type and build the document.

        Args:
            client: Admin API client scoped to the shop
            shop_domain: myshopify.com domain (tenant key)
            plan_name: Active subscription plan name, None for free
            excluded: Resource types switched off in the shop's settings

        Returns:
            LlmsTxtDocument ready to render

        Raises:
            OriginQueryFailed / OriginDataMissing: any resource failed
        """
        log = logger.bind(shop=shop_domain)

        identity = await self.resolve_identity(client, shop_domain)
        limits = self.resolve_limits(shop_domain, plan_name, excluded)
        log.info("llms_txt_assembly_started", plan=normalize_tier(plan_name), limits={k.value: v for k, v in limits.items()})

        order = [rt for rt in self.config.section_order if limits.get(rt) != 0]
        for rt in self.config.section_order:
            if rt not in order:
                log.info("llms_txt_section_skipped", resource=rt.value)

        if self.config.parallel_fetch:
            fetched = await self._fetch_parallel(client, order, limits, identity.site_url)
        else:
            fetched = [await self.fetch_section(client, rt, limits.get(rt), identity.site_url) for rt in order]

        sections = tuple(section for section in fetched if section.lines)
        log.info("llms_txt_assembly_complete", sections=[s.resource_type.value for s in sections])

        return LlmsTxtDocument(
            title=identity.name,
            url=identity.site_url,
            description=identity.description,
            sections=sections,
        )

    async def resolve_identity(self, client: GraphQLClient, shop_domain: str) -> ShopIdentity:
        data = await client.graphql(SHOP_QUERY, resource="shop")
        shop: Any = data.get("shop")
        if shop is not None and not isinstance(shop, dict):
            raise OriginDataMissing("shop", "'shop' is not an object")
        shop = shop or {}

        name = (shop.get("name") or "").strip() or shop_domain.split(".")[0]
        primary_domain = shop.get("primaryDomain") or {}
        site_url = (primary_domain.get("url") or "").rstrip("/") or f"https://{shop_domain}"

        return ShopIdentity(name=name, description=shop.get("description"), site_url=site_url)

    def resolve_limits(
        self,
        shop_domain: str,
        plan_name: str | None,
        excluded: frozenset[ResourceType] = frozenset(),
    ) -> QuotaLimits:
        if plan_name is not None and not is_known_tier(plan_name, self.config.tier_table):
            # QuotaResolutionFailed is recovered by falling back to the free table
            logger.warning("quota_tier_unrecognized", shop=shop_domain, plan=plan_name)
        limits = resolve_quota(plan_name, self.config.tier_table)
        return apply_exclusions(limits, excluded)

    async def fetch_section(
        self,
        client: GraphQLClient,
        resource_type: ResourceType,
        cap: int | None,
        site_url: str,
    ) -> DocumentSection:
        fetcher = get_fetcher(resource_type)

        async def fetch_page(limit: int, cursor: str | None):
            return await fetcher.fetch_page(client, limit, cursor)

        nodes = await paginate(
            fetch_page,
            resource=resource_type.value,
            cap=cap,
            batch_size=self.config.batch_size,
        )

        lines: list[str] = []
        for node in nodes:
            lines.extend(fetcher.render(node, site_url))

        return DocumentSection(resource_type=resource_type, heading=fetcher.heading, lines=tuple(lines))

    async def _fetch_parallel(
        self,
        client: GraphQLClient,
        order: list[ResourceType],
        limits: QuotaLimits,
        site_url: str,
    ) -> list[DocumentSection]:
        tasks = [
            asyncio.ensure_future(self.fetch_section(client, rt, limits.get(rt), site_url))
            for rt in order
        ]
        try:
            # gather preserves input order, so section order is unaffected
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
