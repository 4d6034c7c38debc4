"""Explicit configuration for the llms.txt assembler."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from llmstxt.core.config import Settings, get_settings
from llmstxt.domain.quota import FALLBACK_TIER, TIER_RESOURCE_LIMITS
from llmstxt.pipeline.paginator import DEFAULT_BATCH_SIZE
from llmstxt.pipeline.resources import SECTION_ORDER, ResourceType

# Shopify caps `first:` at 250 per connection page
MAX_BATCH_SIZE = 250


@dataclass(frozen=True)
class PipelineConfig:
    """Recognized options.

    batch_size: items per page request
    tier_table: tier -> {resource type -> ceiling or None}
    section_order: fixed order of resource sections after the header
    parallel_fetch: fetch resource types concurrently (order is preserved)
    """

    batch_size: int = DEFAULT_BATCH_SIZE
    tier_table: Mapping[str, Mapping[ResourceType, int | None]] = field(default_factory=lambda: TIER_RESOURCE_LIMITS)
    section_order: tuple[ResourceType, ...] = SECTION_ORDER
    parallel_fetch: bool = False

    def __post_init__(self) -> None:
        if not 1 <= self.batch_size <= MAX_BATCH_SIZE:
            raise ValueError(f"batch_size must be between 1 and {MAX_BATCH_SIZE}, got {self.batch_size}")
        if sorted(self.section_order) != sorted(ResourceType):
            raise ValueError("section_order must list every resource type exactly once")
        if FALLBACK_TIER not in self.tier_table:
            raise ValueError(f"tier_table must define the '{FALLBACK_TIER}' tier")
        for tier, limits in self.tier_table.items():
            missing = set(ResourceType) - set(limits)
            if missing:
                raise ValueError(f"tier '{tier}' has no limit for {sorted(str(rt) for rt in missing)}")
            negative = [str(rt) for rt, limit in limits.items() if limit is not None and limit < 0]
            if negative:
                raise ValueError(f"tier '{tier}' has negative limits for {negative}")

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "PipelineConfig":
        settings = settings or get_settings()
        return cls(
            batch_size=settings.llms_batch_size,
            parallel_fetch=settings.llms_parallel_fetch,
        )
