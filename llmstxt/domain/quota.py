"""Subscription-tier quota policy for llms.txt resources.

Pure functions with no external dependencies: a tier name maps to a per
resource type ceiling, where None means unlimited and 0 means skipped.
"""

from collections.abc import Iterable, Mapping
from enum import StrEnum

from llmstxt.core.exceptions import QuotaResolutionFailed
from llmstxt.pipeline.resources import ResourceType

QuotaLimits = dict[ResourceType, int | None]

UNLIMITED = None


class PlanTier(StrEnum):
    """Subscription tiers, most restrictive first."""

    FREE = "free"
    BASIC = "basic"
    PRO = "pro"


# Tier-based item ceilings per resource type (None = unlimited)
TIER_RESOURCE_LIMITS: dict[str, QuotaLimits] = {
    PlanTier.FREE: {
        ResourceType.PRODUCTS: 100,
        ResourceType.COLLECTIONS: 5,
        ResourceType.ARTICLES: 5,
        ResourceType.PAGES: 5,
    },
    PlanTier.BASIC: {
        ResourceType.PRODUCTS: 500,
        ResourceType.COLLECTIONS: 50,
        ResourceType.ARTICLES: 100,
        ResourceType.PAGES: 50,
    },
    PlanTier.PRO: {
        ResourceType.PRODUCTS: UNLIMITED,
        ResourceType.COLLECTIONS: UNLIMITED,
        ResourceType.ARTICLES: UNLIMITED,
        ResourceType.PAGES: UNLIMITED,
    },
}

FALLBACK_TIER = PlanTier.FREE


def normalize_tier(plan_name: str | None) -> str:
    """Map a subscription plan name to a tier key.

    "Basic Plan" -> "basic", "PRO" -> "pro", None/"" -> "free".
    Unknown names are returned normalized, not rejected.
    """
    if plan_name is None or not plan_name.strip():
        return FALLBACK_TIER.value
    name = plan_name.strip().lower()
    if name.endswith(" plan"):
        name = name[: -len(" plan")].strip()
    return name


def lookup_tier_limits(tier: str, table: Mapping[str, Mapping[ResourceType, int | None]] = TIER_RESOURCE_LIMITS) -> QuotaLimits:
    """Return a copy of the limits for a known tier.

    Raises:
        QuotaResolutionFailed: tier is not in the table
    """
    if tier not in table:
        raise QuotaResolutionFailed(tier)
    limits = dict(table[tier])
    for resource_type, limit in limits.items():
        if limit is not None and limit < 0:
            raise ValueError(f"Negative limit for {resource_type} in tier '{tier}'")
    return limits


def resolve_quota(
    plan_name: str | None,
    table: Mapping[str, Mapping[ResourceType, int | None]] = TIER_RESOURCE_LIMITS,
) -> QuotaLimits:
    """Resolve per-resource limits for a subscription plan.

    Absent or unrecognized plans fall back to the most restrictive (free)
    table. Deterministic; never raises for an unknown tier.
    """
    try:
        return lookup_tier_limits(normalize_tier(plan_name), table)
    except QuotaResolutionFailed:
        return lookup_tier_limits(FALLBACK_TIER.value, table)


def is_known_tier(
    plan_name: str | None,
    table: Mapping[str, Mapping[ResourceType, int | None]] = TIER_RESOURCE_LIMITS,
) -> bool:
    return normalize_tier(plan_name) in table


def apply_exclusions(limits: Mapping[ResourceType, int | None], excluded: Iterable[ResourceType]) -> QuotaLimits:
    """Force a ceiling of 0 for resource types the shop switched off."""
    excluded = set(excluded)
    return {rt: (0 if rt in excluded else limit) for rt, limit in limits.items()}
