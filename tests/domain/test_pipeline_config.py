"""Tests for PipelineConfig validation."""

import pytest

from llmstxt.core.config import Settings
from llmstxt.pipeline.config import MAX_BATCH_SIZE, PipelineConfig
from llmstxt.pipeline.resources import SECTION_ORDER, ResourceType

pytestmark = pytest.mark.unit


def test_defaults():
    config = PipelineConfig()

    assert config.batch_size == 50
    assert config.section_order == SECTION_ORDER
    assert config.parallel_fetch is False
    assert "free" in config.tier_table


@pytest.mark.parametrize("batch_size", [0, -5, MAX_BATCH_SIZE + 1])
def test_batch_size_bounds(batch_size):
    with pytest.raises(ValueError, match="batch_size"):
        PipelineConfig(batch_size=batch_size)


def test_section_order_must_cover_every_type():
    with pytest.raises(ValueError, match="section_order"):
        PipelineConfig(section_order=(ResourceType.PRODUCTS, ResourceType.PAGES))

    with pytest.raises(ValueError, match="section_order"):
        PipelineConfig(section_order=(ResourceType.PRODUCTS,) * 4)


def test_custom_order_accepted():
    order = (ResourceType.PAGES, ResourceType.ARTICLES, ResourceType.COLLECTIONS, ResourceType.PRODUCTS)

    assert PipelineConfig(section_order=order).section_order == order


def test_tier_table_requires_free_tier():
    with pytest.raises(ValueError, match="free"):
        PipelineConfig(tier_table={"pro": {}})


def test_from_settings():
    settings = Settings(llms_batch_size=100, llms_parallel_fetch=True)

    config = PipelineConfig.from_settings(settings)

    assert config.batch_size == 100
    assert config.parallel_fetch is True


def test_tier_missing_a_resource_type_rejected():
    """A tier without a row for some type must not fall through to unlimited."""
    with pytest.raises(ValueError, match="no limit for \\['articles', 'collections', 'pages'\\]"):
        PipelineConfig(tier_table={"free": {ResourceType.PRODUCTS: 1}})


def test_negative_tier_limit_rejected():
    table = {"free": {rt: 5 for rt in ResourceType} | {ResourceType.PAGES: -1}}

    with pytest.raises(ValueError, match="negative limits for \\['pages'\\]"):
        PipelineConfig(tier_table=table)


def test_complete_custom_table_accepted():
    table = {"free": {rt: 1 for rt in ResourceType}, "pro": {rt: None for rt in ResourceType}}

    assert PipelineConfig(tier_table=table).tier_table is table
