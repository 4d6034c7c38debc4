"""Storefront llms.txt generator: aggregates Admin API content into a cached llms.txt."""

__version__ = "0.1.0"
