"""Resource aggregation pipeline: paginator, per-resource fetchers, assembler."""
