"""llms.txt document package.

Provides:
- LlmsTxtDocument / DocumentSection: the assembled artifact
- LlmsTxtRenderer: Jinja2 rendering with the fixed section grammar
"""

from llmstxt.artifacts.document import DocumentSection, LlmsTxtDocument, LlmsTxtRenderer

__all__ = ["DocumentSection", "LlmsTxtDocument", "LlmsTxtRenderer"]
