"""llms.txt document model and Jinja2 rendering.

The rendered document is:
- `# [Shop name](site url)` header
- optional `> description` paragraph
- one `## Heading` section per non-empty resource type, in fixed order
separated by blank lines and trimmed.
"""

from dataclasses import dataclass, field
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from llmstxt.pipeline.resources import ResourceType

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "llms.txt.j2"


@dataclass(frozen=True)
class DocumentSection:
    resource_type: ResourceType
    heading: str
    lines: tuple[str, ...] = ()


@dataclass(frozen=True)
class LlmsTxtDocument:
    title: str
    url: str
    description: str | None = None
    sections: tuple[DocumentSection, ...] = field(default_factory=tuple)

    def section_types(self) -> list[ResourceType]:
        return [section.resource_type for section in self.sections]

    def render(self) -> str:
        return get_renderer().render(self)


class LlmsTxtRenderer:
    """Render LlmsTxtDocument instances through the llms.txt template."""

    def __init__(self, template_dir: Path = TEMPLATE_DIR):
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=False,  # plain text / markdown must not be escaped
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, document: LlmsTxtDocument) -> str:
        template = self.env.get_template(TEMPLATE_NAME)
        sections = [section for section in document.sections if section.lines]
        return template.render(
            document=LlmsTxtDocument(
                title=document.title,
                url=document.url,
                description=collapse_paragraph(document.description),
                sections=tuple(sections),
            )
        ).strip()


def collapse_paragraph(text: str | None) -> str | None:
    """Collapse whitespace so the description renders as one paragraph."""
    if not text:
        return None
    collapsed = " ".join(text.split())
    return collapsed or None


_renderer: LlmsTxtRenderer | None = None


def get_renderer() -> LlmsTxtRenderer:
    """Get the singleton LlmsTxtRenderer instance."""
    global _renderer
    if _renderer is None:
        _renderer = LlmsTxtRenderer()
    return _renderer
