"""Logic for rendering documentation comments attached to nodes."""

from __future__ import annotations

import logging
import re
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from docgraph.escape import escape
from docgraph.markup import format_content, highlight, normalize_link, render_markdown

if TYPE_CHECKING:
    from docgraph.link_resolver import LinkResolver
    from docgraph.node import DocContent, DocSpan, Node, Source, SymbolGraph
    from docgraph.render_options import RenderOptions

logger = logging.getLogger(__name__)

DOC_LINK_RE = re.compile(r"^\s*([^|]+?)\s*(?:[|\s]\s*(.+))?\s*$")
CAPTION_RE = re.compile(r"^\s*<caption>(.*?)</caption>\s*", re.DOTALL)
URL_LIKE_RE = re.compile(r"^([a-z][a-z0-9+.-]*://|/|#|\.{1,2}/)|\.(html|md)(#.*)?$", re.IGNORECASE)

DEMO_TAGS = frozenset({"demo", "demoonly"})
EXAMPLE_TAGS = DEMO_TAGS | {"example"}


def parse_example(value: str) -> tuple[str | None, str]:
    """Split an optional ``<caption>`` title off an example body."""
    match = CAPTION_RE.match(value)
    if match is None:
        return None, value.strip("\n")
    return match.group(1).strip(), value[match.end():].strip("\n")


def parse_doc_link(value: str) -> tuple[str, str | None]:
    """Split ``target|title`` or ``target title`` into its two parts."""
    match = DOC_LINK_RE.match(value)
    if match is None:
        return value.strip(), None
    return match.group(1), match.group(2)


def plain_value(value: str | list[DocSpan]) -> str:
    """Join span values into plain text."""
    if isinstance(value, str):
        return value
    return "".join(span.value for span in value)


def _placeholder(index: int) -> str:
    return f"DOCGRAPHLINK{index}END"


class DocRenderer:
    """Render documentation blocks, resolving ``{@link}`` spans against the graph."""

    def __init__(
        self, graph: SymbolGraph, resolver: LinkResolver, options: RenderOptions
    ) -> None:
        self.graph = graph
        self.resolver = resolver
        self.options = options

    def external_link(self, url: str, title: str | None = None) -> str:
        href = normalize_link(url, self.options.base_href)
        return f'<a href="{escape(href)}">{escape(title or url)}</a>'

    def doc_link(self, value: str) -> str:
        """Render a ``{@link target title}`` span."""
        name, title = parse_doc_link(value)
        symbol = self.graph.find_by_name(name)
        if symbol is not None:
            return self.resolver.link(symbol, escape(title) if title else None)
        logger.warning("Unresolved documentation link %r", name)
        return self.external_link(name, title)

    def prose(self, value: str | list[DocSpan], *, inline: bool | None = None) -> str:
        """Render descriptive text; links are resolved after markdown runs."""
        links: list[str] = []
        if isinstance(value, str):
            source = value
        else:
            pieces = []
            for span in value:
                if span.tag == "link":
                    pieces.append(_placeholder(len(links)))
                    links.append(self.doc_link(span.value))
                else:
                    pieces.append(span.value)
            source = "".join(pieces)

        if inline is None:
            inline = "\n" not in source.strip()
        if self.options.markdown:
            body = render_markdown(
                source, inline=inline, base_href=self.options.base_href
            )
        elif inline:
            body = escape(source.strip())
        else:
            body = format_content(escape(source))

        for index, link in enumerate(links):
            body = body.replace(_placeholder(index), link)
        return body

    def demo(self, doc: DocContent) -> str:
        title, body = parse_example(plain_value(doc.value))
        language = "html" if doc.tag in DEMO_TAGS else "typescript"
        return f"<h6>{escape(title or 'Example')}</h6>" + highlight(body, language)

    def related(self, docs: list[DocContent]) -> str:
        entries = []
        for doc in docs:
            if not isinstance(doc.value, str):
                entries.append(self.prose(doc.value, inline=True))
                continue
            symbol = self.graph.find_by_name(doc.value.strip())
            if symbol is not None:
                entries.append(self.resolver.link(symbol))
            elif URL_LIKE_RE.search(doc.value.strip()):
                entries.append(self.external_link(doc.value.strip()))
            else:
                entries.append(self.prose(doc.value, inline=True))
        return f'<p class="related"><b>Related:</b> {", ".join(entries)}</p>'

    def render(self, node: Node) -> str:
        """Render every documentation item of ``node``; unknown tags are skipped."""
        docs = node.docs
        if docs is None or not docs.content:
            return ""

        parts: list[str] = []
        related: list[DocContent] = []
        for doc in docs.content:
            if doc.tag in EXAMPLE_TAGS:
                parts.append(self.demo(doc))
            elif doc.tag == "see":
                related.append(doc)
            elif doc.tag == "link" and isinstance(doc.value, str):
                parts.append(self.doc_link(doc.value))
            elif doc.tag == "return":
                parts.append(f"<h6>Returns</h6>{self._block(doc.value)}")
            elif doc.tag in (None, "param"):
                parts.append(self._block(doc.value))
            else:
                logger.debug("Skipping documentation tag %r on %s", doc.tag, node.name)

        if related:
            parts.append(self.related(related))
        return "".join(parts)

    def _block(self, value: str | list[DocSpan]) -> str:
        inline = "\n" not in plain_value(value).strip()
        body = self.prose(value, inline=inline)
        return f"<p>{body}</p>" if inline else body

    def source_link(self, source: Source) -> str | None:
        """Return the repository URL of a declaration, when one is configured."""
        repository = self.options.repository
        if not repository or source.is_declaration_file:
            return None
        path = PurePosixPath(source.name)
        root = PurePosixPath(self.options.package_root)
        if path.is_relative_to(root):
            path = path.relative_to(root)
        line = f"#L{source.line + 1}" if source.line is not None else ""
        return f"{repository.rstrip('/')}/{path}{line}"
