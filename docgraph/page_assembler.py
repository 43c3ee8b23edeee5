"""Logic for assembling full HTML pages from the rendering components."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from docgraph.chrome import (
    SITEMAP_FILE,
    STYLESHEET_FILE,
    Chrome,
    ExtraLink,
    ExtraLinkSection,
)
from docgraph.documentation import DocRenderer
from docgraph.errors import DocGenError
from docgraph.escape import escape
from docgraph.kinds import Flags, Kind, kind_label
from docgraph.link_resolver import LinkResolver
from docgraph.markup import render_markdown, stylesheet
from docgraph.member_grouper import Group, MemberGrouper
from docgraph.navigation import NavSection, build_navigation
from docgraph.output_file import OutputFile
from docgraph.page_planner import escape_file_name
from docgraph.signature_printer import chip, node_chips
from docgraph.type_renderer import TypeRenderer

if TYPE_CHECKING:
    from docgraph.node import Node, SymbolGraph
    from docgraph.page_planner import PagePlan
    from docgraph.render_options import ExtraDocument, RenderOptions

logger = logging.getLogger(__name__)

INDEX_PAGE = "index.html"
TITLE_BADGE_KINDS = frozenset(
    {
        Kind.MODULE,
        Kind.CLASS,
        Kind.INTERFACE,
        Kind.COMPONENT,
        Kind.NAMESPACE,
        Kind.ENUM,
    }
)
CONTAINER_KINDS = frozenset({Kind.MODULE, Kind.NAMESPACE})


class PageAssembler:
    """Render every planned page and wrap it in the shared chrome."""

    def __init__(
        self, graph: SymbolGraph, plan: PagePlan, options: RenderOptions
    ) -> None:
        self.graph = graph
        self.plan = plan
        self.options = options
        self.resolver = LinkResolver(plan, options)
        self.renderer = TypeRenderer(self.resolver)
        self.docs = DocRenderer(graph, self.resolver, options)
        self.grouper = MemberGrouper(
            self.index_entry, self.member_card, exclude=options.exclude
        )

    def index_entry(self, member: Node, rendering_parent: Node | None) -> str:
        return self.resolver.link(member, rendering_parent=rendering_parent)

    def member_card(self, node: Node) -> str:
        """Render the anchored card of a member shown inside its parent's page."""
        parts = []
        if node.id is not None:
            parts.append(f'<a name="s{node.id}"></a>')
        parts.append('<div class="member">')
        parts.append(f"<h4>{self.renderer.signature(node)}</h4>")

        docs = self.docs.render(node)
        if docs:
            parts.append(docs)
        parts.extend(self._parameter_list(node))

        source = node.first_source
        href = self.docs.source_link(source) if source is not None else None
        if href:
            parts.append(f'<a class="source" href="{escape(href)}">View source</a>')
        parts.append("</div>")
        return "\n".join(parts)

    def _parameter_list(self, node: Node) -> list[str]:
        if not node.parameters:
            return []
        parts = ["<h6>Parameters</h6>", '<ul class="parameters">']
        for param in node.parameters:
            item = f"<code>{self.renderer.parameter(param)}</code>"
            docs = self.docs.render(param)
            if docs:
                item += f" {docs}"
            parts.append(f"<li>{item}</li>")
        parts.append("</ul>")
        return parts

    def title_block(self, node: Node) -> list[str]:
        badges = node_chips(node)
        if node.kind in TITLE_BADGE_KINDS:
            badges += chip(kind_label(node.kind).lower())
        if node.docs and node.docs.role:
            badges += chip(f"role: {escape(node.docs.role)}")
        if node.has(Flags.DECLARATION_MERGE):
            badges += chip("declaration merge")

        parts = [f"<h1>{badges}{self.renderer.signature_text(node)}</h1>"]
        if node.docs and node.docs.tag_name:
            parts.append(f"<p><code>&lt;{escape(node.docs.tag_name)}&gt;</code></p>")
        return parts

    def extended_by(self, node: Node) -> list[str]:
        if not node.extended_by:
            return []
        links = ", ".join(self.resolver.link(n) for n in node.extended_by)
        return [f'<p class="extended-by"><b>Extended By:</b> {links}</p>']

    def render_groups(self, groups: list[Group]) -> list[str]:
        parts = []
        for group in groups:
            parts.append(f"<h3>{group.title}</h3>")
            parts.append(f'<p class="index">{" ".join(group.index)}</p>')
            parts.extend(group.body)
        return parts

    def inherited_sections(self, node: Node) -> list[str]:
        heritage = node.type
        if heritage is None or heritage.kind != Kind.CLASS_TYPE:
            return []
        parts = []
        for section in self.grouper.inherited(heritage):
            parts.append(f"<h3>Inherited from {self.resolver.link(section.heritage)}</h3>")
            for group in section.groups:
                parts.append(f"<h6>{group.title}</h6>")
                parts.append(f'<p class="index">{" ".join(group.index)}</p>')
        return parts

    def page_body(self, node: Node) -> str:
        """Render the body of one page-owning node."""
        parts = self.title_block(node)
        parts.extend(self.extended_by(node))

        docs = self.docs.render(node)
        if docs:
            parts.append(docs)

        source = node.first_source
        href = self.docs.source_link(source) if source is not None else None
        if href and node.kind not in CONTAINER_KINDS:
            parts.append(f'<a class="source" href="{escape(href)}">View source</a>')

        parts.extend(self.render_groups(self.grouper.group_members(node)))
        parts.extend(self.inherited_sections(node))
        return "\n".join(parts).rstrip() + "\n"

    def navigation(self) -> list[NavSection]:
        containers = [n for n in self.plan if n.kind in CONTAINER_KINDS]
        return build_navigation(containers, self.resolver)

    def extra_documents(self) -> tuple[list[ExtraLinkSection], list[tuple[str, str, str]]]:
        """Render the hand-written documents published next to the API pages."""
        sections = []
        pages = []
        for section in self.options.extra:
            links = []
            for doc in section.items:
                name = self._extra_name(doc)
                body = render_markdown(
                    _read_text(Path(doc.file)),
                    base_href=self.options.base_href,
                    allow_html=True,
                )
                pages.append((name, body, doc.title))
                links.append(ExtraLink(title=doc.title, href=name, icon=doc.icon))
            sections.append(ExtraLinkSection(items=links, title=section.title))
        return sections, pages

    def _extra_name(self, doc: ExtraDocument) -> str:
        if doc.index:
            return INDEX_PAGE
        name = escape_file_name(doc.file)
        return name if name.endswith(".html") else f"{name}.html"

    def render_site(self) -> list[OutputFile]:
        """Render every page into memory; nothing is written here."""
        bodies = [
            (self.plan.page_of(node), self.page_body(node), node.name)
            for node in self.plan
        ]
        logger.debug("Rendered %d API pages", len(bodies))

        extra_sections, extra_pages = self.extra_documents()
        bodies.extend(extra_pages)
        if not any(name == INDEX_PAGE for name, _, _ in bodies):
            bodies.append((INDEX_PAGE, "", ""))

        head_html = _read_text(Path(self.options.head_html)) if self.options.head_html else ""
        chrome = Chrome(self.options, self.navigation(), extra_sections, head_html)
        css = OutputFile(STYLESHEET_FILE, stylesheet())

        if self.options.spa:
            routes = [(name, body) for name, body, _ in bodies]
            files = [OutputFile(INDEX_PAGE, chrome.spa(routes, INDEX_PAGE)), css]
            if self.options.sitemap:
                sitemap = chrome.sitemap(self.options.sitemap, [name for name, _ in routes])
                files.append(OutputFile(SITEMAP_FILE, sitemap))
            return files
        if self.options.sitemap:
            logger.warning("Ignoring sitemap: it is only written for the single-page site")
        files = [OutputFile(name, chrome.page(body, title)) for name, body, title in bodies]
        files.append(css)
        return files


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocGenError(f"Cannot read {path}: {exc}") from exc
