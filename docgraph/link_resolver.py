"""Logic for turning a node into an href and an anchor."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from docgraph.escape import escape
from docgraph.kinds import Flags, Kind
from docgraph.page_planner import PagePlan, has_own_page

if TYPE_CHECKING:
    from docgraph.node import Node
    from docgraph.render_options import RenderOptions

logger = logging.getLogger(__name__)

REFERENCE_KINDS = frozenset({Kind.REFERENCE, Kind.EXPORT, Kind.IMPORT_TYPE})


def display_name(node: Node) -> str:
    """Return the escaped label for a node, with placeholders for unnamed ones."""
    if node.name:
        return escape(node.name)
    return "<i>default</i>" if node.has(Flags.DEFAULT) else "(Unknown)"


class LinkResolver:
    """Map nodes to hrefs using the page plan."""

    def __init__(self, plan: PagePlan | None, options: RenderOptions) -> None:
        self.plan = plan if plan is not None else PagePlan(has_readme=options.has_readme)
        self.options = options

    def target(self, node: Node) -> Node:
        """Follow Reference, Export and ImportType nodes to the declaration."""
        seen: set[int] = set()
        while node.kind in REFERENCE_KINDS and node.type is not None:
            if id(node) in seen:
                logger.warning("Reference cycle through %r", node.name)
                break
            seen.add(id(node))
            node = node.type
        return node

    def get_href(self, node: Node, rendering_parent: Node | None = None) -> str:
        """Return the href of ``node``.

        A page-owning node maps to its page file; any other node maps to an
        anchor on its parent's page. When ``rendering_parent`` has the same
        name as the node's parent, the page part is omitted.
        """
        node = self.target(node)
        if has_own_page(node):
            return self.plan.page_of(node)

        parent = node.parent
        parent_href = ""
        if parent is not None and (
            rendering_parent is None or parent.name != rendering_parent.name
        ):
            parent_href = self.get_href(parent)

        anchor = f"#s{node.id}" if node.id is not None else ""
        return parent_href + anchor

    def link(
        self,
        node: Node,
        content: str | None = None,
        rendering_parent: Node | None = None,
    ) -> str:
        """Render ``node`` as an anchor; nodes without an id render as text."""
        label = content or display_name(node)
        if node.kind in (Kind.REFERENCE, Kind.IMPORT_TYPE) and node.type is not None:
            node = node.type
        if node.id is None:
            return label

        href = self.get_href(node, rendering_parent)
        if self.options.spa and not href.startswith("#"):
            return f'<doc-a href="{escape(href)}">{label}</doc-a>'
        return f'<a href="{escape(href)}">{label}</a>'
