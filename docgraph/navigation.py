"""Logic for building the sitewide navigation tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from docgraph.errors import DocGenError
from docgraph.kinds import Flags, Kind
from docgraph.member_grouper import declaration_filter, member_sort_key
from docgraph.page_planner import has_own_page

if TYPE_CHECKING:
    from docgraph.link_resolver import LinkResolver
    from docgraph.node import Node

KIND_ICONS = {
    Kind.CONSTANT: "K",
    Kind.VARIABLE: "V",
    Kind.CLASS: "C",
    Kind.FUNCTION: "F",
    Kind.INTERFACE: "I",
    Kind.TYPE_ALIAS: "T",
    Kind.COMPONENT: "C",
    Kind.ENUM: "E",
    Kind.NAMESPACE: "N",
}
INDEX_MODULE_NAMES = frozenset({"index", "index.ts", "index.d.ts", "index.tsx", "index.js"})


@dataclass
class NavItem:
    title: str
    href: str
    icon: str | None = None
    italic: bool = False  # unnamed default export


@dataclass
class NavSection:
    """One module or namespace with the pages it contains."""

    page: NavItem
    entries: list[NavItem] = field(default_factory=list)


def kind_icon(kind: Kind) -> str:
    return KIND_ICONS.get(kind, "?")


def nav_sort_key(node: Node) -> tuple[int, str]:
    """Index module first, namespaces last, the rest by name."""
    if node.kind == Kind.MODULE and node.name.rsplit("/", 1)[-1] in INDEX_MODULE_NAMES:
        return (0, node.name)
    if node.kind == Kind.NAMESPACE:
        return (2, node.name)
    return (1, node.name)


def nav_item(node: Node, resolver: LinkResolver, *, icon: bool = True) -> NavItem:
    href = resolver.get_href(node)
    if not href:
        raise DocGenError(f'No href for navigation entry "{node.name}"')
    return NavItem(
        title=node.name or "default",
        href=href,
        icon=kind_icon(node.kind) if icon else None,
        italic=not node.name,
    )


def build_navigation(containers: list[Node], resolver: LinkResolver) -> list[NavSection]:
    """Build one section per module or namespace that has visible pages or members."""
    sections = []
    for container in sorted(containers, key=nav_sort_key):
        children = [
            c
            for c in container.children or []
            if declaration_filter(c) and not c.has(Flags.OVERLOAD)
        ]
        if not children:
            continue
        entries = [
            nav_item(c, resolver)
            for c in sorted(children, key=member_sort_key)
            if has_own_page(c)
        ]
        sections.append(NavSection(page=nav_item(container, resolver, icon=False), entries=entries))
    return sections
