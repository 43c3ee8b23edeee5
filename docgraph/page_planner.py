"""Logic for deciding which nodes own a page and what each page is called."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from docgraph.errors import MissingSourceError
from docgraph.kinds import Flags, Kind

if TYPE_CHECKING:
    from collections.abc import Iterator

    from docgraph.node import Node, SymbolGraph
    from docgraph.render_options import RenderOptions

logger = logging.getLogger(__name__)

SOURCE_EXT_RE = re.compile(r"\.([tj]sx?|md)$")
UNSAFE_FILE_CHARS_RE = re.compile(r'[/"]')

PAGE_KINDS = frozenset(
    {Kind.CLASS, Kind.MODULE, Kind.ENUM, Kind.COMPONENT, Kind.NAMESPACE}
)


def has_own_page(node: Node) -> bool:
    """Check if the node is rendered as its own page rather than an anchor."""
    if node.kind in PAGE_KINDS:
        return True
    if node.kind == Kind.INTERFACE:
        return not node.has(Flags.DECLARATION_MERGE)
    # An ambient function merged with a namespace carries its members as children.
    return (
        node.kind == Kind.FUNCTION
        and node.flags == Flags.AMBIENT
        and bool(node.children)
    )


def escape_file_name(name: str, replace_ext: str = ".html") -> str:
    """Turn a source path into a flat file-name token.

    A trailing ``.ts``/``.tsx``/``.js``/``.jsx``/``.md`` extension becomes
    ``replace_ext``; path separators and quotes become ``--``.
    """
    name = SOURCE_EXT_RE.sub(lambda _m: replace_ext, name)
    return UNSAFE_FILE_CHARS_RE.sub("--", name)


def page_name(node: Node, *, has_readme: bool = False) -> str:
    """Derive the file name of a page-owning node.

    Pure function of the declaring source path, the kind and the name.
    """
    if node.kind == Kind.MODULE:
        result = escape_file_name(node.name)
        if not result.endswith(".html"):
            result += ".html"
        # The README takes index.html; the module steps aside.
        return "index-api.html" if result == "index.html" and has_readme else result

    if node.kind == Kind.NAMESPACE:
        return f"ns--{escape_file_name(node.name)}.html"

    source = node.first_source
    if source is None:
        raise MissingSourceError(node.name)

    prefix = escape_file_name(source.name, "--")
    return f"{prefix}{node.name}.html"


@dataclass
class PagePlan:
    """Page file names for every page-owning node, plus the pages to emit."""

    names: dict[Node, str] = field(default_factory=dict)
    emitted: list[Node] = field(default_factory=list)
    has_readme: bool = False

    def page_of(self, node: Node) -> str:
        """Return the planned file name, deriving it for unplanned nodes."""
        planned = self.names.get(node)
        if planned is not None:
            return planned
        return page_name(node, has_readme=self.has_readme)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.emitted)

    def __len__(self) -> int:
        return len(self.emitted)


def is_skipped_module(module: Node, options: RenderOptions) -> bool:
    """Check if a top-level module produces no pages at all."""
    return (
        module.name in options.exclude
        or not module.children
        or module.has(Flags.INTERNAL)
    )


def plan_pages(graph: SymbolGraph, options: RenderOptions) -> PagePlan:
    """Walk the graph once and assign every page-owning node a file name."""
    plan = PagePlan(has_readme=options.has_readme)
    taken: dict[str, Node] = {}

    for module in graph.modules:
        emit = not is_skipped_module(module, options)
        if not emit:
            logger.debug("Skipping module %s", module.name)
        for node in _walk(module):
            if not has_own_page(node) or node in plan.names:
                continue
            name = page_name(node, has_readme=options.has_readme)
            if name in taken:
                name = _disambiguate(name, node, taken)
            taken[name] = node
            plan.names[node] = name
            if emit:
                plan.emitted.append(node)

    return plan


def _walk(root: Node) -> Iterator[Node]:
    """Yield ``root`` and its descendants through ``children``, depth first."""
    stack = [root]
    seen: set[int] = set()
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        yield node
        stack.extend(reversed(node.children or []))


def _disambiguate(name: str, node: Node, taken: dict[str, Node]) -> str:
    """Give a colliding page a deterministic suffix."""
    stem = name.removesuffix(".html")
    suffix = f"s{node.id}" if node.id is not None else "dup"
    candidate = f"{stem}-{suffix}.html"
    counter = 2
    while candidate in taken:
        candidate = f"{stem}-{suffix}-{counter}.html"
        counter += 1
    logger.warning(
        'Page name "%s" collides for "%s"; using "%s"', name, node.name, candidate
    )
    return candidate
