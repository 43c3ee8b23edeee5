"""Data models for the symbol graph consumed by the renderers."""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field

from docgraph.kinds import Flags, Kind


@dataclass
class Source:
    """Location of a declaration: file identity plus character offset."""

    name: str  # declaring file, relative to the package root
    index: int = 0
    line: int | None = None  # zero-based, when the extractor resolved it
    tsconfig: str | None = None
    is_declaration_file: bool = False


@dataclass
class DocSpan:
    """One inline span of a documentation value: plain text or a link."""

    value: str
    tag: str | None = None  # "link" or None


@dataclass
class DocContent:
    """A tagged documentation item. An untagged item is descriptive prose."""

    value: str | list[DocSpan]
    tag: str | None = None


@dataclass
class Documentation:
    """Documentation block attached to a node."""

    content: list[DocContent] = field(default_factory=list)
    beta: bool = False
    tag_name: str | None = None  # custom element tag of a component
    role: str | None = None


@dataclass(eq=False)
class Node:
    """One declaration, type expression or structural sub-term.

    Nodes compare and hash by identity so they can key memoization tables.
    ``parent`` is a weak back-reference and never keeps its target alive.
    """

    kind: Kind
    id: int | None = None
    flags: Flags = Flags.NONE
    name: str = ""
    value: str | None = None
    type: Node | None = None
    type_parameters: list[Node] | None = None
    parameters: list[Node] | None = None
    children: list[Node] | None = None
    resolved_type: Node | None = None
    docs: Documentation | None = None
    source: list[Source] = field(default_factory=list)
    extended_by: list[Node] | None = None
    _parent: weakref.ReferenceType[Node] | None = field(default=None, repr=False)

    @property
    def parent(self) -> Node | None:
        """Return the enclosing node, if it is still alive."""
        return self._parent() if self._parent is not None else None

    def attach(self, parent: Node | None) -> None:
        """Record ``parent`` as the enclosing node."""
        self._parent = weakref.ref(parent) if parent is not None else None

    def has(self, flag: Flags) -> bool:
        """Check whether any bit of ``flag`` is set."""
        return bool(self.flags & flag)

    @property
    def first_source(self) -> Source | None:
        """Return the primary declaration location."""
        return self.source[0] if self.source else None


def adopt(parent: Node) -> Node:
    """Attach ``parent`` to every child, parameter and type parameter, recursively.

    Returns ``parent`` so graph literals can be built inline.
    """
    stack = [parent]
    seen: set[int] = set()
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        for group in (node.children, node.parameters, node.type_parameters):
            for child in group or []:
                child.attach(node)
                stack.append(child)
    return parent


@dataclass
class SymbolGraph:
    """Root value handed over by the declaration extractor."""

    modules: list[Node]
    index: dict[int, Node] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Index every node reachable from the modules when no index was given."""
        if not self.index:
            self.index = build_node_index(self.modules)

    def find_by_name(self, name: str) -> Node | None:
        """Find a symbol by exact name. ``Name#member`` resolves to ``Name``."""
        symbol_name = name.split("#", 1)[0]
        for node in self.index.values():
            if node.name == symbol_name:
                return node
        return None


def build_node_index(roots: list[Node]) -> dict[int, Node]:
    """Map every id reachable from ``roots`` to its node."""
    index: dict[int, Node] = {}
    stack = list(reversed(roots))
    seen: set[int] = set()
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        if node.id is not None:
            index.setdefault(node.id, node)
        for group in (node.children, node.parameters, node.type_parameters):
            stack.extend(reversed(group or []))
        for linked in (node.type, node.resolved_type):
            if linked is not None:
                stack.append(linked)
    return index
