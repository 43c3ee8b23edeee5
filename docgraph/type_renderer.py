"""Logic for rendering type expressions as markup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from docgraph.errors import StructuralError
from docgraph.escape import escape, strip_markup
from docgraph.kinds import Flags, Kind
from docgraph.signature_printer import SignaturePrinter

if TYPE_CHECKING:
    from docgraph.link_resolver import LinkResolver
    from docgraph.node import Node

logger = logging.getLogger(__name__)

OBJECT_COLLAPSE_THRESHOLD = 300


def collapsible(summary: str, content: str) -> str:
    """Wrap ``content`` so the page shows ``summary`` until expanded."""
    return (
        f'<details class="doc-more"><summary>{summary}</summary>'
        f"{content}</details>"
    )


class TypeRenderer(SignaturePrinter):
    """Render type nodes, memoizing the result per node.

    A node met again while its own rendering is still in progress renders
    as its bare name, so cyclic type graphs terminate.
    """

    def __init__(self, resolver: LinkResolver) -> None:
        self.resolver = resolver
        self._cache: dict[Node, str] = {}
        self._in_progress: set[Node] = set()
        self._handlers: dict[Kind, Callable[[Node], str]] = {
            Kind.CLASS_TYPE: self._class_type,
            Kind.INFER: self._infer,
            Kind.PARENTHESIZED: self._parenthesized,
            Kind.CONDITIONAL_TYPE: self._conditional_type,
            Kind.INDEXED_TYPE: self._indexed_type,
            Kind.TYPE_UNION: self._joined(" | "),
            Kind.TYPE_INTERSECTION: self._joined(" &amp; "),
            Kind.TUPLE: self._tuple,
            Kind.ARRAY: self._array,
            Kind.REFERENCE: self._reference,
            Kind.IMPORT_TYPE: self._reference,
            Kind.FUNCTION_TYPE: self.function_type,
            Kind.FUNCTION: self.function_type,
            Kind.METHOD: self.function_type,
            Kind.CONSTRUCTOR_TYPE: self._constructor_type,
            Kind.MAPPED_TYPE: self._mapped_type,
            Kind.OBJECT_TYPE: self._object_type,
            Kind.LITERAL: self._raw_name,
            Kind.TYPE_ALIAS: self._raw_name,
            Kind.BASE_TYPE: self._raw_name,
            Kind.TYPE_PARAMETER: self._type_parameter,
            Kind.KEYOF: self._keyof,
            Kind.TYPEOF: self._typeof,
            Kind.THIS_TYPE: lambda _node: "this",
            Kind.READONLY_KEYWORD: self._readonly,
            Kind.SYMBOL: lambda _node: "Symbol",
            Kind.UNKNOWN_TYPE: lambda _node: "unknown",
        }

    def render(self, node: Node | None) -> str:
        """Render a type position. A rest-flagged node gets a ``...`` prefix."""
        if node is None:
            return ""
        prefix = "..." if node.has(Flags.REST) else ""
        return prefix + self._render_cached(node)

    def render_text(self, node: Node | None) -> str:
        """Render a type position as visible text."""
        return strip_markup(self.render(node))

    def _render_cached(self, node: Node) -> str:
        cached = self._cache.get(node)
        if cached is not None:
            return cached
        if node in self._in_progress:
            logger.debug("Type cycle at %s %r", node.kind.name, node.name)
            return escape(node.name) if node.name else "?"

        self._in_progress.add(node)
        try:
            handler = self._handlers.get(node.kind, self.signature)
            result = handler(node)
        finally:
            self._in_progress.discard(node)
        self._cache[node] = result
        return result

    def type_argument(self, node: Node) -> str:
        """Render one entry of a type argument or type parameter list."""
        result = self.render(node)
        if node.kind == Kind.TYPE_PARAMETER and node.type is not None:
            result += f" extends {self.render(node.type)}"
        return result

    def type_arguments(self, types: list[Node] | None) -> str:
        if not types:
            return ""
        return "&lt;" + ", ".join(self.type_argument(t) for t in types) + "&gt;"

    def function_type(self, node: Node) -> str:
        return (
            self.signature_name(node)
            + self.type_arguments(node.type_parameters)
            + self.signature_parameters(node.parameters)
            + " =&gt; "
            + self.render(node.type)
        )

    def heritage_owner(self, node: Node) -> Node | None:
        """Return the class or interface whose heritage clause ``node`` is."""
        return node.type if node.type is not None else node.parent

    def _class_type(self, node: Node) -> str:
        owner = self.heritage_owner(node)
        owner_is_interface = owner is not None and owner.kind == Kind.INTERFACE
        extends: list[str] = []
        implements: list[str] = []
        for child in node.children or []:
            target = child.type
            if owner_is_interface or (
                target is not None
                and target.kind in (Kind.INTERFACE, Kind.CLASS, Kind.COMPONENT)
            ):
                extends.append(self.render(child))
            else:
                implements.append(self.render(child))

        parts = []
        if extends:
            parts.append("extends " + ", ".join(extends))
        if implements:
            parts.append("implements " + ", ".join(implements))
        if not parts:
            return ""
        return f'<span class="heritage">{" ".join(parts)}</span>'

    def _infer(self, node: Node) -> str:
        return f"infer {self.render(node.type)}"

    def _parenthesized(self, node: Node) -> str:
        return f"({self.render(node.type)})"

    def _conditional_type(self, node: Node) -> str:
        children = node.children
        if not children or len(children) != 4:
            raise StructuralError(node.kind, node.name)
        check, extends, true_type, false_type = (self.render(c) for c in children)
        return f"{check} extends {extends} ? {true_type} : {false_type}"

    def _indexed_type(self, node: Node) -> str:
        children = node.children
        if not children or len(children) < 2:
            raise StructuralError(node.kind, node.name)
        return f"{self.render(children[0])}[{self.render(children[1])}]"

    def _joined(self, separator: str) -> Callable[[Node], str]:
        def render_joined(node: Node) -> str:
            return separator.join(self.render(c) for c in node.children or [])

        return render_joined

    def _tuple(self, node: Node) -> str:
        return "[" + ", ".join(self.render(c) for c in node.children or []) + "]"

    def _array(self, node: Node) -> str:
        return f"{self.render(node.type)}[]"

    def _reference(self, node: Node) -> str:
        return self.resolver.link(node) + self.type_arguments(node.type_parameters)

    def _constructor_type(self, node: Node) -> str:
        return "new " + self.function_type(node)

    def _mapped_type(self, node: Node) -> str:
        children = node.children
        if not children or len(children) < 2 or node.type is None:
            return "?"
        key, source = children[0], children[1]
        return (
            f"{{ [{self.render(key)} in {self.render(source)}]: "
            f"{self.render(node.type)} }}"
        )

    def _object_type(self, node: Node) -> str:
        members = "; ".join(self.property(c) for c in node.children or [])
        if len(strip_markup(members)) > OBJECT_COLLAPSE_THRESHOLD:
            return collapsible("{ ... }", f"{{ {members} }}")
        return f"{{ {members} }}"

    def _raw_name(self, node: Node) -> str:
        return escape(node.name)

    def _type_parameter(self, node: Node) -> str:
        name = escape(node.name)
        if node.children:
            return f"{name} extends {self.render(node.children[0])}"
        return name

    def _keyof(self, node: Node) -> str:
        literal = f"keyof {self.render(node.type)}"
        if node.resolved_type is None:
            return literal
        return collapsible(literal, self.render(node.resolved_type))

    def _typeof(self, node: Node) -> str:
        return f"typeof {escape(node.name)}"

    def _readonly(self, node: Node) -> str:
        return f"readonly {self.render(node.type)}"
