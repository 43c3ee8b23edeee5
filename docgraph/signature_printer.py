"""Logic for printing declaration headings: name, type arguments, parameters, type."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from docgraph.escape import escape
from docgraph.kinds import Flags, Kind

if TYPE_CHECKING:
    from docgraph.link_resolver import LinkResolver
    from docgraph.node import Node

VALUE_DISPLAY_LIMIT = 50

# Badge label, flag (None means the beta documentation marker), color.
CHIPS: list[tuple[str, Flags | None, str]] = [
    ("beta", None, "warning"),
    ("static", Flags.STATIC, "primary"),
    ("protected", Flags.PROTECTED, "primary"),
    ("abstract", Flags.ABSTRACT, "primary"),
    ("overload", Flags.OVERLOAD, "primary"),
    ("private", Flags.PRIVATE, "primary"),
    ("deprecated", Flags.DEPRECATED, "error"),
    ("readonly", Flags.READONLY, "primary"),
    ("internal", Flags.INTERNAL, "primary"),
    ("default", Flags.DEFAULT, "primary"),
]

PARAMETER_MODIFIERS: list[tuple[Flags, str]] = [
    (Flags.PUBLIC, "public "),
    (Flags.PRIVATE, "private "),
    (Flags.PROTECTED, "protected "),
]

HERITAGE_OWNER_KINDS = frozenset({Kind.CLASS, Kind.INTERFACE, Kind.COMPONENT})


def chip(label: str, color: str = "primary") -> str:
    return f'<span class="chip chip-{color}">{label}</span> '


def node_chips(node: Node) -> str:
    """Render the badges for a node's flags, in a fixed order."""
    parts = []
    for label, flag, color in CHIPS:
        if flag is None:
            active = bool(node.docs and node.docs.beta)
        else:
            active = node.has(flag)
        if active:
            parts.append(chip(label, color))
    return "".join(parts)


def type_colon(kind: Kind, name: str) -> str:
    """Return the separator between a signature and its type."""
    if kind == Kind.TYPE_ALIAS:
        return " = "
    if name or kind == Kind.CONSTRUCTOR:
        return ": "
    if kind == Kind.READONLY_KEYWORD:
        return "readonly "
    return " => "


def signature_value(value: str | None) -> str:
    """Return the `` = value`` suffix; long initializers are not shown."""
    if not value or len(value) > VALUE_DISPLAY_LIMIT:
        return ""
    return f" = {escape(value)}"


class SignaturePrinter(ABC):
    """Heading printer mixed into the type renderer.

    Everything here defers to ``render`` and ``type_arguments`` for type
    positions.
    """

    resolver: LinkResolver

    @abstractmethod
    def render(self, node: Node | None) -> str: ...

    @abstractmethod
    def type_arguments(self, types: list[Node] | None) -> str: ...

    def signature_name(self, node: Node) -> str:
        if not node.name and node.kind == Kind.CONSTRUCT_SIGNATURE:
            name = "new"
        else:
            name = escape(node.name)
        return name + ("?" if node.has(Flags.OPTIONAL) else "")

    def parameter(self, node: Node) -> str:
        modifiers = "".join(
            label for flag, label in PARAMETER_MODIFIERS if node.has(flag)
        )
        rest = "..." if node.has(Flags.REST) else ""
        optional = "?" if node.has(Flags.OPTIONAL) else ""
        default = f" = {escape(node.value)}" if node.value else ""
        return (
            f"{modifiers}{rest}{escape(node.name)}{optional}: "
            f"{self.render(node.type)}{default}"
        )

    def signature_parameters(self, parameters: list[Node] | None) -> str:
        """Render a parameter list; ``None`` means the node is not callable."""
        if parameters is None:
            return ""
        return "(" + ", ".join(self.parameter(p) for p in parameters) + ")"

    def signature_type(self, node: Node) -> str:
        if node.type is None:
            return ""
        rendered = self.render(node.type)
        if node.kind in HERITAGE_OWNER_KINDS:
            return f" {rendered}" if rendered else ""
        return type_colon(node.kind, node.name) + rendered

    def index_signature(self, node: Node) -> str:
        """Render ``[key: K]: V``; a missing value type prints as ``?``."""
        params = ", ".join(self.signature_text(p) for p in node.parameters or [])
        value = self.render(node.type) if node.type is not None else "?"
        return f"[{params}]: {value}"

    def signature_text(self, node: Node) -> str:
        """Render the plain heading of a declaration."""
        if node.kind == Kind.MODULE:
            return escape(node.name)
        if node.kind == Kind.INDEX_SIGNATURE:
            return self.index_signature(node)
        return (
            self.signature_name(node)
            + self.type_arguments(node.type_parameters)
            + self.signature_parameters(node.parameters)
            + self.signature_type(node)
            + signature_value(node.value)
        )

    def signature(self, node: Node) -> str:
        """Render a heading with its badges."""
        if node.kind in (Kind.MODULE, Kind.INDEX_SIGNATURE):
            return self.signature_text(node)
        return (
            node_chips(node)
            + f'<span class="signature">{self.signature_text(node)}</span>'
        )

    def property(self, node: Node) -> str:
        """Render one member of an object type."""
        if node.kind == Kind.INDEX_SIGNATURE:
            return self.index_signature(node)
        if node.kind == Kind.SPREAD and node.children:
            return "..." + self.render(node.children[0])
        return self.signature_text(node)
