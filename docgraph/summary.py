"""Logic for serializing nodes into the compact, cycle-safe summary document."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any, Union

from docgraph.escape import strip_markup
from docgraph.kinds import Flags, Kind
from docgraph.page_planner import has_own_page

if TYPE_CHECKING:
    from docgraph.node import Documentation, Node, SymbolGraph
    from docgraph.type_renderer import TypeRenderer

logger = logging.getLogger(__name__)

SUMMARY_FILE_NAME = "summary.json"

EMBEDDED_KINDS = frozenset(
    {
        Kind.OBJECT_TYPE,
        Kind.FUNCTION_TYPE,
        Kind.FUNCTION,
        Kind.METHOD,
        Kind.TYPE_UNION,
        Kind.INTERFACE,
    }
)
FLATTENED_FLAGS = Flags.EXTERNAL | Flags.DEFAULT_LIBRARY
REFERENCE_KINDS = frozenset({Kind.REFERENCE, Kind.IMPORT_TYPE})
ORDERED_KINDS = frozenset({Kind.OBJECT_TYPE, Kind.TYPE_UNION, Kind.TUPLE})


@dataclass(frozen=True)
class Inline:
    """A type flattened to its visible text."""

    text: str


@dataclass(frozen=True)
class Ref:
    """A type standing for the exported declaration with this id."""

    id: int


@dataclass(frozen=True)
class Embedded:
    """A type carried structurally as a nested record."""

    record: SummaryRecord


TypeValue = Union[Inline, Ref, Embedded]


@dataclass(eq=False)
class SummaryRecord:
    """Compact form of one node."""

    kind: Kind
    id: int | None = None
    name: str | None = None
    flags: Flags = Flags.NONE
    value: str | None = None
    docs: Documentation | None = None
    parameters: list[SummaryRecord] | None = None
    children: list[SummaryRecord] | None = None
    type: TypeValue | None = None
    type_parameters: list[SummaryRecord] | None = None
    resolved_type: TypeValue | None = None
    tsconfig: str | None = None

    def to_json(self) -> dict[str, Any]:
        """Return the JSON-safe mapping, omitting empty fields."""
        data: dict[str, Any] = {"kind": int(self.kind)}
        if self.id is not None:
            data["id"] = self.id
        if self.name:
            data["name"] = self.name
        if self.flags:
            data["flags"] = int(self.flags)
        if self.value is not None:
            data["value"] = self.value
        if self.docs is not None:
            data["docs"] = documentation_to_json(self.docs)
        if self.parameters is not None:
            data["parameters"] = [p.to_json() for p in self.parameters]
        if self.children is not None:
            data["children"] = [c.to_json() for c in self.children]
        if self.type is not None:
            data["type"] = value_to_json(self.type)
        if self.type_parameters is not None:
            data["typeP"] = [t.to_json() for t in self.type_parameters]
        if self.resolved_type is not None:
            data["resolvedType"] = value_to_json(self.resolved_type)
        if self.tsconfig:
            data["tsconfig"] = self.tsconfig
        return data


def value_to_json(value: TypeValue) -> str | int | dict[str, Any]:
    if isinstance(value, Inline):
        return value.text
    if isinstance(value, Ref):
        return value.id
    return value.record.to_json()


def documentation_to_json(docs: Documentation) -> dict[str, Any]:
    content = []
    for item in docs.content:
        entry: dict[str, Any] = {}
        if item.tag:
            entry["tag"] = item.tag
        if isinstance(item.value, str):
            entry["value"] = item.value
        else:
            entry["value"] = [
                {"tag": span.tag, "value": span.value} if span.tag else {"value": span.value}
                for span in item.value
            ]
        content.append(entry)
    data: dict[str, Any] = {"content": content}
    if docs.beta:
        data["beta"] = True
    if docs.tag_name:
        data["tagName"] = docs.tag_name
    if docs.role:
        data["role"] = docs.role
    return data


def as_record(value: TypeValue) -> SummaryRecord:
    """Wrap a type value so it can sit in a record list."""
    if isinstance(value, Embedded):
        return value.record
    if isinstance(value, Ref):
        return SummaryRecord(kind=Kind.REFERENCE, type=value)
    return SummaryRecord(kind=Kind.LITERAL, name=value.text)


class SummarySerializer:
    """Convert nodes to summary records, one record per node identity.

    Exported declarations with an id appear in type positions as ``Ref``;
    external and non-structural types are flattened to ``Inline`` text.
    """

    def __init__(self, renderer: TypeRenderer) -> None:
        self.renderer = renderer
        self._records: dict[Node, SummaryRecord] = {}
        self._in_progress: set[Node] = set()

    def to_summary(self, node: Node) -> SummaryRecord:
        cached = self._records.get(node)
        if cached is not None:
            return cached
        if node in self._in_progress:
            logger.debug("Summary cycle at %s %r", node.kind.name, node.name)
            return SummaryRecord(kind=node.kind, id=node.id, name=node.name or None)

        self._in_progress.add(node)
        try:
            record = self._record(node)
        finally:
            self._in_progress.discard(node)
        self._records[node] = record
        return record

    def _record(self, node: Node) -> SummaryRecord:
        children = None
        if node.children:
            children = [self.to_summary(c) for c in node.children]
            # Union branches and object members keep their written order.
            if node.kind not in ORDERED_KINDS:
                children.sort(key=lambda r: r.name or "")
        parameters = (
            [self.to_summary(p) for p in node.parameters]
            if node.parameters is not None
            else None
        )
        type_parameters = (
            [self.type_parameter(t) for t in node.type_parameters]
            if node.type_parameters
            else None
        )
        type_value = self.type_position(node.type) if node.type is not None else None
        resolved = self._resolved(node)
        if resolved is not None and type_value is not None:
            if value_to_json(resolved) == value_to_json(type_value):
                resolved = None

        tsconfig = None
        source = node.first_source
        if node.has(Flags.EXPORT) and source is not None and source.tsconfig:
            tsconfig = PurePosixPath(source.tsconfig).name

        return SummaryRecord(
            kind=node.kind,
            id=node.id,
            name=node.name or None,
            flags=node.flags,
            value=node.value,
            docs=node.docs,
            parameters=parameters,
            children=children,
            type=type_value,
            type_parameters=type_parameters,
            resolved_type=resolved,
            tsconfig=tsconfig,
        )

    def _resolved(self, node: Node) -> TypeValue | None:
        resolved = node.resolved_type
        if resolved is None:
            return None
        # An alias resolving back to its own declaration keeps its name.
        if resolved.type is not None and resolved.type.type is node:
            return Inline(resolved.name)
        return self.type_position(resolved)

    def type_position(self, node: Node) -> TypeValue:
        """Encode a node met in a ``type`` or ``resolvedType`` position."""
        target = node.type if node.kind in REFERENCE_KINDS and node.type is not None else node
        if target.id is not None and target.has(Flags.EXPORT):
            if node is not target and node.type_parameters:
                return Embedded(
                    SummaryRecord(
                        kind=Kind.REFERENCE,
                        type=Ref(target.id),
                        type_parameters=self._arguments(node.type_parameters),
                    )
                )
            return Ref(target.id)
        return self.flatten(node)

    def _arguments(self, nodes: list[Node]) -> list[SummaryRecord]:
        return [as_record(self.type_position(n)) for n in nodes]

    def type_parameter(self, node: Node) -> SummaryRecord:
        """Encode a generic parameter with its full text, or a type argument."""
        if node.kind != Kind.TYPE_PARAMETER:
            return as_record(self.type_position(node))
        constraint = Inline(strip_markup(self.renderer.type_argument(node)))
        return SummaryRecord(
            kind=node.kind,
            id=node.id,
            name=node.name or None,
            flags=node.flags,
            docs=node.docs,
            type=constraint,
        )

    def flatten(self, node: Node) -> TypeValue:
        """Encode a type that is not a reference to an exported declaration.

        A reference keeps its own text and type arguments unless its target
        is a structural type that can be embedded whole.
        """
        if node.kind in REFERENCE_KINDS and node.type is not None:
            target = node.type
            if (
                node.type_parameters
                or target.has(FLATTENED_FLAGS)
                or target.kind not in EMBEDDED_KINDS
            ):
                return Inline(self.renderer.render_text(node))
            node = target
        if node.kind == Kind.CLASS_TYPE:
            return Embedded(self._heritage(node))
        if node.kind == Kind.BASE_TYPE:
            return Inline(node.name)
        if node.has(FLATTENED_FLAGS) or node.kind not in EMBEDDED_KINDS:
            return Inline(self.renderer.render_text(node))
        if node in self._in_progress:
            if node.id is not None:
                return Ref(node.id)
            return Inline(node.name or self.renderer.render_text(node))

        self._in_progress.add(node)
        try:
            record = self._record(node)
        finally:
            self._in_progress.discard(node)
        return Embedded(record)

    def _heritage(self, node: Node) -> SummaryRecord:
        entries = []
        for child in node.children or []:
            if child.kind != Kind.REFERENCE:
                continue
            target = child.type
            entry_type: TypeValue
            if target is not None and target.id is not None:
                entry_type = Ref(target.id)
            else:
                entry_type = Inline(self.renderer.render_text(child))
            entries.append(
                SummaryRecord(
                    kind=Kind.REFERENCE,
                    name=child.name or None,
                    type=entry_type,
                    type_parameters=(
                        self._arguments(child.type_parameters)
                        if child.type_parameters
                        else None
                    ),
                )
            )
        owner = self.renderer.heritage_owner(node)
        return SummaryRecord(
            kind=Kind.CLASS_TYPE,
            children=entries,
            type=Ref(owner.id) if owner is not None and owner.id is not None else None,
        )


def summary_nodes(graph: SymbolGraph) -> list[Node]:
    """Return the nodes listed at the top level of the summary."""
    return [
        node
        for node in graph.index.values()
        if has_own_page(node) or node.kind == Kind.TYPE_ALIAS
    ]


def render_summary(graph: SymbolGraph, serializer: SummarySerializer) -> dict[str, Any]:
    """Build the ``{"index": [...]}`` summary document, sorted by name."""
    records = [serializer.to_summary(node) for node in summary_nodes(graph)]
    records.sort(key=lambda r: r.name or "")
    return {"index": [r.to_json() for r in records]}


def dump_summary(document: dict[str, Any]) -> str:
    return json.dumps(document, ensure_ascii=False, separators=(",", ":"))
