"""Logic for loading a symbol graph document from JSON or YAML."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from docgraph.errors import GraphLoadError
from docgraph.kinds import parse_flags, parse_kind
from docgraph.node import (
    DocContent,
    DocSpan,
    Documentation,
    Node,
    Source,
    SymbolGraph,
    adopt,
)

OWNED_LISTS = (
    ("children", "children"),
    ("parameters", "parameters"),
    ("typeParameters", "type_parameters"),
)


def documentation_from_json(raw: Any) -> Documentation:
    """Parse a documentation block; a bare string is one prose item."""
    if isinstance(raw, str):
        return Documentation(content=[DocContent(value=raw)])

    content = []
    for item in raw.get("content") or []:
        if isinstance(item, str):
            content.append(DocContent(value=item))
            continue
        value = item.get("value", "")
        if isinstance(value, list):
            value = [
                DocSpan(value=span, tag=None)
                if isinstance(span, str)
                else DocSpan(value=span.get("value", ""), tag=span.get("tag"))
                for span in value
            ]
        content.append(DocContent(value=value, tag=item.get("tag")))

    return Documentation(
        content=content,
        beta=bool(raw.get("beta", False)),
        tag_name=raw.get("tagName"),
        role=raw.get("role"),
    )


def _source_from_json(raw: Any) -> list[Source]:
    if raw is None:
        return []
    items = raw if isinstance(raw, list) else [raw]
    return [
        Source(
            name=item.get("name") or item.get("fileName") or "",
            index=int(item.get("index", 0)),
            line=item.get("line"),
            tsconfig=item.get("tsconfig"),
            is_declaration_file=bool(item.get("isDeclarationFile", False)),
        )
        for item in items
    ]


class _GraphBuilder:
    """Build nodes from mappings, deferring integer references until the end."""

    def __init__(self) -> None:
        self.index: dict[int, Node] = {}
        self.pending: list[tuple[Node, str, int]] = []
        self.pending_lists: list[tuple[Node, list[Any]]] = []

    def build(self, raw: Any) -> Node:
        if not isinstance(raw, dict):
            raise GraphLoadError(f"Expected a node mapping, got {type(raw).__name__}")
        try:
            kind = parse_kind(raw.get("kind", 0))
            flags = parse_flags(raw.get("flags"))
        except ValueError as exc:
            raise GraphLoadError(str(exc)) from exc

        node = Node(
            kind=kind,
            id=raw.get("id"),
            flags=flags,
            name=str(raw.get("name") or ""),
            value=None if raw.get("value") is None else str(raw["value"]),
            docs=documentation_from_json(raw["docs"]) if raw.get("docs") is not None else None,
            source=_source_from_json(raw.get("source")),
        )
        if node.id is not None:
            if node.id in self.index:
                raise GraphLoadError(f"Duplicate node id {node.id}")
            self.index[node.id] = node

        for key, attr in OWNED_LISTS:
            items = raw.get(key)
            if items is not None:
                setattr(node, attr, [self.build(item) for item in items])

        for key, attr in (("type", "type"), ("resolvedType", "resolved_type")):
            linked = raw.get(key)
            if isinstance(linked, int):
                self.pending.append((node, attr, linked))
            elif linked is not None:
                setattr(node, attr, self.build(linked))

        if raw.get("extendedBy") is not None:
            self.pending_lists.append((node, raw["extendedBy"]))
        return node

    def lookup(self, node_id: int, owner: Node) -> Node:
        target = self.index.get(node_id)
        if target is None:
            raise GraphLoadError(
                f'Node "{owner.name}" refers to unknown id {node_id}'
            )
        return target

    def resolve(self) -> None:
        # Inline extendedBy entries are built first; they may add ids and references.
        lists = []
        for node, items in self.pending_lists:
            lists.append(
                (node, [item if isinstance(item, int) else self.build(item) for item in items])
            )
        for node, attr, node_id in self.pending:
            setattr(node, attr, self.lookup(node_id, node))
        for node, items in lists:
            node.extended_by = [
                self.lookup(item, node) if isinstance(item, int) else item for item in items
            ]


def parse_symbol_graph(doc: Any) -> SymbolGraph:
    """Turn a decoded ``{"modules": [...]}`` document into a graph."""
    if not isinstance(doc, dict) or not isinstance(doc.get("modules"), list):
        raise GraphLoadError('Symbol graph must be a mapping with a "modules" list')

    builder = _GraphBuilder()
    modules = [builder.build(raw) for raw in doc["modules"]]
    builder.resolve()
    for module in modules:
        adopt(module)
    return SymbolGraph(modules=modules, index=builder.index)


def load_symbol_graph(path: Path) -> SymbolGraph:
    """Load a symbol graph from a ``.json`` or YAML file."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise GraphLoadError(f"Cannot read {path}: {exc}") from exc

    try:
        if path.suffix == ".json":
            doc = json.loads(raw)
        else:
            doc = yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise GraphLoadError(f"Cannot parse {path}: {exc}") from exc

    return parse_symbol_graph(doc or {})
