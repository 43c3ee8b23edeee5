"""Logic for reading a summary document back and printing signatures from it."""

from __future__ import annotations

import logging
from typing import Any, Callable

from docgraph.kinds import Flags, Kind, group_title, parse_flags
from docgraph.load_symbol_graph import documentation_from_json
from docgraph.signature_printer import (
    HERITAGE_OWNER_KINDS,
    PARAMETER_MODIFIERS,
    VALUE_DISPLAY_LIMIT,
    type_colon,
)
from docgraph.summary import Embedded, Inline, Ref, SummaryRecord, TypeValue

logger = logging.getLogger(__name__)

LINKABLE_KINDS = frozenset({Kind.CLASS, Kind.INTERFACE, Kind.COMPONENT})
MEMBER_SKIP_KINDS = frozenset({Kind.CONSTRUCTOR, Kind.UNKNOWN})


def decode_value(raw: Any) -> TypeValue | None:
    """Turn a JSON ``type``/``resolvedType`` field into its tagged variant."""
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError(f"Invalid summary type value: {raw!r}")
    if isinstance(raw, int):
        return Ref(raw)
    if isinstance(raw, str):
        return Inline(raw)
    return Embedded(record_from_json(raw))


def record_from_json(raw: dict[str, Any]) -> SummaryRecord:
    def records(key: str) -> list[SummaryRecord] | None:
        items = raw.get(key)
        return None if items is None else [record_from_json(item) for item in items]

    docs = raw.get("docs")
    return SummaryRecord(
        kind=Kind(raw["kind"]),
        id=raw.get("id"),
        name=raw.get("name"),
        flags=parse_flags(raw.get("flags")),
        value=raw.get("value"),
        docs=documentation_from_json(docs) if docs is not None else None,
        parameters=records("parameters"),
        children=records("children"),
        type=decode_value(raw.get("type")),
        type_parameters=records("typeP"),
        resolved_type=decode_value(raw.get("resolvedType")),
        tsconfig=raw.get("tsconfig"),
    )


def _plain_link(record: SummaryRecord) -> str:
    return record.name or "?"


class SummaryReader:
    """Resolve and print records of a summary document.

    ``link`` renders a resolved declaration; by default it prints the bare
    name, so the output is plain text.
    """

    def __init__(
        self,
        summary: dict[str, Any],
        link: Callable[[SummaryRecord], str] = _plain_link,
    ) -> None:
        self.index = [record_from_json(item) for item in summary.get("index", [])]
        self.link = link
        self._by_id: dict[int, SummaryRecord] = {}
        for record in self.index:
            self._register(record)

    def _register(self, record: SummaryRecord) -> None:
        stack = [record]
        while stack:
            current = stack.pop()
            if current.id is not None:
                self._by_id.setdefault(current.id, current)
            stack.extend(current.children or [])
            stack.extend(current.parameters or [])

    def find(self, name: str) -> SummaryRecord | None:
        """Find a top-level record by name."""
        for record in self.index:
            if record.name == name:
                return record
        return None

    def get_ref(self, value: TypeValue | None) -> SummaryRecord | None:
        if isinstance(value, Ref):
            return self._by_id.get(value.id)
        return None

    def get_type_summary(self, value: TypeValue | None) -> SummaryRecord | None:
        """Follow aliases until a class, interface or structural record is reached."""
        seen: set[int] = set()
        while value is not None:
            if isinstance(value, Inline):
                return None
            if isinstance(value, Embedded):
                record = value.record
                if record.kind != Kind.REFERENCE:
                    return record
                value = record.type
                continue
            if value.id in seen:
                return None
            seen.add(value.id)
            record = self._by_id.get(value.id)
            if record is None or record.kind in LINKABLE_KINDS:
                return record
            value = record.resolved_type or record.type
        return None

    def render_type(self, value: TypeValue | None) -> str:
        """Print a type value; a missing or dangling one prints as ``?``."""
        if value is None:
            return "?"
        if isinstance(value, Inline):
            return value.text
        if isinstance(value, Ref):
            record = self._by_id.get(value.id)
            if record is None:
                logger.debug("Summary reference %s not in index", value.id)
                return "?"
            return self.link(record)
        return self.render_record(value.record)

    def render_record(self, record: SummaryRecord) -> str:
        kind = record.kind
        if kind == Kind.REFERENCE:
            return self.render_type(record.type) + self.type_arguments(record.type_parameters)
        if kind in (Kind.LITERAL, Kind.BASE_TYPE):
            return record.name or ""
        if kind == Kind.TYPE_PARAMETER:
            return self.render_type(record.type) if record.type is not None else record.name or ""
        if kind == Kind.TYPE_UNION:
            return " | ".join(self.render_record(c) for c in record.children or [])
        if kind == Kind.OBJECT_TYPE:
            members = "; ".join(self.property(c) for c in record.children or [])
            return f"{{ {members} }}"
        if kind == Kind.ARRAY:
            return self.render_type(record.type) + "[]"
        if kind in LINKABLE_KINDS:
            return self.link(record) + self.type_arguments(record.type_parameters)
        if kind in (Kind.FUNCTION_TYPE, Kind.FUNCTION, Kind.METHOD):
            return self.function_type(record)
        if kind == Kind.CLASS_TYPE:
            return self.heritage(record)
        if kind == Kind.INDEXED_TYPE and record.children and len(record.children) >= 2:
            first, second = record.children[0], record.children[1]
            return f"{self.render_record(first)}[{self.render_record(second)}]"
        return record.name or "?"

    def type_arguments(self, records: list[SummaryRecord] | None) -> str:
        if not records:
            return ""
        return "<" + ", ".join(self.render_record(r) for r in records) + ">"

    def function_type(self, record: SummaryRecord) -> str:
        return (
            self.signature_name(record)
            + self.type_arguments(record.type_parameters)
            + self.parameters(record.parameters)
            + " => "
            + (self.render_type(record.type) if record.type is not None else "")
        )

    def heritage(self, record: SummaryRecord) -> str:
        owner = self.get_ref(record.type)
        owner_is_interface = owner is not None and owner.kind == Kind.INTERFACE
        extends: list[str] = []
        implements: list[str] = []
        for entry in record.children or []:
            target = self.get_ref(entry.type)
            if target is None and isinstance(entry.type, Ref):
                text = entry.name or "?"
            else:
                text = self.render_record(entry)
            if owner_is_interface or (target is not None and target.kind in LINKABLE_KINDS):
                extends.append(text)
            else:
                implements.append(text)
        parts = []
        if extends:
            parts.append("extends " + ", ".join(extends))
        if implements:
            parts.append("implements " + ", ".join(implements))
        return " ".join(parts)

    def signature_name(self, record: SummaryRecord) -> str:
        if not record.name and record.kind == Kind.CONSTRUCT_SIGNATURE:
            name = "new"
        else:
            name = record.name or ""
        return name + ("?" if record.flags & Flags.OPTIONAL else "")

    def parameter(self, record: SummaryRecord) -> str:
        modifiers = "".join(
            label for flag, label in PARAMETER_MODIFIERS if record.flags & flag
        )
        rest = "..." if record.flags & Flags.REST else ""
        optional = "?" if record.flags & Flags.OPTIONAL else ""
        type_text = self.render_type(record.type) if record.type is not None else ""
        default = f" = {record.value}" if record.value else ""
        return f"{modifiers}{rest}{record.name or ''}{optional}: {type_text}{default}"

    def parameters(self, records: list[SummaryRecord] | None) -> str:
        if records is None:
            return ""
        return "(" + ", ".join(self.parameter(p) for p in records) + ")"

    def index_signature(self, record: SummaryRecord) -> str:
        params = ", ".join(self.signature(p) for p in record.parameters or [])
        value = self.render_type(record.type) if record.type is not None else "?"
        return f"[{params}]: {value}"

    def signature(self, record: SummaryRecord) -> str:
        """Print the heading of a declaration record as plain text."""
        if record.kind == Kind.MODULE:
            return record.name or ""
        if record.kind == Kind.INDEX_SIGNATURE:
            return self.index_signature(record)

        type_text = ""
        if record.type is not None:
            rendered = self.render_type(record.type)
            if record.kind in HERITAGE_OWNER_KINDS:
                type_text = f" {rendered}" if rendered else ""
            else:
                type_text = type_colon(record.kind, record.name or "") + rendered

        value = ""
        if record.value and len(record.value) <= VALUE_DISPLAY_LIMIT:
            value = f" = {record.value}"
        return (
            self.signature_name(record)
            + self.type_arguments(record.type_parameters)
            + self.parameters(record.parameters)
            + type_text
            + value
        )

    def property(self, record: SummaryRecord) -> str:
        if record.kind == Kind.INDEX_SIGNATURE:
            return self.index_signature(record)
        if record.kind == Kind.SPREAD and record.children:
            return "..." + self.render_record(record.children[0])
        return self.signature(record)

    def members(self, record: SummaryRecord) -> list[tuple[str, list[SummaryRecord]]]:
        """Group a record's children by kind title, titles in order."""
        groups: dict[str, list[SummaryRecord]] = {}
        for child in record.children or []:
            if child.kind in MEMBER_SKIP_KINDS or child.flags & Flags.INTERNAL:
                continue
            groups.setdefault(group_title(child.kind), []).append(child)
        return sorted(groups.items())

    def inherited_members(self, record: SummaryRecord) -> list[SummaryRecord]:
        """Collect the members of every ancestor reachable through heritage."""
        result: list[SummaryRecord] = []
        seen: set[int] = set()
        heritage = self.get_type_summary(record.type) if record.kind in HERITAGE_OWNER_KINDS else None
        stack = [heritage] if heritage is not None and heritage.kind == Kind.CLASS_TYPE else []
        while stack:
            current = stack.pop()
            for entry in current.children or []:
                ancestor = self.get_ref(entry.type)
                if ancestor is None or ancestor.id in seen:
                    continue
                seen.add(ancestor.id)
                result.extend(ancestor.children or [])
                parent_heritage = self.get_type_summary(ancestor.type)
                if parent_heritage is not None and parent_heritage.kind == Kind.CLASS_TYPE:
                    stack.append(parent_heritage)
        return result
