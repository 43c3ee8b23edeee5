"""Logic for grouping a container's members by kind and walking inheritance."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from docgraph.kinds import Flags, Kind, group_title
from docgraph.page_planner import has_own_page

if TYPE_CHECKING:
    from docgraph.node import Node

logger = logging.getLogger(__name__)

IndexEntry = Callable[["Node", "Node | None"], str]
BodyEntry = Callable[["Node"], str]

CONTAINER_KINDS = frozenset({Kind.MODULE, Kind.NAMESPACE})
DESTRUCTURING_KINDS = frozenset({Kind.CONSTANT, Kind.VARIABLE})
INHERITABLE_KINDS = frozenset({Kind.CLASS, Kind.COMPONENT})


@dataclass
class Group:
    """Members of one kind: index links plus full body entries."""

    kind: Kind
    index: list[str] = field(default_factory=list)
    body: list[str] = field(default_factory=list)
    names: set[str] = field(default_factory=set, repr=False)

    @property
    def title(self) -> str:
        return group_title(self.kind)


@dataclass
class InheritedSection:
    """Index-only groups contributed by one heritage entry."""

    heritage: Node
    groups: list[Group]


def declaration_filter(node: Node) -> bool:
    """Check if a module-level node is part of the public surface."""
    return not node.has(Flags.INTERNAL) and node.has(
        Flags.EXPORT | Flags.AMBIENT | Flags.DECLARATION_MERGE
    )


def member_sort_key(node: Node) -> tuple[int, str]:
    """Static members first, then by name."""
    return (0 if node.has(Flags.STATIC) else 1, node.name)


def enum_value_key(node: Node) -> tuple[int, float, str]:
    """Numeric values first in numeric order, then lexically.

    Only finite decimal numbers count as numeric; a member without a value
    sorts by name.
    """
    text = (node.value or "").strip()
    try:
        number = float(text)
    except ValueError:
        number = math.nan
    if math.isfinite(number):
        return (0, number, "")
    return (1, 0.0, text or node.name)


def _is_empty_import_stub(node: Node) -> bool:
    """Check if an import type points at nothing with members."""
    import_type = node.type
    if import_type is None or import_type.kind != Kind.IMPORT_TYPE:
        return False
    target = import_type.type
    return not (target is not None and target.children)


class MemberGrouper:
    """Build member groups, delegating entry markup to the caller.

    ``index_entry(member, rendering_parent)`` returns the index link of a
    member; ``body_entry(member)`` returns its full card.
    """

    def __init__(
        self,
        index_entry: IndexEntry,
        body_entry: BodyEntry,
        exclude: tuple[str, ...] = (),
    ) -> None:
        self.index_entry = index_entry
        self.body_entry = body_entry
        self.exclude = frozenset(exclude)

    def is_excluded(self, node: Node) -> bool:
        """Check if any declaration of ``node`` comes from an excluded source."""
        return any(source.name in self.exclude for source in node.source)

    def group_members(
        self, node: Node, *, index_only: bool = False, sort: bool = True
    ) -> list[Group]:
        """Group the children of ``node``. The node itself is not modified."""
        children = node.children
        if not children:
            return []
        if node.kind == Kind.ENUM:
            return self.enum_members(node, children, index_only=index_only)

        groups: dict[Kind, Group] = {}
        for child in sorted(children, key=member_sort_key):
            if node.kind in CONTAINER_KINDS and not declaration_filter(child):
                continue
            if child.has(Flags.INTERNAL) or child.kind == Kind.UNKNOWN:
                continue
            if _is_empty_import_stub(child):
                continue
            if child.kind in DESTRUCTURING_KINDS and child.children:
                for element in child.children:
                    self._push(groups, child, element, index_only)
            else:
                self._push(groups, node, child, index_only)

        result = list(groups.values())
        if sort:
            result.sort(key=lambda group: group.title)
        return result

    def _push(
        self, groups: dict[Kind, Group], parent: Node, member: Node, index_only: bool
    ) -> None:
        kind = Kind.EXPORT if member.kind == Kind.IMPORT_TYPE else member.kind
        group = groups.get(kind)
        if group is None:
            group = groups[kind] = Group(kind)

        # Overloads share a name; the index lists it once.
        if member.name not in group.names:
            group.names.add(member.name)
            group.index.append(
                self.index_entry(member, None if index_only else parent)
            )
        if not index_only and not has_own_page(member) and member.kind != Kind.EXPORT:
            group.body.append(self.body_entry(member))

    def enum_members(
        self, node: Node, children: list[Node], *, index_only: bool = False
    ) -> list[Group]:
        """Build the single group of an enum: index by name, body by value."""
        members = [c for c in children if not c.has(Flags.INTERNAL)]
        if not members:
            return []
        group = Group(Kind.ENUM_MEMBER)
        for member in sorted(members, key=member_sort_key):
            group.names.add(member.name)
            group.index.append(self.index_entry(member, None if index_only else node))
        if not index_only:
            group.body = [self.body_entry(m) for m in sorted(members, key=enum_value_key)]
        return [group]

    def inherited(
        self, heritage: Node, visited: set[Node] | None = None
    ) -> list[InheritedSection]:
        """Collect index-only groups from every ancestor class, nearest first.

        Each ancestor is visited once, so cyclic heritage terminates.
        """
        if visited is None:
            visited = set()
        sections: list[InheritedSection] = []
        for entry in heritage.children or []:
            target = entry.type
            if target is None or target.kind not in INHERITABLE_KINDS:
                continue
            if self.is_excluded(entry) or self.is_excluded(target):
                continue
            if target in visited:
                logger.debug("Heritage of %s already visited", target.name)
                continue
            visited.add(target)

            groups = self.group_members(target, index_only=True)
            if groups:
                sections.append(InheritedSection(heritage=entry, groups=groups))
            if target.type is not None:
                sections.extend(self.inherited(target.type, visited))
        return sections
