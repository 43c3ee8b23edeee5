"""Tests for member grouping and inherited member collection."""

from docgraph.kinds import Flags, Kind
from docgraph.member_grouper import (
    MemberGrouper,
    declaration_filter,
    enum_value_key,
)
from docgraph.node import Node, Source, SymbolGraph, adopt


def _grouper(exclude: tuple[str, ...] = ()) -> MemberGrouper:
    return MemberGrouper(
        index_entry=lambda member, _parent: member.name,
        body_entry=lambda member: f"card:{member.name}",
        exclude=exclude,
    )


def _find(graph: SymbolGraph, name: str) -> Node:
    node = graph.find_by_name(name)
    assert node is not None
    return node


def test_enum_index_by_name_body_by_value(sample_graph: SymbolGraph) -> None:
    """Verify the index is alphabetical while cards follow numeric-then-lexical value order."""
    groups = _grouper().group_members(_find(sample_graph, "Color"))
    assert len(groups) == 1
    assert groups[0].title == "Members"
    assert groups[0].index == ["Blue", "Red"]
    assert groups[0].body == ["card:Blue", "card:Red"]


def test_enum_value_key_orders_numbers_before_text() -> None:
    """Verify finite numbers sort numerically ahead of everything else."""
    members = [
        Node(Kind.ENUM_MEMBER, name="c", value='"z"'),
        Node(Kind.ENUM_MEMBER, name="b", value="10"),
        Node(Kind.ENUM_MEMBER, name="a", value="2"),
        Node(Kind.ENUM_MEMBER, name="d", value="NaN"),
    ]
    ordered = [m.name for m in sorted(members, key=enum_value_key)]
    assert ordered == ["a", "b", "c", "d"]


def test_module_groups_sorted_by_title(sample_graph: SymbolGraph) -> None:
    """Verify module members are grouped per kind with titled groups in order."""
    module = sample_graph.modules[0]
    groups = _grouper().group_members(module)
    assert [g.title for g in groups] == ["Classes", "Enums", "Functions", "Interfaces"]
    interfaces = groups[-1]
    assert interfaces.index == ["Animal", "Box"]
    # Page owners contribute index links only.
    assert interfaces.body == []
    assert groups[2].body == ["card:add"]


def test_grouping_does_not_modify_children(sample_graph: SymbolGraph) -> None:
    """Verify grouping sorts a copy of the children."""
    module = sample_graph.modules[0]
    before = [c.name for c in module.children or []]
    _grouper().group_members(module)
    assert [c.name for c in module.children or []] == before


def test_declaration_filter() -> None:
    """Verify only exported, ambient or merged non-internal nodes pass."""
    assert declaration_filter(Node(Kind.FUNCTION, flags=Flags.EXPORT))
    assert declaration_filter(Node(Kind.FUNCTION, flags=Flags.AMBIENT))
    assert not declaration_filter(Node(Kind.FUNCTION))
    assert not declaration_filter(Node(Kind.FUNCTION, flags=Flags.EXPORT | Flags.INTERNAL))


def test_internal_and_unknown_members_are_skipped() -> None:
    """Verify internal and unknown children never appear."""
    cls = Node(
        Kind.CLASS,
        name="C",
        children=[
            Node(Kind.PROPERTY, name="shown"),
            Node(Kind.PROPERTY, name="hidden", flags=Flags.INTERNAL),
            Node(Kind.UNKNOWN, name="odd"),
        ],
    )
    groups = _grouper().group_members(cls)
    assert [g.index for g in groups] == [["shown"]]


def test_static_members_first() -> None:
    """Verify static members lead their group."""
    cls = Node(
        Kind.CLASS,
        name="C",
        children=[
            Node(Kind.METHOD, name="alpha"),
            Node(Kind.METHOD, name="zeta", flags=Flags.STATIC),
        ],
    )
    assert _grouper().group_members(cls)[0].index == ["zeta", "alpha"]


def test_overloads_listed_once_in_index() -> None:
    """Verify overloads share one index entry but each keeps its card."""
    cls = Node(
        Kind.CLASS,
        name="C",
        children=[Node(Kind.METHOD, name="on"), Node(Kind.METHOD, name="on")],
    )
    group = _grouper().group_members(cls)[0]
    assert group.index == ["on"]
    assert group.body == ["card:on", "card:on"]


def test_destructured_elements_are_grouped_as_members() -> None:
    """Verify a destructuring declaration contributes its elements."""
    module = Node(
        Kind.MODULE,
        name="m.ts",
        children=[
            Node(
                Kind.CONSTANT,
                name="__0",
                flags=Flags.EXPORT,
                children=[Node(Kind.CONSTANT, name="x"), Node(Kind.CONSTANT, name="y")],
            )
        ],
    )
    group = _grouper().group_members(module)[0]
    assert group.title == "Constants"
    assert group.index == ["x", "y"]


def test_empty_import_stub_is_skipped() -> None:
    """Verify a re-export of an import type without members is dropped."""
    empty = Node(Kind.EXPORT, name="gone", flags=Flags.EXPORT, type=Node(Kind.IMPORT_TYPE))
    full = Node(
        Kind.EXPORT,
        name="kept",
        flags=Flags.EXPORT,
        type=Node(Kind.IMPORT_TYPE, type=Node(Kind.MODULE, children=[Node(Kind.VARIABLE)])),
    )
    module = Node(Kind.MODULE, name="m.ts", children=[empty, full])
    groups = _grouper().group_members(module)
    assert [g.title for g in groups] == ["Exports"]
    assert groups[0].index == ["kept"]
    assert groups[0].body == []


def test_index_only_omits_bodies(sample_graph: SymbolGraph) -> None:
    """Verify index-only grouping produces no cards."""
    groups = _grouper().group_members(_find(sample_graph, "Dog"), index_only=True)
    assert all(g.body == [] for g in groups)
    assert sorted(name for g in groups for name in g.index) == ["bark", "name"]


def test_inherited_collects_ancestors_nearest_first() -> None:
    """Verify a heritage chain yields one section per ancestor class."""
    source = [Source(name="a.ts")]
    base = Node(Kind.CLASS, name="Base", source=source, children=[Node(Kind.METHOD, name="root")])
    middle = Node(Kind.CLASS, name="Middle", source=source, children=[Node(Kind.METHOD, name="mid")])
    middle.type = Node(Kind.CLASS_TYPE, children=[Node(Kind.REFERENCE, name="Base", type=base)])
    leaf_heritage = Node(
        Kind.CLASS_TYPE, children=[Node(Kind.REFERENCE, name="Middle", type=middle)]
    )
    sections = _grouper().inherited(leaf_heritage)
    assert [s.heritage.name for s in sections] == ["Middle", "Base"]
    assert sections[1].groups[0].index == ["root"]


def test_inherited_terminates_on_cycles() -> None:
    """Verify cyclic heritage visits each ancestor once."""
    first = Node(Kind.CLASS, name="A", children=[Node(Kind.METHOD, name="a")])
    second = Node(Kind.CLASS, name="B", children=[Node(Kind.METHOD, name="b")])
    first.type = Node(Kind.CLASS_TYPE, children=[Node(Kind.REFERENCE, name="B", type=second)])
    second.type = Node(Kind.CLASS_TYPE, children=[Node(Kind.REFERENCE, name="A", type=first)])
    sections = _grouper().inherited(first.type)
    assert [s.heritage.name for s in sections] == ["B", "A"]


def test_inherited_skips_interfaces_and_excluded_sources(sample_graph: SymbolGraph) -> None:
    """Verify only classes from non-excluded sources contribute."""
    dog = _find(sample_graph, "Dog")
    assert dog.type is not None
    # Dog only extends the Animal interface.
    assert _grouper().inherited(dog.type) == []

    hidden = Node(
        Kind.CLASS,
        name="Hidden",
        source=[Source(name="vendor.ts")],
        children=[Node(Kind.METHOD, name="x")],
    )
    heritage = Node(Kind.CLASS_TYPE, children=[Node(Kind.REFERENCE, name="Hidden", type=hidden)])
    assert _grouper(exclude=("vendor.ts",)).inherited(heritage) == []
    assert len(_grouper().inherited(heritage)) == 1


def test_adopt_links_parents() -> None:
    """Verify children see their container after adoption."""
    child = Node(Kind.PROPERTY, name="p")
    parent = adopt(Node(Kind.CLASS, name="C", children=[child]))
    assert child.parent is parent
