"""Shared fixtures: a small symbol graph and the renderers built over it."""

import pytest

from docgraph.kinds import Flags, Kind
from docgraph.link_resolver import LinkResolver
from docgraph.node import Node, Source, SymbolGraph, adopt
from docgraph.page_planner import PagePlan, plan_pages
from docgraph.render_options import RenderOptions
from docgraph.type_renderer import TypeRenderer

ANIMALS_TS = "src/animals.ts"


def base_type(name: str) -> Node:
    return Node(Kind.BASE_TYPE, name=name)


@pytest.fixture
def options() -> RenderOptions:
    return RenderOptions(package_name="zoo")


@pytest.fixture
def sample_graph() -> SymbolGraph:
    """Module with an interface, a class extending it, a generic, an enum and a function."""
    source = [Source(name=ANIMALS_TS, line=4)]

    animal = Node(
        Kind.INTERFACE,
        id=2,
        flags=Flags.EXPORT,
        name="Animal",
        source=source,
        children=[Node(Kind.PROPERTY, id=3, name="legs", type=base_type("number"))],
    )
    heritage = Node(
        Kind.CLASS_TYPE,
        children=[Node(Kind.REFERENCE, name="Animal", type=animal)],
    )
    dog = Node(
        Kind.CLASS,
        id=4,
        flags=Flags.EXPORT,
        name="Dog",
        source=source,
        type=heritage,
        children=[
            Node(Kind.METHOD, id=5, name="bark", parameters=[], type=base_type("void")),
            Node(Kind.PROPERTY, id=6, name="name", type=base_type("string")),
        ],
    )
    heritage.type = dog
    animal.extended_by = [dog]

    type_param = Node(Kind.TYPE_PARAMETER, id=8, name="T")
    box = Node(
        Kind.INTERFACE,
        id=7,
        flags=Flags.EXPORT,
        name="Box",
        source=source,
        type_parameters=[type_param],
        children=[Node(Kind.PROPERTY, id=9, name="value", type=type_param)],
    )
    color = Node(
        Kind.ENUM,
        id=10,
        flags=Flags.EXPORT,
        name="Color",
        source=source,
        children=[
            Node(Kind.ENUM_MEMBER, id=11, name="Red", value='"a"'),
            Node(Kind.ENUM_MEMBER, id=12, name="Blue", value="1"),
        ],
    )
    add = Node(
        Kind.FUNCTION,
        id=13,
        flags=Flags.EXPORT,
        name="add",
        source=source,
        parameters=[
            Node(Kind.PARAMETER, id=14, name="a", type=base_type("number")),
            Node(Kind.PARAMETER, id=15, name="b", type=base_type("number")),
        ],
        type=base_type("number"),
    )
    module = Node(
        Kind.MODULE,
        id=1,
        flags=Flags.EXPORT,
        name=ANIMALS_TS,
        source=source,
        children=[animal, dog, box, color, add],
    )
    return SymbolGraph(modules=[adopt(module)])


@pytest.fixture
def plan(sample_graph: SymbolGraph, options: RenderOptions) -> PagePlan:
    return plan_pages(sample_graph, options)


@pytest.fixture
def resolver(plan: PagePlan, options: RenderOptions) -> LinkResolver:
    return LinkResolver(plan, options)


@pytest.fixture
def renderer(resolver: LinkResolver) -> TypeRenderer:
    return TypeRenderer(resolver)
