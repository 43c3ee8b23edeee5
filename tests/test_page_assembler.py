"""Tests for page assembly and the rendered site."""

from dataclasses import replace
from pathlib import Path

import pytest

from docgraph.chrome import SITEMAP_FILE, STYLESHEET_FILE
from docgraph.errors import DocGenError, MissingSourceError
from docgraph.kinds import Flags, Kind
from docgraph.load_config import load_config
from docgraph.node import DocContent, Documentation, Node, Source, SymbolGraph, adopt
from docgraph.page_assembler import PageAssembler
from docgraph.page_planner import PagePlan
from docgraph.render_options import RenderOptions
from docgraph.run_generation import run_generation, write_output


def _find(graph: SymbolGraph, name: str) -> Node:
    node = graph.find_by_name(name)
    assert node is not None
    return node


@pytest.fixture
def assembler(
    sample_graph: SymbolGraph, plan: PagePlan, options: RenderOptions
) -> PageAssembler:
    return PageAssembler(sample_graph, plan, options)


def test_class_page_body(assembler: PageAssembler, sample_graph: SymbolGraph) -> None:
    """Verify the class page has its title, heritage and member cards."""
    body = assembler.page_body(_find(sample_graph, "Dog"))
    assert body.startswith("<h1>")
    assert '<span class="chip chip-primary">class</span>' in body
    assert '<a href="src--animals--Animal.html">Animal</a>' in body
    assert "<h3>Methods</h3>" in body
    assert '<a name="s5"></a>' in body
    assert '<a href="#s5">bark</a>' in body


def test_interface_page_lists_extenders(
    assembler: PageAssembler, sample_graph: SymbolGraph
) -> None:
    """Verify an extended interface links to the classes extending it."""
    body = assembler.page_body(_find(sample_graph, "Animal"))
    assert '<b>Extended By:</b> <a href="src--animals--Dog.html">Dog</a>' in body


def test_module_page_indexes_pages_and_cards(
    assembler: PageAssembler, sample_graph: SymbolGraph
) -> None:
    """Verify module members link to their pages and functions get cards."""
    body = assembler.page_body(sample_graph.modules[0])
    assert "<h3>Classes</h3>" in body
    assert '<a href="src--animals--Dog.html">Dog</a>' in body
    assert '<a name="s13"></a>' in body
    assert "add(a: number, b: number): number" in body


def test_enum_page_orders_cards_by_value(
    assembler: PageAssembler, sample_graph: SymbolGraph
) -> None:
    """Verify enum cards follow the value order."""
    body = assembler.page_body(_find(sample_graph, "Color"))
    assert body.index('<a name="s12"></a>') < body.index('<a name="s11"></a>')


def test_member_card_with_documentation(assembler: PageAssembler) -> None:
    """Verify member cards list every parameter with its documentation."""
    param = Node(
        Kind.PARAMETER,
        name="count",
        type=Node(Kind.BASE_TYPE, name="number"),
        docs=Documentation(content=[DocContent("How many.")]),
    )
    option = Node(
        Kind.PARAMETER,
        name="mode",
        flags=Flags.OPTIONAL,
        type=Node(Kind.BASE_TYPE, name="string"),
        value='"fast"',
    )
    method = Node(
        Kind.METHOD,
        id=77,
        name="take",
        parameters=[param, option],
        docs=Documentation(content=[DocContent("Takes some.")]),
    )
    card = assembler.member_card(method)
    assert '<a name="s77"></a>' in card
    assert "<p>Takes some.</p>" in card
    assert "<h6>Parameters</h6>" in card
    assert "<li><code>count: number</code> <p>How many.</p></li>" in card
    assert "<li><code>mode?: string = &quot;fast&quot;</code></li>" in card


def test_title_block_badges(assembler: PageAssembler) -> None:
    """Verify role, merge and component tag badges."""
    node = Node(
        Kind.COMPONENT,
        name="ZooMap",
        flags=Flags.DECLARATION_MERGE,
        docs=Documentation(role="map", tag_name="zoo-map"),
    )
    html = "\n".join(assembler.title_block(node))
    assert "role: map" in html
    assert "declaration merge" in html
    assert "<code>&lt;zoo-map&gt;</code>" in html


def test_inherited_sections_link_ancestors(assembler: PageAssembler) -> None:
    """Verify inherited members are listed under their ancestor."""
    base = Node(
        Kind.CLASS,
        id=90,
        name="Base",
        source=[Source(name="src/base.ts")],
        children=[Node(Kind.METHOD, id=91, name="run")],
    )
    child = Node(Kind.CLASS, id=92, name="Child")
    child.type = Node(
        Kind.CLASS_TYPE, type=child, children=[Node(Kind.REFERENCE, name="Base", type=base)]
    )
    adopt(base)
    parts = assembler.inherited_sections(child)
    assert parts[0].startswith("<h3>Inherited from ")
    assert "<h6>Methods</h6>" in parts


def test_render_site_pages(assembler: PageAssembler) -> None:
    """Verify every planned page plus index and stylesheet are produced."""
    files = assembler.render_site()
    names = sorted(f.name for f in files)
    assert names == [
        "index.html",
        STYLESHEET_FILE,
        "src--animals--Animal.html",
        "src--animals--Box.html",
        "src--animals--Color.html",
        "src--animals--Dog.html",
        "src--animals.html",
    ]
    dog = next(f for f in files if f.name == "src--animals--Dog.html")
    assert "<title>Dog - zoo API Reference</title>" in dog.content
    assert 'href="src--animals.html"' in dog.content


def test_render_site_spa(
    sample_graph: SymbolGraph, plan: PagePlan, options: RenderOptions
) -> None:
    """Verify the single-page mode packs routes into one document."""
    files = PageAssembler(sample_graph, plan, replace(options, spa=True)).render_site()
    assert [f.name for f in files] == ["index.html", STYLESHEET_FILE]
    index = files[0].content
    assert '<template data-path="src--animals--Dog.html">' in index
    assert '<template data-path="index.html" data-default>' in index


def test_render_site_spa_sitemap(
    sample_graph: SymbolGraph, plan: PagePlan, options: RenderOptions
) -> None:
    """Verify the single-page site lists every route in sitemap.xml."""
    spa = replace(options, spa=True, sitemap="https://zoo.dev/docs/")
    files = PageAssembler(sample_graph, plan, spa).render_site()
    assert [f.name for f in files] == ["index.html", STYLESHEET_FILE, SITEMAP_FILE]
    sitemap = files[2].content
    assert sitemap.startswith('<?xml version="1.0" encoding="UTF-8"?><urlset')
    assert "<url><loc>https://zoo.dev/docs/?src--animals--Dog.html</loc></url>" in sitemap
    assert sitemap.count("<url>") == 6


def test_sitemap_needs_single_page_mode(assembler: PageAssembler, options: RenderOptions) -> None:
    """Verify multi-page output ignores the sitemap setting."""
    assembler.options = replace(options, sitemap="https://zoo.dev")
    assert SITEMAP_FILE not in [f.name for f in assembler.render_site()]


def test_readme_becomes_landing_page(tmp_path: Path, sample_graph: SymbolGraph) -> None:
    """Verify a README is rendered as index.html."""
    (tmp_path / "README.md").write_text("# Zoo\n\nWelcome.\n")
    config = load_config(None)
    config["package_root"] = str(tmp_path)
    config["package_name"] = "zoo"
    options = RenderOptions.from_config(config)

    files = run_generation(sample_graph, options)
    index = next(f for f in files if f.name == "index.html")
    assert "<h4>Zoo</h4>" in index.content
    assert sum(1 for f in files if f.name == "index.html") == 1


def test_missing_head_file_is_fatal(
    sample_graph: SymbolGraph, plan: PagePlan, options: RenderOptions, tmp_path: Path
) -> None:
    """Verify an unreadable head file raises a generation error."""
    broken = replace(options, head_html=str(tmp_path / "head.html"))
    with pytest.raises(DocGenError, match="Cannot read"):
        PageAssembler(sample_graph, plan, broken).render_site()


def test_run_generation_summary_only(sample_graph: SymbolGraph, options: RenderOptions) -> None:
    """Verify summary-only runs emit just the summary document."""
    files = run_generation(sample_graph, replace(options, summary=True, no_html=True))
    assert [f.name for f in files] == ["summary.json"]
    assert files[0].content.startswith('{"index":[')


def test_missing_source_fails_before_output(options: RenderOptions) -> None:
    """Verify a page owner without a source aborts the run."""
    orphan = Node(Kind.CLASS, id=2, flags=Flags.EXPORT, name="Orphan")
    graph = SymbolGraph(modules=[adopt(Node(Kind.MODULE, id=1, name="m.ts", children=[orphan]))])
    with pytest.raises(MissingSourceError):
        run_generation(graph, options)


def test_write_output(tmp_path: Path, sample_graph: SymbolGraph, options: RenderOptions) -> None:
    """Verify rendered files land in the output directory."""
    files = run_generation(sample_graph, options)
    written = write_output(files, tmp_path / "site")
    assert written == len(files)
    assert (tmp_path / "site" / "src--animals--Dog.html").is_file()
    assert ".highlight" in (tmp_path / "site" / STYLESHEET_FILE).read_text()
