"""Orchestration logic for turning a symbol graph into a documentation site."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from docgraph.link_resolver import LinkResolver
from docgraph.output_file import OutputFile, output_file_for_page
from docgraph.page_assembler import PageAssembler
from docgraph.page_planner import plan_pages
from docgraph.summary import (
    SUMMARY_FILE_NAME,
    SummarySerializer,
    dump_summary,
    render_summary,
)
from docgraph.type_renderer import TypeRenderer

if TYPE_CHECKING:
    from docgraph.node import SymbolGraph
    from docgraph.render_options import RenderOptions

logger = logging.getLogger(__name__)


def run_generation(graph: SymbolGraph, options: RenderOptions) -> list[OutputFile]:
    """Render the whole site in memory.

    Structural and missing-source errors propagate from here before any file
    exists on disk.
    """
    plan = plan_pages(graph, options)
    logger.debug("Planned %d pages", len(plan))

    files: list[OutputFile] = []
    if options.summary:
        serializer = SummarySerializer(TypeRenderer(LinkResolver(plan, options)))
        document = render_summary(graph, serializer)
        files.append(OutputFile(SUMMARY_FILE_NAME, dump_summary(document)))

    if not options.no_html:
        files.extend(PageAssembler(graph, plan, options).render_site())
    return files


def write_output(files: list[OutputFile], out_dir: Path) -> int:
    """Write rendered files below ``out_dir`` and return how many were written."""
    out_root = out_dir.resolve()
    out_root.mkdir(parents=True, exist_ok=True)

    total = len(files)
    print(f"Writing {total} files...")
    written = 0
    for f in files:
        out_file = output_file_for_page(out_root, f.name)
        out_file.write_text(f.content, encoding="utf-8")
        logger.debug("Wrote %s", out_file)
        written += 1
        if written % 50 == 0:
            print(f"  ... wrote {written}/{total} files")
    return written
