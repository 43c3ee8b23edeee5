"""Command line entry point for generating API documentation from a symbol graph."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

from docgraph.errors import DocGenError
from docgraph.load_config import load_config
from docgraph.load_symbol_graph import load_symbol_graph
from docgraph.render_options import RenderOptions
from docgraph.run_generation import run_generation, write_output


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Render browsable API documentation from a symbol graph.",
    )
    ap.add_argument(
        "graph",
        type=Path,
        help="Symbol graph document (.json, .yml or .yaml)",
    )
    ap.add_argument(
        "-o",
        "--out-dir",
        type=Path,
        help="Output directory (default: output_dir from config, ./docs)",
    )
    ap.add_argument("--config", help="Path to configuration file")
    ap.add_argument(
        "--summary",
        action="store_true",
        default=None,
        help="Also write summary.json for client-side rendering",
    )
    ap.add_argument(
        "--no-html",
        action="store_true",
        default=None,
        help="Skip HTML pages (useful with --summary)",
    )
    ap.add_argument(
        "--markdown",
        action="store_true",
        default=None,
        help="Render documentation comments as markdown",
    )
    ap.add_argument(
        "--exclude",
        nargs="+",
        default=None,
        metavar="PATH",
        help="Source files whose declarations are left out",
    )
    ap.add_argument("--base-href", help="Base URL for relative links in documentation")
    ap.add_argument("--repository", help="Repository URL used for view-source links")
    ap.add_argument("--readme", help="README rendered as the landing page")
    ap.add_argument(
        "--spa",
        action="store_true",
        default=None,
        help="Emit a single index.html holding every page as a route",
    )
    ap.add_argument(
        "--sitemap",
        metavar="BASE_URL",
        help="Write sitemap.xml listing every route under BASE_URL (with --spa)",
    )
    ap.add_argument("--debug", action="store_true", default=None, help="Verbose logging")
    return ap


def _apply_overrides(config: dict[str, Any], args: argparse.Namespace) -> dict[str, Any]:
    """Layer command line flags over the loaded configuration."""
    overrides = {
        "summary": args.summary,
        "no_html": args.no_html,
        "markdown": args.markdown,
        "base_href": args.base_href,
        "repository": args.repository,
        "readme": args.readme,
        "spa": args.spa,
        "sitemap": args.sitemap,
        "debug": args.debug,
    }
    config = {**config, **{k: v for k, v in overrides.items() if v is not None}}
    if args.exclude:
        config["exclude"] = list(dict.fromkeys([*config.get("exclude", []), *args.exclude]))
    if args.out_dir is not None:
        config["output_dir"] = str(args.out_dir)
    return config


def main(argv: list[str] | None = None) -> int:
    """Run the documentation generator."""
    args = build_parser().parse_args(argv)
    config = _apply_overrides(load_config(args.config), args)

    logging.basicConfig(
        level=logging.DEBUG if config["debug"] else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    options = RenderOptions.from_config(config)
    try:
        graph = load_symbol_graph(args.graph)
        files = run_generation(graph, options)
    except DocGenError as exc:
        msg = f"error: {exc}"
        raise SystemExit(msg) from exc

    out_root = Path(config["output_dir"])
    written = write_output(files, out_root)
    print(f"Generated {written} files into: {out_root.resolve()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
