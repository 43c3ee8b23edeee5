"""Rendered output files and where they land on disk."""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class OutputFile:
    """A rendered file, named relative to the output directory."""

    name: str
    content: str


def output_file_for_page(out_root: Path, name: str) -> Path:
    """Determine the output path for a page name, creating its directory."""
    p = out_root / name.lstrip("/")
    p.parent.mkdir(parents=True, exist_ok=True)
    return p
