"""Immutable rendering options threaded through every renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from docgraph.load_config import compute_config_hash


@dataclass(frozen=True)
class ExtraDocument:
    """A hand-written markdown document published next to the API pages."""

    title: str
    file: str
    icon: str | None = None
    index: bool = False  # published as index.html


@dataclass(frozen=True)
class ExtraSection:
    """A titled group of extra documents in the navigation drawer."""

    items: tuple[ExtraDocument, ...]
    title: str | None = None


@dataclass(frozen=True)
class RenderOptions:
    """Configuration visible to the rendering core."""

    package_name: str = ""
    repository: str | None = None
    package_root: str = "."
    base_href: str | None = None
    markdown: bool = False
    exclude: tuple[str, ...] = ()
    summary: bool = False
    no_html: bool = False
    has_readme: bool = False
    readme: str | None = None
    head_html: str | None = None
    spa: bool = False
    sitemap: str | None = None  # base URL of the single-page site
    debug: bool = False
    extra: tuple[ExtraSection, ...] = ()
    config_hash: str = field(default="", compare=False)

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> RenderOptions:
        """Build options from a merged configuration dictionary.

        README presence is checked here, once, so that page naming stays a pure
        function of the graph and these options.
        """
        package_root = str(config.get("package_root") or ".")
        readme = config.get("readme")
        readme_path = Path(package_root) / readme if readme else None
        has_readme = bool(readme_path and readme_path.is_file())

        extra = tuple(
            ExtraSection(
                title=section.get("title"),
                items=tuple(
                    ExtraDocument(
                        title=item["title"],
                        file=item["file"],
                        icon=item.get("icon"),
                        index=bool(item.get("index", False)),
                    )
                    for item in section.get("items") or []
                ),
            )
            for section in config.get("extra") or []
        )
        if not extra and has_readme and readme_path is not None:
            extra = (
                ExtraSection(
                    items=(ExtraDocument(title="Home", file=str(readme_path), index=True),)
                ),
            )

        return cls(
            package_name=str(config.get("package_name") or ""),
            repository=config.get("repository"),
            package_root=package_root,
            base_href=config.get("base_href"),
            markdown=bool(config.get("markdown")),
            exclude=tuple(config.get("exclude") or ()),
            summary=bool(config.get("summary")),
            no_html=bool(config.get("no_html")),
            has_readme=has_readme,
            readme=str(readme_path) if has_readme else None,
            head_html=config.get("head_html"),
            spa=bool(config.get("spa")),
            sitemap=config.get("sitemap"),
            debug=bool(config.get("debug")),
            extra=extra,
            config_hash=compute_config_hash(config),
        )
