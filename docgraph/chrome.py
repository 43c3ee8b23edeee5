"""Shared page chrome: head, navigation drawer and body wrapper."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from jinja2 import Environment

if TYPE_CHECKING:
    from docgraph.navigation import NavSection
    from docgraph.render_options import RenderOptions

STYLESHEET_FILE = "pygments.css"

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<meta name="description" content="Documentation for {{ package_name }}">
<meta name="generator" content="docgraph {{ config_hash }}">
<title>{% if title %}{{ title }} - {% endif %}{{ package_name }} API Reference</title>
<link rel="stylesheet" href="{{ stylesheet }}">
{{ head_html|safe }}
</head>
<body>
<nav class="drawer">
<header><a href="index.html">{{ package_name }}</a></header>
{% for section in extra %}
<section class="nav-extra">
{% if section.title %}<h6>{{ section.title }}</h6>{% endif %}
{% for doc in section.items %}
<a class="nav-item" href="{{ doc.href }}">{% if doc.icon %}<span class="icon">{{ doc.icon }}</span>{% endif %}{{ doc.title }}</a>
{% endfor %}
</section>
{% endfor %}
{% for section in navigation %}
<section class="nav-module">
<a class="nav-page" href="{{ section.page.href }}"><i>{{ section.page.title }}</i></a>
{% for item in section.entries %}
<a class="nav-item" href="{{ item.href }}"><span class="icon">{{ item.icon }}</span>{% if item.italic %}<i>{{ item.title }}</i>{% else %}{{ item.title }}{% endif %}</a>
{% endfor %}
</section>
{% endfor %}
</nav>
<main>
{{ body|safe }}
</main>
</body>
</html>
"""

SPA_TEMPLATE = """{% for route in routes %}<template data-path="{{ route.path }}"{% if route.default %} data-default{% endif %}>
{{ route.body|safe }}
</template>
{% endfor %}"""

SITEMAP_FILE = "sitemap.xml"
SITEMAP_TEMPLATE = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
    "{% for path in paths %}<url><loc>{{ base }}/?{{ path }}</loc></url>{% endfor %}"
    "</urlset>"
)


@dataclass
class ExtraLink:
    title: str
    href: str
    icon: str | None = None


@dataclass
class ExtraLinkSection:
    items: list[ExtraLink]
    title: str | None = None


@dataclass
class Route:
    path: str
    body: str
    default: bool = False


class Chrome:
    """Wrap rendered page bodies with the shared layout."""

    def __init__(
        self,
        options: RenderOptions,
        navigation: list[NavSection],
        extra: list[ExtraLinkSection],
        head_html: str = "",
    ) -> None:
        self.options = options
        self.navigation = navigation
        self.extra = extra
        self.head_html = head_html
        env = Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)
        self._page = env.from_string(PAGE_TEMPLATE)
        self._spa = env.from_string(SPA_TEMPLATE)
        self._sitemap = env.from_string(SITEMAP_TEMPLATE)

    def page(self, body: str, title: str = "") -> str:
        return self._page.render(
            title=title,
            package_name=self.options.package_name,
            config_hash=self.options.config_hash[:12],
            stylesheet=STYLESHEET_FILE,
            head_html=self.head_html,
            extra=self.extra,
            navigation=self.navigation,
            body=body,
        )

    def spa(self, routes: list[tuple[str, str]], default_path: str = "index.html") -> str:
        """Pack every page body into one document of route templates."""
        body = self._spa.render(
            routes=[
                Route(path=path, body=content, default=path == default_path)
                for path, content in routes
            ]
        )
        return self.page(body)

    def sitemap(self, base: str, paths: list[str]) -> str:
        """List every route of the single-page document under ``base``."""
        return self._sitemap.render(base=base.rstrip("/"), paths=paths)
