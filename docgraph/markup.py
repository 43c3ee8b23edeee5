"""Markdown and code highlighting for documentation prose."""

from __future__ import annotations

import re
from urllib.parse import urljoin

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

HIGHLIGHT_CSS_CLASS = "highlight"
HEADING_SHIFT = {"h1": "h4", "h2": "h5", "h3": "h6", "h4": "h6", "h5": "h6"}

_SINGLE_PARAGRAPH_RE = re.compile(r"^<p>(.*)</p>$", re.DOTALL)
_ABSOLUTE_URL_RE = re.compile(r"^([a-z][a-z0-9+.-]*:|#|/)", re.IGNORECASE)

_formatter = HtmlFormatter(cssclass=HIGHLIGHT_CSS_CLASS)


def highlight(code: str, language: str | None = None) -> str:
    """Highlight a code sample; unknown languages are shown as plain text."""
    try:
        lexer = get_lexer_by_name(language) if language else TextLexer()
    except ClassNotFound:
        lexer = TextLexer()
    return pygments_highlight(code, lexer, _formatter)


def stylesheet(style: str = "default") -> str:
    """Return the CSS rules used by highlighted code."""
    return HtmlFormatter(style=style).get_style_defs(f".{HIGHLIGHT_CSS_CLASS}")


def normalize_link(url: str, base_href: str | None) -> str:
    """Resolve a relative link against the documentation base href."""
    if not base_href or _ABSOLUTE_URL_RE.match(url):
        return url
    return urljoin(base_href, url)


class _DocTreeprocessor(Treeprocessor):
    """Demote headings under the page's own and rebase relative links."""

    def __init__(self, md: markdown.Markdown, base_href: str | None) -> None:
        super().__init__(md)
        self.base_href = base_href

    def run(self, root):
        for element in root.iter():
            if element.tag in HEADING_SHIFT:
                element.tag = HEADING_SHIFT[element.tag]
            elif element.tag == "a" and element.get("href"):
                element.set("href", normalize_link(element.get("href"), self.base_href))
            elif element.tag == "img" and element.get("src"):
                element.set("src", normalize_link(element.get("src"), self.base_href))


class DocExtension(Extension):
    """Register the documentation tree rewrites."""

    def __init__(self, base_href: str | None = None, **kwargs) -> None:
        self.base_href = base_href
        super().__init__(**kwargs)

    def extendMarkdown(self, md):  # noqa: N802
        md.treeprocessors.register(_DocTreeprocessor(md, self.base_href), "docgraph", 5)


def create_markdown(base_href: str | None = None, allow_html: bool = False) -> markdown.Markdown:
    md = markdown.Markdown(
        extensions=[
            "tables",
            "fenced_code",
            "codehilite",
            DocExtension(base_href=base_href),
        ],
        extension_configs={
            "codehilite": {
                "css_class": HIGHLIGHT_CSS_CLASS,
                "guess_lang": False,
            }
        },
    )
    if not allow_html:
        # Raw HTML in comments is shown, not interpreted.
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")
    return md


def render_markdown(
    text: str,
    *,
    inline: bool = False,
    base_href: str | None = None,
    allow_html: bool = False,
) -> str:
    """Render markdown; ``inline`` drops the wrapping paragraph."""
    result = create_markdown(base_href, allow_html).convert(text)
    if inline:
        match = _SINGLE_PARAGRAPH_RE.match(result)
        if match and "<p>" not in match.group(1):
            return match.group(1)
    return result


def format_content(text: str) -> str:
    """Wrap already escaped plain text into paragraphs at blank lines."""
    paragraphs = [p.strip() for p in re.split(r"\n\s*\n", text.strip()) if p.strip()]
    return "".join(f"<p>{p}</p>" for p in paragraphs)
