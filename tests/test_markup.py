"""Tests for markdown rendering, highlighting and link rebasing."""

from docgraph.markup import (
    format_content,
    highlight,
    normalize_link,
    render_markdown,
    stylesheet,
)


def test_highlight_known_language() -> None:
    """Verify code is wrapped in the highlight container."""
    result = highlight("const x = 1;", "typescript")
    assert result.startswith('<div class="highlight">')
    assert "const" in result


def test_highlight_unknown_language_falls_back_to_text() -> None:
    """Verify an unknown language does not raise."""
    result = highlight("<b>raw</b>", "no-such-language")
    assert "&lt;b&gt;raw&lt;/b&gt;" in result


def test_stylesheet_targets_highlight_class() -> None:
    """Verify the generated stylesheet is scoped to highlighted blocks."""
    assert ".highlight" in stylesheet()


def test_normalize_link() -> None:
    """Verify only relative links are rebased."""
    base = "https://docs.example.com/api/"
    assert normalize_link("guide.html", base) == "https://docs.example.com/api/guide.html"
    assert normalize_link("#anchor", base) == "#anchor"
    assert normalize_link("https://other.org/x", base) == "https://other.org/x"
    assert normalize_link("/root.html", base) == "/root.html"
    assert normalize_link("guide.html", None) == "guide.html"


def test_headings_are_demoted() -> None:
    """Verify prose headings sit below the page headings."""
    assert render_markdown("# Title") == "<h4>Title</h4>"
    assert render_markdown("### Deep") == "<h6>Deep</h6>"


def test_inline_drops_single_paragraph() -> None:
    """Verify inline rendering yields bare phrasing content."""
    assert render_markdown("some *em* text", inline=True) == "some <em>em</em> text"


def test_inline_keeps_multiple_paragraphs() -> None:
    """Verify text with several paragraphs keeps its wrappers."""
    assert render_markdown("one\n\ntwo", inline=True) == "<p>one</p>\n<p>two</p>"


def test_relative_links_use_base_href() -> None:
    """Verify markdown links and images are rebased."""
    result = render_markdown(
        "[guide](guide.html) ![logo](img/logo.png)",
        inline=True,
        base_href="https://docs.example.com/",
    )
    assert 'href="https://docs.example.com/guide.html"' in result
    assert 'src="https://docs.example.com/img/logo.png"' in result


def test_raw_html_is_escaped_unless_allowed() -> None:
    """Verify inline HTML is shown literally by default."""
    assert "&lt;b&gt;" in render_markdown("a <b>bold</b> move", inline=True)
    assert "<b>bold</b>" in render_markdown("a <b>bold</b> move", inline=True, allow_html=True)


def test_fenced_code_is_highlighted() -> None:
    """Verify fenced code blocks go through the highlighter."""
    result = render_markdown("```python\nx = 1\n```")
    assert 'class="highlight"' in result


def test_format_content_splits_paragraphs() -> None:
    """Verify blank lines separate paragraphs."""
    assert format_content("first\nline\n\n  second  ") == "<p>first\nline</p><p>second</p>"
    assert format_content("   ") == ""
