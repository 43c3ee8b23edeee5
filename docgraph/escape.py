"""Utilities for escaping text into markup and recovering visible text."""

import html
import re

_ENTITIES = {"&": "&amp;", "<": "&lt;", '"': "&quot;"}
_ENTITIES_RE = re.compile(r'[&<"]')
_TAG_RE = re.compile(r"</?[^>]+>")


def escape(text: str) -> str:
    """Escape the characters that would otherwise open markup."""
    return _ENTITIES_RE.sub(lambda m: _ENTITIES[m.group(0)], text)


def strip_markup(markup: str) -> str:
    """Remove tags and decode entities, leaving the visible text."""
    return html.unescape(_TAG_RE.sub("", markup))
