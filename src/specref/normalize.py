"""Text normalisation for comparing term definitions.

Cached definitions come from the build, live ones from a freshly rendered
page; both pass through the same pipeline so that markup and formatting
noise does not register as drift.
"""

from __future__ import annotations

import html
import re

from bs4 import BeautifulSoup

HTML_PARSER = "html.parser"

_ZERO_WIDTH_SPACE = "\u200b"
_WHITESPACE_RE = re.compile(r"\s+")
# A whitespace run followed by one or more punctuation marks (possibly
# separated by whitespace themselves), plus any whitespace after them.
_SPACED_PUNCT_RE = re.compile(r"\s+([.,;:!?](?:\s*[.,;:!?])*)\s*")


def extract_text(fragment: str | None) -> str:
    """Return the plain text of an HTML fragment, ``""`` for empty input."""
    if not fragment:
        return ""
    return BeautifulSoup(fragment, HTML_PARSER).get_text()


def normalize_content(fragment: str | None) -> str:
    """Normalise an HTML fragment into comparable text.

    Steps (order matters):
      1. Strip tags, keep text
      2. Lowercase
      3. Remove zero-width spaces
      4. "word , next" → "word, next"; spaces inside a punctuation run are
         dropped too ("a , , b" → "a,, b")
      5. Collapse whitespace runs, trim
    """
    text = extract_text(fragment)
    if not text:
        return ""
    text = text.lower().replace(_ZERO_WIDTH_SPACE, "")
    text = _SPACED_PUNCT_RE.sub(lambda m: _WHITESPACE_RE.sub("", m.group(1)) + " ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def truncate_text(text: str | None, max_length: int) -> str:
    if not text or len(text) <= max_length:
        return text or ""
    return text[:max_length] + "..."


def escape_html(text: str | None) -> str:
    """Escape text for safe insertion into markup."""
    return html.escape(text or "")
