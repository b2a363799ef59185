"""Integration test fixtures.

Provides a rendered spec page with one xref and one tref, its reference
index, and a live gh-page builder. HTTP is mocked with respx; everything
else (client, fetcher, cache, validator) is the real wiring.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path

SPEC_URL = "https://example.github.io/test-spec/"

XTREFS = {
    "xtrefs": [
        {
            "externalSpec": "TestSpec",
            "term": "test-term",
            "ghPageUrl": SPEC_URL,
            "content": "<dd><p>This is a test definition.</p></dd>",
            "sourceFiles": [
                {"file": "spec/terms.md", "type": "xref"},
                {"file": "spec/terms/test-term.md", "type": "tref"},
            ],
        }
    ]
}


def _render_page(xtrefs: dict | None = XTREFS) -> str:
    script = f"<script>const allXTrefs = {json.dumps(xtrefs)};</script>" if xtrefs else ""
    return f"""<!DOCTYPE html>
<html>
<head>{script}</head>
<body>
<p>A <a class="x-term-reference term-reference" data-local-href="#term:TestSpec:test-term"
      href="{SPEC_URL}#term:test-term">test term</a> is referenced here.</p>
<dl class="terms-and-definitions-list">
  <dt class="term-external"><span class="term-external" id="term:test-term"
      data-original-term="test-term">test-term</span></dt>
  <dd class="meta-info-content-wrapper">Source: TestSpec</dd>
  <dd><p>This is a test definition.</p></dd>
</dl>
</body>
</html>
"""


def _render_live_spec(definition: str | None) -> str:
    """Render the external gh-page; ``None`` omits the term entirely."""
    entry = ""
    if definition is not None:
        entry = (
            '<dt><span id="term:test-spec:test-term">test-term</span></dt>\n'
            '<dd class="meta-info-content-wrapper">Front matter</dd>\n'
            f"<dd>{definition}</dd>"
        )
    return f"""<html><body>
<dl class="terms-and-definitions-list">
<dt><span id="term:test-spec:unrelated">unrelated</span></dt>
<dd>Unrelated.</dd>
{entry}
</dl>
</body></html>"""


@pytest.fixture()
def page_path(tmp_path: Path) -> Path:
    path = tmp_path / "docs" / "index.html"
    path.parent.mkdir()
    path.write_text(_render_page(), encoding="utf-8")
    return path


@pytest.fixture()
def render_page() -> Callable[..., str]:
    return _render_page


@pytest.fixture()
def live_spec() -> Callable[[str | None], str]:
    return _render_live_spec
