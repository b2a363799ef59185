"""Shared test fixtures for the specref test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from specref.models.reference import ReferenceIndex

SPEC_URL = "https://example.github.io/test-spec/"


def _render_live_page(*definitions: tuple[str, str]) -> str:
    items = "\n".join(
        f'<dt><span id="term:test-spec:{term}">{term}</span></dt>\n{body}'
        for term, body in definitions
    )
    return f'<html><body><dl class="terms-and-definitions-list">\n{items}\n</dl></body></html>'


@pytest.fixture()
def live_page() -> Callable[..., str]:
    """Builder for a minimal spec page: one dt/dd pair per (term, dd markup)."""
    return _render_live_page


@pytest.fixture()
def sample_index() -> ReferenceIndex:
    """Reference index with one tref'd and one xref'd term from the same spec."""
    return ReferenceIndex.model_validate(
        {
            "xtrefs": [
                {
                    "externalSpec": "TestSpec",
                    "term": "test-term",
                    "ghPageUrl": SPEC_URL,
                    "content": "<dd><p>This is a test definition.</p></dd>",
                    "sourceFiles": [{"file": "test.md", "type": "tref"}],
                },
                {
                    "externalSpec": "TestSpec",
                    "term": "another-term",
                    "ghPageUrl": SPEC_URL,
                    "content": "<dd><p>Another definition here.</p></dd>",
                    "sourceFiles": [{"file": "test.md", "type": "xref"}],
                },
            ]
        }
    )
