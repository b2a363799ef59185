"""Term definition parser for rendered specification pages.

Single pass over ``dl.terms-and-definitions-list``: every ``dt`` carrying a
``term:`` id opens a definition, and the run of ``dd`` siblings after it
is the definition body. Meta-info wrappers (tref front-matter such as
source repo and commit) sit among those siblings but are not part of the
definition, so they are skipped wherever they appear.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from specref.models.live import LiveTermEntry
from specref.normalize import HTML_PARSER

TERMS_LIST_SELECTOR = "dl.terms-and-definitions-list dt"
TERM_ID_SELECTOR = '[id^="term:"]'
META_INFO_CLASS = "meta-info-content-wrapper"


def term_name_from_id(term_id: str) -> str:
    """``'term:other-spec:Some-Term'`` → ``'Some-Term'``."""
    return term_id.split(":")[-1]


def _definition_siblings(dt: Tag) -> list[Tag]:
    siblings: list[Tag] = []
    sibling = dt.find_next_sibling()
    while isinstance(sibling, Tag) and sibling.name == "dd":
        if META_INFO_CLASS not in (sibling.get("class") or []):
            siblings.append(sibling)
        sibling = sibling.find_next_sibling()
    return siblings


def extract_terms_from_html(page_html: str) -> dict[str, LiveTermEntry]:
    """Extract every term definition from a rendered spec page.

    Returns a dict keyed by lowercased term name. An empty or term-less
    page yields an empty dict.
    """
    terms: dict[str, LiveTermEntry] = {}
    if not page_html:
        return terms

    soup = BeautifulSoup(page_html, HTML_PARSER)
    for dt in soup.select(TERMS_LIST_SELECTOR):
        term_span = dt.select_one(TERM_ID_SELECTOR)
        if term_span is None:
            continue

        term_id = str(term_span["id"])
        siblings = _definition_siblings(dt)

        terms[term_name_from_id(term_id).lower()] = LiveTermEntry(
            content=" ".join(dd.get_text() for dd in siblings).strip(),
            raw_content="".join(str(dd) for dd in siblings),
            term_id=term_id,
        )

    return terms
