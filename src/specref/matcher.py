"""Match in-page reference elements to reference index entries.

Pure lookups: receives a parsed element and the ReferenceIndex, returns
the first qualifying entry in index order or None. A miss is not an
error: the element may simply not be an external reference.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from specref.models.reference import ExternalSpecDescriptor
from specref.parser import TERM_ID_SELECTOR, term_name_from_id

if TYPE_CHECKING:
    from bs4 import Tag

    from specref.models.reference import ReferenceIndex, ReferenceIndexEntry

XREF_SELECTOR = "a.x-term-reference"
TREF_SELECTOR = "dt.term-external"

_LOCAL_HREF_RE = re.compile(r"#term:([^:]+):(.+)")
_ORIGINAL_TERM_ATTR = "data-original-term"


def collect_external_specs(index: ReferenceIndex) -> dict[str, ExternalSpecDescriptor]:
    """Return the distinct external specs in the index, keyed by gh-page URL.

    The first entry seen for a URL names the spec. Entries without a
    gh-page URL cannot be validated and are left out.
    """
    specs: dict[str, ExternalSpecDescriptor] = {}
    for entry in index.xtrefs:
        if entry.gh_page_url and entry.gh_page_url not in specs:
            specs[entry.gh_page_url] = ExternalSpecDescriptor(
                url=entry.gh_page_url,
                spec_name=entry.external_spec,
            )
    return specs


def find_cached_xtref_for_xref(
    element: Tag, index: ReferenceIndex
) -> ReferenceIndexEntry | None:
    """Find the index entry for an ``a.x-term-reference`` anchor.

    The anchor's ``data-local-href`` has the form ``#term:<spec>:<term>``.
    Spec names match exactly, term names case-insensitively.
    """
    local_href = element.get("data-local-href") or ""
    match = _LOCAL_HREF_RE.search(str(local_href))
    if match is None:
        return None

    spec_name, term_name = match.groups()
    wanted = term_name.lower()
    for entry in index.xtrefs:
        if entry.external_spec == spec_name and entry.term.lower() == wanted:
            return entry
    return None


def resolve_original_term(element: Tag) -> str | None:
    """Return the original term name of a tref element.

    Looks for ``data-original-term`` on a descendant first, then on the
    element itself and its ancestors. Without one, falls back to the last
    segment of the nested ``term:`` id.
    """
    holder = element.find(attrs={_ORIGINAL_TERM_ATTR: True})
    if holder is None:
        if element.has_attr(_ORIGINAL_TERM_ATTR):
            holder = element
        else:
            holder = element.find_parent(attrs={_ORIGINAL_TERM_ATTR: True})
    if holder is not None:
        return str(holder[_ORIGINAL_TERM_ATTR])

    term_span = element.select_one(TERM_ID_SELECTOR)
    if term_span is None and str(element.get("id") or "").startswith("term:"):
        term_span = element
    if term_span is not None:
        return term_name_from_id(str(term_span["id"]))
    return None


def find_cached_xtref_for_tref(
    element: Tag, index: ReferenceIndex
) -> ReferenceIndexEntry | None:
    """Find the index entry for a ``dt.term-external`` element.

    Only entries that at least one local file transcludes (a ``tref``
    source file) qualify.
    """
    original_term = resolve_original_term(element)
    if not original_term:
        return None

    wanted = original_term.lower()
    for entry in index.xtrefs:
        if entry.term.lower() == wanted and entry.has_source_type("tref"):
            return entry
    return None
