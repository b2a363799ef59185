"""Indicator widgets for validation outcomes.

Builds the inline marker placed next to an xref or inside a tref term,
with an expandable detail panel for changed and missing terms. All text
from cached or live definitions is escaped before it reaches markup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bs4 import BeautifulSoup, Tag

from specref.diff import extract_line_diff
from specref.normalize import HTML_PARSER, escape_html, truncate_text

if TYPE_CHECKING:
    from specref.models.outcome import OutcomeKind, ValidationOutcome

INDICATOR_CLASS = "external-ref-validation-indicator"

STATE_CLASSES: dict[str, str] = {
    "missing": "external-ref-missing",
    "changed": "external-ref-changed",
    "valid": "external-ref-valid",
    "error": "external-ref-error",
}

LABELS: dict[str, str] = {
    "missing": "⚠️ Term not found",
    "changed": "🔄 Definition changed",
    "error": "❌ Could not verify",
    "valid": "✓ Verified",
}

CACHED_PREVIEW_LENGTH = 300
LIVE_PREVIEW_LENGTH = 500

_MISSING_DETAILS = """
<div class="validation-details-header">Term Not Found</div>
<div class="validation-details-section">
    The term referenced here no longer exists in the external specification.
    It may have been renamed, moved, or removed.
</div>
<div class="validation-details-footer">
    <em>Check the external specification for updates</em>
</div>
"""


def _changed_details(old_content: str, new_content: str, similarity: float | None) -> str:
    diff = extract_line_diff(old_content, new_content)
    if diff.has_differences:
        old_section = escape_html(diff.old_display)
        new_section = escape_html(diff.new_display)
        old_heading, new_heading = "Removed (cached at build time):", "Added (live):"
    else:
        old_section = escape_html(truncate_text(old_content, CACHED_PREVIEW_LENGTH))
        new_section = escape_html(truncate_text(new_content, LIVE_PREVIEW_LENGTH))
        old_heading, new_heading = "Cached (at build time):", "Current (live):"

    similarity_line = ""
    if similarity is not None:
        similarity_line = (
            f'<div class="validation-similarity">Similarity: {similarity * 100:.1f}%</div>'
        )

    return f"""
<div class="validation-details-header">Definition Changed</div>
{similarity_line}
<div class="validation-details-section">
    <strong>{old_heading}</strong>
    <div class="validation-content-old">{old_section}</div>
</div>
<div class="validation-details-section">
    <strong>{new_heading}</strong>
    <div class="validation-content-new">{new_section}</div>
</div>
<div class="validation-details-footer">
    <em>Rebuild the spec to update the definition</em>
</div>
"""


def create_indicator(
    kind: OutcomeKind,
    *,
    message: str | None = None,
    old_content: str | None = None,
    new_content: str | None = None,
    similarity: float | None = None,
) -> Tag:
    """Build a detached indicator element for ``kind``."""
    label = LABELS[kind]
    classes = [INDICATOR_CLASS, STATE_CLASSES[kind]]

    details = ""
    if kind == "changed" and old_content and new_content:
        details = _changed_details(old_content, new_content, similarity)
    elif kind == "missing":
        details = _MISSING_DETAILS
    if details:
        classes.append("has-details")
        details = f'<div class="validation-details">{details}</div>'

    markup = (
        f'<span class="{" ".join(classes)}" title="{escape_html(message or label)}">'
        f'<span class="indicator-icon">{escape_html(label.split(" ")[0])}</span>'
        f"{details}</span>"
    )
    fragment = BeautifulSoup(markup, HTML_PARSER)
    return fragment.span.extract()  # type: ignore[union-attr]


def indicator_for_outcome(outcome: ValidationOutcome) -> Tag:
    """Map a classified outcome onto its indicator."""
    if outcome.kind == "changed":
        return create_indicator(
            "changed",
            old_content=outcome.old_content,
            new_content=outcome.new_content,
            similarity=outcome.similarity,
        )
    return create_indicator(outcome.kind)


def _is_indicator(element: object) -> bool:
    return isinstance(element, Tag) and INDICATOR_CLASS in (element.get("class") or [])


def insert_indicator_after_element(element: Tag, indicator: Tag) -> bool:
    """Place ``indicator`` right after an xref anchor.

    Returns False, and leaves the tree alone, if an indicator is already there.
    """
    if _is_indicator(element.find_next_sibling()):
        return False
    element.insert_after(indicator)
    return True


def insert_indicator_into_tref(dt_element: Tag, indicator: Tag) -> bool:
    """Append ``indicator`` inside the tref's ``span.term-external``.

    Returns False if the span is missing or already holds an indicator.
    """
    term_span = dt_element.select_one("span.term-external")
    if term_span is None:
        return False
    if term_span.select_one(f".{INDICATOR_CLASS}") is not None:
        return False
    term_span.append(indicator)
    return True


def clear_indicators(document: BeautifulSoup | Tag) -> int:
    """Remove every indicator left in ``document`` by an earlier pass.

    Returns how many were removed.
    """
    stale = document.select(f".{INDICATOR_CLASS}")
    for element in stale:
        element.decompose()
    return len(stale)
