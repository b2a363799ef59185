"""External reference validation pass.

Collects the external specs named by the reference index, fetches them
concurrently, matches every xref/tref element on the page to its cached
entry, classifies it against the live definition and inserts an
indicator. Classification is pure (``classify_reference``); only
``ExternalRefValidator.validate`` touches the document.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Literal

import structlog

from specref.cache import FetchCache
from specref.fetcher import LiveSpecFetcher
from specref.indicator import (
    clear_indicators,
    indicator_for_outcome,
    insert_indicator_after_element,
    insert_indicator_into_tref,
)
from specref.matcher import (
    TREF_SELECTOR,
    XREF_SELECTOR,
    collect_external_specs,
    find_cached_xtref_for_tref,
    find_cached_xtref_for_xref,
)
from specref.models.live import LiveTermEntry
from specref.models.outcome import (
    Changed,
    Error,
    Missing,
    ReferenceResult,
    Valid,
    ValidationOutcome,
    ValidationReport,
)
from specref.normalize import extract_text, normalize_content
from specref.similarity import DEFAULT_SIMILARITY_THRESHOLD, is_changed, similarity_ratio

if TYPE_CHECKING:
    from bs4 import BeautifulSoup, Tag

    from specref.config import ValidatorSettings
    from specref.models.reference import ReferenceIndex, ReferenceIndexEntry
    from specref.protocols import FetcherProtocol

log = structlog.get_logger()

LiveData = Mapping[str, dict[str, LiveTermEntry] | None]
CompletionListener = Callable[[ValidationReport], None]


def classify_reference(
    entry: ReferenceIndexEntry,
    live_data: LiveData,
    *,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    debug: bool = False,
) -> ValidationOutcome | None:
    """Classify one cached reference against the live term mappings.

    Returns None when there is nothing to validate against: the entry has
    no gh-page URL, or its URL was never fetched in this pass.
    """
    url = entry.gh_page_url
    if not url or url not in live_data:
        return None

    live_terms = live_data[url]
    if live_terms is None:
        return Error()

    live_term = live_terms.get(entry.term.lower())
    if live_term is None:
        return Missing()

    cached_normalized = normalize_content(entry.content)
    live_normalized = normalize_content(live_term.raw_content)
    similarity = similarity_ratio(cached_normalized, live_normalized)

    if debug:
        log.info(
            "reference_compared",
            spec=entry.external_spec,
            term=entry.term,
            cached_length=len(cached_normalized),
            live_length=len(live_normalized),
            similarity=round(similarity, 4),
            threshold=threshold,
        )

    if is_changed(similarity, threshold):
        return Changed(
            old_content=extract_text(entry.content) or "No cached content",
            new_content=live_term.content or "No live content",
            similarity=similarity,
        )
    return Valid()


class ExternalRefValidator:
    """Runs validation passes over rendered spec pages.

    Owns its FetchCache: passes made through the same validator share
    fetched specs until they expire, separate validators never do.
    """

    def __init__(
        self,
        fetcher: FetcherProtocol,
        settings: ValidatorSettings,
        *,
        cache: FetchCache | None = None,
    ) -> None:
        self._settings = settings
        self.cache = cache if cache is not None else FetchCache(settings.cache_timeout_ms)
        self._live = LiveSpecFetcher(fetcher, self.cache)
        self._listeners: list[CompletionListener] = []

    def add_completion_listener(self, listener: CompletionListener) -> None:
        """Register a callback that receives the report of every finished pass."""
        self._listeners.append(listener)

    async def fetch_all(self, index: ReferenceIndex) -> dict[str, dict[str, LiveTermEntry] | None]:
        """Fetch every distinct external spec concurrently.

        Waits for all fetches to settle. A failed fetch maps its URL to
        None; it never fails the batch.
        """
        specs = collect_external_specs(index)
        results = await asyncio.gather(
            *(self._live.fetch_external_spec(url, spec.spec_name) for url, spec in specs.items()),
            return_exceptions=True,
        )

        live_data: dict[str, dict[str, LiveTermEntry] | None] = {}
        for (url, spec), result in zip(specs.items(), results, strict=True):
            if isinstance(result, BaseException):
                log.warning(
                    "external_spec_fetch_error",
                    spec=spec.spec_name,
                    url=url,
                    exc_info=result,
                )
                live_data[url] = None
            else:
                live_data[url] = result
        return live_data

    async def validate(self, document: BeautifulSoup, index: ReferenceIndex) -> ValidationReport:
        """Run one validation pass, mutating ``document`` in place.

        Indicators from any earlier pass are removed first, so the page only
        ever shows the outcomes of this pass.
        """
        log.info("validation_started")
        removed = clear_indicators(document)
        if removed:
            log.debug("stale_indicators_removed", count=removed)

        specs = collect_external_specs(index)
        if not specs:
            log.info("validation_skipped", reason="no_external_specs")
            return ValidationReport()

        log.info("external_specs_found", count=len(specs))
        live_data = await self.fetch_all(index)

        report = ValidationReport(specs_validated=len(specs))

        xref_elements = document.select(XREF_SELECTOR)
        for element in xref_elements:
            entry = find_cached_xtref_for_xref(element, index)
            if entry is not None:
                self._apply("xref", element, entry, live_data, report)

        tref_elements = document.select(TREF_SELECTOR)
        for element in tref_elements:
            entry = find_cached_xtref_for_tref(element, index)
            if entry is not None:
                self._apply("tref", element, entry, live_data, report)

        report.xrefs_validated = len(xref_elements)
        report.trefs_validated = len(tref_elements)

        log.info(
            "external_refs_validated",
            specs_validated=report.specs_validated,
            xrefs_validated=report.xrefs_validated,
            trefs_validated=report.trefs_validated,
            missing=report.count("missing"),
            changed=report.count("changed"),
            errors=report.count("error"),
        )
        for listener in self._listeners:
            listener(report)
        return report

    def _apply(
        self,
        reference_type: Literal["xref", "tref"],
        element: Tag,
        entry: ReferenceIndexEntry,
        live_data: LiveData,
        report: ValidationReport,
    ) -> None:
        outcome = classify_reference(
            entry,
            live_data,
            threshold=self._settings.similarity_threshold,
            debug=self._settings.debug,
        )
        if outcome is None:
            return

        rendered = False
        if outcome.kind != "valid" or self._settings.show_valid_indicators:
            indicator = indicator_for_outcome(outcome)
            if reference_type == "xref":
                rendered = insert_indicator_after_element(element, indicator)
            else:
                rendered = insert_indicator_into_tref(element, indicator)

        report.results.append(
            ReferenceResult(
                reference_type=reference_type,
                external_spec=entry.external_spec,
                term=entry.term,
                outcome=outcome,
                rendered=rendered,
            )
        )
