"""Loading the reference index (``allXTrefs``).

The build writes the index twice: as ``xtrefs-data.json`` in the output
directory and as a ``const allXTrefs = {...};`` script embedded in the
rendered page. A page without a usable embedded index is not an error,
it just has nothing to validate.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from specref.errors import ErrorCode, SpecRefError
from specref.models.reference import ReferenceIndex

if TYPE_CHECKING:
    from pathlib import Path

    from bs4 import BeautifulSoup

log = structlog.get_logger()

_EMBEDDED_INDEX_RE = re.compile(r"\ballXTrefs\s*=\s*(?=\{)")


def read_xtrefs_file(path: Path) -> ReferenceIndex:
    """Read and validate an ``xtrefs-data.json`` file.

    Raises SpecRefError if the file is missing or not a valid index.
    """
    if not path.is_file():
        raise SpecRefError(
            code=ErrorCode.INDEX_NOT_FOUND,
            message=f"Reference index not found: {path}",
            suggestion="Build the spec first so that xtrefs-data.json is generated.",
            recoverable=False,
        )
    try:
        index = ReferenceIndex.model_validate_json(path.read_bytes())
    except (OSError, ValidationError) as exc:
        raise SpecRefError(
            code=ErrorCode.INDEX_INVALID,
            message=f"Invalid reference index {path}: {exc}",
            suggestion="Rebuild the spec to regenerate xtrefs-data.json.",
            recoverable=False,
        ) from exc

    log.info("reference_index_loaded", source="file", path=str(path), entries=len(index.xtrefs))
    return index


def extract_embedded_index(document: BeautifulSoup) -> ReferenceIndex:
    """Return the ``allXTrefs`` object embedded in a rendered page.

    Missing or malformed data is logged and yields an empty index.
    """
    decoder = json.JSONDecoder()
    for script in document.find_all("script"):
        source = script.string or ""
        match = _EMBEDDED_INDEX_RE.search(source)
        if match is None:
            continue
        try:
            raw, _ = decoder.raw_decode(source, match.end())
            index = ReferenceIndex.model_validate(raw)
        except (ValueError, ValidationError):
            log.warning("reference_index_invalid", source="page", exc_info=True)
            return ReferenceIndex()
        log.info("reference_index_loaded", source="page", entries=len(index.xtrefs))
        return index

    log.warning("reference_index_missing", source="page")
    return ReferenceIndex()
