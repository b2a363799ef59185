"""Build-time transclusion of cached external definitions into term files.

A term file that starts a line with ``[[tref:<spec>,<term>]]`` is
rewritten in place: the marker line is kept and everything else is
replaced by the definition cached in ``xtrefs-data.json``. There is no
backup; the cached copy is regenerated on every build.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog

from specref.reference_index import read_xtrefs_file

if TYPE_CHECKING:
    from pathlib import Path

    from specref.models.reference import ReferenceIndex, ReferenceIndexEntry

log = structlog.get_logger()

TREF_MARKER_PREFIX = "[[tref:"
REGENERATED_NOTICE = (
    "<!-- This is a copy of the saved remote text. Remove it if you like. "
    "It is automatically (re)generated -->"
    '<span class="transcluded-xref-term">transcluded xref</span>'
)

_TREF_RE = re.compile(r"\[\[tref:(.*?)\]\]")
_DEF_MARKER_RE = re.compile(r"\[\[def: .*?\]\]:")


def find_local_xtref(
    index: ReferenceIndex, external_spec: str, term: str
) -> ReferenceIndexEntry | None:
    """Exact ``(external_spec, term)`` lookup, first match in index order."""
    for entry in index.xtrefs:
        if entry.external_spec == external_spec and entry.term == term:
            return entry
    return None


def render_transcluded(marker: str, entry: ReferenceIndexEntry) -> str:
    """Build the new file body for a tref marker and its cached entry."""
    content = _DEF_MARKER_RE.sub("", entry.content or "")
    return (
        f"{marker}\n\n{REGENERATED_NOTICE}\n\n"
        f"~ Commit Hash: {entry.commit_hash or ''}{content}"
    )


def prepare_tref_file(path: Path, index: ReferenceIndex) -> bool:
    """Rewrite one markdown file if it holds a tref marker.

    Returns True if the file was rewritten. Read/write failures and
    unknown terms are logged and leave the file untouched.
    """
    try:
        lines = path.read_text(encoding="utf-8").split("\n")
    except OSError:
        log.error("tref_file_read_failed", path=str(path), exc_info=True)
        return False

    for line in lines:
        if not line.startswith(TREF_MARKER_PREFIX):
            continue
        match = _TREF_RE.search(line)
        if match is None:
            continue

        parts = [part.strip() for part in match.group(1).split(",")]
        if len(parts) < 2:
            log.error("tref_marker_invalid", path=str(path), marker=match.group(0))
            return False
        external_spec, term = parts[0], parts[1]

        entry = find_local_xtref(index, external_spec, term)
        if entry is None:
            log.error(
                "tref_term_not_cached",
                path=str(path),
                spec=external_spec,
                term=term,
            )
            return False

        try:
            path.write_text(render_transcluded(match.group(0), entry), encoding="utf-8")
        except OSError:
            log.error("tref_file_write_failed", path=str(path), exc_info=True)
            return False

        log.info("tref_prepared", path=str(path), spec=external_spec, term=term)
        # A term file defines a single term.
        return True

    return False


def prepare_tref(directory: Path, xtrefs_path: Path) -> list[Path]:
    """Process every ``*.md`` file under ``directory`` recursively.

    Returns the files that were rewritten. Raises SpecRefError if the
    reference index cannot be read.
    """
    index = read_xtrefs_file(xtrefs_path)
    rewritten: list[Path] = []
    for path in sorted(directory.rglob("*.md")):
        if path.is_file() and prepare_tref_file(path, index):
            rewritten.append(path)

    log.info("prepare_tref_complete", directory=str(directory), rewritten=len(rewritten))
    return rewritten
