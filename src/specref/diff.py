"""Line-level difference between cached and live definition text.

This is a set difference over lines, not a sequence alignment. Specs
change in whole paragraphs, so it is enough to show what went and what
came in the detail panel.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

NO_REMOVED_CONTENT = "(no removed content)"
NO_ADDED_CONTENT = "(no added content)"

_NEWLINES_RE = re.compile(r"\n+")


def _split_lines(text: str | None) -> list[str]:
    if not text:
        return []
    return [line.strip() for line in _NEWLINES_RE.split(text) if line.strip()]


@dataclass
class LineDiff:
    old_unique: list[str] = field(default_factory=list)
    new_unique: list[str] = field(default_factory=list)

    @property
    def has_differences(self) -> bool:
        return bool(self.old_unique or self.new_unique)

    @property
    def old_display(self) -> str:
        return "\n".join(self.old_unique) if self.old_unique else NO_REMOVED_CONTENT

    @property
    def new_display(self) -> str:
        return "\n".join(self.new_unique) if self.new_unique else NO_ADDED_CONTENT


def extract_line_diff(old_text: str | None, new_text: str | None) -> LineDiff:
    """Return lines only in ``old_text`` and lines only in ``new_text``."""
    old_lines = _split_lines(old_text)
    new_lines = _split_lines(new_text)
    return LineDiff(
        old_unique=[line for line in old_lines if line not in new_lines],
        new_unique=[line for line in new_lines if line not in old_lines],
    )
