"""Record model and file naming."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# <4+ digit number>-<slug>.md; the slug may be empty for all-punctuation titles.
RECORD_FILE_RE = re.compile(r"^(\d{4,})-(.*)\.md$")

_NON_ALNUM_RE = re.compile(r"[\W_]+")


def slugify(title: str) -> str:
    """Lower-case slug: runs of non-alphanumerics become one hyphen, ends trimmed.

    >>> slugify("Use a Database!")
    'use-a-database'
    """
    return _NON_ALNUM_RE.sub("-", title.lower()).strip("-")


def record_filename(number: int, title: str) -> str:
    return f"{number:04d}-{slugify(title)}.md"


@dataclass
class Record:
    """One decision record.

    Every logical field may be unset (None) when a file is only partially
    parseable; unset and empty render the same way.
    """

    number: int | None = None
    title: str | None = None
    date: str | None = None
    status: str | None = None
    context: str | None = None
    decision: str | None = None
    consequences: str | None = None
    path: Path | None = None               # backing file, set on load/save
    metadata: dict[str, Any] = field(default_factory=dict)  # YAML front matter, if any

    @property
    def filename(self) -> str:
        """Canonical file name derived from (number, title)."""
        if self.number is None:
            raise ValueError("Record has no number; cannot derive a file name")
        return record_filename(self.number, self.title or "")

    @property
    def link_target(self) -> str:
        """File basename used when another record links to this one."""
        return self.path.name if self.path is not None else self.filename

    def append_status(self, line: str) -> None:
        """Append a line to the status log, blank-line separated."""
        if self.status:
            self.status = f"{self.status}\n\n{line}"
        else:
            self.status = line
