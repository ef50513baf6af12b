"""Link graph maintenance: status-section annotations between records.

A link is one line appended to the source record's Status section:

    Supersedes [Use MySQL](0001-use-mysql.md)

Mutual links are two independent file writes; a failure between them leaves
a one-sided link behind.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from adr.errors import InvalidArgumentError, RecordNotFoundError

if TYPE_CHECKING:
    from adr.models import Record
    from adr.store import RecordStore

logger = logging.getLogger(__name__)

SUPERSEDES = "Supersedes"
SUPERSEDED_BY = "Superseded by"

_LINK_SPEC_RE = re.compile(r"^(\d+):([\w -]+?)(?::([\w -]+))?$")


@dataclass(frozen=True)
class LinkSpec:
    """A link requested at creation time: `<to>:<forward>[:<reverse>]`."""

    to_number: int
    forward: str
    reverse: str | None = None


def parse_link_spec(spec: str) -> LinkSpec:
    """Parse `3:Amends:Amended by` into a LinkSpec."""
    m = _LINK_SPEC_RE.match(spec.strip())
    if not m:
        raise InvalidArgumentError(
            f"Malformed link specification {spec!r}; expected <number>:<link text>[:<reverse link text>]"
        )
    forward = m.group(2).strip()
    reverse = m.group(3)
    if not forward or (reverse is not None and not reverse.strip()):
        raise InvalidArgumentError(f"Blank link text in link specification {spec!r}")
    return LinkSpec(int(m.group(1)), forward, reverse.strip() if reverse is not None else None)


def _validate_pair(from_number: int, to_number: int, link_text: str) -> None:
    if not link_text.strip():
        raise InvalidArgumentError("Link text must not be blank")
    if from_number == to_number:
        raise InvalidArgumentError(f"Record {from_number} cannot link to itself")
    if from_number <= 0 or to_number <= 0:
        raise InvalidArgumentError(
            f"Record numbers must be positive (got {from_number} and {to_number})"
        )


def add_link(
    store: RecordStore,
    from_number: int,
    link_text: str,
    to_number: int,
    reverse_text: str | None = None,
) -> None:
    """Annotate `from_number` with a link to `to_number`.

    With `reverse_text`, the target gets the mirror annotation in a second,
    separate write.
    """
    _validate_pair(from_number, to_number, link_text)

    source = store.get(from_number)
    target = store.get(to_number)
    missing = [n for n, r in ((from_number, source), (to_number, target)) if r is None]
    if missing:
        raise RecordNotFoundError(missing)

    source.append_status(f"{link_text} [{target.title or ''}]({target.link_target})")
    store.save(source)
    logger.info("Linked %d -> %d (%s)", from_number, to_number, link_text)

    if reverse_text:
        add_link(store, to_number, reverse_text, from_number)


def clear_status(store: RecordStore, number: int) -> Record:
    """Empty a record's Status section and rewrite its file."""
    if number <= 0:
        raise InvalidArgumentError(f"Record numbers must be positive (got {number})")
    record = store.get(number)
    if record is None:
        raise RecordNotFoundError([number])
    record.status = ""
    store.save(record)
    logger.info("Cleared status of record %d", number)
    return record
