"""Index file listing every record, in directory-listing order."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adr.models import Record
    from adr.store import RecordStore

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.md"


def render_index(records: Iterable[Record]) -> str:
    lines = [f"- [{r.title or ''}]({r.link_target})" for r in records]
    body = "\n".join(lines)
    return f"# Architecture Decision Records\n\n## Decisions\n\n{body}\n"


def regenerate_index(store: RecordStore) -> Path:
    """Write index.md next to the records. No numeric sort is applied.

    The index lives inside the records directory, so each link is a bare
    record file name.
    """
    store.require_directory()
    records = store.records()
    path = store.directory / INDEX_FILENAME
    # Plain "utf-8" never writes a BOM.
    path.write_text(render_index(records), encoding="utf-8")
    logger.info("Wrote index of %d record(s) to %s", len(records), path)
    return path
