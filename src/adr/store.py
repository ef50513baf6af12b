"""Record store: one markdown file per record in a single directory.

    store = RecordStore(Path("doc/adr"))
    result = store.create("Use PostgreSQL", supersedes=[2])
    store.get(3).status

Single writer at a time: two concurrent `create` calls can compute the same
next number from the same directory listing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from adr.codec import decode, encode
from adr.config import write_directory_marker
from adr.errors import InvalidArgumentError, MissingDirectoryError, RecordNotFoundError
from adr.links import SUPERSEDED_BY, SUPERSEDES, LinkSpec, add_link, clear_status
from adr.models import RECORD_FILE_RE, Record, record_filename
from adr.template import BOOTSTRAP_TEMPLATE, bundled_template, resolve_template

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "accepted"
BOOTSTRAP_TITLE = "Record architecture decisions"


@dataclass
class CreateResult:
    """Outcome of `RecordStore.create`.

    `superseded` / `linked` list the targets that were updated; `failures`
    maps each target that could not be updated to the reason. Earlier
    successful writes are never rolled back.
    """

    record: Record
    superseded: list[int] = field(default_factory=list)
    linked: list[int] = field(default_factory=list)
    failures: dict[int, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


class RecordStore:
    """Enumerate, load, number and write records in `directory`."""

    def __init__(
        self,
        directory: Path | str,
        template: Path | str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.directory = Path(directory)
        self.template = template
        self._environ = environ

    # ── Reading ──────────────────────────────────────────────

    def require_directory(self) -> None:
        if not self.directory.is_dir():
            raise MissingDirectoryError(self.directory)

    def _record_files(self) -> list[Path]:
        """Canonically named record files, in directory-listing order."""
        return [
            p for p in self.directory.iterdir()
            if p.is_file() and RECORD_FILE_RE.match(p.name)
        ]

    def _load(self, path: Path) -> Record:
        record = decode(path.read_text(encoding="utf-8"))
        record.path = path
        if record.number is None:
            # No parseable heading: fall back to the number in the file name.
            record.number = int(RECORD_FILE_RE.match(path.name).group(1))
            logger.warning("No '# N. Title' heading in %s; using number from file name", path.name)
        return record

    def records(self, number: int | None = None) -> list[Record]:
        """All records (or just `number`), each carrying its backing path.

        A missing directory is reported and treated as an empty store.
        """
        if not self.directory.is_dir():
            logger.error("%s", MissingDirectoryError(self.directory))
            return []

        found: list[Record] = []
        for path in self._record_files():
            record = self._load(path)
            if number is None or record.number == number:
                found.append(record)
        return found

    def get(self, number: int) -> Record | None:
        matches = self.records(number)
        if len(matches) > 1:
            logger.warning(
                "Record %d has %d files; using %s",
                number, len(matches), matches[0].path.name,
            )
        return matches[0] if matches else None

    def next_number(self) -> int:
        return max((r.number for r in self.records()), default=0) + 1

    # ── Writing ──────────────────────────────────────────────

    def template_text(self) -> str:
        return resolve_template(self.template, directory=self.directory, environ=self._environ)

    def save(self, record: Record, template: str | None = None) -> Path:
        """Encode `record` and overwrite its backing file."""
        if template is None:
            template = self.template_text()
        path = record.path or self.directory / record.filename
        text = encode(record, template)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        record.path = path
        logger.debug("Wrote %s", path)
        return path

    def create(
        self,
        title: str,
        status: str = DEFAULT_STATUS,
        supersedes: Iterable[int] = (),
        links: Iterable[LinkSpec] = (),
        *,
        today: date | None = None,
        template: str | None = None,
    ) -> CreateResult:
        """Write a new record, then apply supersessions and links to it.

        Each supersede/link target is processed independently; a missing
        target is logged and collected in `CreateResult.failures`.
        """
        # Repeated targets would clear and annotate the same record twice.
        supersedes = list(dict.fromkeys(supersedes))
        links = list(dict.fromkeys(links))
        number = self.next_number()

        for target in supersedes + [spec.to_number for spec in links]:
            if target <= 0:
                raise InvalidArgumentError(f"Record numbers must be positive (got {target})")
            if target == number:
                raise InvalidArgumentError(f"New record {number} cannot link to itself")
        if template is None:
            template = self.template_text()

        record = Record(
            number=number,
            title=title,
            date=(today or date.today()).isoformat(),
            status=status,
        )
        record.path = self.directory / record_filename(number, title)
        self.save(record, template)
        logger.info("Created record %d: %s", number, record.path)

        result = CreateResult(record=record)
        for target in supersedes:
            try:
                clear_status(self, target)
                add_link(self, number, SUPERSEDES, target, SUPERSEDED_BY)
            except RecordNotFoundError as exc:
                logger.error("Cannot supersede record %d: %s", target, exc)
                result.failures[target] = str(exc)
            else:
                result.superseded.append(target)

        for spec in links:
            try:
                add_link(self, number, spec.forward, spec.to_number, spec.reverse)
            except RecordNotFoundError as exc:
                logger.error("Cannot link record %d to %d: %s", number, spec.to_number, exc)
                result.failures[spec.to_number] = str(exc)
            else:
                result.linked.append(spec.to_number)

        result.record = self.get(number) or record
        return result

    def initialize(self, persist_marker: bool = False, cwd: Path | None = None) -> CreateResult:
        """Create the first record, documenting the decision to keep records.

        With `persist_marker`, the directory is also written to the marker
        file so later runs in `cwd` resolve to it.
        """
        if persist_marker:
            marker = write_directory_marker(self.directory, cwd, environ=self._environ)
            logger.info("Wrote directory marker %s", marker)
        return self.create(BOOTSTRAP_TITLE, template=bundled_template(BOOTSTRAP_TEMPLATE))
