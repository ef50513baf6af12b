"""Tests for the record store: listing, numbering, creation, initialization."""

from __future__ import annotations

import logging
import pytest
from datetime import date
from pathlib import Path

from adr.errors import ConfigurationConflictError, InvalidArgumentError, MissingTemplateError
from adr.links import LinkSpec, add_link
from adr.store import BOOTSTRAP_TITLE, RecordStore

TODAY = date(2026, 2, 18)


@pytest.fixture
def store(tmp_path: Path) -> RecordStore:
    return RecordStore(tmp_path / "doc" / "adr", environ={})


def _write(store: RecordStore, name: str, text: str) -> Path:
    store.directory.mkdir(parents=True, exist_ok=True)
    path = store.directory / name
    path.write_text(text, encoding="utf-8")
    return path


class TestListing:
    def test_missing_directory_is_empty(self, store: RecordStore, caplog):
        with caplog.at_level(logging.ERROR):
            assert store.records() == []
        assert "does not exist" in caplog.text
        assert not store.directory.exists()

    def test_only_canonical_names(self, store: RecordStore):
        store.create("Real one", today=TODAY)
        _write(store, "README.md", "# 9. Readme\n\nDate: x\n")
        _write(store, "12-short.md", "# 12. Short\n\nDate: x\n")
        _write(store, "0003-notes.txt", "# 3. Notes\n\nDate: x\n")
        assert [r.number for r in store.records()] == [1]

    def test_records_carry_path(self, store: RecordStore):
        store.create("Use Redis", today=TODAY)
        (record,) = store.records()
        assert record.path == store.directory / "0001-use-redis.md"

    def test_filter_by_number(self, store: RecordStore):
        store.create("One", today=TODAY)
        store.create("Two", today=TODAY)
        assert [r.title for r in store.records(2)] == ["Two"]
        assert store.records(5) == []

    def test_get(self, store: RecordStore):
        store.create("One", today=TODAY)
        assert store.get(1).title == "One"
        assert store.get(2) is None

    def test_headerless_file_uses_filename_number(self, store: RecordStore):
        _write(store, "0004-loose-notes.md", "## Status\n\nproposed\n")
        record = store.get(4)
        assert record is not None
        assert record.title is None
        assert record.status == "proposed"


class TestNumbering:
    def test_empty_store_starts_at_one(self, store: RecordStore):
        assert store.next_number() == 1

    def test_sequential(self, store: RecordStore):
        numbers = [store.create(f"Decision {i}", today=TODAY).record.number for i in range(5)]
        assert numbers == [1, 2, 3, 4, 5]

    def test_gaps_are_not_filled(self, store: RecordStore):
        _write(store, "0001-a.md", "# 1. A\n\nDate: x\n")
        _write(store, "0007-b.md", "# 7. B\n\nDate: x\n")
        assert store.create("C", today=TODAY).record.number == 8

    def test_headerless_file_still_blocks_its_number(self, store: RecordStore):
        _write(store, "0009-broken.md", "no heading at all")
        assert store.next_number() == 10


class TestCreate:
    def test_writes_rendered_file(self, store: RecordStore):
        result = store.create("Use a Database!", today=TODAY)
        path = store.directory / "0001-use-a-database.md"
        assert result.record.path == path
        text = path.read_text(encoding="utf-8")
        assert text.startswith("# 1. Use a Database!\n")
        assert "Date: 2026-02-18" in text

    def test_default_status_and_empty_sections(self, store: RecordStore):
        record = store.create("X", today=TODAY).record
        assert record.status == "accepted"
        assert record.context == ""
        assert record.decision == ""

    def test_custom_status(self, store: RecordStore):
        assert store.create("X", status="proposed", today=TODAY).record.status == "proposed"

    def test_creates_directory(self, store: RecordStore):
        assert not store.directory.exists()
        store.create("X", today=TODAY)
        assert store.directory.is_dir()

    def test_empty_slug(self, store: RecordStore):
        record = store.create("!!!", today=TODAY).record
        assert record.path.name == "0001-.md"
        assert store.get(1).title == "!!!"

    def test_uses_explicit_template(self, tmp_path: Path):
        tpl = tmp_path / "short.md"
        tpl.write_text("# NUMBER. TITLE\n\nDate: DATE\n\n## Status\n\nSTATUS\n", encoding="utf-8")
        store = RecordStore(tmp_path / "adr", template=tpl, environ={})
        record = store.create("Short", today=TODAY).record
        assert "## Context" not in record.path.read_text(encoding="utf-8")

    def test_missing_template_writes_nothing(self, tmp_path: Path):
        store = RecordStore(tmp_path / "adr", template=tmp_path / "missing.md", environ={})
        with pytest.raises(MissingTemplateError):
            store.create("X", today=TODAY)
        assert not store.directory.exists()

    def test_non_positive_target_rejected_before_write(self, store: RecordStore):
        with pytest.raises(InvalidArgumentError):
            store.create("X", supersedes=[0], today=TODAY)
        assert not store.directory.exists()

    def test_target_equal_to_new_number_rejected(self, store: RecordStore):
        store.create("One", today=TODAY)
        with pytest.raises(InvalidArgumentError):
            store.create("Two", links=[LinkSpec(2, "Amends", "Amended by")], today=TODAY)
        assert store.get(2) is None


class TestCreateSupersede:
    def test_supersede(self, store: RecordStore):
        store.create("First", today=TODAY)
        store.create("Second", status="proposed", today=TODAY)
        result = store.create("New decision", supersedes=[2], today=TODAY)

        assert result.ok
        assert result.superseded == [2]
        old = store.get(2)
        assert old.status == "Superseded by [New decision](0003-new-decision.md)"
        assert result.record.status == "accepted\n\nSupersedes [Second](0002-second.md)"
        assert store.get(1).status == "accepted"

    def test_supersede_several(self, store: RecordStore):
        store.create("A", today=TODAY)
        store.create("B", today=TODAY)
        result = store.create("C", supersedes=[1, 2], today=TODAY)
        assert result.superseded == [1, 2]
        assert result.record.status.splitlines()[-1] == "Supersedes [B](0002-b.md)"
        assert "Supersedes [A](0001-a.md)" in result.record.status

    def test_missing_target_is_isolated(self, store: RecordStore):
        store.create("A", today=TODAY)
        store.create("B", today=TODAY)
        result = store.create("C", supersedes=[9, 2], today=TODAY)

        assert not result.ok
        assert list(result.failures) == [9]
        assert result.superseded == [2]
        assert store.get(2).status.startswith("Superseded by [C]")
        assert store.get(3) is not None


class TestCreateLinks:
    def test_link_with_reverse(self, store: RecordStore):
        store.create("Base", today=TODAY)
        result = store.create("Addon", links=[LinkSpec(1, "Amends", "Amended by")], today=TODAY)
        assert result.linked == [1]
        assert "Amends [Base](0001-base.md)" in result.record.status
        assert store.get(1).status.endswith("Amended by [Addon](0002-addon.md)")

    def test_link_without_reverse(self, store: RecordStore):
        store.create("Base", today=TODAY)
        store.create("Addon", links=[LinkSpec(1, "Relates to")], today=TODAY)
        assert store.get(1).status == "accepted"

    def test_missing_link_target(self, store: RecordStore):
        result = store.create("Lonely", links=[LinkSpec(4, "Amends", "Amended by")], today=TODAY)
        assert 4 in result.failures
        assert result.record.status == "accepted"


class TestInitialize:
    def test_bootstrap_record(self, store: RecordStore):
        result = store.initialize()
        record = result.record
        assert record.number == 1
        assert record.title == BOOTSTRAP_TITLE
        assert record.path.name == "0001-record-architecture-decisions.md"
        assert record.context == "We need to record the architectural decisions made on this project."

    def test_persists_marker(self, tmp_path: Path):
        store = RecordStore(tmp_path / "decisions", environ={})
        store.initialize(persist_marker=True, cwd=tmp_path)
        marker = tmp_path / ".adr-dir"
        assert marker.read_text(encoding="utf-8").strip() == str(tmp_path / "decisions")

    def test_no_marker_by_default(self, tmp_path: Path):
        RecordStore(tmp_path / "adr", environ={}).initialize(cwd=tmp_path)
        assert not (tmp_path / ".adr-dir").exists()


class TestHorizontalRules:
    RULED = (
        "---\n# 2. Ruled\n\nDate: 2026-01-05\n\n"
        "## Status\n\naccepted\n\n---\n\n## Context\n\nc\n"
    )

    def test_leading_rule_does_not_break_listing(self, store: RecordStore):
        store.create("First", today=TODAY)
        _write(store, "0002-ruled.md", self.RULED)

        assert store.create("Third", today=TODAY).record.number == 3
        ruled = store.get(2)
        assert ruled.title == "Ruled"
        assert ruled.date == "2026-01-05"
        assert ruled.context == "c"
        assert ruled.metadata == {}

    def test_ruled_record_can_be_linked(self, store: RecordStore):
        store.create("First", today=TODAY)
        _write(store, "0002-ruled.md", self.RULED)
        add_link(store, 1, "Relates to", 2, "Related by")
        assert "Related by [First](0001-first.md)" in store.get(2).status


class TestCreateDuplicates:
    def test_repeated_supersede_target(self, store: RecordStore):
        store.create("A", today=TODAY)
        result = store.create("B", supersedes=[1, 1], today=TODAY)
        assert result.superseded == [1]
        assert result.record.status.count("Supersedes") == 1
        assert store.get(1).status == "Superseded by [B](0002-b.md)"

    def test_repeated_link_spec(self, store: RecordStore):
        store.create("A", today=TODAY)
        spec = LinkSpec(1, "Amends", "Amended by")
        result = store.create("B", links=[spec, spec], today=TODAY)
        assert result.linked == [1]
        assert store.get(1).status.count("Amended by") == 1


class TestInitializeMarkerConflict:
    def test_marker_refused_while_env_set(self, tmp_path: Path):
        store = RecordStore(tmp_path / "decisions", environ={"ADR_DIRECTORY": "elsewhere"})
        with pytest.raises(ConfigurationConflictError):
            store.initialize(persist_marker=True, cwd=tmp_path)
        assert not (tmp_path / ".adr-dir").exists()
        assert not store.directory.exists()
