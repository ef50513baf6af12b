"""Entry point: python -m adr <command>

- init [DIR]                      First record; DIR is also saved to .adr-dir
- new [-s N] [-l SPEC] TITLE...   New record, optionally superseding/linking
- link SOURCE TEXT TARGET [REV]   Add a link annotation (and its reverse)
- list                            Paths of all records
- show NUMBER                     Print one record
- index                           Regenerate index.md
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from adr.config import AdrConfig, load_config
from adr.errors import AdrError
from adr.index import regenerate_index
from adr.links import add_link, parse_link_spec
from adr.store import RecordStore


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="adr", description="Manage architecture decision records.")
    sub = parser.add_subparsers(dest="command", required=True)

    p_init = sub.add_parser("init", help="create the records directory and its first record")
    p_init.add_argument("directory", nargs="?", help="records directory (saved to .adr-dir)")

    p_new = sub.add_parser("new", help="create a new record")
    p_new.add_argument("title", nargs="+")
    p_new.add_argument("-s", "--supersedes", type=int, action="append", default=[], metavar="N")
    p_new.add_argument("-l", "--link", action="append", default=[], metavar="N:TEXT:REVERSE")
    p_new.add_argument("--status", default="accepted")

    p_link = sub.add_parser("link", help="link two existing records")
    p_link.add_argument("source", type=int)
    p_link.add_argument("text")
    p_link.add_argument("target", type=int)
    p_link.add_argument("reverse", nargs="?")

    sub.add_parser("list", help="print the path of every record")

    p_show = sub.add_parser("show", help="print one record")
    p_show.add_argument("number", type=int)

    sub.add_parser("index", help="regenerate index.md")
    return parser


def _store(config: AdrConfig, directory: Path | None = None) -> RecordStore:
    return RecordStore(directory or config.directory, template=config.template)


def _run(args: argparse.Namespace, config: AdrConfig) -> int:
    if args.command == "init":
        directory = Path(args.directory) if args.directory else None
        result = _store(config, directory).initialize(persist_marker=directory is not None)
        print(result.record.path)
        return 0

    if args.command == "new":
        links = [parse_link_spec(spec) for spec in args.link]
        result = _store(config).create(
            " ".join(args.title),
            status=args.status,
            supersedes=args.supersedes,
            links=links,
        )
        print(result.record.path)
        for number, reason in result.failures.items():
            print(f"error: record {number}: {reason}", file=sys.stderr)
        return 0 if result.ok else 1

    if args.command == "link":
        add_link(_store(config), args.source, args.text, args.target, args.reverse)
        return 0

    if args.command == "list":
        for record in _store(config).records():
            print(record.path)
        return 0

    if args.command == "show":
        record = _store(config).get(args.number)
        if record is None:
            print(f"error: no record with number {args.number}", file=sys.stderr)
            return 1
        print(record.path.read_text(encoding="utf-8"), end="")
        return 0

    if args.command == "index":
        print(regenerate_index(_store(config)))
        return 0

    return 2


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        config = load_config()
        _setup_logging(config.log_level)
        return _run(args, config)
    except AdrError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
