"""Architecture decision records kept as numbered markdown files.

Layout:
    doc/adr/                              # or $ADR_DIRECTORY / .adr-dir
    ├── 0001-record-architecture-decisions.md
    ├── 0002-use-postgresql.md
    ├── index.md                          # generated by `adr index`
    └── templates/
        └── template.md                   # optional store-local template

Each record is one markdown document:

    # 2. Use PostgreSQL

    Date: 2026-02-18

    ## Status

    accepted

    Supersedes [Use MySQL](0001-use-mysql.md)

    ## Context
    ...

Only the Status section is rewritten after creation (link annotations are
appended, supersession clears it first).
"""

from adr.codec import decode, encode
from adr.config import AdrConfig, load_config
from adr.models import Record, slugify
from adr.store import CreateResult, RecordStore

__all__ = [
    "AdrConfig",
    "CreateResult",
    "Record",
    "RecordStore",
    "decode",
    "encode",
    "load_config",
    "slugify",
]
