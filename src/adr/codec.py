"""Record <-> markdown text.

Decoding is section recognition, not a grammar:

    # <number>. <title>          ┐ heading; absent → number/title/date unset
    Date: <date>                 ┘
    ## Status                    ┐ each section runs until the next "## "
    ...                          │ heading or end of document, trimmed;
    ## Context / Decision /      │ an absent heading leaves the field unset
    ## Consequences              ┘

An optional YAML front-matter block is split off first and kept in
`Record.metadata`.
"""

from __future__ import annotations

import logging
import re

import frontmatter

from adr.models import Record
from adr.template import bundled_template, render

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(
    r"^#[ \t]+(\d+)\.[ \t]*(.*?)[ \t]*\n(?:[ \t]*\n)*.*?Date:[ \t]*(.*?)[ \t]*$",
    re.MULTILINE,
)

SECTIONS = ("status", "context", "decision", "consequences")


def _section_re(label: str) -> re.Pattern[str]:
    return re.compile(
        rf"^##[ \t]+{re.escape(label)}[ \t]*$\n?(.*?)(?=^##[ \t]|\Z)",
        re.MULTILINE | re.DOTALL,
    )


_SECTION_RES = {name: _section_re(name.capitalize()) for name in SECTIONS}


def encode(record: Record, template: str | None = None) -> str:
    """Render a record through the template (bundled default if omitted)."""
    if template is None:
        template = bundled_template()
    # Order matters: later tokens are also replaced inside earlier values.
    values = {
        "NUMBER": "" if record.number is None else str(record.number),
        "TITLE": record.title or "",
        "DATE": record.date or "",
        "STATUS": record.status or "",
        "CONTEXT": record.context or "",
        "DECISION": record.decision or "",
        "CONSEQUENCES": record.consequences or "",
    }
    text = render(template, values)
    if record.metadata:
        post = frontmatter.Post(text)
        post.metadata.update(record.metadata)
        text = frontmatter.dumps(post).rstrip("\n") + "\n"
    return text


def _split_front_matter(text: str) -> tuple[dict, str]:
    """Return (metadata, body); a block that fails to parse or swallows the
    title heading is treated as an opening horizontal rule, not front matter."""
    try:
        post = frontmatter.loads(text)
    except Exception as exc:
        logger.warning("Ignoring unparseable front matter: %s", exc)
        return {}, text
    if not post.metadata:
        return {}, text
    if _HEADING_RE.search(text) and not _HEADING_RE.search(post.content):
        logger.warning("Front matter block hides the title heading; reading it as body text")
        return {}, text
    return dict(post.metadata), post.content


def decode(text: str) -> Record:
    """Parse rendered text back into a (possibly partial) record."""
    metadata, body = _split_front_matter(text)
    record = Record(metadata=metadata)

    m = _HEADING_RE.search(body)
    if m:
        record.number = int(m.group(1))
        record.title = m.group(2)
        record.date = m.group(3)

    for name, pattern in _SECTION_RES.items():
        sm = pattern.search(body)
        if sm:
            setattr(record, name, sm.group(1).strip())
    return record
