"""Template rendering and template source resolution.

Placeholders are bare upper-case tokens (NUMBER, TITLE, DATE, STATUS,
CONTEXT, DECISION, CONSEQUENCES) matched as literal substrings.

Substitution is sequential: each replacement runs over the output of the
previous one, so a value that contains a token applied later in the order is
substituted again. `render("TITLE", {"TITLE": "DATE", "DATE": "x"})` gives
"x". Callers rely on the fixed token order in `adr.codec`.

Template source precedence (first hit wins):
    1. explicit path argument            (must exist)
    2. $ADR_TEMPLATE                     (must exist)
    3. <records dir>/templates/template.md
    4. bundled adr/templates/template.md
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from importlib import resources
from pathlib import Path

from adr.errors import MissingTemplateError

logger = logging.getLogger(__name__)

TEMPLATE_ENV_VAR = "ADR_TEMPLATE"
DEFAULT_TEMPLATE = "template.md"
BOOTSTRAP_TEMPLATE = "init.md"
LOCAL_TEMPLATE = Path("templates") / DEFAULT_TEMPLATE


def render(template: str, values: Mapping[str, str]) -> str:
    """Replace every occurrence of each key with its value, in mapping order."""
    text = template
    for token, value in values.items():
        text = text.replace(token, value)
    return text


def bundled_template(name: str = DEFAULT_TEMPLATE) -> str:
    """Read a template shipped inside the package."""
    return (resources.files("adr") / "templates" / name).read_text(encoding="utf-8")


def resolve_template(
    explicit: Path | str | None = None,
    *,
    directory: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Return the text of the highest-priority template source."""
    env = os.environ if environ is None else environ

    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise MissingTemplateError(path, "argument")
        logger.debug("Using template %s", path)
        return path.read_text(encoding="utf-8")

    override = env.get(TEMPLATE_ENV_VAR)
    if override:
        path = Path(override)
        if not path.is_file():
            raise MissingTemplateError(path, TEMPLATE_ENV_VAR)
        logger.debug("Using template %s from $%s", path, TEMPLATE_ENV_VAR)
        return path.read_text(encoding="utf-8")

    if directory is not None:
        local = directory / LOCAL_TEMPLATE
        if local.is_file():
            logger.debug("Using store-local template %s", local)
            return local.read_text(encoding="utf-8")

    return bundled_template(DEFAULT_TEMPLATE)
