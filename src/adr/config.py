"""Configuration: records directory resolution and tool settings.

Records directory: $ADR_DIRECTORY or a `.adr-dir` marker file in the working
directory (never both), else `doc/adr`.

Tool settings: environment variables > adr.toml ([adr] table) > defaults.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from adr.errors import ConfigurationConflictError

DIRECTORY_ENV_VAR = "ADR_DIRECTORY"
MARKER_FILENAME = ".adr-dir"
DEFAULT_DIRECTORY = Path("doc") / "adr"
_CONFIG_FILENAME = "adr.toml"


@dataclass
class AdrConfig:
    """Resolved configuration, passed explicitly into RecordStore."""

    directory: Path = DEFAULT_DIRECTORY
    template: Path | None = None
    log_level: str = "INFO"


def resolve_directory(cwd: Path | None = None, environ: Mapping[str, str] | None = None) -> Path:
    """Return the records directory for `cwd`.

    Raises ConfigurationConflictError if both the environment variable and
    the marker file are present.
    """
    cwd = cwd or Path.cwd()
    env = os.environ if environ is None else environ

    from_env = env.get(DIRECTORY_ENV_VAR)
    marker = cwd / MARKER_FILENAME
    if from_env and marker.is_file():
        raise ConfigurationConflictError(
            f"Both ${DIRECTORY_ENV_VAR} and {marker} set the records directory; remove one"
        )
    if from_env:
        return cwd / from_env
    if marker.is_file():
        return cwd / marker.read_text(encoding="utf-8").strip()
    return cwd / DEFAULT_DIRECTORY


def write_directory_marker(
    directory: Path | str,
    cwd: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Persist `directory` in the marker file so later runs resolve to it.

    Refuses while $ADR_DIRECTORY is set: the marker would conflict with it
    on every later run.
    """
    cwd = cwd or Path.cwd()
    env = os.environ if environ is None else environ
    if env.get(DIRECTORY_ENV_VAR):
        raise ConfigurationConflictError(
            f"${DIRECTORY_ENV_VAR} is set; unset it before saving {directory} to {MARKER_FILENAME}"
        )
    marker = cwd / MARKER_FILENAME
    marker.write_text(f"{directory}\n", encoding="utf-8")
    return marker


def load_config(
    config_path: Path | None = None,
    *,
    cwd: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> AdrConfig:
    """Load configuration from environment variables and optional adr.toml."""
    cwd = cwd or Path.cwd()
    env = os.environ if environ is None else environ

    file_data: dict = {}
    candidate = config_path or cwd / _CONFIG_FILENAME
    if candidate.exists():
        file_data = tomllib.loads(candidate.read_text(encoding="utf-8"))
    adr_data = file_data.get("adr", {})

    template = adr_data.get("template")
    return AdrConfig(
        directory=resolve_directory(cwd, env),
        template=cwd / template if template else None,
        log_level=env.get("ADR_LOG_LEVEL", adr_data.get("log_level", "INFO")),
    )
