"""Error kinds raised by the record store and its collaborators."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path


class AdrError(Exception):
    """Base class for every error this package raises on purpose."""


class ConfigurationConflictError(AdrError):
    """Both the environment variable and the marker file name a directory."""


class MissingTemplateError(AdrError, FileNotFoundError):
    """An explicitly named template path does not exist."""

    def __init__(self, path: Path | str, source: str = "argument") -> None:
        self.path = Path(path)
        self.source = source
        super().__init__(f"Template not found ({source}): {self.path}")


class MissingDirectoryError(AdrError):
    """The records directory does not exist."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)
        super().__init__(f"Records directory does not exist: {self.directory}")


class InvalidArgumentError(AdrError, ValueError):
    """A call was rejected before any I/O was attempted."""


class RecordNotFoundError(AdrError):
    """One or more referenced record numbers have no backing file."""

    def __init__(self, numbers: Iterable[int]) -> None:
        self.numbers = sorted(set(numbers))
        listed = ", ".join(str(n) for n in self.numbers)
        super().__init__(f"No record with number {listed}")
