"""Error kinds raised by the instrumentation pipeline."""

from __future__ import annotations

from pathlib import Path


class TimecostError(RuntimeError):
    """Base class for failures that end a unit of work."""


class PathError(TimecostError):
    """The root path handed to the driver is missing or inaccessible."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"invalid path {path}: {reason}")
        self.path = path
        self.reason = reason


class ParseError(TimecostError):
    """A source file could not be read or does not parse.

    ``line`` and ``column`` are 1-based and point at the first problem the
    parser reported; they are ``None`` when the file could not be read.
    """

    def __init__(
        self,
        path: Path | None,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        location = str(path) if path is not None else "<source>"
        if line is not None:
            location = f"{location}:{line}:{column}"
        super().__init__(f"failed to parse {location}: {message}")
        self.path = path
        self.line = line
        self.column = column


class WriteError(TimecostError):
    """Rendered text could not be persisted."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"failed to write {path}: {reason}")
        self.path = path
        self.reason = reason
