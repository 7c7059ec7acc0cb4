"""Error types raised by SLIM operations."""

from __future__ import annotations

from pathlib import Path


class SlimError(Exception):
    """Base exception for SLIM errors."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = str(path) if path is not None else None
        if self.path:
            message = f"{message} - {self.path}"
        super().__init__(message)


class NotFoundError(SlimError):
    """A required file does not exist."""


class ConfigParseError(SlimError):
    """A configuration file is malformed."""


class ExternalToolError(SlimError):
    """The lint engine could not be run or returned unusable output."""


class FileAccessError(SlimError):
    """Reading, writing or renaming a file failed."""
