"""Small filesystem helpers shared by the manifest and suppression code."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List

from .errors import FileAccessError, NotFoundError


@dataclass
class FileStats:
    size: int
    length: int


def ensure_exists(path: str | Path) -> Path:
    """Return ``path`` as a Path, raising NotFoundError when it is missing."""
    fpath = Path(path)
    if not fpath.exists():
        raise NotFoundError("There is no file on this path", fpath)
    return fpath


def file_stats(path: str | Path) -> FileStats:
    """Size in bytes and number of newline-separated lines of a file."""
    fpath = ensure_exists(path)
    try:
        size = fpath.stat().st_size
        length = len(fpath.read_text(encoding="utf-8").split("\n"))
    except OSError as exc:
        raise FileAccessError(f"Cannot stat file ({exc})", fpath) from exc
    return FileStats(size=size, length=length)


def read_text(path: str | Path) -> str:
    fpath = ensure_exists(path)
    try:
        return fpath.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileAccessError(f"Cannot read file ({exc})", fpath) from exc


def read_lines(path: str | Path) -> List[str]:
    # split keeps a trailing empty element, so joining restores the final newline
    return read_text(path).split("\n")


def iter_lines(path: str | Path) -> Iterator[str]:
    """Lazily yield lines without their line endings or a leading BOM."""
    fpath = ensure_exists(path)
    try:
        with fpath.open(encoding="utf-8-sig") as handle:
            for line in handle:
                yield line.rstrip("\r\n")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileAccessError(f"Cannot read file ({exc})", fpath) from exc


def write_text(path: str | Path, data: str) -> None:
    fpath = Path(path)
    try:
        fpath.write_text(data, encoding="utf-8")
    except OSError as exc:
        raise FileAccessError(f"Cannot write file ({exc})", fpath) from exc


def write_lines(path: str | Path, lines: List[str]) -> None:
    write_text(path, "\n".join(lines))


def rename(src: str | Path, dst: str | Path) -> None:
    try:
        os.replace(src, dst)
    except OSError as exc:
        raise FileAccessError(f"Cannot rename file to {dst} ({exc})", src) from exc
