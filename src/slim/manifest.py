"""Reading, filtering and rewriting of the .stylelintignore manifest."""

from __future__ import annotations

import glob
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List

from .config import ManifestConfig
from .errors import SlimError
from .files import ensure_exists, iter_lines, write_text

logger = logging.getLogger(__name__)

DISABLE_COMMENT_RE = re.compile(r"^/\*\s*stylelint-disable\s*\*/$")


@dataclass
class IgnoreEntry:
    pattern: str
    files: List[Path] = field(default_factory=list)


Manifest = Dict[str, IgnoreEntry]


def read_manifest(
    path: str | Path,
    base_dir: str | Path = ".",
    cfg: ManifestConfig | None = None,
) -> Manifest:
    """Parse the manifest into pattern -> resolved file entries, in file order."""
    cfg = cfg or ManifestConfig()
    manifest_path = ensure_exists(path)
    manifest: Manifest = {}
    for line in iter_lines(manifest_path):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        files = resolve_pattern(expand_pattern(line, cfg), base_dir)
        if not files:
            logger.debug("Pattern %r matches no files, dropping it", line)
            continue

        manifest[line] = IgnoreEntry(pattern=line, files=files)
    return manifest


def expand_pattern(line: str, cfg: ManifestConfig) -> str:
    """Directory lines get the recursive wildcard appended."""
    if line.endswith(cfg.file_suffix):
        return line
    if line.endswith("/"):
        return f"{line}{cfg.directory_glob}"
    return f"{line}/{cfg.directory_glob}"


def resolve_pattern(pattern: str, base_dir: str | Path = ".") -> List[Path]:
    root = Path(base_dir)
    matches = glob.glob(pattern, root_dir=str(root), recursive=True)
    files = {(root / match).resolve() for match in matches}
    return sorted(p for p in files if p.is_file())


def manifest_files(manifest: Manifest) -> List[Path]:
    """Ordered, de-duplicated union of every entry's files."""
    seen: Dict[Path, None] = {}
    for entry in manifest.values():
        for path in entry.files:
            seen.setdefault(path, None)
    return list(seen)


def has_disable_comment(path: str | Path) -> bool:
    """True when the first non-blank line is a bare ``/* stylelint-disable */``."""
    for line in iter_lines(path):
        stripped = line.strip()
        if not stripped:
            continue
        return bool(DISABLE_COMMENT_RE.match(stripped))
    return False


def filter_disabled_files(files: Iterable[Path]) -> List[Path]:
    """Drop files that are already fully suppressed by a disable comment."""
    remaining: List[Path] = []
    for path in files:
        try:
            disabled = has_disable_comment(path)
        except SlimError as exc:
            logger.error("Error: filtering files containing a stylelint-disable comment - %s", exc)
            disabled = False
        if disabled:
            logger.debug("Skipping %s, already stylelint-disabled", path)
            continue
        remaining.append(path)
    return remaining


def filter_disabled_entries(manifest: Manifest) -> Manifest:
    filtered: Manifest = {}
    for pattern, entry in manifest.items():
        files = filter_disabled_files(entry.files)
        if files:
            filtered[pattern] = IgnoreEntry(pattern=pattern, files=files)
    return filtered


def read_manifest_lines(path: str | Path) -> List[str]:
    return list(iter_lines(ensure_exists(path)))


def render_manifest(manifest: Manifest, raw_lines: Iterable[str] | None = None) -> str:
    """Render kept entries; with ``raw_lines`` comments and blank lines stay in place."""
    if raw_lines is None:
        return "".join(f"{pattern}\n" for pattern, entry in manifest.items() if entry.files)

    kept: List[str] = []
    for line in raw_lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            kept.append(line)
            continue
        entry = manifest.get(line)
        if entry is not None and entry.files:
            kept.append(line)
    return "".join(f"{line}\n" for line in kept)


def write_manifest(path: str | Path, manifest: Manifest, raw_lines: Iterable[str] | None = None) -> None:
    write_text(path, render_manifest(manifest, raw_lines))


def truncate_manifest(path: str | Path) -> None:
    write_text(path, "")
