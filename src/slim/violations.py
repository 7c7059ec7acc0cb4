"""Violation queries against the lint engine with the manifest hidden."""

from __future__ import annotations

import contextlib
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List

from .adapters.stylelint import FileReport, LintEngine
from .errors import ExternalToolError, SlimError
from .files import rename

logger = logging.getLogger(__name__)

HIDDEN_SUFFIX = ".slim-hidden"


def hidden_path(manifest_path: str | Path) -> Path:
    path = Path(manifest_path)
    return path.with_name(path.name + HIDDEN_SUFFIX)


@contextlib.contextmanager
def hidden_manifest(manifest_path: str | Path) -> Iterator[None]:
    """Move the manifest out of the lint engine's sight, restoring it on exit.

    stylelint silently skips files listed in .stylelintignore, so the manifest
    has to be renamed while its own entries are linted.
    """
    path = Path(manifest_path)
    if not path.exists():
        yield
        return

    hidden = hidden_path(path)
    rename(path, hidden)
    logger.debug("Moved %s to %s while linting", path, hidden)
    try:
        yield
    finally:
        rename(hidden, path)


def query_violations(
    engine: LintEngine,
    config: Dict[str, Any],
    files: Iterable[Path],
    manifest_path: str | Path,
) -> List[FileReport]:
    file_list = [str(f) for f in files]
    if not file_list:
        return []

    with hidden_manifest(manifest_path):
        try:
            return engine.lint(config, file_list)
        except SlimError:
            raise
        except Exception as exc:
            raise ExternalToolError(f"Lint engine failed ({exc})") from exc


def count_errors(reports: Iterable[FileReport]) -> int:
    return sum(
        1
        for report in reports
        for warning in report.warnings
        if warning.severity == "error"
    )


def source_path(source: str, root: str | Path = ".") -> Path:
    """Resolve a report source, which the engine may give relative to its cwd."""
    path = Path(source)
    if not path.is_absolute():
        path = Path(root) / path
    return path.resolve()


def errored_sources(reports: Iterable[FileReport], root: str | Path = ".") -> List[Path]:
    return [source_path(report.source, root) for report in reports if report.errored]
