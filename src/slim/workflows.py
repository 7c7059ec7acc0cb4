"""Compress and eliminate workflows over the .stylelintignore manifest."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

from .adapters.stylelint import FileReport, LintEngine
from .config import SlimConfig, load_lint_config
from .errors import SlimError
from .files import file_stats
from .manifest import (
    IgnoreEntry,
    Manifest,
    filter_disabled_entries,
    filter_disabled_files,
    manifest_files,
    read_manifest,
    read_manifest_lines,
    truncate_manifest,
    write_manifest,
)
from .report import RunOutcome, stats_dict
from .suppressions import SuppressionStyle, plan_suppressions, write_suppressions
from .violations import count_errors, errored_sources, query_violations, source_path

logger = logging.getLogger(__name__)


def compact_manifest(
    cfg: SlimConfig,
    engine: LintEngine,
    base_dir: str | Path = ".",
) -> RunOutcome:
    """Rewrite the manifest keeping only entries whose files still fail linting."""
    outcome = RunOutcome(command="compress")
    root = Path(base_dir)
    manifest_path = root / cfg.paths.manifest

    try:
        outcome.stats_before = stats_dict(file_stats(manifest_path))
        lint_config = load_lint_config(root / cfg.paths.lint_config)
        raw_lines = read_manifest_lines(manifest_path)
        manifest = filter_disabled_entries(read_manifest(manifest_path, root, cfg.manifest))

        kept: Manifest = {}
        # a file matched by several patterns is counted once
        reports_by_file: Dict[Path, FileReport] = {}
        for pattern, entry in manifest.items():
            reports = query_violations(engine, lint_config, entry.files, manifest_path)
            for report in reports:
                reports_by_file[source_path(report.source, root)] = report
            errored = set(errored_sources(reports, root))
            files = [path for path in entry.files if path in errored]
            outcome.files_processed += len(entry.files)
            if files:
                kept[pattern] = IgnoreEntry(pattern=pattern, files=files)
            else:
                logger.info("Dropping %r, its files no longer fail linting", pattern)

        write_manifest(manifest_path, kept, raw_lines)
        outcome.entries_kept = len(kept)
        outcome.errors_before = count_errors(reports_by_file.values())
        remaining = query_violations(engine, lint_config, manifest_files(kept), manifest_path)
        outcome.errors_after = count_errors(remaining)
        outcome.stats_after = stats_dict(file_stats(manifest_path))
    except SlimError as exc:
        logger.error("Error: compressing %s - %s", manifest_path, exc)
        return outcome.abort(str(exc))

    return outcome


def eliminate_manifest(
    cfg: SlimConfig,
    engine: LintEngine,
    base_dir: str | Path = ".",
    style: SuppressionStyle | None = None,
) -> RunOutcome:
    """Inline suppression comments into every ignored file, then empty the manifest."""
    style = style or SuppressionStyle(cfg.suppression.style)
    outcome = RunOutcome(command="eliminate")
    root = Path(base_dir)
    manifest_path = root / cfg.paths.manifest

    try:
        lint_config = load_lint_config(root / cfg.paths.lint_config)
        manifest = read_manifest(manifest_path, root, cfg.manifest)
        files = filter_disabled_files(manifest_files(manifest))
        reports = query_violations(engine, lint_config, files, manifest_path)
    except SlimError as exc:
        logger.error("Error: reading %s - %s", manifest_path, exc)
        return outcome.abort(str(exc))

    outcome.errors_before = count_errors(reports)
    _annotate_reports(reports, root, style, outcome)

    if outcome.failures:
        logger.warning("Keeping %s, %d file(s) could not be annotated", manifest_path, len(outcome.failures))
    else:
        try:
            truncate_manifest(manifest_path)
        except SlimError as exc:
            logger.error("Error: truncating %s - %s", manifest_path, exc)
            return outcome.abort(str(exc))

    try:
        after = query_violations(engine, lint_config, files, manifest_path)
        outcome.errors_after = count_errors(after)
    except SlimError as exc:
        logger.error("Error: counting remaining errors - %s", exc)
        outcome.add_failure(str(exc))

    return outcome


def _annotate_reports(
    reports: List[FileReport],
    root: Path,
    style: SuppressionStyle,
    outcome: RunOutcome,
) -> None:
    for report in reports:
        if not report.errored:
            continue
        path = source_path(report.source, root)
        plan = plan_suppressions(report.warnings)
        try:
            write_suppressions(path, plan, style)
        except SlimError as exc:
            logger.error("Error: adding comments to %s - %s", path, exc)
            outcome.add_failure(str(exc))
            continue
        outcome.files_processed += 1
