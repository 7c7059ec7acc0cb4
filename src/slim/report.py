from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .files import FileStats


class RunOutcome(BaseModel):
    """Result of a compress or eliminate run."""

    command: str
    status: Literal["ok", "partial", "aborted"] = "ok"
    errors_before: Optional[int] = None
    errors_after: Optional[int] = None
    files_processed: int = 0
    entries_kept: Optional[int] = None
    stats_before: Optional[Dict[str, int]] = None
    stats_after: Optional[Dict[str, int]] = None
    failures: List[str] = Field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return {"ok": 0, "partial": 1, "aborted": 2}[self.status]

    def abort(self, message: str) -> "RunOutcome":
        self.status = "aborted"
        self.failures.append(message)
        return self

    def add_failure(self, message: str) -> None:
        self.failures.append(message)
        if self.status == "ok":
            self.status = "partial"


def stats_dict(stats: FileStats) -> Dict[str, int]:
    return {"size": stats.size, "length": stats.length}


def summarize(outcome: RunOutcome) -> List[str]:
    """Human-readable lines describing a run."""
    lines: List[str] = []
    if outcome.stats_before:
        lines.append(
            f"Total file size: {outcome.stats_before['size']} bytes\n"
            f"Total lines in the file: {outcome.stats_before['length']}"
        )
    if outcome.errors_before is not None:
        lines.append(f"Total errors stylelint previous: {outcome.errors_before}")
    if outcome.errors_after is not None:
        lines.append(f"Total errors stylelint current: {outcome.errors_after}")
    if outcome.stats_after:
        lines.append(
            f"Total file size: {outcome.stats_after['size']} bytes\n"
            f"Total lines in the file: {outcome.stats_after['length']}"
        )
    for failure in outcome.failures:
        lines.append(f"Error: {failure}")
    return lines
