from __future__ import annotations

import json
import logging
import os
import subprocess
import tempfile
from typing import Any, Dict, Iterable, List, Literal, Optional, Protocol, Sequence

from pydantic import BaseModel, Field, model_validator

from ..errors import ExternalToolError

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = ["npx", "stylelint"]


class Violation(BaseModel):
    severity: Literal["error", "warning"] = "error"
    line: int = 1
    end_line: Optional[int] = Field(default=None, alias="endLine")
    rule: str = ""
    text: str = ""

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _default_end_line(self) -> "Violation":
        if self.end_line is None or self.end_line < self.line:
            self.end_line = self.line
        return self


class FileReport(BaseModel):
    source: str
    errored: bool = False
    warnings: List[Violation] = Field(default_factory=list)


class LintEngine(Protocol):
    def lint(self, config: Dict[str, Any], files: Sequence[str]) -> List[FileReport]:
        ...


class StylelintEngine:
    """Runs the stylelint CLI with the JSON formatter and parses its report."""

    def __init__(self, command: Iterable[str] | None = None, cwd: str | None = None) -> None:
        self.command = list(command or DEFAULT_COMMAND)
        self.cwd = cwd

    def lint(self, config: Dict[str, Any], files: Sequence[str]) -> List[FileReport]:
        file_list = [str(f) for f in files]
        if not file_list:
            return []

        with tempfile.NamedTemporaryFile(
            "w", suffix=".json", prefix="stylelintrc-", delete=False, encoding="utf-8"
        ) as handle:
            json.dump(config, handle)
            config_path = handle.name

        cmd = self.command + [
            "--config", config_path,
            # relative extends/plugins resolve against the project, not the temp dir
            "--config-basedir", os.path.abspath(self.cwd or os.getcwd()),
            "--formatter", "json",
            "--allow-empty-input",
        ]
        cmd.extend(file_list)
        logger.debug("Running %s on %d file(s)", " ".join(self.command), len(file_list))

        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, check=False, cwd=self.cwd
            )
        except FileNotFoundError as exc:
            raise ExternalToolError("stylelint binary not found", self.command[0]) from exc
        finally:
            os.unlink(config_path)

        return parse_output(result.stdout, result.stderr, result.returncode)


def parse_output(stdout: str, stderr: str = "", returncode: int = 0) -> List[FileReport]:
    """Parse the JSON formatter output; newer stylelint prints it on stderr."""
    data = _load_json(stdout)
    if data is None:
        data = _load_json(stderr)
    if data is None:
        message = stderr.strip() or f"no JSON report (exit code {returncode})"
        raise ExternalToolError(f"Stylelint execution failed: {message}")

    reports: List[FileReport] = []
    for item in data:
        source = item.get("source")
        if not source:
            continue
        reports.append(
            FileReport(
                source=source,
                errored=bool(item.get("errored")),
                warnings=[Violation.model_validate(w) for w in item.get("warnings", [])],
            )
        )
    return reports


def _load_json(text: str) -> Optional[List[Dict[str, Any]]]:
    text = text.strip()
    if not text:
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, list):
        return None
    return data
