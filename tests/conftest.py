import json
import textwrap
from pathlib import Path
from typing import Callable, Dict, List, Sequence

import pytest

from slim.adapters.stylelint import FileReport, Violation


class FakeEngine:
    """In-memory lint engine returning canned violations per file name."""

    def __init__(self, violations: Dict[str, List[Violation]] | None = None, manifest: Path | None = None):
        self.violations = violations or {}
        self.manifest = manifest
        self.calls: List[List[str]] = []
        self.manifest_visible: List[bool] = []

    def lint(self, config, files: Sequence[str]) -> List[FileReport]:
        self.calls.append(list(files))
        if self.manifest is not None:
            self.manifest_visible.append(self.manifest.exists())
        reports = []
        for f in files:
            path = Path(f)
            warnings = list(self.violations.get(path.name, []))
            if path.exists() and "stylelint-disable" in path.read_text(encoding="utf-8"):
                warnings = []
            errored = any(w.severity == "error" for w in warnings)
            reports.append(FileReport(source=str(f), errored=errored, warnings=warnings))
        return reports


def error(line: int, rule: str, end_line: int | None = None) -> Violation:
    return Violation(severity="error", line=line, end_line=end_line or line, rule=rule)


def warning(line: int, rule: str) -> Violation:
    return Violation(severity="warning", line=line, end_line=line, rule=rule)


@pytest.fixture
def write_file(tmp_path) -> Callable[[str, str], Path]:
    def _write(relpath: str, content: str) -> Path:
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def project(tmp_path, write_file):
    """A tiny stylelint project with a config and a few stylesheets."""
    write_file(".stylelintrc.json", json.dumps({"rules": {"color-no-invalid-hex": True}}))
    write_file("src/button.css", """\
        .button {
          color: #fffz;
        }
    """)
    write_file("src/nested/card.css", """\
        .card {
          margin: 0;
        }
    """)
    write_file("legacy/old.css", """\
        /* stylelint-disable */
        .old { color: #ggg; }
    """)
    return tmp_path
