from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, NamedTuple

from .adapters.stylelint import Violation
from .files import read_lines, write_lines

logger = logging.getLogger(__name__)

COMMENT_TEMPLATE = "/* stylelint-{mode} {rules} */"


class SuppressionStyle(str, enum.Enum):
    NEXT_LINE = "next-line"
    BLOCK = "block"


class SuppressionKey(NamedTuple):
    start_line: int
    end_line: int


@dataclass
class SuppressionGroup:
    key: SuppressionKey
    rules: List[str] = field(default_factory=list)

    @property
    def start_line(self) -> int:
        return self.key.start_line

    @property
    def end_line(self) -> int:
        return self.key.end_line


SuppressionPlan = List[SuppressionGroup]


def plan_suppressions(warnings: Iterable[Violation]) -> SuppressionPlan:
    """Group error violations by line range, sorted by start line."""
    grouped: Dict[SuppressionKey, Dict[str, None]] = {}
    for warning in warnings:
        if warning.severity != "error":
            continue
        key = SuppressionKey(warning.line, warning.end_line or warning.line)
        grouped.setdefault(key, {}).setdefault(warning.rule, None)

    plan = [SuppressionGroup(key=key, rules=list(rules)) for key, rules in grouped.items()]
    plan.sort(key=lambda group: group.start_line)
    return plan


def render_comment(rules: Iterable[str], mode: str) -> str:
    return COMMENT_TEMPLATE.format(mode=mode, rules=",".join(rules))


def apply_plan(
    lines: List[str],
    plan: SuppressionPlan,
    style: SuppressionStyle = SuppressionStyle.NEXT_LINE,
) -> List[str]:
    """Return a copy of ``lines`` with suppression comments inserted.

    Plan line numbers refer to the original file. ``positions`` maps each
    original line to its current buffer index, so overlapping or nested
    ranges still land around the lines they were reported on.
    """
    buffer = list(lines)
    positions = list(range(len(lines)))

    def insert(index: int, comment: str) -> None:
        buffer.insert(index, comment)
        for original, current in enumerate(positions):
            if current >= index:
                positions[original] = current + 1

    def before(line: int) -> int:
        if line - 1 < len(positions):
            return positions[max(line, 1) - 1]
        return len(buffer)

    def after(line: int) -> int:
        if line - 1 < len(positions):
            return positions[max(line, 1) - 1] + 1
        return len(buffer)

    if style is SuppressionStyle.BLOCK:
        for group in plan:
            insert(before(group.start_line), render_comment(group.rules, "disable"))
            insert(after(group.end_line), render_comment(group.rules, "enable"))
        return buffer

    for start_line, rules in merge_by_start_line(plan).items():
        insert(before(start_line), render_comment(rules, "disable-next-line"))
    return buffer


def merge_by_start_line(plan: SuppressionPlan) -> Dict[int, List[str]]:
    """Union the rules of groups sharing a start line, keeping first-seen order."""
    merged: Dict[int, Dict[str, None]] = {}
    for group in plan:
        rules = merged.setdefault(group.start_line, {})
        for rule in group.rules:
            rules.setdefault(rule, None)
    return {line: list(rules) for line, rules in merged.items()}


def write_suppressions(
    path: str | Path,
    plan: SuppressionPlan,
    style: SuppressionStyle = SuppressionStyle.NEXT_LINE,
) -> int:
    """Insert the plan's comments into ``path``; returns the number of lines added."""
    if not plan:
        return 0
    lines = read_lines(path)
    updated = apply_plan(lines, plan, style)
    write_lines(path, updated)
    added = len(updated) - len(lines)
    logger.info("Added %d suppression comment(s) to %s", added, path)
    return added
