from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from . import adapters
from .config import DEFAULT_CONFIG_PATH, load_config
from .errors import SlimError
from .logging_config import setup_logging
from .report import RunOutcome, summarize
from .suppressions import SuppressionStyle
from .workflows import compact_manifest, eliminate_manifest

logger = logging.getLogger(__name__)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        cfg = load_config(args.config)
    except SlimError as exc:
        logger.error("%s", exc)
        sys.exit(2)

    base_dir = Path(args.base_dir)
    engine = adapters.stylelint.StylelintEngine(cfg.engine.command, cwd=str(base_dir))

    if args.cmd == "compress":
        print(f"Start compress {cfg.paths.manifest} script...")
        outcome = compact_manifest(cfg, engine, base_dir)
    else:
        print(f"Start delete {cfg.paths.manifest} script...")
        style = SuppressionStyle.NEXT_LINE if args.next_line else None
        outcome = eliminate_manifest(cfg, engine, base_dir, style=style)

    report(outcome, args.json_out)
    sys.exit(outcome.exit_code)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slim",
        description="SLIM (Stylelint Ignore Maintenance): shrink or remove .stylelintignore.",
    )
    parser.add_argument("cmd", choices=["compress", "eliminate"])
    parser.add_argument("--config", default=str(DEFAULT_CONFIG_PATH))
    parser.add_argument("--base-dir", default=".")
    parser.add_argument(
        "--next-line",
        action="store_true",
        help="eliminate: use stylelint-disable-next-line instead of disable/enable blocks",
    )
    parser.add_argument("--json", dest="json_out")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def report(outcome: RunOutcome, destination: str | None = None) -> None:
    lines: List[str] = summarize(outcome)
    for line in lines:
        print(line)
    if outcome.status == "ok":
        print("Success")
    if destination:
        path = Path(destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(outcome.model_dump(), ensure_ascii=False, indent=2), encoding="utf-8")


if __name__ == "__main__":
    main()
