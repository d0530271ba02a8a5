#!/usr/bin/env python3
"""commit-msg hook: check the message being committed against a regex pattern."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Validate commit message format.")
    parser.add_argument("commit_msg_file", help="Path to commit message file provided by commit-msg hook.")
    parser.add_argument("--pattern", required=True)
    parser.add_argument("--flags", default="")
    parser.add_argument("--error", default="Commit message policy failed: message does not match the required pattern.")
    parser.add_argument("--debug-fragments", default="", help="JSON or YAML fragment list for diagnostics.")
    return parser


def _load_message(path: Path) -> str:
    raw_lines = path.read_text(encoding="utf-8").splitlines()
    lines: list[str] = []
    for line in raw_lines:
        if line.startswith("#"):
            continue
        lines.append(line.rstrip())
    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    from commit_gate.checker import CheckRequest, OutcomeKind, check_all
    from commit_gate.errors import ConfigurationError
    from commit_gate.fragments import load_fragments

    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stdout, force=True)

    msg_file = Path(args.commit_msg_file).resolve()
    if not msg_file.exists():
        print(f"Commit message policy failed: message file not found: {msg_file}")
        return 1

    try:
        fragments = load_fragments(Path(args.debug_fragments)) if args.debug_fragments else None
    except ConfigurationError as err:
        print(f"Commit message policy failed: {err}")
        return 2

    message = _load_message(msg_file)
    outcome = check_all(
        CheckRequest(
            pattern=args.pattern,
            flags=args.flags,
            error=args.error,
            messages=(message,) if message else (),
            debug_fragments=fragments,
        )
    )
    if outcome.ok:
        print("Commit message policy OK.")
        return 0
    print(outcome.detail)
    if outcome.kind == OutcomeKind.CONFIGURATION_ERROR:
        return 2
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
