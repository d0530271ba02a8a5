"""CLI entrypoint for the commit message gate."""

from __future__ import annotations

import argparse
import json
import logging
import os
import re
import sys
from pathlib import Path

from .annotations import error_command
from .checker import CheckOutcome, CheckRequest, OutcomeKind, check_all
from .errors import ConfigurationError
from .fragments import Fragment, load_fragments
from .inputs import build_request
from .render import render_report
from .replay import replay


EXIT_OK = 0
EXIT_CHECK_FAILED = 1
EXIT_CONFIGURATION_ERROR = 2


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stdout,
        force=True,
    )


def _read_messages(raw: list[str]) -> list[str]:
    messages: list[str] = []
    for item in raw:
        if item == "-":
            messages.append(sys.stdin.read().rstrip("\n"))
        else:
            messages.append(item)
    return messages


def _optional_fragments(path: str) -> tuple[Fragment, ...] | None:
    if not path:
        return None
    return load_fragments(Path(path))


def _exit_code(outcome: CheckOutcome) -> int:
    if outcome.kind == OutcomeKind.OK:
        return EXIT_OK
    if outcome.kind == OutcomeKind.CONFIGURATION_ERROR:
        return EXIT_CONFIGURATION_ERROR
    return EXIT_CHECK_FAILED


def _emit_outcome(outcome: CheckOutcome, *, as_json: bool, annotate: bool) -> int:
    if as_json:
        print(json.dumps(outcome.to_dict(), indent=2, sort_keys=True))
    elif not outcome.ok:
        print(error_command(outcome.detail) if annotate else outcome.detail)
    return _exit_code(outcome)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check commit messages against a regex pattern.")
    parser.add_argument("--verbose", action="store_true", help="log fragment replay steps")

    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="check messages given on the command line")
    check.add_argument("--pattern", required=True)
    check.add_argument("--flags", default="")
    check.add_argument("--error", default="Commit message does not match the required pattern.")
    check.add_argument("--debug-fragments", default="", help="JSON or YAML fragment list")
    check.add_argument("--json", action="store_true")
    check.add_argument("messages", nargs="*", help="messages to check ('-' reads stdin)")

    action = sub.add_parser("action", help="check messages of the current GitHub Actions event")
    action.add_argument("--json", action="store_true")

    replay_cmd = sub.add_parser("replay", help="print the fragment diagnostic for one message")
    replay_cmd.add_argument("--fragments", required=True, help="JSON or YAML fragment list")
    replay_cmd.add_argument("message", help="message to replay ('-' reads stdin)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        if args.command == "check":
            request = CheckRequest(
                pattern=args.pattern,
                flags=args.flags,
                error=args.error,
                messages=tuple(_read_messages(args.messages)),
                debug_fragments=_optional_fragments(args.debug_fragments),
            )
            return _emit_outcome(check_all(request), as_json=args.json, annotate=False)
        if args.command == "action":
            request = build_request(os.environ)
            return _emit_outcome(check_all(request), as_json=args.json, annotate=True)
        if args.command == "replay":
            fragments = load_fragments(Path(args.fragments))
            message = _read_messages([args.message])[0]
            try:
                report = replay(fragments, message)
            except re.error as err:
                raise ConfigurationError(f"fragment is not a valid regular expression: {err}") from err
            print(render_report(report))
            return EXIT_OK
    except ConfigurationError as err:
        if args.command == "action":
            print(error_command(str(err)))
        else:
            print(f"configuration error: {err}", file=sys.stderr)
        return EXIT_CONFIGURATION_ERROR

    print(f"unknown command: {args.command}", file=sys.stderr)
    return EXIT_CONFIGURATION_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
