"""Batch check of commit messages against a configured pattern."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from .flags import validate_flags
from .fragments import Fragment
from .matcher import compile_pattern
from .render import render_report
from .replay import FullMatch, replay


_logger = logging.getLogger("commit_gate.checker")

Reporter = Callable[[str], None]


class OutcomeKind(str, Enum):
    OK = "ok"
    CONFIGURATION_ERROR = "configuration_error"
    CHECK_FAILED = "check_failed"


@dataclass(frozen=True)
class CheckRequest:
    pattern: str
    flags: str
    error: str
    messages: tuple[str, ...]
    debug_fragments: tuple[Fragment, ...] | None = None


@dataclass(frozen=True)
class MessageOutcome:
    message: str
    passed: bool


@dataclass(frozen=True)
class CheckOutcome:
    ok: bool
    kind: OutcomeKind
    detail: str = ""
    results: tuple[MessageOutcome, ...] = field(default=())

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "kind": self.kind.value,
            "detail": self.detail,
            "results": [{"message": r.message, "passed": r.passed} for r in self.results],
        }


def _configuration_error(detail: str) -> CheckOutcome:
    return CheckOutcome(ok=False, kind=OutcomeKind.CONFIGURATION_ERROR, detail=detail)


def validate_request(request: CheckRequest) -> str | None:
    """Return the first configuration problem of ``request``, if any."""
    if not request.pattern:
        return "PATTERN not defined."
    invalid = validate_flags(request.flags)
    if invalid is not None:
        return invalid.message()
    if not request.error:
        return "ERROR not defined."
    if not request.messages:
        return "MESSAGES not defined."
    return None


def diagnose(fragments: tuple[Fragment, ...], message: str) -> str:
    report = replay(fragments, message)
    if isinstance(report.outcome, FullMatch):
        _logger.warning("debug fragments fully match a message the pattern rejected: %r", message)
    return render_report(report)


def check_all(request: CheckRequest, report: Reporter | None = None) -> CheckOutcome:
    """Check every message of ``request`` and aggregate the result.

    Configuration problems are returned before any message is checked. A
    failing message does not stop the batch; diagnostics, when fragments are
    given, are computed for the first failing message only.
    """
    emit = report or _logger.info

    problem = validate_request(request)
    if problem is not None:
        return _configuration_error(problem)
    try:
        matcher = compile_pattern(request.pattern, request.flags)
    except re.error as err:
        return _configuration_error(f"PATTERN is not a valid regular expression: {err}")

    emit(f'Checking commit messages against "{request.pattern}"...')

    results: list[MessageOutcome] = []
    first_failure: str | None = None
    for message in request.messages:
        passed = matcher(message.replace("\r", ""))
        results.append(MessageOutcome(message=message, passed=passed))
        if passed:
            emit(f'- OK: "{message}"')
            continue
        emit(f'- failed: "{message}"')
        if first_failure is None:
            first_failure = message

    if first_failure is None:
        return CheckOutcome(ok=True, kind=OutcomeKind.OK, results=tuple(results))

    detail = request.error
    if request.debug_fragments is not None:
        try:
            detail += "\n" + diagnose(request.debug_fragments, first_failure)
        except re.error as err:
            return _configuration_error(f"DEBUGREGEX contains an invalid regular expression: {err}")
    return CheckOutcome(ok=False, kind=OutcomeKind.CHECK_FAILED, detail=detail, results=tuple(results))
