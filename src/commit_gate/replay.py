"""Fragment-by-fragment replay of a failing message.

The pass/fail check only says *that* a message does not match. Replaying a
hand-split copy of the pattern, one fragment at a time and always anchored at
the start of the remaining text, tells *where* it stops matching.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Sequence, Union

from .fragments import Fragment, OptionalGroup, PlainFragment


_logger = logging.getLogger("commit_gate.replay")


@dataclass(frozen=True)
class FullMatch:
    pass


@dataclass(frozen=True)
class TrailingUnmatched:
    remainder: str


@dataclass(frozen=True)
class FragmentFailed:
    expected: str


ReplayOutcome = Union[FullMatch, TrailingUnmatched, FragmentFailed]


@dataclass(frozen=True)
class DiagnosticReport:
    text: str
    consumed_length: int
    outcome: ReplayOutcome


@dataclass
class ReplayState:
    remaining_text: str
    consumed_length: int = 0
    cursor: int = 0

    def consume(self, new_text: str) -> None:
        self.consumed_length += len(self.remaining_text) - len(new_text)
        self.remaining_text = new_text


@dataclass(frozen=True)
class GroupResolution:
    text: str
    failure_marker: int | None = None
    failed_pattern: str | None = None

    @property
    def failed(self) -> bool:
        return self.failure_marker is not None


def strip_prefix(pattern: str, text: str) -> str | None:
    """Return ``text`` without the prefix matched by ``pattern``, or None."""
    match = re.match(pattern, text)
    if match is None:
        return None
    return text[match.end():]


def resolve_group(patterns: Sequence[str], text: str) -> GroupResolution:
    """Consume an optional group all-or-nothing.

    If the first pattern does not match, the group is absent and nothing is
    consumed. Once the first pattern matched, every following pattern must match
    too; the first one that does not is reported with failure marker 0.
    """
    if not patterns or strip_prefix(patterns[0], text) is None:
        return GroupResolution(text=text)
    for pattern in patterns:
        rest = strip_prefix(pattern, text)
        if rest is None:
            return GroupResolution(text=text, failure_marker=0, failed_pattern=pattern)
        text = rest
    return GroupResolution(text=text)


def replay(fragments: Sequence[Fragment], message: str) -> DiagnosticReport:
    text = message.replace("\r", "")
    state = ReplayState(remaining_text=text)
    failed: FragmentFailed | None = None

    while state.cursor < len(fragments):
        fragment = fragments[state.cursor]
        if isinstance(fragment, OptionalGroup):
            resolution = resolve_group(fragment.patterns, state.remaining_text)
            skipped = resolution.text == state.remaining_text
            state.consume(resolution.text)
            if resolution.failed:
                failed = FragmentFailed(expected=str(resolution.failed_pattern))
                break
            if skipped:
                _logger.debug("fragment %d skipped, consumed=%d", state.cursor, state.consumed_length)
                state.cursor += 1
                continue
        elif isinstance(fragment, PlainFragment):
            rest = strip_prefix(fragment.pattern, state.remaining_text)
            if rest is None:
                failed = FragmentFailed(expected=fragment.pattern)
                break
            state.consume(rest)
        else:
            raise TypeError(f"unsupported fragment type: {type(fragment).__name__}")
        _logger.debug("fragment %d matched, consumed=%d", state.cursor, state.consumed_length)
        state.cursor += 1

    outcome: ReplayOutcome
    if failed is not None:
        outcome = failed
    elif state.remaining_text:
        outcome = TrailingUnmatched(remainder=state.remaining_text)
    else:
        outcome = FullMatch()
    return DiagnosticReport(text=text, consumed_length=state.consumed_length, outcome=outcome)
