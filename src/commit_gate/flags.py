"""Regex flag letters accepted by the gate and their `re` equivalents."""

from __future__ import annotations

import re
from dataclasses import dataclass


RECOGNIZED_FLAGS = "gimsuy"

# g and u have no effect on a single test against a str pattern; y is handled
# by the matcher as an anchor at index 0.
_RE_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}


@dataclass(frozen=True)
class InvalidFlags:
    chars: str

    def message(self) -> str:
        return f'FLAGS contains invalid characters "{self.chars}".'


def validate_flags(flags: str) -> InvalidFlags | None:
    chars = "".join(ch for ch in flags if ch not in RECOGNIZED_FLAGS)
    if chars:
        return InvalidFlags(chars=chars)
    return None


def to_re_flags(flags: str) -> re.RegexFlag:
    value = re.RegexFlag(0)
    for ch in flags:
        value |= _RE_FLAGS.get(ch, re.RegexFlag(0))
    return value


def is_sticky(flags: str) -> bool:
    return "y" in flags
