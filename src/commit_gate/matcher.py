"""Pattern matching primitive used for the pass/fail decision."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .flags import is_sticky, to_re_flags


@dataclass(frozen=True)
class Matcher:
    regex: re.Pattern[str]
    sticky: bool = False

    def __call__(self, message: str) -> bool:
        if self.sticky:
            return self.regex.match(message) is not None
        return self.regex.search(message) is not None


def compile_pattern(pattern: str, flags: str = "") -> Matcher:
    """Compile ``pattern`` with JavaScript-style ``flags``.

    Raises ``re.error`` when the pattern is not a valid regular expression.
    """
    return Matcher(regex=re.compile(pattern, to_re_flags(flags)), sticky=is_sticky(flags))


def matches(message: str, pattern: str, flags: str = "") -> bool:
    return compile_pattern(pattern, flags)(message)
