"""Human-readable rendering of replay diagnostics."""

from __future__ import annotations

from .replay import DiagnosticReport, FragmentFailed, FullMatch, TrailingUnmatched


CONTEXT_WINDOW = 10
ELLIPSIS = "…"
NEWLINE_GLYPH = "␤"
CONTEXT_LABEL = 'Context: "'
RULE = "-" * 32


def render_context(text: str, matched_until: int, window: int = CONTEXT_WINDOW) -> tuple[str, str]:
    """Return ``(excerpt, underline)`` around offset ``matched_until``.

    The caret sits under the character at ``matched_until`` and tildes cover the
    right-hand context.
    """
    matched_until = max(0, min(matched_until, len(text)))
    start = max(matched_until - window, 0)
    end = min(matched_until + window, len(text))
    left_dots = ELLIPSIS if start != 0 else ""
    right_dots = ELLIPSIS if end != len(text) else ""
    body = text[start:end].replace("\n", NEWLINE_GLYPH)
    excerpt = f"{left_dots}{body}{right_dots}"
    underline = f"{' ' * len(left_dots)}{' ' * (matched_until - start)}^{'~' * (end - matched_until)}"
    return excerpt, underline


def _context_block(report: DiagnosticReport) -> str:
    excerpt, underline = render_context(report.text, report.consumed_length)
    return f"{CONTEXT_LABEL}{excerpt}\"\n{' ' * len(CONTEXT_LABEL)}{underline}"


def render_report(report: DiagnosticReport) -> str:
    outcome = report.outcome
    if isinstance(outcome, FullMatch):
        return "The regex should work."
    if isinstance(outcome, TrailingUnmatched):
        return f'Trailing characters: "{outcome.remainder}"\n{RULE}\n{_context_block(report)}'
    if isinstance(outcome, FragmentFailed):
        return (
            f"The regex stopped matching at index: {report.consumed_length}\n"
            f"Expected: /^{outcome.expected}/\n"
            f"{_context_block(report)}"
        )
    raise TypeError(f"unsupported replay outcome: {type(outcome).__name__}")
