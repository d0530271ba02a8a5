import pathlib
import sys
import unittest

ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from commit_gate.checker import CheckRequest, MessageOutcome, OutcomeKind, check_all
from commit_gate.fragments import parse_fragments


def _request(**overrides):
    values = {
        "pattern": "^(fix|feat): .+",
        "flags": "i",
        "error": "Bad format",
        "messages": ("fix: ok",),
        "debug_fragments": None,
    }
    values.update(overrides)
    return CheckRequest(**values)


class CheckAllTests(unittest.TestCase):
    def setUp(self):
        self.lines = []

    def _check(self, request):
        return check_all(request, report=self.lines.append)

    def test_all_messages_pass(self):
        outcome = self._check(_request(messages=("fix: ok", "FEAT: shout")))
        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.kind, OutcomeKind.OK)
        self.assertEqual(outcome.detail, "")
        self.assertEqual(
            self.lines,
            [
                'Checking commit messages against "^(fix|feat): .+"...',
                '- OK: "fix: ok"',
                '- OK: "FEAT: shout"',
            ],
        )

    def test_end_to_end_failure_reports_every_message(self):
        outcome = self._check(_request(messages=("fix: ok", "nope")))
        self.assertFalse(outcome.ok)
        self.assertEqual(outcome.kind, OutcomeKind.CHECK_FAILED)
        self.assertEqual(outcome.detail, "Bad format")
        self.assertEqual(self.lines[1:], ['- OK: "fix: ok"', '- failed: "nope"'])
        self.assertEqual(
            outcome.results,
            (MessageOutcome(message="fix: ok", passed=True), MessageOutcome(message="nope", passed=False)),
        )

    def test_failure_in_the_middle_does_not_stop_the_batch(self):
        outcome = self._check(_request(messages=("nope", "fix: a", "bad")))
        self.assertFalse(outcome.ok)
        self.assertEqual(len(outcome.results), 3)
        self.assertEqual(self.lines[1:], ['- failed: "nope"', '- OK: "fix: a"', '- failed: "bad"'])

    def test_diagnostics_use_first_failing_message(self):
        outcome = self._check(
            _request(messages=("nope", "fix: a", "also bad"), debug_fragments=parse_fragments(["fix: "]))
        )
        self.assertEqual(
            outcome.detail,
            "Bad format\n"
            "The regex stopped matching at index: 0\n"
            "Expected: /^fix: /\n"
            'Context: "nope"\n'
            "          ^~~~~",
        )

    def test_anomalous_full_match_is_reported_not_escalated(self):
        with self.assertLogs("commit_gate.checker", level="WARNING"):
            outcome = self._check(
                _request(pattern="^fix", flags="", messages=("nope",), debug_fragments=parse_fragments(["nope"]))
            )
        self.assertEqual(outcome.kind, OutcomeKind.CHECK_FAILED)
        self.assertEqual(outcome.detail, "Bad format\nThe regex should work.")

    def test_carriage_returns_do_not_cause_mismatch(self):
        outcome = self._check(_request(pattern="^fix: bug\\n", flags="", messages=("fix: bug\r\n",)))
        self.assertTrue(outcome.ok)
        self.assertEqual(self.lines[1], '- OK: "fix: bug\r\n"')

    def test_validation_order(self):
        cases = [
            (_request(pattern="", flags="x", error=""), "PATTERN not defined."),
            (_request(flags="gx", error=""), 'FLAGS contains invalid characters "x".'),
            (_request(error="", messages=()), "ERROR not defined."),
            (_request(messages=()), "MESSAGES not defined."),
        ]
        for request, expected in cases:
            with self.subTest(expected=expected):
                outcome = self._check(request)
                self.assertEqual(outcome.kind, OutcomeKind.CONFIGURATION_ERROR)
                self.assertEqual(outcome.detail, expected)
        self.assertEqual(self.lines, [])

    def test_invalid_pattern_is_a_configuration_error(self):
        outcome = self._check(_request(pattern="("))
        self.assertEqual(outcome.kind, OutcomeKind.CONFIGURATION_ERROR)
        self.assertIn("PATTERN is not a valid regular expression", outcome.detail)
        self.assertEqual(self.lines, [])

    def test_invalid_debug_fragment_is_a_configuration_error(self):
        outcome = self._check(_request(messages=("nope",), debug_fragments=parse_fragments(["["])))
        self.assertEqual(outcome.kind, OutcomeKind.CONFIGURATION_ERROR)
        self.assertIn("DEBUGREGEX", outcome.detail)

    def test_default_reporter_logs_at_info(self):
        with self.assertLogs("commit_gate.checker", level="INFO") as captured:
            check_all(_request(messages=("fix: ok",)))
        self.assertIn('- OK: "fix: ok"', "\n".join(captured.output))

    def test_to_dict(self):
        payload = self._check(_request(messages=("nope",))).to_dict()
        self.assertEqual(payload["kind"], "check_failed")
        self.assertEqual(payload["results"], [{"message": "nope", "passed": False}])


if __name__ == "__main__":
    unittest.main()
