"""Parser for PHPUnit output produced by `php artisan dusk`.

The output is read line by line against a small grammar:

    summary-line   := ... "Tests:" N "," "Assertions:" N ["," "Failures:" N] ...
    duration-line  := ... "Time:" REST
    failure-block  := line ending in "FAILURES!" , body-line* , blank-line
    body-line      := ordinal-line | text-line
    ordinal-line   := [ws] DIGITS ")" text

Only the first summary line, duration line and failure block are used. The
parser never raises: anything it does not recognise leaves the defaults
(zero counts, empty duration, no failures) in place.

The Failures count from the summary line and the itemised failure blocks
are read independently and are not reconciled with each other.
"""

import re
from dataclasses import dataclass, field
from enum import Enum

SUMMARY_PATTERN = re.compile(r"Tests:\s+(\d+),\s+Assertions:\s+(\d+)(?:,\s+Failures:\s+(\d+))?")
DURATION_PATTERN = re.compile(r"Time:\s+(.+)")
FAILURES_MARKER = "FAILURES!"
ORDINAL_PATTERN = re.compile(r"^\s*\d+\)")


@dataclass
class FailureRecord:
    """A single failed test extracted from a failure block."""

    test: str
    message: str


@dataclass
class TestResultSummary:
    """Structured result of a Dusk run.

    passed is always total - failed. skipped is reserved; PHPUnit's
    summary line is not currently parsed for it.
    """

    __test__ = False  # not a pytest test class

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    duration: str = ""
    failures: list[FailureRecord] = field(default_factory=list)


class _State(Enum):
    SCANNING = "scanning"
    IN_FAILURES = "in_failures"
    DONE = "done"


class DuskOutputParser:
    """Line-oriented state machine over runner output.

    SCANNING looks for the summary, duration and FAILURES! lines.
    IN_FAILURES collects block lines until a blank line closes the block.
    DONE means the block was closed; summary and duration may still follow.
    """

    def __init__(self) -> None:
        self._state = _State.SCANNING
        self._summary = TestResultSummary()
        self._have_summary = False
        self._have_duration = False
        self._block: list[str] = []

    def parse(self, output: str) -> TestResultSummary:
        for line in output.replace("\r\n", "\n").split("\n"):
            self._feed(line)

        # A block that never reached a blank line is incomplete and ignored
        if self._state is _State.DONE:
            self._summary.failures = _split_failures(self._block)

        return self._summary

    def _feed(self, line: str) -> None:
        if self._state is _State.IN_FAILURES:
            if line.strip():
                self._block.append(line)
                self._scan_counters(line)
                return
            self._state = _State.DONE
            return

        self._scan_counters(line)

        if self._state is _State.SCANNING and line.endswith(FAILURES_MARKER):
            self._state = _State.IN_FAILURES

    def _scan_counters(self, line: str) -> None:
        if not self._have_summary:
            match = SUMMARY_PATTERN.search(line)
            if match:
                self._have_summary = True
                total = int(match.group(1))
                failed = int(match.group(3) or 0)
                self._summary.total = total
                self._summary.failed = failed
                self._summary.passed = total - failed

        if not self._have_duration:
            match = DURATION_PATTERN.search(line)
            if match:
                self._have_duration = True
                self._summary.duration = match.group(1)


def _split_failures(block: list[str]) -> list[FailureRecord]:
    """Split a failure block at ordinal markers into FailureRecords."""
    segments: list[list[str]] = [[]]
    for line in block:
        marker = ORDINAL_PATTERN.match(line)
        if marker:
            segments.append([line[marker.end():]])
        else:
            segments[-1].append(line)

    failures = []
    for segment in segments:
        text = "\n".join(segment).strip()
        if not text:
            continue
        lines = text.split("\n")
        failures.append(
            FailureRecord(test=lines[0].strip(), message="\n".join(lines[1:]).strip())
        )
    return failures


def parse_test_results(output: str) -> TestResultSummary:
    """Parse raw Dusk/PHPUnit output into a TestResultSummary."""
    return DuskOutputParser().parse(output)
