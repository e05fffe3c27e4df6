"""Tests for the Dusk output parser."""

import pytest

from dusk_mcp.parser import FailureRecord, TestResultSummary, parse_test_results

PASSING_OUTPUT = """PHPUnit 10.5.0 by Sebastian Bergmann and contributors.

...                                                                 3 / 3 (100%)

Time: 00:04.512, Memory: 24.00 MB

OK (3 tests, 7 assertions)
Tests: 3, Assertions: 7
"""

FAILING_OUTPUT = """PHPUnit 10.5.0 by Sebastian Bergmann and contributors.

.F.F                                                                4 / 4 (100%)

Time: 00:09.001

FAILURES!
1) Tests\\Browser\\LoginTest::testLogin
Failed asserting that false is true.
/app/tests/Browser/LoginTest.php:21
2) Tests\\Browser\\CartTest::testCheckout
Did not see expected text [Thanks] within element [body].

Tests: 4, Assertions: 9, Failures: 2.
"""


class TestSummaryExtraction:
    """Tests for the summary and duration lines."""

    def test_scenario_counts_and_duration(self) -> None:
        """Test summary with failures and duration."""
        summary = parse_test_results("Tests: 10, Assertions: 42, Failures: 2\nTime: 00:01.234")
        assert summary.total == 10
        assert summary.passed == 8
        assert summary.failed == 2
        assert summary.duration == "00:01.234"
        assert summary.failures == []

    def test_no_failures_clause(self) -> None:
        """Test missing Failures clause means zero failed."""
        summary = parse_test_results(PASSING_OUTPUT)
        assert summary.total == 3
        assert summary.failed == 0
        assert summary.passed == 3

    def test_duration_is_rest_of_line(self) -> None:
        """Test duration captures everything after 'Time:' verbatim."""
        summary = parse_test_results(PASSING_OUTPUT)
        assert summary.duration == "00:04.512, Memory: 24.00 MB"

    @pytest.mark.parametrize("total,failed", [(0, 0), (1, 1), (5, 0), (12, 7), (100, 3)])
    def test_passed_is_total_minus_failed(self, total: int, failed: int) -> None:
        """Test passed = total - failed for any valid pair."""
        summary = parse_test_results(f"Tests: {total}, Assertions: 5, Failures: {failed}")
        assert summary.passed == total - failed

    def test_first_summary_line_wins(self) -> None:
        """Test only the first summary line is used."""
        summary = parse_test_results("Tests: 2, Assertions: 2\nTests: 9, Assertions: 9, Failures: 9")
        assert summary.total == 2
        assert summary.failed == 0

    def test_skipped_never_populated(self) -> None:
        """Test the reserved skipped field stays zero."""
        summary = parse_test_results("Tests: 5, Assertions: 5, Failures: 1, Skipped: 2")
        assert summary.skipped == 0

    def test_crlf_line_endings(self) -> None:
        """Test Windows line endings do not leak into captured values."""
        summary = parse_test_results("Time: 00:02.000\r\nTests: 1, Assertions: 1\r\n")
        assert summary.duration == "00:02.000"
        assert summary.total == 1


class TestDefaults:
    """Tests for output without recognised lines."""

    @pytest.mark.parametrize(
        "output",
        ["", "random text", "Tests: many", "Assertions: 4", "\n\n\n", "FAILURES!\n"],
    )
    def test_no_summary_yields_zeroes(self, output: str) -> None:
        """Test all counters stay zero and no failures are reported."""
        summary = parse_test_results(output)
        assert summary.total == 0
        assert summary.passed == 0
        assert summary.failed == 0
        assert summary.failures == []
        assert summary.duration == ""

    def test_default_summary(self) -> None:
        """Test the dataclass defaults."""
        summary = TestResultSummary()
        assert (summary.total, summary.passed, summary.failed, summary.skipped) == (0, 0, 0, 0)
        assert summary.duration == ""
        assert summary.failures == []


class TestFailureExtraction:
    """Tests for the FAILURES! block."""

    def test_itemised_failures(self) -> None:
        """Test each ordinal segment becomes a FailureRecord."""
        summary = parse_test_results(FAILING_OUTPUT)
        assert summary.total == 4
        assert summary.failed == 2
        assert summary.passed == 2
        assert summary.duration == "00:09.001"
        assert summary.failures == [
            FailureRecord(
                test="Tests\\Browser\\LoginTest::testLogin",
                message="Failed asserting that false is true.\n/app/tests/Browser/LoginTest.php:21",
            ),
            FailureRecord(
                test="Tests\\Browser\\CartTest::testCheckout",
                message="Did not see expected text [Thanks] within element [body].",
            ),
        ]

    def test_block_ends_at_first_blank_line(self) -> None:
        """Test ordinals after the blank line are not part of the block."""
        output = "FAILURES!\n1) FirstTest\nboom\n\n2) SecondTest\nbang\n\n"
        summary = parse_test_results(output)
        assert [f.test for f in summary.failures] == ["FirstTest"]

    def test_unterminated_block_is_ignored(self) -> None:
        """Test a block without a closing blank line yields no failures."""
        summary = parse_test_results("FAILURES!\n1) FirstTest\nboom")
        assert summary.failures == []

    def test_failure_without_message(self) -> None:
        """Test a single-line segment has an empty message."""
        summary = parse_test_results("FAILURES!\n1) OnlyTitle\n\n")
        assert summary.failures == [FailureRecord(test="OnlyTitle", message="")]

    def test_text_before_first_ordinal_is_a_segment(self) -> None:
        """Test leading text in the block forms its own record."""
        summary = parse_test_results("FAILURES!\nThere was 1 failure:\n1) LoginTest\nnope\n\n")
        assert summary.failures == [
            FailureRecord(test="There was 1 failure:", message=""),
            FailureRecord(test="LoginTest", message="nope"),
        ]

    def test_marker_requires_line_end(self) -> None:
        """Test FAILURES! in the middle of a line does not open a block."""
        summary = parse_test_results("FAILURES! (see below)\n1) LoginTest\n\n")
        assert summary.failures == []

    def test_failures_without_summary(self) -> None:
        """Test itemised failures are reported even with zero counts."""
        summary = parse_test_results("FAILURES!\n1) LoginTest\nnope\n\n")
        assert summary.failed == 0
        assert len(summary.failures) == 1

    def test_failed_count_without_block(self) -> None:
        """Test a non-zero Failures count with no block keeps both signals."""
        summary = parse_test_results("Tests: 3, Assertions: 3, Failures: 2\n")
        assert summary.failed == 2
        assert summary.failures == []
