"""Tests for the cronkit command-line interface."""

import pytest
from typer.testing import CliRunner

from cronkit.cli import EXIT_ERROR, EXIT_NO_MATCH, app


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def runner():
    """Create CLI runner."""
    return CliRunner()


# =============================================================================
# next
# =============================================================================


class TestNextCommand:
    """Tests for 'cronkit next'."""

    def test_lists_matches(self, runner):
        """Test listing upcoming matches from a start time."""
        result = runner.invoke(app, ["next", "0 0 1 1 *", "--from", "2021-01-01", "-n", "2"])

        assert result.exit_code == 0
        assert "2021-01-01T00:00:00Z  1609459200" in result.output
        assert "2022-01-01T00:00:00Z  1640995200" in result.output

    def test_after_excludes_start(self, runner):
        """Test --after skips the start time."""
        result = runner.invoke(
            app, ["next", "0 0 1 1 *", "--from", "1609459200", "--after", "-n", "1"]
        )

        assert result.exit_code == 0
        assert "2022-01-01T00:00:00Z" in result.output
        assert "2021-01-01" not in result.output

    def test_default_count(self, runner):
        """Test five matches are listed by default."""
        result = runner.invoke(app, ["next", "@hourly", "--from", "0"])

        assert result.exit_code == 0
        assert len(result.output.strip().splitlines()) == 5

    def test_never_matches(self, runner):
        """Test an unsatisfiable expression exits with 1."""
        result = runner.invoke(app, ["next", "0 0 31 2 *", "--from", "0"])

        assert result.exit_code == EXIT_NO_MATCH
        assert "No matching times" in result.output

    def test_invalid_expression(self, runner):
        """Test a parse error exits with 2."""
        result = runner.invoke(app, ["next", "0 0 32 * *"])

        assert result.exit_code == EXIT_ERROR
        assert "Error" in result.output

    def test_invalid_start(self, runner):
        """Test an unreadable start time exits with 2."""
        result = runner.invoke(app, ["next", "* * * * *", "--from", "tomorrow"])

        assert result.exit_code == EXIT_ERROR

    def test_start_out_of_range(self, runner):
        """Test a start time outside the domain exits with 2."""
        result = runner.invoke(app, ["next", "* * * * *", "--from", "9999999999999"])

        assert result.exit_code == EXIT_ERROR
        assert "outside the supported range" in result.output


# =============================================================================
# contains
# =============================================================================


class TestContainsCommand:
    """Tests for 'cronkit contains'."""

    def test_match(self, runner):
        """Test a matching time exits with 0."""
        result = runner.invoke(app, ["contains", "0 9 * * MON-FRI", "2021-01-04T09:00"])

        assert result.exit_code == 0
        assert "2021-01-04T09:00:00Z matches" in result.output

    def test_no_match(self, runner):
        """Test a non-matching time exits with 1."""
        result = runner.invoke(app, ["contains", "0 9 * * MON-FRI", "2021-01-02T09:00"])

        assert result.exit_code == EXIT_NO_MATCH
        assert "does not match" in result.output


# =============================================================================
# check / describe / presets
# =============================================================================


class TestInfoCommands:
    """Tests for 'cronkit check', 'describe' and 'presets'."""

    def test_check_valid(self, runner):
        """Test a satisfiable expression."""
        result = runner.invoke(app, ["check", "0 9 * * MON-FRI"])

        assert result.exit_code == 0
        assert "Valid" in result.output
        assert "Monday through Friday" in result.output

    def test_check_never_matches(self, runner):
        """Test an unsatisfiable expression exits with 1."""
        result = runner.invoke(app, ["check", "* * 31 2 *"])

        assert result.exit_code == EXIT_NO_MATCH
        assert "never matches" in result.output

    def test_check_invalid(self, runner):
        """Test an invalid expression exits with 2."""
        result = runner.invoke(app, ["check", "* * * *"])

        assert result.exit_code == EXIT_ERROR

    def test_describe(self, runner):
        """Test describing an expression."""
        result = runner.invoke(app, ["describe", "0 9 * * MON-FRI"])

        assert result.exit_code == 0
        assert "At 09:00, on Monday through Friday" in result.output

    def test_presets(self, runner):
        """Test listing presets."""
        result = runner.invoke(app, ["presets"])

        assert result.exit_code == 0
        assert "Presets" in result.output
        assert "daily" in result.output

    def test_invalid_log_level(self, runner):
        """Test an unknown log level exits with 2."""
        result = runner.invoke(app, ["--log-level", "LOUD", "describe", "* * * * *"])

        assert result.exit_code == EXIT_ERROR
