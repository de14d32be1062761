"""Unit tests for the command-line interface."""

import argparse
import json
from datetime import date, datetime, timezone

import pytest

from rrulekit.cli import main_entry
from rrulekit.cli.parser import create_parser, parse_timestamp


class TestParseTimestamp:
    """Test suite for ISO timestamp arguments."""

    def test_date(self):
        """Test date-only input."""
        assert parse_timestamp("2025-06-23") == date(2025, 6, 23)

    def test_utc_datetime(self):
        """Test a Z-suffixed date-time."""
        assert parse_timestamp("2025-06-23T08:30:00Z") == datetime(
            2025, 6, 23, 8, 30, tzinfo=timezone.utc
        )

    def test_invalid(self):
        """Test invalid input raises an argparse error."""
        with pytest.raises(argparse.ArgumentTypeError):
            parse_timestamp("next tuesday")


class TestCreateParser:
    """Test suite for argument parsing."""

    def test_command_required(self):
        """Test that a subcommand must be given."""
        with pytest.raises(SystemExit):
            create_parser().parse_args([])

    def test_expand_arguments(self):
        """Test expand arguments are converted to timestamps."""
        args = create_parser().parse_args(
            ["expand", "FREQ=DAILY", "--start", "2025-01-01T09:00", "--end", "2025-01-01T10:00"]
        )

        assert args.command == "expand"
        assert args.start == datetime(2025, 1, 1, 9, 0)
        assert args.window_start is None


class TestMainEntry:
    """Test suite for main_entry."""

    def test_parse_prints_canonical_form(self, capsys):
        """Test the parse command output."""
        exit_code = main_entry(["parse", "BYDAY=MO,FR;FREQ=WEEKLY;COUNT=4"])

        assert exit_code == 0
        assert capsys.readouterr().out.strip() == "FREQ=WEEKLY;COUNT=4;BYDAY=MO,FR"

    def test_parse_json(self, capsys):
        """Test the parse command JSON output."""
        exit_code = main_entry(["parse", "FREQ=MONTHLY;BYDAY=-1FR", "--json"])

        data = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert data["frequency"] == "MONTHLY"
        assert data["by_filters"]["BYDAY"] == ["-1FR"]
        assert data["raw_text"] == "FREQ=MONTHLY;BYDAY=-1FR"

    def test_parse_error_exit_code(self, capsys):
        """Test invalid rules exit with code 1."""
        exit_code = main_entry(["parse", "COUNT=3"])

        assert exit_code == 1
        assert "FREQ must be specified" in capsys.readouterr().out

    def test_expand_window(self, capsys):
        """Test windowed expansion output."""
        exit_code = main_entry(
            [
                "expand",
                "FREQ=DAILY",
                "--start",
                "2025-01-01T09:00",
                "--end",
                "2025-01-01T10:00",
                "--window-start",
                "2025-01-06T09:00",
                "--window-end",
                "2025-01-07T09:00",
            ]
        )

        lines = capsys.readouterr().out.strip().splitlines()
        assert exit_code == 0
        assert lines == [
            "2025-01-06T09:00:00 -> 2025-01-06T10:00:00",
            "2025-01-07T09:00:00 -> 2025-01-07T10:00:00",
        ]

    def test_expand_by_count(self, capsys):
        """Test count-based expansion when no window is given."""
        exit_code = main_entry(
            ["expand", "FREQ=DAILY;COUNT=2", "--start", "2025-01-01", "--end", "2025-01-02"]
        )

        lines = capsys.readouterr().out.strip().splitlines()
        assert exit_code == 0
        assert lines == ["2025-01-01 -> 2025-01-02", "2025-01-02 -> 2025-01-03"]

    def test_expand_half_window_rejected(self, capsys):
        """Test that a window needs both ends."""
        exit_code = main_entry(
            [
                "expand",
                "FREQ=DAILY",
                "--start",
                "2025-01-01",
                "--end",
                "2025-01-02",
                "--window-start",
                "2025-01-05",
            ]
        )

        assert exit_code == 1
        assert "must be given together" in capsys.readouterr().out
