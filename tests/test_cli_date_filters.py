"""Tests for CLI date filter helper."""

from datetime import date

import click
import pytest

from frotafin.cli.date_filters import in_range, resolve_cli_date_range

TODAY = date(2024, 3, 15)


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_resolve_cli_date_range_rejects_multiple_periods(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(),
            start_date=None,
            end_date=None,
            period_flags={"this-month": True, "last-month": True},
        )

    assert excinfo.value.exit_code == 1
    assert "Only one period option" in capsys.readouterr().err


def test_resolve_cli_date_range_rejects_period_with_start_end(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(),
            start_date="2024-01-01",
            end_date=None,
            period_flags={"this-month": True},
        )

    assert excinfo.value.exit_code == 1
    assert "cannot be combined" in capsys.readouterr().err


def test_resolve_cli_date_range_uses_period():
    start, end = resolve_cli_date_range(
        _ctx(),
        start_date=None,
        end_date=None,
        period_flags={"this-month": False, "last-month": True},
        today=TODAY,
    )

    assert start == date(2024, 2, 1)
    assert end == date(2024, 2, 29)


def test_resolve_cli_date_range_parses_explicit_dates():
    start, end = resolve_cli_date_range(
        _ctx(),
        start_date="01/03/2024",
        end_date="today",
        period_flags={},
        today=TODAY,
    )

    assert start == date(2024, 3, 1)
    assert end == TODAY


def test_resolve_cli_date_range_rejects_bad_date(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_cli_date_range(
            _ctx(), start_date="not a date", end_date=None, period_flags={}, today=TODAY
        )

    assert "Invalid start date" in capsys.readouterr().err


@pytest.mark.parametrize(
    "value,start,end,expected",
    [
        (date(2024, 3, 1), date(2024, 3, 1), date(2024, 3, 31), True),
        (date(2024, 4, 1), date(2024, 3, 1), date(2024, 3, 31), False),
        (date(2024, 1, 1), None, date(2024, 3, 31), True),
        (date(2024, 1, 1), date(2024, 3, 1), None, False),
        (date(2024, 1, 1), None, None, True),
    ],
)
def test_in_range(value, start, end, expected):
    assert in_range(value, start, end) is expected
