"""Tests for print formatting helpers."""

import os
import time
from datetime import date, datetime, timedelta, timezone

import pytest

from print_format import (
    MISSING,
    balance_marker,
    format_balance,
    format_date,
    format_datetime,
    format_money,
)


@pytest.mark.parametrize("value, expected", [
    ("2024-03-07", "07/03/2024"),
    ("2024-03-07 18:30:00", "07/03/2024"),
    ("2024-12-31T09:15:00", "31/12/2024"),
    (date(2023, 1, 2), "02/01/2023"),
    (datetime(2023, 11, 5, 23, 59), "05/11/2023"),
])
def test_format_date(value, expected):
    assert format_date(value) == expected


@pytest.mark.parametrize("raw", ["not a date", "31/31/2024", "yesterday"])
def test_unparseable_date_is_returned_unchanged(raw):
    assert format_date(raw) == raw


def test_missing_date():
    assert format_date(None) == MISSING
    assert format_date("") == MISSING


def test_format_datetime():
    assert format_datetime(datetime(2024, 5, 6, 7, 8, 9)) == "06/05/2024, 07:08:09"


@pytest.mark.parametrize("value, expected", [
    (0, "₹0.00"),
    (1234.5, "₹1,234.50"),
    (1234567.891, "₹1,234,567.89"),
    ("250", "₹250.00"),
    (None, "₹0.00"),
    (float("nan"), "₹0.00"),
    (float("inf"), "₹0.00"),
    ("abc", "₹0.00"),
    (-0.0, "₹0.00"),
])
def test_format_money(value, expected):
    assert format_money(value) == expected


def test_format_money_spaced_and_symbol():
    assert format_money(10, spaced=True) == "₹ 10.00"
    assert format_money(10, symbol="Rs.") == "Rs.10.00"


def test_negative_balance_is_parenthesised():
    assert format_balance(-500) == "(₹500.00)"
    assert "-" not in format_balance(-1234.5)
    assert format_balance(-1234.5) == "(₹1,234.50)"
    assert format_balance(500) == "₹500.00"


@pytest.mark.parametrize("value, marker", [(0, "CR"), (10, "CR"), (-0.01, "DB"), (None, "CR")])
def test_balance_marker(value, marker):
    assert balance_marker(value) == marker


@pytest.fixture
def kolkata_tz():
    previous = os.environ.get("TZ")
    os.environ["TZ"] = "Asia/Kolkata"
    time.tzset()
    yield
    if previous is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = previous
    time.tzset()


@pytest.mark.parametrize("value", [
    "2024-03-06T20:00:00Z",
    "2024-03-06T20:00:00+00:00",
    datetime(2024, 3, 6, 20, 0, tzinfo=timezone.utc),
    datetime(2024, 3, 7, 0, 30, tzinfo=timezone(timedelta(hours=5, minutes=30))),
])
def test_aware_values_use_local_calendar_day(kolkata_tz, value):
    assert format_date(value) == "07/03/2024"


def test_aware_datetime_uses_local_clock(kolkata_tz):
    assert format_datetime("2024-03-06T20:00:00Z") == "07/03/2024, 01:30:00"
