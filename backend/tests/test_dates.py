"""
Test per le utility di data.
"""

import datetime

from crm.utils.dates import add_months, days_between, parse_iso_date


# ============================================================
# add_months
# ============================================================


class TestAddMonths:
    """Somma di mesi di calendario."""

    def test_simple(self):
        assert add_months(datetime.date(2024, 1, 15), 6) == datetime.date(2024, 7, 15)

    def test_crosses_year(self):
        assert add_months(datetime.date(2023, 11, 10), 10) == datetime.date(2024, 9, 10)

    def test_clamps_to_month_end(self):
        """31/08 + 6 mesi = 28/02 (29 nei bisestili)."""
        assert add_months(datetime.date(2023, 8, 31), 6) == datetime.date(2024, 2, 29)
        assert add_months(datetime.date(2022, 8, 31), 6) == datetime.date(2023, 2, 28)

    def test_negative_months(self):
        assert add_months(datetime.date(2024, 3, 31), -1) == datetime.date(2024, 2, 29)


# ============================================================
# parse_iso_date / days_between
# ============================================================


class TestParseIsoDate:
    """Interpretazione tollerante delle date salvate."""

    def test_plain_date(self):
        assert parse_iso_date("2024-01-31") == datetime.date(2024, 1, 31)

    def test_datetime_string_drops_time(self):
        assert parse_iso_date("2024-01-31T23:59:00") == datetime.date(2024, 1, 31)

    def test_invalid_values(self):
        assert parse_iso_date(None) is None
        assert parse_iso_date("") is None
        assert parse_iso_date("31/01/2024") is None
        assert parse_iso_date(12345) is None

    def test_date_objects(self):
        day = datetime.date(2024, 5, 1)
        assert parse_iso_date(day) == day
        assert parse_iso_date(datetime.datetime(2024, 5, 1, 8, 30)) == day


def test_days_between_sign():
    today = datetime.date(2024, 7, 15)
    assert days_between(today, datetime.date(2024, 7, 20)) == 5
    assert days_between(today, datetime.date(2024, 7, 10)) == -5
    assert days_between(today, today) == 0
