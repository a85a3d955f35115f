"""
Rupiah and date formatting tests
"""
from datetime import date, datetime, timezone
from decimal import Decimal

from innsync.utils.currency import (
    format_number, format_idr, format_idr_compact, parse_idr, calculate_tax, calculate_total
)
from innsync.utils.dates import (
    local_date, month_bounds, shift_month, format_date, format_date_time, format_check_in_out,
    format_relative_time, to_local
)


class TestCurrency:
    """IDR formatting and tax"""

    def test_thousands_separator(self):
        assert format_number(1500000) == "1.500.000"
        assert format_number(Decimal("999.5")) == "1.000"
        assert format_number(-25000) == "-25.000"

    def test_format_idr(self):
        assert format_idr(1500000) == "Rp 1.500.000"
        assert format_idr(0) == "Rp 0"

    def test_compact(self):
        assert format_idr_compact(1500000) == "Rp 1,5 jt"
        assert format_idr_compact(2000000000) == "Rp 2 M"
        assert format_idr_compact(25000) == "Rp 25 rb"
        assert format_idr_compact(750) == "Rp 750"

    def test_parse(self):
        assert parse_idr("Rp 1.500.000") == 1500000
        assert parse_idr("gratis") == 0
        assert parse_idr(None) == 0

    def test_ppn(self):
        assert calculate_tax(1000000) == 110000
        assert calculate_tax(Decimal("33333")) == 3667

    def test_total_with_service_charge(self):
        assert calculate_total(100000) == 111000
        assert calculate_total(100000, include_service=True) == 121000
        assert calculate_total(100000, include_tax=False) == 100000


class TestDates:
    """Business dates in WIB"""

    def test_utc_evening_is_next_local_day(self):
        assert local_date(datetime(2024, 3, 1, 18, 30)) == date(2024, 3, 2)
        assert local_date("2024-03-01T16:59:00") == date(2024, 3, 1)
        assert local_date("2024-03-01") == date(2024, 3, 1)
        assert local_date(None) is None

    def test_to_local_keeps_instant(self):
        utc = datetime(2024, 3, 1, 0, 0, tzinfo=timezone.utc)

        assert to_local(utc).hour == 7
        assert to_local(utc) == utc

    def test_month_helpers(self):
        assert month_bounds(date(2024, 12, 15)) == (date(2024, 12, 1), date(2025, 1, 1))
        assert shift_month(date(2024, 1, 31), -1) == date(2023, 12, 1)
        assert shift_month(date(2024, 11, 5), 3) == date(2025, 2, 1)

    def test_formats(self):
        assert format_date(date(2024, 3, 5)) == "05/03/2024"
        assert format_date_time(datetime(2024, 3, 5, 14, 0)) == "05/03/2024 14:00"
        assert format_check_in_out(date(2024, 3, 5), date(2024, 3, 8)) == "05 Mar - 08 Mar 2024"

    def test_relative_time(self):
        now = datetime(2024, 3, 5, 9, 0)

        assert format_relative_time(datetime(2024, 3, 5, 14, 0), now=now) == "Hari ini 14:00"
        assert format_relative_time(datetime(2024, 3, 6, 12, 0), now=now) == "Besok 12:00"
        assert format_relative_time(datetime(2024, 3, 4, 8, 0), now=now) == "Kemarin 08:00"
        assert format_relative_time(date(2024, 3, 10), now=now) == "dalam 5 hari"
        assert format_relative_time(date(2024, 3, 1), now=now) == "4 hari lalu"
