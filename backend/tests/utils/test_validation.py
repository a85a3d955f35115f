"""
Identity, phone and reservation rule validation tests
"""
from datetime import date

from innsync.utils.validation import (
    validate_ktp, format_ktp, validate_indonesian_id, validate_indonesian_phone, validate_indonesian_mobile,
    format_indonesian_phone, is_room_available, validate_guest_capacity, validate_payment_amount,
    validate_reservation_dates, validate_guest_identity
)

TODAY = date(2024, 3, 1)


class TestIdentity:
    """KTP, passport and SIM numbers"""

    def test_valid_ktp(self):
        assert validate_ktp("3201011234560001")
        assert validate_ktp("32.01.01.123456.0001")

    def test_invalid_ktp(self):
        assert not validate_ktp("0001011234560001")   # province below 11
        assert not validate_ktp("9901011234560001")   # province above 94
        assert not validate_ktp("3200011234560001")   # regency 00
        assert not validate_ktp("32010112345600")     # too short
        assert not validate_ktp("")

    def test_format_ktp(self):
        assert format_ktp("3201011234560001") == "32.01.01.123456.0001"
        assert format_ktp("123") == "123"

    def test_id_shapes(self):
        assert validate_indonesian_id("A1234567", "passport")
        assert validate_indonesian_id("AB123456", "Passport")
        assert not validate_indonesian_id("1234567", "passport")
        assert validate_indonesian_id("123456789012", "sim")
        assert not validate_indonesian_id("3201011234560001", "npwp")

    def test_guest_identity_messages(self):
        assert validate_guest_identity("KTP", "3201011234560001", "081234567890") == (True, None)
        assert validate_guest_identity("KTP", "0001011234560001", None) == (False, "Nomor KTP tidak valid")
        assert validate_guest_identity("Passport", "123", None) == (False, "Nomor Passport tidak valid")
        assert validate_guest_identity(None, None, "12345") == (False, "Nomor telepon tidak valid")


class TestPhones:
    """Indonesian phone numbers"""

    def test_mobile_prefixes(self):
        for phone in ("081234567890", "+6281234567890", "6281234567890", "0812 3456 7890"):
            assert validate_indonesian_mobile(phone), phone

    def test_landline(self):
        assert validate_indonesian_phone("0215551234")
        assert not validate_indonesian_mobile("0215551234")

    def test_rejects_garbage(self):
        assert not validate_indonesian_phone("12345")
        assert not validate_indonesian_phone("")

    def test_format(self):
        assert format_indonesian_phone("0812-3456-7890") == "+6281234567890"
        assert format_indonesian_phone("6281234567890") == "+6281234567890"
        assert format_indonesian_phone("81234567890") == "+6281234567890"


class TestReservationRules:
    """Availability, capacity, payment and stay dates"""

    def _stay(self, id, check_in, check_out, status="confirmed", room_id=1):
        return {"id": id, "room_id": room_id, "check_in_date": check_in, "check_out_date": check_out,
                "status": status}

    def test_overlap_blocks(self):
        existing = [self._stay(1, "2024-03-05", "2024-03-08")]

        result = is_room_available(existing, 1, date(2024, 3, 7), date(2024, 3, 9))

        assert result["available"] is False
        assert result["conflicting_reservations"] == existing

    def test_back_to_back_allowed(self):
        existing = [self._stay(1, "2024-03-05", "2024-03-08")]

        assert is_room_available(existing, 1, "2024-03-08", "2024-03-10")["available"]
        assert is_room_available(existing, 1, "2024-03-01", "2024-03-05")["available"]

    def test_ignores_cancelled_other_rooms_and_self(self):
        existing = [
            self._stay(1, "2024-03-05", "2024-03-08", status="cancelled"),
            self._stay(2, "2024-03-05", "2024-03-08", room_id=2),
            self._stay(3, "2024-03-05", "2024-03-08"),
        ]

        assert is_room_available(existing, 1, "2024-03-06", "2024-03-07", exclude_reservation_id=3)["available"]

    def test_capacity_counts_children(self):
        assert validate_guest_capacity(2, 0, 2) == (True, None)
        valid, message = validate_guest_capacity(2, 1, 2)
        assert not valid
        assert message == "Jumlah tamu (3) melebihi kapasitas kamar (2)"

    def test_payment_amount(self):
        assert validate_payment_amount(500000, 1000000, 500000) == (True, None)
        assert validate_payment_amount(0, 1000000)[0] is False
        assert "melebihi sisa tagihan" in validate_payment_amount(600000, 1000000, 500000)[1]

    def test_stay_dates(self):
        assert validate_reservation_dates(TODAY, date(2024, 3, 31), today=TODAY) == (True, None)
        assert validate_reservation_dates(date(2024, 2, 29), date(2024, 3, 2), today=TODAY)[1] == \
            "Tanggal check-in tidak boleh di masa lalu"
        assert validate_reservation_dates(TODAY, TODAY, today=TODAY)[1] == \
            "Tanggal check-out harus setelah tanggal check-in"
        assert validate_reservation_dates(TODAY, date(2024, 4, 1), today=TODAY)[1] == "Maksimal menginap 30 hari"
