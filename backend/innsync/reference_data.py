"""
Static Indonesian reference data used by forms and the setup wizard
"""
from datetime import date
from typing import Optional

INDONESIAN_CITIES = [
    "Jakarta", "Surabaya", "Bandung", "Bekasi", "Medan", "Tangerang", "Depok", "Semarang",
    "Palembang", "Makassar", "Denpasar", "Yogyakarta", "Malang", "Bogor", "Batam", "Pekanbaru",
    "Bandar Lampung", "Padang", "Balikpapan", "Samarinda",
]

INDONESIAN_PROVINCES = [
    "Aceh", "Sumatera Utara", "Sumatera Barat", "Riau", "Kepulauan Riau", "Jambi",
    "Sumatera Selatan", "Bangka Belitung", "Bengkulu", "Lampung", "DKI Jakarta", "Jawa Barat",
    "Banten", "Jawa Tengah", "DI Yogyakarta", "Jawa Timur", "Bali", "Nusa Tenggara Barat",
    "Nusa Tenggara Timur", "Kalimantan Barat", "Kalimantan Tengah", "Kalimantan Selatan",
    "Kalimantan Timur", "Kalimantan Utara", "Sulawesi Utara", "Gorontalo", "Sulawesi Tengah",
    "Sulawesi Barat", "Sulawesi Selatan", "Sulawesi Tenggara", "Maluku", "Maluku Utara", "Papua",
    "Papua Barat", "Papua Selatan", "Papua Tengah", "Papua Pegunungan", "Papua Barat Daya",
]

ROOM_TYPES = [
    {"id": "standard", "name": "Standard", "description": "Kamar standar dengan fasilitas dasar",
     "capacity": 2, "base_rate": 500000},
    {"id": "superior", "name": "Superior", "description": "Kamar superior dengan view kota",
     "capacity": 2, "base_rate": 750000},
    {"id": "deluxe", "name": "Deluxe", "description": "Kamar deluxe dengan balkon",
     "capacity": 3, "base_rate": 1000000},
    {"id": "suite", "name": "Suite", "description": "Suite dengan ruang tamu terpisah",
     "capacity": 4, "base_rate": 1500000},
    {"id": "family", "name": "Family Room", "description": "Kamar keluarga dengan tempat tidur tambahan",
     "capacity": 4, "base_rate": 1200000},
    {"id": "presidential", "name": "Presidential Suite", "description": "Suite presidential dengan fasilitas mewah",
     "capacity": 6, "base_rate": 3000000},
]

AMENITIES = [
    {"id": "wifi", "name": "WiFi Gratis"},
    {"id": "ac", "name": "AC"},
    {"id": "tv", "name": "TV LED"},
    {"id": "minibar", "name": "Minibar"},
    {"id": "safe", "name": "Brankas"},
    {"id": "balcony", "name": "Balkon"},
    {"id": "bathtub", "name": "Bathtub"},
    {"id": "breakfast", "name": "Sarapan"},
    {"id": "parking", "name": "Parkir"},
    {"id": "gym", "name": "Akses Gym"},
    {"id": "pool", "name": "Akses Kolam Renang"},
    {"id": "spa", "name": "Akses Spa"},
]

PAYMENT_METHODS = [
    {"id": "cash", "name": "Tunai", "description": "Pembayaran tunai"},
    {"id": "bank_transfer", "name": "Transfer Bank", "description": "Transfer ke rekening hotel"},
    {"id": "credit_card", "name": "Kartu Kredit", "description": "Visa, Mastercard, JCB"},
    {"id": "debit_card", "name": "Kartu Debit", "description": "Debit BCA, Mandiri, BNI, BRI"},
    {"id": "digital_wallet", "name": "E-Wallet", "description": "GoPay, OVO, DANA, ShopeePay"},
]

INDONESIAN_HOLIDAYS_2024 = [
    {"date": "2024-01-01", "name": "Tahun Baru Masehi"},
    {"date": "2024-02-10", "name": "Tahun Baru Imlek"},
    {"date": "2024-03-11", "name": "Hari Raya Nyepi"},
    {"date": "2024-03-29", "name": "Wafat Isa Al Masih"},
    {"date": "2024-04-10", "name": "Hari Raya Idul Fitri"},
    {"date": "2024-04-11", "name": "Hari Raya Idul Fitri"},
    {"date": "2024-05-01", "name": "Hari Buruh Internasional"},
    {"date": "2024-05-09", "name": "Kenaikan Isa Al Masih"},
    {"date": "2024-05-23", "name": "Hari Raya Waisak"},
    {"date": "2024-06-01", "name": "Hari Lahir Pancasila"},
    {"date": "2024-06-17", "name": "Hari Raya Idul Adha"},
    {"date": "2024-07-07", "name": "Tahun Baru Islam"},
    {"date": "2024-08-17", "name": "Hari Kemerdekaan RI"},
    {"date": "2024-09-16", "name": "Maulid Nabi Muhammad SAW"},
    {"date": "2024-12-25", "name": "Hari Raya Natal"},
]


def get_room_type(type_id: str) -> Optional[dict]:
    return next((t for t in ROOM_TYPES if t["id"] == type_id), None)


def holiday_name(day: date) -> Optional[str]:
    iso = day.isoformat()
    return next((h["name"] for h in INDONESIAN_HOLIDAYS_2024 if h["date"] == iso), None)
