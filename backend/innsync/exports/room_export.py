"""
Room inventory exports and the plain-text room analysis report
"""
import json
from typing import Any, Iterable, Optional
from datetime import datetime
from innsync.analytics import value, enum_value
from innsync.analytics.room_analytics import calculate_room_analytics
from innsync.utils.currency import format_idr
from innsync.utils.dates import format_date, format_date_time, local_date, now_wib

STATUS_LABELS = {
    "clean": "Bersih",
    "dirty": "Kotor",
    "inspected": "Diperiksa",
    "out_of_order": "Perbaikan",
}

CSV_HEADERS = [
    "Nomor Kamar", "Tipe Kamar", "Kapasitas", "Tarif Dasar", "Lantai", "Luas (m²)", "Tipe Kasur",
    "Status", "Status Operasional", "Merokok Diizinkan", "Fasilitas", "Deskripsi", "Tanggal Dibuat",
]


def status_label(status: Optional[str]) -> str:
    return STATUS_LABELS.get(status, status or "")


def _quote(text: Any) -> str:
    return '"' + str(text).replace('"', '""') + '"'


def export_csv(rooms: Iterable[Any]) -> str:
    lines = [",".join(CSV_HEADERS)]
    for room in rooms:
        created = value(room, "created_at")
        lines.append(",".join(_quote(cell) for cell in [
            value(room, "room_number", ""),
            value(room, "room_type", ""),
            value(room, "capacity", 0),
            int(float(value(room, "base_rate", 0))),
            value(room, "floor", ""),
            value(room, "size_sqm", ""),
            value(room, "bed_type", ""),
            status_label(enum_value(room, "status")),
            "Aktif" if value(room, "is_active", True) else "Tidak Aktif",
            "Ya" if value(room, "is_smoking_allowed", False) else "Tidak",
            "; ".join(value(room, "amenities", []) or []),
            value(room, "description", ""),
            format_date(local_date(created)) if created else "",
        ]))
    return "\n".join(lines)


def _room_dict(room: Any) -> dict:
    created = value(room, "created_at")
    return {
        "id": value(room, "id"),
        "property_id": value(room, "property_id"),
        "room_number": value(room, "room_number"),
        "room_type": value(room, "room_type"),
        "floor": value(room, "floor"),
        "capacity": value(room, "capacity"),
        "base_rate": float(value(room, "base_rate", 0)),
        "amenities": value(room, "amenities", []) or [],
        "status": enum_value(room, "status"),
        "is_active": value(room, "is_active", True),
        "description": value(room, "description"),
        "created_at": created.isoformat() if isinstance(created, datetime) else created,
    }


def export_json(rooms: Iterable[Any], exported_at: Optional[datetime] = None) -> str:
    rooms = [_room_dict(r) for r in rooms]
    exported_at = exported_at or now_wib()
    return json.dumps(
        {"exported_at": exported_at.isoformat(), "total_rooms": len(rooms), "rooms": rooms},
        indent=2,
        ensure_ascii=False,
    )


def generate_room_report(rooms: Iterable[Any], generated_at: Optional[datetime] = None) -> str:
    rooms = list(rooms)
    analytics = calculate_room_analytics(rooms)
    generated_at = generated_at or now_wib()

    lines = [
        "LAPORAN ANALISA KAMAR",
        "=" * 40,
        f"Tanggal: {format_date_time(generated_at)} WIB",
        "",
        "RINGKASAN UMUM",
        "-" * 40,
        f"Total Kamar: {analytics['total_rooms']}",
        f"Kamar Aktif: {analytics['active_rooms']}",
        f"Kamar Tidak Aktif: {analytics['inactive_rooms']}",
        f"Rata-rata Tarif: {format_idr(analytics['average_base_rate'])}",
        f"Potensi Pendapatan per Malam: {format_idr(analytics['total_revenue_potential'])}",
        f"Efisiensi Housekeeping: {analytics['housekeeping_efficiency']}%",
        "",
        "DISTRIBUSI TIPE KAMAR",
        "-" * 40,
    ]
    lines += [
        f"{t['type']}: {t['count']} kamar ({t['percentage']}%)"
        for t in analytics["room_type_distribution"]
    ]

    lines += ["", "DISTRIBUSI STATUS", "-" * 40]
    for status, label in STATUS_LABELS.items():
        lines.append(f"{label}: {analytics[status + '_rooms']} kamar")

    lines += ["", "DISTRIBUSI LANTAI", "-" * 40]
    lines += [
        f"Lantai {f['floor']}: {f['count']} kamar, rata-rata {format_idr(f['avg_rate'])}"
        for f in analytics["floor_distribution"]
    ]

    lines += ["", "FASILITAS POPULER", "-" * 40]
    lines += [
        f"{a['amenity']}: {a['count']} kamar ({a['percentage']}%)"
        for a in analytics["amenity_popularity"][:5]
    ]
    return "\n".join(lines)


EXPORTERS = {"csv": export_csv, "json": export_json, "report": generate_room_report}


def export_rooms(rooms: Iterable[Any], fmt: str = "csv") -> str:
    if fmt not in EXPORTERS:
        raise ValueError(f"Format ekspor tidak didukung: {fmt}")
    return EXPORTERS[fmt](list(rooms))
