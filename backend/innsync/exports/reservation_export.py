"""
Reservation exports - CSV, iCalendar feed, tab-separated spreadsheet and printable HTML
"""
from datetime import date, datetime, timezone
from typing import Any, Iterable, List, Optional
from innsync.analytics import value, enum_value
from innsync.exports import escape
from innsync.utils.currency import format_number, format_idr
from innsync.utils.dates import BUSINESS_HOURS, business_tz, format_date, format_date_time, now_wib

CSV_HEADERS = [
    "Konfirmasi", "Tamu", "Kamar", "Check-in", "Check-out", "Status", "Total", "Dewasa", "Anak",
    "Permintaan Khusus",
]
EXCEL_HEADERS = CSV_HEADERS[:6] + ["Total (IDR)"] + CSV_HEADERS[7:]


def _row(reservation: Any) -> dict:
    """Flatten an ORM reservation (or pass a dict through) into export fields"""
    if isinstance(reservation, dict):
        guest_name = reservation.get("guest_name", "")
        room_number = reservation.get("room_number", "")
    else:
        guest_name = reservation.guest.full_name if reservation.guest else ""
        room_number = reservation.room.room_number if reservation.room else ""
    return {
        "id": value(reservation, "id"),
        "confirmation_number": value(reservation, "confirmation_number", ""),
        "guest_name": guest_name,
        "room_number": room_number,
        "check_in_date": value(reservation, "check_in_date"),
        "check_out_date": value(reservation, "check_out_date"),
        "status": enum_value(reservation, "status") or "",
        "total_amount": value(reservation, "total_amount", 0),
        "adults": value(reservation, "adults", 1),
        "children": value(reservation, "children", 0),
        "special_requests": value(reservation, "special_requests", ""),
    }


def _one_line(text) -> str:
    return " ".join(str(text or "").splitlines())


def _csv_text(text) -> str:
    """Always-quoted free-text cell on a single physical line"""
    return '"' + _one_line(text).replace('"', '""') + '"'


def ical_text(text) -> str:
    """Escape a TEXT property value (RFC 5545 3.3.11)"""
    text = str(text or "").replace("\\", "\\\\").replace(";", "\\;").replace(",", "\\,")
    return "\\n".join(text.splitlines())


def _amount(amount) -> str:
    number = float(amount)
    return str(int(number)) if number == int(number) else str(number)


def export_csv(reservations: Iterable[Any]) -> str:
    lines = [",".join(CSV_HEADERS)]
    for r in map(_row, reservations):
        lines.append(",".join([
            r["confirmation_number"],
            _csv_text(r["guest_name"]),
            r["room_number"],
            format_date(r["check_in_date"]),
            format_date(r["check_out_date"]),
            r["status"],
            _amount(r["total_amount"]),
            str(r["adults"]),
            str(r["children"]),
            _csv_text(r["special_requests"]),
        ]))
    return "\n".join(lines)


def ical_timestamp(day: date, at) -> str:
    """Local wall-clock time on `day` as a UTC iCalendar stamp"""
    if isinstance(day, str):
        day = date.fromisoformat(day)
    local = datetime.combine(day, at, tzinfo=business_tz())
    return local.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def _ical_description(r: dict) -> str:
    guests = f"{r['adults']} dewasa"
    if r["children"]:
        guests += f", {r['children']} anak"
    parts = [
        f"Konfirmasi: {ical_text(r['confirmation_number'])}",
        f"Tamu: {ical_text(guests)}",
        f"Total: Rp {format_number(r['total_amount'])}",
    ]
    if r["special_requests"]:
        parts.append(f"Permintaan: {ical_text(r['special_requests'])}")
    return "\\n".join(parts)


def export_ical(reservations: Iterable[Any]) -> str:
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//InnSync//Property Management//EN",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
    ]
    for r in map(_row, reservations):
        lines.extend([
            "BEGIN:VEVENT",
            f"UID:{r['id']}@innsync.com",
            f"DTSTART:{ical_timestamp(r['check_in_date'], BUSINESS_HOURS['CHECK_IN'])}",
            f"DTEND:{ical_timestamp(r['check_out_date'], BUSINESS_HOURS['CHECK_OUT'])}",
            f"SUMMARY:{ical_text(r['guest_name'])} - Kamar {ical_text(r['room_number'])}",
            f"DESCRIPTION:{_ical_description(r)}",
            f"LOCATION:Kamar {ical_text(r['room_number'])}",
            f"STATUS:{r['status'].upper()}",
            "BEGIN:VALARM",
            "TRIGGER:-PT1H",
            "DESCRIPTION:Reminder: Check-in dalam 1 jam",
            "ACTION:DISPLAY",
            "END:VALARM",
            "END:VEVENT",
        ])
    lines.append("END:VCALENDAR")
    return "\r\n".join(lines)


def _tsv_text(text) -> str:
    return _one_line(text).replace("\t", " ")


def export_excel(reservations: Iterable[Any]) -> str:
    """Tab-separated text that spreadsheet programs open directly"""
    lines = ["\t".join(EXCEL_HEADERS)]
    for r in map(_row, reservations):
        lines.append("\t".join([
            r["confirmation_number"],
            _tsv_text(r["guest_name"]),
            r["room_number"],
            format_date(r["check_in_date"]),
            format_date(r["check_out_date"]),
            r["status"],
            _amount(r["total_amount"]),
            str(r["adults"]),
            str(r["children"]),
            _tsv_text(r["special_requests"]),
        ]))
    return "\n".join(lines)


def export_html(reservations: Iterable[Any], generated_at: Optional[datetime] = None) -> str:
    """Printable report; browsers save it as PDF"""
    generated_at = generated_at or now_wib()
    rows: List[str] = []
    for r in map(_row, reservations):
        guests = str(r["adults"]) + (f" +{r['children']} anak" if r["children"] else "")
        rows.append(
            "<tr>"
            f"<td>{escape(r['confirmation_number'])}</td>"
            f"<td>{escape(r['guest_name'])}</td>"
            f"<td>{escape(r['room_number'])}</td>"
            f"<td>{format_date(r['check_in_date'])}</td>"
            f"<td>{format_date(r['check_out_date'])}</td>"
            f"<td><span class=\"status {escape(r['status'])}\">{escape(r['status'])}</span></td>"
            f"<td>{format_idr(r['total_amount'])}</td>"
            f"<td>{guests}</td>"
            "</tr>"
        )

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Laporan Reservasi</title>
<style>
body {{ font-family: Arial, sans-serif; margin: 20px; }}
h1 {{ color: #333; text-align: center; }}
table {{ width: 100%; border-collapse: collapse; margin: 20px 0; }}
th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
th {{ background-color: #f5f5f5; font-weight: bold; }}
</style>
</head>
<body>
<h1>Laporan Reservasi InnSync</h1>
<p>Tanggal Export: {format_date_time(generated_at)} WIB</p>
<table>
<thead>
<tr><th>Konfirmasi</th><th>Tamu</th><th>Kamar</th><th>Check-in</th><th>Check-out</th><th>Status</th><th>Total</th><th>Tamu</th></tr>
</thead>
<tbody>
{chr(10).join(rows)}
</tbody>
</table>
<p style="margin-top: 40px; text-align: center; color: #666;">Generated by InnSync Property Management System</p>
</body>
</html>"""


EXPORTERS = {"csv": export_csv, "ical": export_ical, "excel": export_excel, "pdf": export_html}


def export_reservations(reservations: Iterable[Any], fmt: str = "csv") -> str:
    if fmt not in EXPORTERS:
        raise ValueError(f"Format ekspor tidak didukung: {fmt}")
    return EXPORTERS[fmt](list(reservations))
