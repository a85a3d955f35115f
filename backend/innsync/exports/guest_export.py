"""
Guest list exports with a selectable set of columns
"""
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Sequence
from innsync.analytics import value
from innsync.exports import escape
from innsync.utils.dates import format_date, format_date_time, local_date, now_wib

FIELD_LABELS = {
    "first_name": "Nama Depan",
    "last_name": "Nama Belakang",
    "email": "Email",
    "phone": "Telepon",
    "identification_type": "Tipe Identitas",
    "identification_number": "Nomor Identitas",
    "nationality": "Kewarganegaraan",
    "city": "Kota",
    "state": "Provinsi",
    "created_at": "Tanggal Bergabung",
}

DEFAULT_FIELDS = list(FIELD_LABELS)


def available_fields() -> List[dict]:
    return [{"key": key, "label": label} for key, label in FIELD_LABELS.items()]


def _check_fields(fields: Optional[Sequence[str]]) -> List[str]:
    fields = list(fields or DEFAULT_FIELDS)
    unknown = [f for f in fields if f not in FIELD_LABELS]
    if unknown:
        raise ValueError(f"Kolom ekspor tidak dikenal: {', '.join(unknown)}")
    return fields


def _cell(guest: Any, field: str) -> str:
    raw = value(guest, field, "")
    if isinstance(raw, (date, datetime)) or (field == "created_at" and raw):
        return format_date(local_date(raw))
    return " ".join(str(raw).splitlines())


def _quote(text: str) -> str:
    if "," in text or '"' in text or "\n" in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def export_csv(guests: Iterable[Any], fields: Optional[Sequence[str]] = None) -> str:
    fields = _check_fields(fields)
    lines = [",".join(_quote(FIELD_LABELS[f]) for f in fields)]
    for guest in guests:
        lines.append(",".join(_quote(_cell(guest, f)) for f in fields))
    return "\n".join(lines)


def export_excel(guests: Iterable[Any], fields: Optional[Sequence[str]] = None) -> str:
    """Spreadsheet programs open the CSV rendering as-is"""
    return export_csv(guests, fields)


def export_html(guests: Iterable[Any], fields: Optional[Sequence[str]] = None,
                generated_at: Optional[datetime] = None) -> str:
    fields = _check_fields(fields)
    guests = list(guests)
    generated_at = generated_at or now_wib()
    header = "".join(f"<th>{escape(FIELD_LABELS[f])}</th>" for f in fields)
    rows = "\n".join(
        "<tr>" + "".join(f"<td>{escape(_cell(g, f))}</td>" for f in fields) + "</tr>"
        for g in guests
    )
    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Daftar Tamu</title>
<style>
body {{ font-family: Arial, sans-serif; margin: 20px; }}
table {{ width: 100%; border-collapse: collapse; }}
th, td {{ border: 1px solid #ddd; padding: 6px; font-size: 12px; }}
th {{ background-color: #f5f5f5; }}
</style>
</head>
<body>
<h1>Daftar Tamu</h1>
<p>Total tamu: {len(guests)} | Tanggal Export: {format_date_time(generated_at)} WIB</p>
<table>
<thead><tr>{header}</tr></thead>
<tbody>
{rows}
</tbody>
</table>
</body>
</html>"""


EXPORTERS = {"csv": export_csv, "excel": export_excel, "pdf": export_html}


def export_guests(guests: Iterable[Any], fmt: str = "csv", fields: Optional[Sequence[str]] = None) -> str:
    if fmt not in EXPORTERS:
        raise ValueError(f"Format ekspor tidak didukung: {fmt}")
    return EXPORTERS[fmt](list(guests), fields)
