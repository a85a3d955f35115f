"""
Exports - CSV, iCalendar, spreadsheet and printable renderings of hotel data
"""
import html

MEDIA_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "ical": "text/calendar; charset=utf-8",
    "excel": "application/vnd.ms-excel",
    "pdf": "text/html; charset=utf-8",
    "json": "application/json",
    "report": "text/plain; charset=utf-8",
}

EXTENSIONS = {"csv": "csv", "ical": "ics", "excel": "xls", "pdf": "html", "json": "json", "report": "txt"}


def escape(value) -> str:
    return html.escape("" if value is None else str(value))
