"""
Indonesian Rupiah formatting and tax helpers
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Union
import re

Number = Union[int, float, Decimal]

TAX_RATES = {
    "PPN": Decimal("0.11"),             # VAT
    "SERVICE_CHARGE": Decimal("0.10"),  # customary hotel service charge
}


def _round(value: Number) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_number(value: Number) -> str:
    """1500000 -> '1.500.000'"""
    rounded = _round(value)
    sign = "-" if rounded < 0 else ""
    return sign + f"{abs(rounded):,}".replace(",", ".")


def format_idr(amount: Number) -> str:
    """1500000 -> 'Rp 1.500.000'"""
    return f"Rp {format_number(amount)}"


def format_idr_compact(amount: Number) -> str:
    """1500000 -> 'Rp 1,5 jt'"""
    value = Decimal(str(amount))
    for threshold, suffix in ((Decimal("1e12"), "T"), (Decimal("1e9"), "M"),
                              (Decimal("1e6"), "jt"), (Decimal("1e3"), "rb")):
        if abs(value) >= threshold:
            scaled = (value / threshold).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
            text = f"{scaled:f}".rstrip("0").rstrip(".").replace(".", ",")
            return f"Rp {text} {suffix}"
    return format_idr(value)


def parse_idr(text: str) -> int:
    """'Rp 1.500.000' -> 1500000; anything without digits -> 0"""
    digits = re.sub(r"\D", "", text or "")
    return int(digits) if digits else 0


def calculate_tax(amount: Number, tax_rate: Number = TAX_RATES["PPN"]) -> int:
    return _round(Decimal(str(amount)) * Decimal(str(tax_rate)))


def calculate_total(amount: Number, include_tax: bool = True, include_service: bool = False) -> int:
    total = Decimal(str(amount))
    if include_service:
        total += calculate_tax(amount, TAX_RATES["SERVICE_CHARGE"])
    if include_tax:
        total += calculate_tax(amount, TAX_RATES["PPN"])
    return _round(total)
