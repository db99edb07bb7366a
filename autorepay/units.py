"""Conversions between decimal strings and fixed-point integers."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation


def parse_units(text: str, decimals: int) -> int:
    """Parse ``"1.5"`` into ``1.5 * 10**decimals``; extra digits are rejected."""
    try:
        value = Decimal(text)
    except InvalidOperation as e:
        raise ValueError(f"Not a number: {text!r}") from e
    if not value.is_finite():
        raise ValueError(f"Not a finite number: {text!r}")

    scaled = value.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"{text} has more than {decimals} fractional digits")
    return int(scaled)


def format_units(amount: int, decimals: int, places: int = 4) -> str:
    """Render a fixed-point integer with ``places`` fractional digits, truncated."""
    sign = "-" if amount < 0 else ""
    whole, frac = divmod(abs(amount), 10**decimals)
    if places <= 0:
        return f"{sign}{whole:,}"
    frac_str = str(frac).rjust(decimals, "0")[:places].ljust(places, "0")
    return f"{sign}{whole:,}.{frac_str}"
