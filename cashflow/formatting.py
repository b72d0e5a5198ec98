"""Indonesian rupiah formatting for display."""

from decimal import ROUND_HALF_UP, Decimal


def _group(whole: int) -> str:
    # id-ID groups thousands with "."
    return f"{whole:,}".replace(",", ".")


def format_idr(amount: float) -> str:
    """
    Full amount, no decimals.

    >>> format_idr(25000)
    'Rp 25.000'
    >>> format_idr(-1500)
    '-Rp 1.500'
    """
    rounded = int(Decimal(str(abs(amount))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if amount < 0 and rounded else ""
    return f"{sign}Rp {_group(rounded)}"


def _plain(amount: float) -> str:
    """Grouped digits with up to three decimals after a "," separator."""
    quantized = Decimal(str(amount)).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
    sign = "-" if quantized < 0 else ""
    whole, _, fraction = f"{abs(quantized):f}".partition(".")
    fraction = fraction.rstrip("0")
    text = _group(int(whole))
    return f"{sign}{text},{fraction}" if fraction else f"{sign}{text}"


def format_idr_short(amount: float) -> str:
    """
    Compact amount for chart axes and cards.

    >>> format_idr_short(1_500_000_000)
    'Rp 1.5M'
    >>> format_idr_short(2_500_000)
    'Rp 2.5jt'
    >>> format_idr_short(150_000)
    'Rp 150rb'
    """
    if amount >= 1_000_000_000:
        return f"Rp {amount / 1_000_000_000:.1f}M"
    if amount >= 1_000_000:
        return f"Rp {amount / 1_000_000:.1f}jt"
    if amount >= 1_000:
        return f"Rp {amount / 1_000:.0f}rb"
    return f"Rp {_plain(amount)}"
