"""Display formatting for rupee amounts."""

from decimal import Decimal

from src.utils.decimal_utils import coerce_decimal, quantize_money


def _group_indian(digits: str) -> str:
    """Group an integer digit string the Indian way (12,34,567)."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_rupees(value: Decimal | int | float | str | None) -> str:
    """Format an amount as rupees, e.g. ``₹5,000`` or ``₹1,23,456.50``.

    Whole amounts are shown without paise.
    """
    amount = quantize_money(coerce_decimal(value))
    sign = "-" if amount < 0 else ""
    integer, _, fraction = f"{abs(amount):.2f}".partition(".")
    grouped = _group_indian(integer)
    if fraction != "00":
        grouped = f"{grouped}.{fraction}"
    return f"{sign}₹{grouped}"


__all__ = ["format_rupees"]
