"""Helpers for Decimal normalization of monetary values."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

MONEY_QUANTUM = Decimal("0.01")


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Missing values (None or empty strings) count as zero, which is how the
    ledger API reports amounts it has not computed yet.

    Args:
        value: Raw numeric value from a JSON payload or user input.

    Returns:
        Decimal: Normalized numeric value.

    Raises:
        ValueError: If the value cannot be read as a number.
    """
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a monetary value: {value!r}")
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Not a monetary value: {value!r}") from exc


def quantize_money(value: Decimal) -> Decimal:
    """Round a monetary value to paise."""
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


__all__ = ["coerce_decimal", "quantize_money", "MONEY_QUANTUM"]
