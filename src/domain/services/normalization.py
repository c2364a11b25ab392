"""Domain normalization helpers."""

from src.domain.constants import BILLING_MODES, DEFAULT_BILLING_MODE, FLOORS


def normalize_billing_mode(mode: str | None) -> str:
    """Normalize a billing mode, defaulting absent values to OFFICIAL.

    Every place that reads a payment or ledger mode goes through this
    function so payment index keys and lookups always agree.

    Args:
        mode: Raw mode value from a payment record or caller.

    Returns:
        str: One of the known billing modes.

    Raises:
        ValueError: If the mode is present but not a known billing mode.
    """
    if mode is None:
        return DEFAULT_BILLING_MODE
    cleaned = str(mode).strip().upper()
    if not cleaned:
        return DEFAULT_BILLING_MODE
    if cleaned not in BILLING_MODES:
        raise ValueError(f"Unknown billing mode: {mode!r}")
    return cleaned


def normalize_floor(floor: str | None) -> str:
    """Normalize a floor identifier.

    Args:
        floor: Raw floor value, e.g. ``ground_floor``.

    Returns:
        str: One of the known floors.

    Raises:
        ValueError: If the floor is missing or unknown.
    """
    cleaned = (floor or "").strip().upper()
    if cleaned not in FLOORS:
        raise ValueError(
            f"Unknown floor: {floor!r}. Expected one of {', '.join(FLOORS)}."
        )
    return cleaned


__all__ = ["normalize_billing_mode", "normalize_floor"]
