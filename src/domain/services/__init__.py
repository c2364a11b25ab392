"""Domain services package."""

from .formatting import format_rupees
from .ledger import (
    compute_ledger_totals,
    compute_payment_stats,
    due_amount,
    mode_summary,
    payable_dues,
)
from .normalization import normalize_billing_mode, normalize_floor
from .validation import validate_date_range, validate_receipt

__all__ = [
    "format_rupees",
    "compute_ledger_totals",
    "compute_payment_stats",
    "due_amount",
    "mode_summary",
    "payable_dues",
    "normalize_billing_mode",
    "normalize_floor",
    "validate_date_range",
    "validate_receipt",
]
