"""Domain package for ledger rules and core models."""

from .constants import (
    BILLING_MODES,
    DEFAULT_BILLING_MODE,
    FLOORS,
    OFFICIAL,
    OFFLINE,
)
from .errors import ReceiptValidationError
from .models import (
    BillSummary,
    DueAction,
    LedgerOrder,
    LedgerProduct,
    LedgerTotals,
    ModeSummary,
    Party,
    PartyLedger,
    Payment,
    PaymentReceipt,
    PaymentStats,
    PaymentSummary,
)
from .services import (
    compute_ledger_totals,
    compute_payment_stats,
    due_amount,
    format_rupees,
    normalize_billing_mode,
    normalize_floor,
    payable_dues,
    validate_receipt,
)

__all__ = [
    "BILLING_MODES",
    "DEFAULT_BILLING_MODE",
    "FLOORS",
    "OFFICIAL",
    "OFFLINE",
    "ReceiptValidationError",
    "BillSummary",
    "DueAction",
    "LedgerOrder",
    "LedgerProduct",
    "LedgerTotals",
    "ModeSummary",
    "Party",
    "PartyLedger",
    "Payment",
    "PaymentReceipt",
    "PaymentStats",
    "PaymentSummary",
    "compute_ledger_totals",
    "compute_payment_stats",
    "due_amount",
    "format_rupees",
    "normalize_billing_mode",
    "normalize_floor",
    "payable_dues",
    "validate_receipt",
]
