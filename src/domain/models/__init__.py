"""Domain models package."""

from .ledger import (
    BillSummary,
    DueAction,
    LedgerOrder,
    LedgerProduct,
    LedgerTotals,
    ModeSummary,
    PartyLedger,
    PaymentSummary,
)
from .parties import Party
from .payments import Payment, PaymentReceipt, PaymentStats

__all__ = [
    "BillSummary",
    "DueAction",
    "LedgerOrder",
    "LedgerProduct",
    "LedgerTotals",
    "ModeSummary",
    "PartyLedger",
    "PaymentSummary",
    "Party",
    "Payment",
    "PaymentReceipt",
    "PaymentStats",
]
