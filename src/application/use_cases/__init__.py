"""Application use cases package."""

from .get_parties import GetPartiesUseCase
from .get_payment_stats import GetPaymentStatsUseCase
from .load_party_ledgers import LedgerAggregator, PartyLedgerRow
from .party_ledger_view import PartyLedgerView
from .payment_index import LookupStatus, PaymentIndex, PaymentLookup
from .record_payment import (
    CaptureForm,
    FlowState,
    PaymentReconciliationFlow,
)

__all__ = [
    "GetPartiesUseCase",
    "GetPaymentStatsUseCase",
    "LedgerAggregator",
    "PartyLedgerRow",
    "PartyLedgerView",
    "LookupStatus",
    "PaymentIndex",
    "PaymentLookup",
    "CaptureForm",
    "FlowState",
    "PaymentReconciliationFlow",
]
