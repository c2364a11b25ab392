"""Domain models for party ledgers.

A ledger is generated by the server for a single party and a closed
``[start_date, end_date]`` calendar window. Nothing here is mutated after
parsing; a different window means a different ledger.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class LedgerProduct:
    """Line product of an order inside a ledger."""

    product_id: int | None
    product_name: str
    quantity_kg: Decimal | None
    quantity_pc: Decimal | None
    market_rate: Decimal
    rate_difference: Decimal
    total_amount: Decimal


@dataclass(frozen=True)
class BillSummary:
    """Official bill figures for an order.

    Attributes:
        bill_percentage: Share of the order billed officially.
        amount_without_gst: Billed amount before tax.
        gst_amount: Tax amount as computed by the server.
        bill_total_amount: Billed amount including tax.
    """

    bill_percentage: Decimal | None
    amount_without_gst: Decimal
    gst_amount: Decimal
    bill_total_amount: Decimal


@dataclass(frozen=True)
class ModeSummary:
    """Payment totals for one billing mode of an order."""

    total_amount: Decimal
    received_amount: Decimal
    due_amount: Decimal


@dataclass(frozen=True)
class PaymentSummary:
    """Payment totals of an order split by billing mode.

    Either side may be missing; a missing side has nothing due.
    """

    official: ModeSummary | None = None
    offline: ModeSummary | None = None


@dataclass(frozen=True)
class LedgerOrder:
    """Order with its products, bill and payment summaries."""

    order_id: int
    order_date: date | None
    products: tuple[LedgerProduct, ...] = ()
    bill_summary: BillSummary | None = None
    payment_summary: PaymentSummary = field(default_factory=PaymentSummary)
    official_grand_total: Decimal = Decimal("0")
    offline_grand_total: Decimal = Decimal("0")


@dataclass(frozen=True)
class PartyLedger:
    """Ledger of one party for a date window."""

    party_id: int
    party_name: str
    total_official_amount: Decimal
    total_offline_amount: Decimal
    total_received_amount: Decimal
    total_remaining_amount: Decimal
    orders: tuple[LedgerOrder, ...]
    start_date: date
    end_date: date


@dataclass(frozen=True)
class LedgerTotals:
    """Totals combined across one or more party ledgers."""

    official: Decimal = Decimal("0")
    offline: Decimal = Decimal("0")
    received: Decimal = Decimal("0")
    remaining: Decimal = Decimal("0")


@dataclass(frozen=True)
class DueAction:
    """A record-payment action offered for an order and billing mode."""

    order_id: int
    mode: str
    due_amount: Decimal
    total_amount: Decimal


__all__ = [
    "LedgerProduct",
    "BillSummary",
    "ModeSummary",
    "PaymentSummary",
    "LedgerOrder",
    "PartyLedger",
    "LedgerTotals",
    "DueAction",
]
