"""Domain models for payment records."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class Payment:
    """Payment record tracked by the payment registry.

    ``mode`` is kept exactly as received; read it through
    ``normalize_billing_mode`` so an absent mode resolves to OFFICIAL.
    """

    payment_id: int
    order_id: int | None
    mode: str | None
    total_amount: Decimal
    received_amount: Decimal
    last_received_date: date | None = None
    customer_name: str | None = None
    due_date: date | None = None
    payment_status: str | None = None
    floor: str | None = None
    last_reminder: date | None = None

    @property
    def remaining_amount(self) -> Decimal:
        """Return total_amount minus received_amount."""
        return self.total_amount - self.received_amount


@dataclass(frozen=True)
class PaymentReceipt:
    """Incremental receipt submitted against a payment.

    Attributes:
        new_received_amount: Amount received in this receipt only.
        new_received_date: Calendar day the amount was received.
    """

    new_received_amount: Decimal
    new_received_date: date


@dataclass(frozen=True)
class PaymentStats:
    """Headline figures for a floor's payment list."""

    overdue_count: int
    overdue_amount: Decimal
    due_soon_count: int
    total_outstanding: Decimal


__all__ = ["Payment", "PaymentReceipt", "PaymentStats"]
