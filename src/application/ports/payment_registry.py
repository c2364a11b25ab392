"""Application port for the payment registry."""

from typing import Protocol

from src.domain.models import Payment, PaymentReceipt


class PaymentRegistryPort(Protocol):
    """Port exposing payment records per floor and payment receipts.

    Implementations must not send a free-text search term when listing
    payments: the server's search also filters on a customer name column
    that does not exist and fails on numeric terms.
    """

    async def fetch_payments(
        self,
        floor: str,
        mode: str,
        page: int = 0,
        size: int = 500,
    ) -> list[Payment]:
        """Return one page of payments for a floor and billing mode."""

    async def receive_payment(
        self,
        payment_id: int,
        receipt: PaymentReceipt,
    ) -> Payment:
        """Record an incremental receipt and return the updated payment."""


__all__ = ["PaymentRegistryPort"]
