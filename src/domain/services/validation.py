"""Domain validation helpers."""

from datetime import date
from decimal import Decimal

from src.domain.errors import ReceiptValidationError
from src.domain.models.payments import Payment, PaymentReceipt
from src.domain.services.formatting import format_rupees


def validate_receipt(
    payment: Payment,
    amount: Decimal,
    received_date: date | None,
) -> PaymentReceipt:
    """Validate a receipt against the payment's outstanding balance.

    Args:
        payment: Payment the receipt is recorded against.
        amount: Incremental amount received.
        received_date: Calendar day of the receipt.

    Returns:
        PaymentReceipt: Receipt ready to submit.

    Raises:
        ReceiptValidationError: If the amount is not positive, exceeds the
            remaining balance, or the date is missing.
    """
    if amount <= 0:
        raise ReceiptValidationError("Received amount must be greater than 0")
    remaining = payment.remaining_amount
    if amount > remaining:
        raise ReceiptValidationError(
            "Received amount exceeds remaining due amount of "
            f"{format_rupees(remaining)}"
        )
    if received_date is None:
        raise ReceiptValidationError("Date of receipt is required")
    return PaymentReceipt(
        new_received_amount=amount,
        new_received_date=received_date,
    )


def validate_date_range(start_date: date, end_date: date) -> None:
    """Reject windows whose start falls after their end.

    Raises:
        ValueError: If start_date is later than end_date.
    """
    if start_date > end_date:
        raise ValueError(
            f"Start date {start_date.isoformat()} is after end date "
            f"{end_date.isoformat()}"
        )


__all__ = ["validate_receipt", "validate_date_range"]
