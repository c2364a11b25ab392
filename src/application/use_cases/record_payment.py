"""Use case to record a payment against a ledger order.

Flow per ledger view::

    IDLE --request--> BLOCKED    (index still loading; back to IDLE)
                  --> NOT_FOUND  (no payment record; back to IDLE)
                  --> CAPTURING  (form bound to the resolved payment)
    CAPTURING --submit--> CAPTURING  (validation or server error)
                      --> SETTLED    (rebuild index, refetch ledger) --> IDLE

Only the incremental receipt is submitted. The received total stays
server-authoritative: after a commit the payment index and the ledger are
refetched instead of merging the new amount locally.
"""

import asyncio
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from enum import Enum

from src.application.ports.errors import ApiRequestError, PortError
from src.application.ports.payment_registry import PaymentRegistryPort
from src.application.use_cases.party_ledger_view import PartyLedgerView
from src.application.use_cases.payment_index import LookupStatus, PaymentIndex
from src.domain.errors import ReceiptValidationError
from src.domain.models import Payment
from src.domain.services.normalization import normalize_billing_mode
from src.domain.services.validation import validate_receipt
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger
from src.utils.decimal_utils import coerce_decimal

STILL_LOADING_MESSAGE = "Payments are still loading, please wait a moment."
SUBMIT_FAILED_MESSAGE = "Failed to record payment"


class FlowState(Enum):
    """States of the record-payment flow."""

    IDLE = "idle"
    BLOCKED = "blocked"
    NOT_FOUND = "not_found"
    CAPTURING = "capturing"
    SETTLED = "settled"


@dataclass(frozen=True)
class CaptureForm:
    """Payment-entry form bound to a resolved payment.

    Attributes:
        payment: Payment the receipt is recorded against.
        mode: Normalized billing mode of the payment.
        received_amount: Amount already received, shown for reference.
        remaining_amount: Upper bound for the new receipt.
        received_date: Pre-filled receipt date.
        error: Inline validation or server error.
    """

    payment: Payment
    mode: str
    received_amount: Decimal
    remaining_amount: Decimal
    received_date: date
    error: str | None = None


def not_found_message(order_id: int, mode: str) -> str:
    return (
        f"No {mode.lower()} payment record found for Order #{order_id}. "
        "It may have already been settled."
    )


def unavailable_message(order_id: int, mode: str) -> str:
    return (
        f"Payments are unavailable right now, so no {mode.lower()} payment "
        f"record could be matched for Order #{order_id}. Please try again."
    )


class PaymentReconciliationFlow:
    """Resolve, capture, and submit a payment receipt for a ledger order."""

    def __init__(
        self,
        payment_index: PaymentIndex,
        payment_registry: PaymentRegistryPort,
        ledger_view: PartyLedgerView,
        today: date | None = None,
        logger=None,
        usage_logger=None,
    ) -> None:
        """Initialize the flow in IDLE.

        Args:
            payment_index: Index owned by the floor's view; rebuilt here
                after each recorded payment.
            payment_registry: Port receiving the payment receipt.
            ledger_view: Ledger view refetched after each recorded payment.
            today: Optional date pre-filled in capture forms.
            logger: Optional logger compatible with logging.Logger-like API.
            usage_logger: Optional logger for user actions.
        """
        self._index = payment_index
        self._registry = payment_registry
        self._ledger_view = ledger_view
        self._today = today
        self._logger = logger or get_app_logger()
        self._usage_logger = usage_logger or get_usage_logger()
        self.state = FlowState.IDLE
        self.message: str | None = None
        self.form: CaptureForm | None = None
        self.submitting = False

    def request_record_payment(
        self,
        order_id: int,
        mode: str | None,
    ) -> FlowState:
        """Resolve the payment behind a "record payment" action.

        Args:
            order_id: Order the due belongs to.
            mode: Billing mode of the due.

        Returns:
            FlowState: BLOCKED, NOT_FOUND, or CAPTURING. BLOCKED and
            NOT_FOUND leave the flow IDLE with ``message`` set.
        """
        if self.submitting:
            return self.state
        try:
            resolved_mode = normalize_billing_mode(mode)
        except ValueError:
            self._logger.warning(
                f"Unknown billing mode {mode!r} for order {order_id}"
            )
            self.message = not_found_message(order_id, str(mode))
            self._reset()
            return FlowState.NOT_FOUND
        self.message = None
        lookup = self._index.get(order_id, resolved_mode)

        if lookup.status is LookupStatus.LOADING:
            self.message = STILL_LOADING_MESSAGE
            self._reset()
            return FlowState.BLOCKED
        if lookup.status is LookupStatus.UNAVAILABLE:
            self.message = unavailable_message(order_id, resolved_mode)
            self._reset()
            return FlowState.NOT_FOUND
        if not lookup.found:
            self._logger.warning(
                f"No {resolved_mode} payment for order {order_id} on "
                f"floor={self._index.floor}"
            )
            self.message = not_found_message(order_id, resolved_mode)
            self._reset()
            return FlowState.NOT_FOUND

        payment = lookup.payment
        self.form = CaptureForm(
            payment=payment,
            mode=resolved_mode,
            received_amount=payment.received_amount,
            remaining_amount=payment.remaining_amount,
            received_date=self._today or date.today(),
        )
        self.state = FlowState.CAPTURING
        return self.state

    async def submit(
        self,
        amount,
        received_date: date | None = None,
    ) -> FlowState:
        """Validate and submit the receipt for the captured payment.

        Invalid input keeps the flow CAPTURING with ``form.error`` set and
        issues no request. After a successful commit the payment index is
        rebuilt and the ledger refetched; both are attempted before the flow
        returns to IDLE.

        Args:
            amount: Incremental amount received (number or numeric string).
            received_date: Receipt date; defaults to the form's date.

        Returns:
            FlowState: SETTLED on success, CAPTURING otherwise.

        Raises:
            RuntimeError: If no payment is being captured.
        """
        if self.state is not FlowState.CAPTURING or self.form is None:
            raise RuntimeError("No payment is being captured")
        if self.submitting:
            return self.state
        form = self.form
        receipt_date = received_date or form.received_date

        try:
            try:
                value = coerce_decimal(amount)
            except ValueError as exc:
                raise ReceiptValidationError("Enter a valid amount") from exc
            receipt = validate_receipt(form.payment, value, receipt_date)
        except ReceiptValidationError as exc:
            self.form = replace(form, error=str(exc))
            return self.state

        self.submitting = True
        self.form = replace(form, error=None)
        try:
            updated = await self._registry.receive_payment(
                form.payment.payment_id,
                receipt,
            )
        except PortError as exc:
            self._logger.error(
                f"Recording payment {form.payment.payment_id} failed: {exc}"
            )
            message = SUBMIT_FAILED_MESSAGE
            if isinstance(exc, ApiRequestError) and exc.server_message:
                message = exc.server_message
            self.form = replace(self.form, error=message)
            return self.state
        finally:
            self.submitting = False

        self.state = FlowState.SETTLED
        self._usage_logger.info(
            f"Recorded {receipt.new_received_amount} on "
            f"{receipt.new_received_date.isoformat()} for payment "
            f"{updated.payment_id} (order {updated.order_id}, {form.mode})"
        )
        try:
            await self._refresh_after_commit()
        finally:
            self._reset()
        return FlowState.SETTLED

    def cancel(self) -> None:
        """Close the capture form without submitting."""
        if not self.submitting:
            self._reset()

    def dismiss_message(self) -> None:
        self.message = None

    async def _refresh_after_commit(self) -> None:
        results = await asyncio.gather(
            self._index.rebuild(),
            self._ledger_view.refresh(),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

    def _reset(self) -> None:
        self.state = FlowState.IDLE
        self.form = None


__all__ = [
    "PaymentReconciliationFlow",
    "FlowState",
    "CaptureForm",
    "STILL_LOADING_MESSAGE",
    "SUBMIT_FAILED_MESSAGE",
    "not_found_message",
    "unavailable_message",
]
