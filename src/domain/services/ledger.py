"""Domain services for ledger dues, totals, and payment stats."""

from collections.abc import Iterable
from decimal import Decimal

from src.domain.constants import BILLING_MODES, DUE_SOON, OFFICIAL, OVERDUE
from src.domain.models.ledger import (
    DueAction,
    LedgerOrder,
    LedgerTotals,
    ModeSummary,
    PartyLedger,
)
from src.domain.models.payments import Payment, PaymentStats
from src.domain.services.normalization import normalize_billing_mode

ZERO = Decimal("0")


def mode_summary(order: LedgerOrder, mode: str | None) -> ModeSummary | None:
    """Return the order's payment summary for a billing mode, if any."""
    resolved = normalize_billing_mode(mode)
    summary = order.payment_summary
    if resolved == OFFICIAL:
        return summary.official
    return summary.offline


def due_amount(order: LedgerOrder, mode: str | None) -> Decimal:
    """Return the amount due on an order for a billing mode.

    A missing mode summary counts as nothing due, and negative dues reported
    by the server are treated as settled.
    """
    summary = mode_summary(order, mode)
    if summary is None:
        return ZERO
    return max(summary.due_amount, ZERO)


def payable_dues(order: LedgerOrder) -> list[DueAction]:
    """Return the record-payment actions to offer for an order.

    Only modes with a positive due are included, OFFICIAL first.

    Args:
        order: Ledger order to inspect.

    Returns:
        list[DueAction]: Zero, one, or two actions.
    """
    actions = []
    for mode in BILLING_MODES:
        due = due_amount(order, mode)
        if due <= 0:
            continue
        summary = mode_summary(order, mode)
        actions.append(
            DueAction(
                order_id=order.order_id,
                mode=mode,
                due_amount=due,
                total_amount=summary.total_amount if summary else ZERO,
            )
        )
    return actions


def compute_ledger_totals(ledgers: Iterable[PartyLedger]) -> LedgerTotals:
    """Sum the headline totals of several party ledgers.

    Args:
        ledgers: Ledgers to combine; callers pass only resolved ledgers.

    Returns:
        LedgerTotals: Official, offline, received, and remaining sums.
    """
    official = offline = received = remaining = ZERO
    for ledger in ledgers:
        official += ledger.total_official_amount
        offline += ledger.total_offline_amount
        received += ledger.total_received_amount
        remaining += ledger.total_remaining_amount
    return LedgerTotals(
        official=official,
        offline=offline,
        received=received,
        remaining=remaining,
    )


def compute_payment_stats(payments: Iterable[Payment]) -> PaymentStats:
    """Compute overdue, due-soon, and outstanding figures for payments."""
    overdue_count = 0
    due_soon_count = 0
    overdue_amount = ZERO
    total_outstanding = ZERO
    for payment in payments:
        outstanding = payment.remaining_amount
        total_outstanding += outstanding
        if payment.payment_status == OVERDUE:
            overdue_count += 1
            overdue_amount += outstanding
        elif payment.payment_status == DUE_SOON:
            due_soon_count += 1
    return PaymentStats(
        overdue_count=overdue_count,
        overdue_amount=overdue_amount,
        due_soon_count=due_soon_count,
        total_outstanding=total_outstanding,
    )


__all__ = [
    "mode_summary",
    "due_amount",
    "payable_dues",
    "compute_ledger_totals",
    "compute_payment_stats",
]
