"""Tests for ledger due and total computations."""

from decimal import Decimal

from src.domain.constants import OFFICIAL, OFFLINE
from src.domain.models import LedgerOrder, ModeSummary, PaymentSummary
from src.domain.services.ledger import (
    compute_ledger_totals,
    compute_payment_stats,
    due_amount,
    payable_dues,
)
from tests.fakes import make_ledger, make_order, make_payment


def test_due_amount_defaults_missing_mode_to_official() -> None:
    order = make_order(official_due="5000", offline_due="200")

    assert due_amount(order, None) == Decimal("5000")
    assert due_amount(order, OFFLINE) == Decimal("200")


def test_due_amount_is_zero_without_summary_and_never_negative() -> None:
    order = LedgerOrder(
        order_id=1,
        order_date=None,
        payment_summary=PaymentSummary(
            official=ModeSummary(
                total_amount=Decimal("100"),
                received_amount=Decimal("120"),
                due_amount=Decimal("-20"),
            ),
        ),
    )

    assert due_amount(order, OFFICIAL) == Decimal("0")
    assert due_amount(order, OFFLINE) == Decimal("0")


def test_payable_dues_lists_positive_dues_official_first() -> None:
    """Only modes with something due get a record-payment action."""
    both = make_order(order_id=7, official_due="5000", offline_due="250")
    settled = make_order(order_id=8, official_due="0", offline_due=None)

    actions = payable_dues(both)

    assert [action.mode for action in actions] == [OFFICIAL, OFFLINE]
    assert actions[0].due_amount == Decimal("5000")
    assert actions[0].order_id == 7
    assert payable_dues(settled) == []


def test_compute_ledger_totals_sums_each_column() -> None:
    totals = compute_ledger_totals(
        [
            make_ledger(1, "100", "50", "30", "120"),
            make_ledger(2, "10.5", "0", "5", "5.5"),
        ]
    )

    assert totals.official == Decimal("110.5")
    assert totals.offline == Decimal("50")
    assert totals.received == Decimal("35")
    assert totals.remaining == Decimal("125.5")


def test_compute_ledger_totals_of_nothing_is_zero() -> None:
    totals = compute_ledger_totals([])

    assert totals.remaining == Decimal("0")


def test_compute_payment_stats() -> None:
    payments = [
        make_payment(1, total="1000", received="400", status="OVERDUE"),
        make_payment(2, total="500", received="0", status="DUE_SOON"),
        make_payment(3, total="300", received="300", status="UPCOMING"),
    ]

    stats = compute_payment_stats(payments)

    assert stats.overdue_count == 1
    assert stats.overdue_amount == Decimal("600")
    assert stats.due_soon_count == 1
    assert stats.total_outstanding == Decimal("1100")
