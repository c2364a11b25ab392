"""Tests for the ledger aggregator."""

import asyncio
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from src.application.ports.errors import ApiRequestError
from src.application.use_cases.load_party_ledgers import (
    LEDGER_INTERRUPTED_ERROR,
    LEDGER_LOAD_ERROR,
    LedgerAggregator,
)
from src.domain.models import Party
from tests.fakes import (
    WINDOW_END,
    WINDOW_START,
    FakeLedgerRepository,
    make_ledger,
)

PARTIES = [Party(1, "Alpha"), Party(2, "Beta"), Party(3, "Gamma")]


def _aggregator(repository):
    return LedgerAggregator(repository, logger=MagicMock())


async def _collect(aggregator, parties, start_date, end_date):
    return [
        snapshot
        async for snapshot in aggregator.load_all(
            parties,
            start_date,
            end_date,
        )
    ]


def test_totals_cover_only_resolved_ledgers() -> None:
    """Errored rows are excluded from the combined totals."""
    repository = FakeLedgerRepository(
        {
            1: make_ledger(1, "100", "50", "30", "120"),
            2: ApiRequestError("down", status_code=500),
            3: make_ledger(3, "10", "0", "10", "0"),
        }
    )
    aggregator = _aggregator(repository)

    rows = asyncio.run(aggregator.load(PARTIES, WINDOW_START, WINDOW_END))

    assert [row.party.party_id for row in rows] == [1, 2, 3]
    failed = rows[1]
    assert failed.error is True
    assert failed.loading is False
    assert failed.ledger is None
    assert failed.error_message == LEDGER_LOAD_ERROR
    totals = aggregator.totals()
    assert totals.official == Decimal("110")
    assert totals.offline == Decimal("50")
    assert totals.received == Decimal("40")
    assert totals.remaining == Decimal("120")
    assert aggregator.is_provisional is False


def test_load_all_yields_pending_snapshot_then_one_per_result() -> None:
    repository = FakeLedgerRepository(
        {party.party_id: make_ledger(party.party_id) for party in PARTIES}
    )
    aggregator = _aggregator(repository)

    snapshots = asyncio.run(
        _collect(aggregator, PARTIES, WINDOW_START, WINDOW_END)
    )

    assert len(snapshots) == len(PARTIES) + 1
    assert all(row.loading for row in snapshots[0])
    assert sum(not row.loading for row in snapshots[1]) == 1
    assert not any(row.loading for row in snapshots[-1])


def test_provisional_totals_while_rows_are_loading() -> None:
    repository = FakeLedgerRepository({1: make_ledger(1, remaining="75")})
    gate = asyncio.Event()
    repository.gates[(WINDOW_START, WINDOW_END)] = gate
    aggregator = _aggregator(repository)

    async def scenario():
        stream = aggregator.load_all(PARTIES[:1], WINDOW_START, WINDOW_END)
        await stream.__anext__()
        provisional = (aggregator.is_provisional, aggregator.totals())
        gate.set()
        await stream.__anext__()
        await stream.aclose()
        return provisional

    was_provisional, early_totals = asyncio.run(scenario())

    assert was_provisional is True
    assert early_totals.remaining == Decimal("0")
    assert aggregator.is_provisional is False
    assert aggregator.totals().remaining == Decimal("75")


def test_results_of_superseded_filter_are_discarded() -> None:
    """A newer window wins even if the older load resumes afterwards."""
    repository = FakeLedgerRepository(
        {party.party_id: make_ledger(party.party_id) for party in PARTIES}
    )
    aggregator = _aggregator(repository)
    newer_start, newer_end = date(2024, 6, 1), date(2024, 6, 30)

    async def scenario():
        older = aggregator.load_all(PARTIES, WINDOW_START, WINDOW_END)
        await older.__anext__()
        await aggregator.load(PARTIES, newer_start, newer_end)
        return [snapshot async for snapshot in older]

    late_snapshots = asyncio.run(scenario())

    assert late_snapshots == []
    assert aggregator.window == (newer_start, newer_end)
    for row in aggregator.rows:
        assert row.ledger.start_date == newer_start
        assert row.ledger.end_date == newer_end


def test_cancel_stops_applying_in_flight_results() -> None:
    repository = FakeLedgerRepository({1: make_ledger(1)})
    aggregator = _aggregator(repository)

    async def scenario():
        stream = aggregator.load_all(PARTIES[:1], WINDOW_START, WINDOW_END)
        await stream.__anext__()
        aggregator.cancel()
        return [snapshot async for snapshot in stream]

    assert asyncio.run(scenario()) == []
    assert aggregator.rows[0].loading is True


def test_duplicate_parties_are_loaded_once() -> None:
    repository = FakeLedgerRepository({1: make_ledger(1)})
    aggregator = _aggregator(repository)

    rows = asyncio.run(
        aggregator.load(
            [Party(1, "Alpha"), Party(1, "Alpha again")],
            WINDOW_START,
            WINDOW_END,
        )
    )

    assert len(rows) == 1
    assert rows[0].party.name == "Alpha"
    assert len(repository.calls) == 1


def test_retry_refetches_a_failed_row() -> None:
    repository = FakeLedgerRepository({1: ApiRequestError("timeout")})
    aggregator = _aggregator(repository)
    asyncio.run(aggregator.load(PARTIES[:1], WINDOW_START, WINDOW_END))

    repository.ledgers[1] = make_ledger(1, remaining="10")
    row = asyncio.run(aggregator.retry(1))

    assert row.error is False
    assert aggregator.rows[0].ledger.total_remaining_amount == Decimal("10")
    assert repository.calls[-1] == (1, WINDOW_START, WINDOW_END)


def test_retry_unknown_party_raises() -> None:
    aggregator = _aggregator(FakeLedgerRepository())

    with pytest.raises(KeyError):
        asyncio.run(aggregator.retry(99))


def test_inverted_window_is_rejected() -> None:
    aggregator = _aggregator(FakeLedgerRepository())

    with pytest.raises(ValueError):
        asyncio.run(aggregator.load(PARTIES, WINDOW_END, WINDOW_START))


def test_interrupted_load_marks_pending_rows_for_reload() -> None:
    """Closing the stream early never leaves rows loading for good."""
    repository = FakeLedgerRepository(
        {1: make_ledger(1, remaining="10"), 2: make_ledger(2, remaining="5")}
    )
    aggregator = _aggregator(repository)
    parties = PARTIES[:2]

    async def _close_after_first_snapshot():
        stream = aggregator.load_all(parties, WINDOW_START, WINDOW_END)
        first = await stream.__anext__()
        await stream.aclose()
        return first

    first = asyncio.run(_close_after_first_snapshot())

    assert all(row.loading for row in first)
    assert aggregator.window == (WINDOW_START, WINDOW_END)
    assert aggregator.is_provisional is False
    assert aggregator.needs_reload is True
    for row in aggregator.rows:
        assert row.error is True
        assert row.error_message == LEDGER_INTERRUPTED_ERROR

    asyncio.run(aggregator.load(parties, WINDOW_START, WINDOW_END))

    assert aggregator.needs_reload is False
    assert aggregator.totals().remaining == Decimal("15")
