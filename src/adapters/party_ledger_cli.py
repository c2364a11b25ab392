"""CLI adapter printing the combined ledger totals of all parties.

The window is read from LEDGER_START_DATE / LEDGER_END_DATE (YYYY-MM-DD) and
defaults to the last year. LEDGER_PARTY_SEARCH narrows the parties by name.
"""

import asyncio
from datetime import date
import os

from src.application.use_cases.get_parties import GetPartiesUseCase
from src.application.use_cases.load_party_ledgers import PartyLedgerRow
from src.application.use_cases.party_ledger_view import default_window
from src.domain.models import LedgerTotals
from src.domain.services.formatting import format_rupees
from src.infrastructure.container import (
    build_ledger_aggregator,
    build_party_repository,
)
from src.infrastructure.logging.logger import get_app_logger


def _parse_date(value: str | None, logger) -> date | None:
    """Parse an ISO date string into a date.

    Args:
        value: Date string in YYYY-MM-DD format.
        logger: Logger used for warnings.

    Returns:
        date | None: Parsed date or None when invalid.
    """
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        logger.warning(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        )
        return None


def _format_row(row: PartyLedgerRow) -> str:
    if row.error:
        return f"{row.party.name}: error ({row.error_message})"
    if row.ledger is None:
        return f"{row.party.name}: loading"
    ledger = row.ledger
    return (
        f"{row.party.name}: "
        f"official={format_rupees(ledger.total_official_amount)}, "
        f"offline={format_rupees(ledger.total_offline_amount)}, "
        f"received={format_rupees(ledger.total_received_amount)}, "
        f"remaining={format_rupees(ledger.total_remaining_amount)}"
    )


def _format_totals(totals: LedgerTotals) -> str:
    return (
        f"Total: official={format_rupees(totals.official)}, "
        f"offline={format_rupees(totals.offline)}, "
        f"received={format_rupees(totals.received)}, "
        f"remaining={format_rupees(totals.remaining)}"
    )


async def _load(query: str | None, start_date: date, end_date: date):
    parties = await GetPartiesUseCase(build_party_repository()).execute(query)
    aggregator = build_ledger_aggregator()
    rows = await aggregator.load(parties, start_date, end_date)
    return rows, aggregator.totals()


def main() -> None:
    """Load every party's ledger and print per-party and combined totals."""
    logger = get_app_logger()
    default_start, default_end = default_window(date.today())
    start_date = (
        _parse_date(os.getenv("LEDGER_START_DATE"), logger) or default_start
    )
    end_date = _parse_date(os.getenv("LEDGER_END_DATE"), logger) or default_end
    if start_date > end_date:
        logger.error(
            f"Start date {start_date} is after end date {end_date}."
        )
        return
    query = os.getenv("LEDGER_PARTY_SEARCH")

    rows, totals = asyncio.run(_load(query, start_date, end_date))

    print(f"Party ledgers from {start_date} to {end_date}")
    for row in rows:
        print(_format_row(row))
    failed = sum(1 for row in rows if row.error)
    if failed:
        print(
            f"{failed} of {len(rows)} ledgers failed to load; "
            "totals exclude them."
        )
    print(_format_totals(totals))


if __name__ == "__main__":  # pragma: no cover
    main()
