"""Use case to load and combine the ledgers of many parties."""

import asyncio
from collections.abc import AsyncIterator, Iterable
from dataclasses import dataclass
from datetime import date

from src.application.ports.errors import PortError
from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.domain.models import LedgerTotals, Party, PartyLedger
from src.domain.services.ledger import compute_ledger_totals
from src.domain.services.validation import validate_date_range
from src.infrastructure.logging.logger import get_app_logger

LEDGER_LOAD_ERROR = "Failed to load ledger data for the selected dates."
LEDGER_INTERRUPTED_ERROR = "Loading was interrupted. Reload to try again."


@dataclass(frozen=True)
class PartyLedgerRow:
    """A party with the load state of its ledger.

    Rows start loading and resolve to exactly one of a ledger or an error.

    Attributes:
        party: Party the row belongs to.
        ledger: Loaded ledger, None while loading or after an error.
        loading: True until the fetch resolves.
        error: True when the fetch failed.
        error_message: User-facing description of the failure.
    """

    party: Party
    ledger: PartyLedger | None = None
    loading: bool = True
    error: bool = False
    error_message: str | None = None

    @classmethod
    def pending(cls, party: Party) -> "PartyLedgerRow":
        return cls(party=party)

    @classmethod
    def resolved(cls, party: Party, ledger: PartyLedger) -> "PartyLedgerRow":
        return cls(party=party, ledger=ledger, loading=False)

    @classmethod
    def failed(cls, party: Party, message: str) -> "PartyLedgerRow":
        return cls(
            party=party,
            loading=False,
            error=True,
            error_message=message,
        )


class LedgerAggregator:
    """Fetch ledgers for a set of parties concurrently and combine totals.

    Each party is fetched independently: a failure only marks that party's
    row as errored. Calling ``load_all`` again (a new date filter) starts a
    new generation and results still arriving for an older generation are
    discarded.
    """

    def __init__(
        self,
        ledger_repository: LedgerRepositoryPort,
        logger=None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            ledger_repository: Port returning one party's ledger.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._repository = ledger_repository
        self._logger = logger or get_app_logger()
        self._rows: dict[int, PartyLedgerRow] = {}
        self._generation = 0
        self._window: tuple[date, date] | None = None

    @property
    def rows(self) -> list[PartyLedgerRow]:
        """Return the rows in the order parties were supplied."""
        return list(self._rows.values())

    @property
    def window(self) -> tuple[date, date] | None:
        return self._window

    @property
    def is_provisional(self) -> bool:
        """Return True while any row is still loading."""
        return any(row.loading for row in self._rows.values())

    @property
    def needs_reload(self) -> bool:
        """Return True when the last load did not run to completion."""
        return any(
            row.loading or row.error_message == LEDGER_INTERRUPTED_ERROR
            for row in self._rows.values()
        )

    def totals(self) -> LedgerTotals:
        """Sum totals over rows with a loaded ledger.

        Loading and errored rows contribute nothing, so while
        ``is_provisional`` is True the result is a lower bound.
        """
        return compute_ledger_totals(
            row.ledger
            for row in self._rows.values()
            if row.ledger is not None and not row.loading and not row.error
        )

    def cancel(self) -> None:
        """Discard results of every fetch currently in flight."""
        self._generation += 1

    async def load_all(
        self,
        parties: Iterable[Party],
        start_date: date,
        end_date: date,
    ) -> AsyncIterator[list[PartyLedgerRow]]:
        """Load every party's ledger, yielding the rows after each change.

        The first snapshot has every row loading; one snapshot follows each
        resolved fetch. Iteration stops early if a newer load supersedes
        this one. If the caller stops iterating first, rows still loading
        are marked as interrupted errors so a later reload picks them up.

        Args:
            parties: Parties to load; duplicates by party_id are ignored.
            start_date: First calendar day of the window.
            end_date: Last calendar day of the window.

        Yields:
            list[PartyLedgerRow]: Current rows in party order.
        """
        validate_date_range(start_date, end_date)
        self._generation += 1
        generation = self._generation
        self._window = (start_date, end_date)

        unique: dict[int, Party] = {}
        for party in parties:
            unique.setdefault(party.party_id, party)
        self._rows = {
            party_id: PartyLedgerRow.pending(party)
            for party_id, party in unique.items()
        }
        self._logger.info(
            f"Loading ledgers for {len(unique)} parties "
            f"from {start_date.isoformat()} to {end_date.isoformat()}"
        )
        tasks: list[asyncio.Task] = []
        try:
            yield self.rows
            tasks = [
                asyncio.create_task(
                    self._fetch_row(party, start_date, end_date)
                )
                for party in unique.values()
            ]
            for next_row in asyncio.as_completed(tasks):
                row = await next_row
                if generation != self._generation:
                    self._logger.debug(
                        f"Discarding stale ledger for party "
                        f"{row.party.party_id}"
                    )
                    return
                self._rows[row.party.party_id] = row
                yield self.rows
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            if generation == self._generation:
                self._fail_pending_rows()

    async def load(
        self,
        parties: Iterable[Party],
        start_date: date,
        end_date: date,
    ) -> list[PartyLedgerRow]:
        """Load every party's ledger and return the final rows."""
        rows: list[PartyLedgerRow] = []
        async for snapshot in self.load_all(parties, start_date, end_date):
            rows = snapshot
        return rows

    async def retry(self, party_id: int) -> PartyLedgerRow:
        """Fetch one party's ledger again within the current window.

        Args:
            party_id: Party whose row should be refetched.

        Returns:
            PartyLedgerRow: The row after the retry.

        Raises:
            KeyError: If the party is not part of the current load.
        """
        current = self._rows[party_id]
        if self._window is None:
            raise KeyError(party_id)
        generation = self._generation
        start_date, end_date = self._window
        self._rows[party_id] = PartyLedgerRow.pending(current.party)
        try:
            row = await self._fetch_row(current.party, start_date, end_date)
        except asyncio.CancelledError:
            if generation == self._generation:
                self._rows[party_id] = PartyLedgerRow.failed(
                    current.party,
                    LEDGER_INTERRUPTED_ERROR,
                )
            raise
        if generation != self._generation:
            return row
        self._rows[party_id] = row
        return row

    def _fail_pending_rows(self) -> None:
        for party_id, row in self._rows.items():
            if row.loading:
                self._logger.warning(
                    f"Ledger load for party {party_id} was interrupted"
                )
                self._rows[party_id] = PartyLedgerRow.failed(
                    row.party,
                    LEDGER_INTERRUPTED_ERROR,
                )

    async def _fetch_row(
        self,
        party: Party,
        start_date: date,
        end_date: date,
    ) -> PartyLedgerRow:
        try:
            ledger = await self._repository.fetch_party_ledger(
                party.party_id,
                start_date,
                end_date,
            )
        except PortError as exc:
            self._logger.error(
                f"Ledger fetch failed for party {party.party_id} "
                f"({party.name}): {exc}"
            )
            return PartyLedgerRow.failed(party, LEDGER_LOAD_ERROR)
        return PartyLedgerRow.resolved(party, ledger)


__all__ = [
    "LedgerAggregator",
    "PartyLedgerRow",
    "LEDGER_LOAD_ERROR",
    "LEDGER_INTERRUPTED_ERROR",
]
