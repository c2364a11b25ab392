"""State of a single party's ledger view: date filter, refresh, PDF export."""

from datetime import date
from pathlib import Path

from src.application.ports.errors import PortError
from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.domain.models import DueAction, Party, PartyLedger
from src.domain.services.ledger import payable_dues
from src.domain.services.validation import validate_date_range
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger

FETCH_ERROR = "Failed to load ledger data for the selected dates."
DOWNLOAD_ERROR = "Failed to download PDF."


def default_window(today: date) -> tuple[date, date]:
    """Return the default ledger window: one year back to today."""
    try:
        start = today.replace(year=today.year - 1)
    except ValueError:
        start = today.replace(year=today.year - 1, day=28)
    return start, today


def ledger_pdf_filename(party_name: str) -> str:
    """Return the file name used when saving a party ledger PDF."""
    safe_name = "".join(
        char if char.isalnum() or char in " -_." else "_"
        for char in party_name.strip()
    ).strip(" .") or "party"
    return f"party-ledger-{safe_name}.pdf"


class PartyLedgerView:
    """Ledger of one party for a user-selected date window.

    Fetches are tagged with a generation number; a response that arrives
    after a newer fetch started, or after the view was closed, is dropped.
    """

    def __init__(
        self,
        ledger_repository: LedgerRepositoryPort,
        party: Party,
        start_date: date | None = None,
        end_date: date | None = None,
        today: date | None = None,
        logger=None,
        usage_logger=None,
    ) -> None:
        """Initialize the view without fetching.

        Args:
            ledger_repository: Port returning ledgers and ledger PDFs.
            party: Party shown by the view.
            start_date: Optional window start; defaults to one year ago.
            end_date: Optional window end; defaults to today.
            today: Reference day for the default window.
            logger: Optional logger compatible with logging.Logger-like API.
            usage_logger: Optional logger for user actions.
        """
        default_start, default_end = default_window(today or date.today())
        self._repository = ledger_repository
        self._party = party
        self._start_date = start_date or default_start
        self._end_date = end_date or default_end
        validate_date_range(self._start_date, self._end_date)
        self._logger = logger or get_app_logger()
        self._usage_logger = usage_logger or get_usage_logger()
        self._generation = 0
        self._closed = False
        self.ledger: PartyLedger | None = None
        self.fetching = False
        self.downloading = False
        self.fetch_error: str | None = None
        self.download_error: str | None = None

    @property
    def party(self) -> Party:
        return self._party

    @property
    def window(self) -> tuple[date, date]:
        return self._start_date, self._end_date

    @property
    def closed(self) -> bool:
        return self._closed

    async def apply_filter(self, start_date: date, end_date: date) -> bool:
        """Switch to a new window and fetch its ledger.

        Raises:
            ValueError: If start_date is after end_date.
        """
        validate_date_range(start_date, end_date)
        self._start_date = start_date
        self._end_date = end_date
        return await self.refresh()

    async def refresh(self) -> bool:
        """Fetch the ledger for the current window.

        Returns:
            bool: True when a fresh ledger was applied.
        """
        self._generation += 1
        generation = self._generation
        start_date, end_date = self._start_date, self._end_date
        self.fetching = True
        self.fetch_error = None
        try:
            ledger = await self._repository.fetch_party_ledger(
                self._party.party_id,
                start_date,
                end_date,
            )
        except PortError as exc:
            if self._is_current(generation):
                self._logger.error(
                    f"Ledger fetch failed for party {self._party.party_id}: "
                    f"{exc}"
                )
                self.fetch_error = FETCH_ERROR
                self.fetching = False
            return False

        if not self._is_current(generation):
            self._logger.debug(
                f"Discarding stale ledger for party {self._party.party_id} "
                f"({start_date.isoformat()}..{end_date.isoformat()})"
            )
            return False
        self.ledger = ledger
        self.fetching = False
        return True

    async def download_pdf(self, destination_dir: Path) -> Path | None:
        """Save the ledger PDF for the current window.

        The file is written only once the complete payload has been
        received, so a failed download never leaves a truncated file.

        Args:
            destination_dir: Directory receiving the PDF.

        Returns:
            Path | None: Saved file, or None when the download failed.
        """
        start_date, end_date = self._start_date, self._end_date
        self.downloading = True
        self.download_error = None
        try:
            content = await self._repository.fetch_party_ledger_pdf(
                self._party.party_id,
                start_date,
                end_date,
            )
        except PortError as exc:
            self._logger.error(
                f"PDF download failed for party {self._party.party_id}: {exc}"
            )
            self.download_error = DOWNLOAD_ERROR
            return None
        finally:
            self.downloading = False

        target = destination_dir / ledger_pdf_filename(self._party.name)
        partial = target.with_name(f"{target.name}.part")
        try:
            destination_dir.mkdir(parents=True, exist_ok=True)
            partial.write_bytes(content)
            partial.replace(target)
        except OSError as exc:
            self._logger.error(
                f"Saving ledger PDF for party {self._party.party_id} "
                f"to {target} failed: {exc}"
            )
            partial.unlink(missing_ok=True)
            self.download_error = DOWNLOAD_ERROR
            return None
        self._usage_logger.info(
            f"Saved ledger PDF for party {self._party.party_id} "
            f"({len(content)} bytes) to {target}"
        )
        return target

    def due_actions(self) -> list[DueAction]:
        """Return the record-payment actions for every loaded order."""
        if self.ledger is None:
            return []
        actions: list[DueAction] = []
        for order in self.ledger.orders:
            actions.extend(payable_dues(order))
        return actions

    def dismiss_errors(self) -> None:
        self.fetch_error = None
        self.download_error = None

    def close(self) -> None:
        """Stop applying results of fetches still in flight."""
        self._closed = True
        self._generation += 1

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation


__all__ = [
    "PartyLedgerView",
    "default_window",
    "ledger_pdf_filename",
    "FETCH_ERROR",
    "DOWNLOAD_ERROR",
]
