"""HTTP-backed repository for party ledgers."""

from datetime import date

from pydantic import ValidationError

from src.application.ports.errors import ApiRequestError, PdfDownloadError
from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.domain.models import PartyLedger
from src.infrastructure.api_schemas import PartyLedgerSchema
from src.infrastructure.http_client import ApiClient
from src.infrastructure.logging.logger import get_app_logger

LEDGER_PATH = "/api/v1/payments/party/{party_id}/ledger"
LEDGER_PDF_PATH = "/api/v1/payments/party/{party_id}/ledger/pdf"
PDF_MAGIC = b"%PDF"


def _window_params(start_date: date, end_date: date) -> dict[str, str]:
    return {
        "startDate": start_date.isoformat(),
        "endDate": end_date.isoformat(),
    }


class HttpLedgerRepository(LedgerRepositoryPort):
    """Read party ledgers and ledger PDFs from the dashboard API."""

    def __init__(self, client: ApiClient, logger=None) -> None:
        """Initialize the repository.

        Args:
            client: Configured API client.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._client = client
        self._logger = logger or get_app_logger()

    async def fetch_party_ledger(
        self,
        party_id: int,
        start_date: date,
        end_date: date,
    ) -> PartyLedger:
        payload = await self._client.get_json(
            LEDGER_PATH.format(party_id=party_id),
            params=_window_params(start_date, end_date),
        )
        try:
            schema = PartyLedgerSchema.model_validate(payload)
        except ValidationError as exc:
            self._logger.error(
                f"Malformed ledger payload for party {party_id}: {exc}"
            )
            raise ApiRequestError(
                f"Malformed ledger payload for party {party_id}"
            ) from exc
        ledger = schema.to_domain(start_date, end_date)
        self._logger.info(
            f"Fetched ledger for party {party_id}: {len(ledger.orders)} orders"
        )
        return ledger

    async def fetch_party_ledger_pdf(
        self,
        party_id: int,
        start_date: date,
        end_date: date,
    ) -> bytes:
        """Fetch the ledger PDF without any text decoding of the body.

        Raises:
            PdfDownloadError: If the request fails or the payload is not a
                PDF document.
        """
        try:
            content = await self._client.get_bytes(
                LEDGER_PDF_PATH.format(party_id=party_id),
                params=_window_params(start_date, end_date),
                accept="application/pdf",
            )
        except ApiRequestError as exc:
            raise PdfDownloadError(
                f"Failed to download PDF: {exc.user_message}"
            ) from exc
        if not content.startswith(PDF_MAGIC):
            raise PdfDownloadError(
                f"Ledger PDF for party {party_id} is not a PDF document"
            )
        return content


__all__ = ["HttpLedgerRepository", "LEDGER_PATH", "LEDGER_PDF_PATH"]
