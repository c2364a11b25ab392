"""CLI adapter saving one party's ledger PDF.

Reads LEDGER_PARTY_ID, the optional LEDGER_START_DATE / LEDGER_END_DATE
window, and LEDGER_PDF_DIR (defaults to ``exports``).
"""

import asyncio
from datetime import date
import os
from pathlib import Path

from src.adapters.party_ledger_cli import _parse_date
from src.application.use_cases.get_parties import GetPartiesUseCase
from src.application.use_cases.party_ledger_view import default_window
from src.infrastructure.container import (
    build_party_ledger_view,
    build_party_repository,
)
from src.infrastructure.logging.logger import get_app_logger


async def _download(
    party_id: int,
    start_date: date,
    end_date: date,
    destination: Path,
    logger,
) -> Path | None:
    parties = await GetPartiesUseCase(build_party_repository()).execute()
    party = next((p for p in parties if p.party_id == party_id), None)
    if party is None:
        logger.warning(f"No party with id {party_id}.")
        return None
    view = build_party_ledger_view(
        party,
        start_date=start_date,
        end_date=end_date,
    )
    saved = await view.download_pdf(destination)
    if saved is None:
        logger.error(view.download_error or "PDF download failed.")
    return saved


def main() -> None:
    """Download the ledger PDF of the configured party."""
    logger = get_app_logger()
    raw_party_id = os.getenv("LEDGER_PARTY_ID", "").strip()
    if not raw_party_id.isdigit():
        logger.warning("LEDGER_PARTY_ID must be set to a numeric party id.")
        return
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
    destination = Path(os.getenv("LEDGER_PDF_DIR", "exports")).expanduser()

    saved = asyncio.run(
        _download(int(raw_party_id), start_date, end_date, destination, logger)
    )
    if saved is not None:
        print(f"Saved ledger PDF to {saved}")


if __name__ == "__main__":  # pragma: no cover
    main()
