"""Application port for party ledger reads."""

from datetime import date
from typing import Protocol

from src.domain.models import PartyLedger


class LedgerRepositoryPort(Protocol):
    """Port exposing read access to server-generated party ledgers."""

    async def fetch_party_ledger(
        self,
        party_id: int,
        start_date: date,
        end_date: date,
    ) -> PartyLedger:
        """Return the ledger of a party for a calendar window."""

    async def fetch_party_ledger_pdf(
        self,
        party_id: int,
        start_date: date,
        end_date: date,
    ) -> bytes:
        """Return the server-rendered ledger PDF, byte for byte."""


__all__ = ["LedgerRepositoryPort"]
