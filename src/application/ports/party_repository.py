"""Application port for party reads."""

from typing import Protocol

from src.domain.models import Party


class PartyRepositoryPort(Protocol):
    """Port exposing the list of business parties."""

    async def fetch_parties(self) -> list[Party]:
        """Return every known party."""


__all__ = ["PartyRepositoryPort"]
