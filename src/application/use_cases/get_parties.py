"""Use case to read parties for presentation layers."""

from src.application.ports.party_repository import PartyRepositoryPort
from src.domain.models import Party


class GetPartiesUseCase:
    """Fetch parties sorted by name, optionally filtered by a search term."""

    def __init__(self, party_repository: PartyRepositoryPort) -> None:
        """Initialize the use case with its required dependencies."""
        self._repository = party_repository

    async def execute(self, query: str | None = None) -> list[Party]:
        """Return parties whose name contains ``query`` (case-insensitive).

        Filtering happens locally; the server-side search is not used.
        """
        parties = await self._repository.fetch_parties()
        needle = (query or "").strip().lower()
        return sorted(
            (
                party
                for party in parties
                if not needle or needle in party.name.lower()
            ),
            key=lambda party: (party.name.lower(), party.party_id),
        )


__all__ = ["GetPartiesUseCase"]
