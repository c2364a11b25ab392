"""HTTP-backed repository for business parties."""

from pydantic import ValidationError

from src.application.ports.errors import ApiRequestError
from src.application.ports.party_repository import PartyRepositoryPort
from src.domain.models import Party
from src.infrastructure.api_schemas import PartySchema
from src.infrastructure.http_client import ApiClient

PARTY_LIST_PATH = "/api/v1/party"


class HttpPartyRepository(PartyRepositoryPort):
    """Read parties from the dashboard API."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def fetch_parties(self) -> list[Party]:
        payload = await self._client.get_json(PARTY_LIST_PATH)
        if not isinstance(payload, list):
            raise ApiRequestError("Party list is not a JSON array")
        try:
            return [
                PartySchema.model_validate(item).to_domain()
                for item in payload
            ]
        except ValidationError as exc:
            raise ApiRequestError("Malformed party list") from exc


__all__ = ["HttpPartyRepository", "PARTY_LIST_PATH"]
