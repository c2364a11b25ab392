"""Tests for GetPartiesUseCase."""

import asyncio

from src.application.use_cases.get_parties import GetPartiesUseCase
from src.domain.models import Party
from tests.fakes import FakePartyRepository

PARTIES = [
    Party(3, "zenith Metals"),
    Party(1, "Alpha Traders"),
    Party(2, "Beta Steel"),
]


def test_execute_returns_parties_sorted_by_name() -> None:
    use_case = GetPartiesUseCase(FakePartyRepository(PARTIES))

    parties = asyncio.run(use_case.execute())

    assert [party.party_id for party in parties] == [1, 2, 3]


def test_execute_filters_locally_case_insensitive() -> None:
    use_case = GetPartiesUseCase(FakePartyRepository(PARTIES))

    parties = asyncio.run(use_case.execute("  STEEL "))

    assert parties == [Party(2, "Beta Steel")]
