"""Composition root for wiring infrastructure adapters."""

from datetime import date

from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.application.ports.party_repository import PartyRepositoryPort
from src.application.ports.payment_registry import PaymentRegistryPort
from src.application.use_cases.get_payment_stats import GetPaymentStatsUseCase
from src.application.use_cases.load_party_ledgers import LedgerAggregator
from src.application.use_cases.party_ledger_view import PartyLedgerView
from src.application.use_cases.payment_index import PaymentIndex
from src.application.use_cases.record_payment import (
    PaymentReconciliationFlow,
)
from src.domain.models import Party
from src.infrastructure.http_client import ApiClient
from src.infrastructure.ledger_api_repository import HttpLedgerRepository
from src.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)
from src.infrastructure.party_api_repository import HttpPartyRepository
from src.infrastructure.payment_api_registry import HttpPaymentRegistry
from src.infrastructure.settings import ApiSettings


def build_api_client(settings: ApiSettings | None = None) -> ApiClient:
    """Return the API client configured from the environment."""
    resolved = settings or ApiSettings.from_env()
    return ApiClient(resolved, logger=get_app_logger())


def build_ledger_repository(
    client: ApiClient | None = None,
) -> LedgerRepositoryPort:
    """Return the party ledger repository."""
    return HttpLedgerRepository(client or build_api_client())


def build_payment_registry(
    client: ApiClient | None = None,
) -> PaymentRegistryPort:
    """Return the payment registry."""
    return HttpPaymentRegistry(client or build_api_client())


def build_party_repository(
    client: ApiClient | None = None,
) -> PartyRepositoryPort:
    """Return the party repository."""
    return HttpPartyRepository(client or build_api_client())


def build_payment_index(
    floor: str | None = None,
    registry: PaymentRegistryPort | None = None,
    settings: ApiSettings | None = None,
) -> PaymentIndex:
    """Return an empty payment index for a floor.

    The caller owns the index and triggers its first ``rebuild``.
    """
    resolved = settings or ApiSettings.from_env()
    return PaymentIndex(
        registry or build_payment_registry(build_api_client(resolved)),
        floor or resolved.floor,
        page_size=resolved.page_size,
        logger=get_app_logger(),
    )


def build_ledger_aggregator(
    repository: LedgerRepositoryPort | None = None,
) -> LedgerAggregator:
    """Return a ledger aggregator."""
    return LedgerAggregator(
        repository or build_ledger_repository(),
        logger=get_app_logger(),
    )


def build_party_ledger_view(
    party: Party,
    repository: LedgerRepositoryPort | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> PartyLedgerView:
    """Return a ledger view for one party."""
    return PartyLedgerView(
        repository or build_ledger_repository(),
        party,
        start_date=start_date,
        end_date=end_date,
        logger=get_app_logger(),
        usage_logger=get_usage_logger(),
    )


def build_payment_stats_use_case(
    registry: PaymentRegistryPort | None = None,
    settings: ApiSettings | None = None,
) -> GetPaymentStatsUseCase:
    """Return the payment stats use case."""
    resolved = settings or ApiSettings.from_env()
    return GetPaymentStatsUseCase(
        registry or build_payment_registry(build_api_client(resolved)),
        logger=get_app_logger(),
        page_size=resolved.page_size,
    )


def build_reconciliation_flow(
    payment_index: PaymentIndex,
    ledger_view: PartyLedgerView,
    registry: PaymentRegistryPort | None = None,
) -> PaymentReconciliationFlow:
    """Return a record-payment flow bound to an index and a ledger view."""
    return PaymentReconciliationFlow(
        payment_index,
        registry or build_payment_registry(),
        ledger_view,
        logger=get_app_logger(),
        usage_logger=get_usage_logger(),
    )


__all__ = [
    "build_api_client",
    "build_ledger_repository",
    "build_payment_registry",
    "build_party_repository",
    "build_payment_index",
    "build_ledger_aggregator",
    "build_party_ledger_view",
    "build_payment_stats_use_case",
    "build_reconciliation_flow",
]
