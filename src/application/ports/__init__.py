"""Application ports package."""

from .errors import ApiRequestError, PdfDownloadError, PortError
from .ledger_repository import LedgerRepositoryPort
from .party_repository import PartyRepositoryPort
from .payment_registry import PaymentRegistryPort

__all__ = [
    "ApiRequestError",
    "PdfDownloadError",
    "PortError",
    "LedgerRepositoryPort",
    "PartyRepositoryPort",
    "PaymentRegistryPort",
]
