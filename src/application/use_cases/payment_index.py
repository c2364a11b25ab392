"""In-memory index of a floor's payments keyed by order and billing mode.

The index pulls one bounded page of payments per billing mode for its floor
and filters locally. It never queries the registry with a search term: the
server-side search breaks on numeric terms, so "fetch all, filter locally" is
the only access pattern used here.

The index is a snapshot. Owners call ``rebuild`` after anything that may have
changed payment state; a rebuild swaps the whole mapping in one assignment so
readers see either the old or the new map, never a mix.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum

from src.application.ports.errors import PortError
from src.application.ports.payment_registry import PaymentRegistryPort
from src.domain.constants import BILLING_MODES, DEFAULT_PAYMENT_PAGE_SIZE
from src.domain.models import Payment
from src.domain.services.normalization import (
    normalize_billing_mode,
    normalize_floor,
)
from src.infrastructure.logging.logger import get_app_logger

PaymentKey = tuple[int, str]


class LookupStatus(Enum):
    """Outcome of a payment index lookup."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    LOADING = "loading"


@dataclass(frozen=True)
class PaymentLookup:
    """Result of ``PaymentIndex.get``.

    Attributes:
        status: Whether the payment was found, is absent, or could not be
            looked up because the index is still loading or its fetch failed.
        payment: Matching payment when status is FOUND.
    """

    status: LookupStatus
    payment: Payment | None = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND


class PaymentIndex:
    """Lookup from (order_id, billing mode) to a floor's payment record."""

    def __init__(
        self,
        payment_registry: PaymentRegistryPort,
        floor: str,
        page_size: int = DEFAULT_PAYMENT_PAGE_SIZE,
        logger=None,
    ) -> None:
        """Initialize an empty, not yet loaded index.

        Args:
            payment_registry: Port listing the floor's payments.
            floor: Floor whose payments are indexed.
            page_size: Number of records pulled per billing mode.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._registry = payment_registry
        self._floor = normalize_floor(floor)
        self._page_size = page_size
        self._logger = logger or get_app_logger()
        self._entries: dict[PaymentKey, Payment] = {}
        self._loaded = False
        self._fetch_failed = False
        self._generation = 0

    @property
    def floor(self) -> str:
        return self._floor

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def fetch_failed(self) -> bool:
        """Return True when the last rebuild could not fetch payments."""
        return self._fetch_failed

    @property
    def entries(self) -> dict[PaymentKey, Payment]:
        """Return a copy of the current snapshot."""
        return dict(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    async def rebuild(self) -> None:
        """Refetch the floor's payments and replace the whole mapping.

        A failed fetch leaves the index loaded and empty with
        ``fetch_failed`` set. When rebuilds overlap, only the most recently
        started one is applied.
        """
        self._generation += 1
        generation = self._generation
        try:
            payments = await self._fetch_payments()
        except PortError as exc:
            if generation != self._generation:
                return
            self._logger.error(
                f"Payment index rebuild failed for floor={self._floor}: {exc}"
            )
            self._entries = {}
            self._fetch_failed = True
            self._loaded = True
            return

        if generation != self._generation:
            self._logger.debug(
                f"Discarding superseded payment index rebuild for "
                f"floor={self._floor}"
            )
            return
        self._entries = self.build_entries(payments, self._logger)
        self._fetch_failed = False
        self._loaded = True
        self._logger.info(
            f"Payment index rebuilt for floor={self._floor}: "
            f"{len(self._entries)} payments from {len(payments)} records"
        )

    def get(self, order_id: int, mode: str | None) -> PaymentLookup:
        """Look up the payment for an order and billing mode.

        Args:
            order_id: Order identifier from the ledger.
            mode: Billing mode; absent values resolve to OFFICIAL.

        Returns:
            PaymentLookup: FOUND with the payment, LOADING before the first
            rebuild completes, UNAVAILABLE when the last fetch failed, and
            NOT_FOUND otherwise.
        """
        if not self._loaded:
            return PaymentLookup(LookupStatus.LOADING)
        try:
            key = (order_id, normalize_billing_mode(mode))
        except ValueError:
            return PaymentLookup(LookupStatus.NOT_FOUND)
        payment = self._entries.get(key)
        if payment is not None:
            return PaymentLookup(LookupStatus.FOUND, payment)
        if self._fetch_failed:
            return PaymentLookup(LookupStatus.UNAVAILABLE)
        return PaymentLookup(LookupStatus.NOT_FOUND)

    async def _fetch_payments(self) -> list[Payment]:
        results = await asyncio.gather(
            *(
                self._registry.fetch_payments(
                    self._floor,
                    mode,
                    page=0,
                    size=self._page_size,
                )
                for mode in BILLING_MODES
            ),
            return_exceptions=True,
        )
        payments: list[Payment] = []
        for result in results:
            if isinstance(result, BaseException):
                raise result
            payments.extend(result)
        return payments

    @staticmethod
    def build_entries(
        payments: list[Payment],
        logger,
    ) -> dict[PaymentKey, Payment]:
        """Key payments by (order_id, normalized mode).

        The first record seen for a key wins. Later duplicates, records
        without an order, and records with an unknown mode are skipped
        with a warning.

        Args:
            payments: Raw payment records for one floor.
            logger: Logger used for warnings.

        Returns:
            dict[PaymentKey, Payment]: Fresh mapping.
        """
        entries: dict[PaymentKey, Payment] = {}
        for payment in payments:
            if payment.order_id is None:
                logger.warning(
                    f"Skipping payment {payment.payment_id} without an order"
                )
                continue
            try:
                mode = normalize_billing_mode(payment.mode)
            except ValueError:
                logger.warning(
                    f"Skipping payment {payment.payment_id} with unknown "
                    f"mode {payment.mode!r}"
                )
                continue
            key = (payment.order_id, mode)
            if key in entries:
                logger.warning(
                    f"Duplicate payment for order {payment.order_id} "
                    f"mode={mode}: keeping {entries[key].payment_id}, "
                    f"ignoring {payment.payment_id}"
                )
                continue
            entries[key] = payment
        return entries


__all__ = ["PaymentIndex", "PaymentLookup", "LookupStatus", "PaymentKey"]
