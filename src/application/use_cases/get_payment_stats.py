"""Use case to summarize a floor's outstanding payments."""

from src.application.ports.payment_registry import PaymentRegistryPort
from src.domain.constants import BILLING_MODES, DEFAULT_PAYMENT_PAGE_SIZE
from src.domain.models import PaymentStats
from src.domain.services.ledger import compute_payment_stats
from src.domain.services.normalization import normalize_floor
from src.infrastructure.logging.logger import get_app_logger


class GetPaymentStatsUseCase:
    """Compute overdue and outstanding figures for a floor."""

    def __init__(
        self,
        payment_registry: PaymentRegistryPort,
        logger=None,
        page_size: int = DEFAULT_PAYMENT_PAGE_SIZE,
    ) -> None:
        """Initialize the use case.

        Args:
            payment_registry: Port listing payments per floor and mode.
            logger: Optional logger compatible with logging.Logger-like API.
            page_size: Number of records pulled per billing mode.
        """
        self._registry = payment_registry
        self._logger = logger or get_app_logger()
        self._page_size = page_size

    async def execute(self, floor: str) -> PaymentStats:
        """Return payment stats for both billing modes of a floor.

        Args:
            floor: Floor identifier.

        Returns:
            PaymentStats: Overdue count and amount, due-soon count, and the
            total outstanding across the fetched payments.
        """
        resolved_floor = normalize_floor(floor)
        payments = []
        for mode in BILLING_MODES:
            payments.extend(
                await self._registry.fetch_payments(
                    resolved_floor,
                    mode,
                    page=0,
                    size=self._page_size,
                )
            )
        stats = compute_payment_stats(payments)
        self._logger.info(
            f"Payment stats for floor={resolved_floor}: "
            f"overdue={stats.overdue_count}, "
            f"outstanding={stats.total_outstanding}"
        )
        return stats


__all__ = ["GetPaymentStatsUseCase"]
