"""HTTP-backed payment registry."""

from pydantic import ValidationError

from src.application.ports.errors import ApiRequestError
from src.application.ports.payment_registry import PaymentRegistryPort
from src.domain.constants import DEFAULT_PAYMENT_PAGE_SIZE
from src.domain.models import Payment, PaymentReceipt
from src.domain.services.normalization import (
    normalize_billing_mode,
    normalize_floor,
)
from src.infrastructure.api_schemas import PaymentPageSchema, PaymentSchema
from src.infrastructure.http_client import ApiClient
from src.infrastructure.logging.logger import get_app_logger
from src.utils.decimal_utils import quantize_money

PAYMENT_LIST_PATH = "/api/v1/payments/floor/{floor}/mode/{mode}"
RECEIVE_PAYMENT_PATH = "/api/v1/payments/{payment_id}/receive"


class HttpPaymentRegistry(PaymentRegistryPort):
    """List and update payments through the dashboard API.

    Listing never sends the ``search`` parameter.
    """

    def __init__(self, client: ApiClient, logger=None) -> None:
        """Initialize the registry.

        Args:
            client: Configured API client.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._client = client
        self._logger = logger or get_app_logger()

    async def fetch_payments(
        self,
        floor: str,
        mode: str,
        page: int = 0,
        size: int = DEFAULT_PAYMENT_PAGE_SIZE,
    ) -> list[Payment]:
        resolved_floor = normalize_floor(floor)
        resolved_mode = normalize_billing_mode(mode)
        payload = await self._client.get_json(
            PAYMENT_LIST_PATH.format(floor=resolved_floor, mode=resolved_mode),
            params={"mode": resolved_mode, "page": page, "size": size},
        )
        try:
            result = PaymentPageSchema.model_validate(payload)
        except ValidationError as exc:
            raise ApiRequestError(
                f"Malformed payment list for floor={resolved_floor} "
                f"mode={resolved_mode}"
            ) from exc
        if result.total_pages and result.total_pages > page + 1:
            self._logger.warning(
                f"Payment list for floor={resolved_floor} "
                f"mode={resolved_mode} "
                f"has {result.total_pages} pages; only page {page} "
                f"({size} records) was read"
            )
        return [item.to_domain() for item in result.data]

    async def receive_payment(
        self,
        payment_id: int,
        receipt: PaymentReceipt,
    ) -> Payment:
        payload = await self._client.post_json(
            RECEIVE_PAYMENT_PATH.format(payment_id=payment_id),
            {
                "newReceivedAmount": float(
                    quantize_money(receipt.new_received_amount)
                ),
                "newReceivedDate": receipt.new_received_date.isoformat(),
            },
        )
        try:
            updated = PaymentSchema.model_validate(payload)
        except ValidationError as exc:
            raise ApiRequestError(
                f"Malformed payment returned for payment {payment_id}"
            ) from exc
        self._logger.info(
            f"Payment {payment_id} received "
            f"{receipt.new_received_amount}; server total "
            f"{updated.received_amount}"
        )
        return updated.to_domain()


__all__ = [
    "HttpPaymentRegistry",
    "PAYMENT_LIST_PATH",
    "RECEIVE_PAYMENT_PATH",
]
