"""Tests for the HTTP client and API adapters against a mock transport."""

import asyncio
from datetime import date
from decimal import Decimal
import json
from unittest.mock import MagicMock

import httpx
import pytest

from src.application.ports.errors import ApiRequestError, PdfDownloadError
from src.application.use_cases.payment_index import LookupStatus, PaymentIndex
from src.domain.constants import GROUND_FLOOR, OFFICIAL, OFFLINE
from src.domain.models import Party, PaymentReceipt
from src.infrastructure.http_client import ApiClient
from src.infrastructure.ledger_api_repository import HttpLedgerRepository
from src.infrastructure.party_api_repository import HttpPartyRepository
from src.infrastructure.payment_api_registry import HttpPaymentRegistry
from src.infrastructure.settings import ApiSettings

SETTINGS = ApiSettings(base_url="http://ledger.test", token="t0k")

LEDGER_BODY = """{
  "partyId": 7,
  "partyName": "Sharma Traders",
  "totalOfficialAmount": 11800.10,
  "totalOfflineAmount": 2000,
  "totalReceivedAmount": 5000,
  "totalRemainingAmount": null,
  "orders": [
    {
      "orderId": 100,
      "orderDate": "2024-03-15T10:30:00",
      "products": [
        {"id": 1, "productName": "Rod", "quantityKg": 12.5,
         "quantityPc": null, "marketRate": 54.2, "rateDifference": null,
         "totalAmount": 677.5}
      ],
      "billSummary": {"billPercentage": 100, "amountWithoutGst": 10000,
                      "gstAmount": 1800.10, "billTotalAmount": 11800.10},
      "paymentSummary": {
        "official": {"totalAmount": 11800.10, "receivedAmount": 5000,
                     "dueAmount": 6800.10},
        "offline": null
      },
      "officialGrandTotal": 11800.10,
      "offlineGrandTotal": null
    }
  ]
}"""


def _client(handler):
    return ApiClient(
        SETTINGS,
        transport=httpx.MockTransport(handler),
        logger=MagicMock(),
    )


def test_fetch_party_ledger_parses_decimal_amounts_and_nulls() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(
            200,
            content=LEDGER_BODY.encode(),
            headers={"Content-Type": "application/json"},
        )

    repository = HttpLedgerRepository(_client(handler), logger=MagicMock())

    ledger = asyncio.run(
        repository.fetch_party_ledger(7, date(2024, 1, 1), date(2024, 12, 31))
    )

    assert seen["path"] == "/api/v1/payments/party/7/ledger"
    assert seen["params"] == {
        "startDate": "2024-01-01",
        "endDate": "2024-12-31",
    }
    assert seen["auth"] == "Bearer t0k"
    assert ledger.total_official_amount == Decimal("11800.10")
    assert ledger.total_remaining_amount == Decimal("0")
    assert ledger.start_date == date(2024, 1, 1)
    order = ledger.orders[0]
    assert order.order_date == date(2024, 3, 15)
    assert order.payment_summary.official.due_amount == Decimal("6800.10")
    assert order.payment_summary.offline is None
    assert order.offline_grand_total == Decimal("0")
    assert order.products[0].rate_difference == Decimal("0")
    assert order.bill_summary.gst_amount == Decimal("1800.10")


def test_malformed_ledger_payload_raises_api_error() -> None:
    def handler(request):
        return httpx.Response(200, json={"partyName": "missing id"})

    repository = HttpLedgerRepository(_client(handler), logger=MagicMock())

    with pytest.raises(ApiRequestError):
        asyncio.run(
            repository.fetch_party_ledger(
                1,
                date(2024, 1, 1),
                date(2024, 1, 2),
            )
        )


def test_fetch_ledger_pdf_returns_bytes_untouched() -> None:
    payload = b"%PDF-1.7\n\x00\xff\xfe binary \x80\n%%EOF"

    def handler(request):
        assert request.headers["Accept"] == "application/pdf"
        assert request.url.path == "/api/v1/payments/party/7/ledger/pdf"
        return httpx.Response(200, content=payload)

    repository = HttpLedgerRepository(_client(handler), logger=MagicMock())

    content = asyncio.run(
        repository.fetch_party_ledger_pdf(
            7,
            date(2024, 1, 1),
            date(2024, 2, 1),
        )
    )

    assert content == payload


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"message": "render failed"}),
        httpx.Response(200, content=b"<html>login</html>"),
    ],
)
def test_fetch_ledger_pdf_failures_raise_pdf_error(response) -> None:
    repository = HttpLedgerRepository(
        _client(lambda request: response),
        logger=MagicMock(),
    )

    with pytest.raises(PdfDownloadError):
        asyncio.run(
            repository.fetch_party_ledger_pdf(
                7,
                date(2024, 1, 1),
                date(2024, 2, 1),
            )
        )


def test_fetch_payments_lists_one_page_without_search() -> None:
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(
            200,
            json={
                "data": [
                    {
                        "id": 55,
                        "orderId": 100,
                        "mode": None,
                        "totalAmount": 10000,
                        "receivedAmount": 5000,
                        "customerName": "Sharma Traders",
                        "dueDate": "2024-06-01",
                        "paymentStatus": "OVERDUE",
                        "floor": "GROUND_FLOOR",
                    }
                ],
                "totalPages": 1,
                "totalElements": 1,
            },
        )

    registry = HttpPaymentRegistry(_client(handler), logger=MagicMock())

    payments = asyncio.run(
        registry.fetch_payments(GROUND_FLOOR, "official", page=0, size=500)
    )

    assert seen["path"] == "/api/v1/payments/floor/GROUND_FLOOR/mode/OFFICIAL"
    assert seen["params"] == {"mode": OFFICIAL, "page": "0", "size": "500"}
    assert "search" not in seen["params"]
    payment = payments[0]
    assert payment.payment_id == 55
    assert payment.mode is None
    assert payment.remaining_amount == Decimal("5000")
    assert payment.due_date == date(2024, 6, 1)


def test_fetch_payments_warns_when_more_pages_exist() -> None:
    logger = MagicMock()

    def handler(request):
        return httpx.Response(200, json={"data": [], "totalPages": 3})

    registry = HttpPaymentRegistry(_client(handler), logger=logger)

    assert asyncio.run(registry.fetch_payments(GROUND_FLOOR, OFFLINE)) == []
    logger.warning.assert_called_once()


def test_receive_payment_posts_incremental_receipt() -> None:
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "id": 55,
                "orderId": 100,
                "mode": "OFFICIAL",
                "totalAmount": 10000,
                "receivedAmount": 7000.5,
                "lastReceivedDate": "2024-05-21",
            },
        )

    registry = HttpPaymentRegistry(_client(handler), logger=MagicMock())
    receipt = PaymentReceipt(Decimal("2000.50"), date(2024, 5, 21))

    updated = asyncio.run(registry.receive_payment(55, receipt))

    assert seen["method"] == "POST"
    assert seen["path"] == "/api/v1/payments/55/receive"
    assert seen["body"] == {
        "newReceivedAmount": 2000.5,
        "newReceivedDate": "2024-05-21",
    }
    assert updated.received_amount == Decimal("7000.5")
    assert updated.last_received_date == date(2024, 5, 21)


def test_error_status_carries_server_message() -> None:
    def handler(request):
        return httpx.Response(400, json={"message": "Amount exceeds due"})

    registry = HttpPaymentRegistry(_client(handler), logger=MagicMock())
    receipt = PaymentReceipt(Decimal("1"), date(2024, 5, 21))

    with pytest.raises(ApiRequestError) as excinfo:
        asyncio.run(registry.receive_payment(55, receipt))

    assert excinfo.value.status_code == 400
    assert excinfo.value.user_message == "Amount exceeds due"


def test_transport_failure_becomes_api_error() -> None:
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    repository = HttpPartyRepository(_client(handler))

    with pytest.raises(ApiRequestError) as excinfo:
        asyncio.run(repository.fetch_parties())

    assert excinfo.value.status_code is None


def test_fetch_parties_accepts_id_or_party_id() -> None:
    def handler(request):
        assert request.url.path == "/api/v1/party"
        return httpx.Response(
            200,
            json=[
                {"id": 1, "name": " Alpha "},
                {"partyId": 2, "name": "Beta"},
            ],
        )

    repository = HttpPartyRepository(_client(handler))

    parties = asyncio.run(repository.fetch_parties())

    assert parties == [Party(1, "Alpha"), Party(2, "Beta")]


def test_non_list_party_payload_is_rejected() -> None:
    repository = HttpPartyRepository(
        _client(lambda request: httpx.Response(200, json={"data": []}))
    )

    with pytest.raises(ApiRequestError):
        asyncio.run(repository.fetch_parties())


def test_payment_page_with_orderless_record_still_indexes_the_rest() -> None:
    def handler(request):
        if request.url.params["mode"] == OFFLINE:
            return httpx.Response(200, json={"data": []})
        return httpx.Response(
            200,
            json={
                "data": [
                    {"id": 1, "orderId": 100, "mode": None},
                    {"id": 2, "orderId": None},
                ]
            },
        )

    registry = HttpPaymentRegistry(_client(handler), logger=MagicMock())
    index = PaymentIndex(registry, GROUND_FLOOR, logger=MagicMock())

    asyncio.run(index.rebuild())

    lookup = index.get(100, OFFICIAL)
    assert lookup.status is LookupStatus.FOUND
    assert lookup.payment.payment_id == 1
    assert index.fetch_failed is False
