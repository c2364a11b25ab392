"""Wire schemas for dashboard API payloads.

The API speaks camelCase JSON and leaves amounts it has not computed as
null. These pydantic models accept that shape and convert it into the
frozen domain dataclasses.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

from src.domain.models import (
    BillSummary,
    LedgerOrder,
    LedgerProduct,
    ModeSummary,
    Party,
    PartyLedger,
    Payment,
    PaymentSummary,
)

ZERO = Decimal("0")


def _zero_when_missing(value):
    return ZERO if value is None or value == "" else value


def _calendar_day(value):
    """Keep only the calendar day of ISO date or datetime strings."""
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        return value[:10]
    return value


class _ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class LedgerProductSchema(_ApiModel):
    id: int | None = None
    product_name: str | None = None
    quantity_kg: Decimal | None = None
    quantity_pc: Decimal | None = None
    market_rate: Decimal = ZERO
    rate_difference: Decimal = ZERO
    total_amount: Decimal = ZERO

    @field_validator(
        "market_rate",
        "rate_difference",
        "total_amount",
        mode="before",
    )
    @classmethod
    def _amounts(cls, value):
        return _zero_when_missing(value)

    def to_domain(self) -> LedgerProduct:
        return LedgerProduct(
            product_id=self.id,
            product_name=self.product_name or "",
            quantity_kg=self.quantity_kg,
            quantity_pc=self.quantity_pc,
            market_rate=self.market_rate,
            rate_difference=self.rate_difference,
            total_amount=self.total_amount,
        )


class BillSummarySchema(_ApiModel):
    bill_percentage: Decimal | None = None
    amount_without_gst: Decimal = ZERO
    gst_amount: Decimal = ZERO
    bill_total_amount: Decimal = ZERO

    @field_validator(
        "amount_without_gst",
        "gst_amount",
        "bill_total_amount",
        mode="before",
    )
    @classmethod
    def _amounts(cls, value):
        return _zero_when_missing(value)

    def to_domain(self) -> BillSummary:
        return BillSummary(
            bill_percentage=self.bill_percentage,
            amount_without_gst=self.amount_without_gst,
            gst_amount=self.gst_amount,
            bill_total_amount=self.bill_total_amount,
        )


class ModeSummarySchema(_ApiModel):
    total_amount: Decimal = ZERO
    received_amount: Decimal = ZERO
    due_amount: Decimal = ZERO

    @field_validator(
        "total_amount",
        "received_amount",
        "due_amount",
        mode="before",
    )
    @classmethod
    def _amounts(cls, value):
        return _zero_when_missing(value)

    def to_domain(self) -> ModeSummary:
        return ModeSummary(
            total_amount=self.total_amount,
            received_amount=self.received_amount,
            due_amount=self.due_amount,
        )


class PaymentSummarySchema(_ApiModel):
    official: ModeSummarySchema | None = None
    offline: ModeSummarySchema | None = None

    def to_domain(self) -> PaymentSummary:
        return PaymentSummary(
            official=self.official.to_domain() if self.official else None,
            offline=self.offline.to_domain() if self.offline else None,
        )


class LedgerOrderSchema(_ApiModel):
    order_id: int
    order_date: date | None = None
    products: list[LedgerProductSchema] = []
    bill_summary: BillSummarySchema | None = None
    payment_summary: PaymentSummarySchema | None = None
    official_grand_total: Decimal = ZERO
    offline_grand_total: Decimal = ZERO

    @field_validator("order_date", mode="before")
    @classmethod
    def _order_day(cls, value):
        return _calendar_day(value)

    @field_validator("products", mode="before")
    @classmethod
    def _products(cls, value):
        return value or []

    @field_validator(
        "official_grand_total",
        "offline_grand_total",
        mode="before",
    )
    @classmethod
    def _amounts(cls, value):
        return _zero_when_missing(value)

    def to_domain(self) -> LedgerOrder:
        return LedgerOrder(
            order_id=self.order_id,
            order_date=self.order_date,
            products=tuple(product.to_domain() for product in self.products),
            bill_summary=(
                self.bill_summary.to_domain() if self.bill_summary else None
            ),
            payment_summary=(
                self.payment_summary.to_domain()
                if self.payment_summary
                else PaymentSummary()
            ),
            official_grand_total=self.official_grand_total,
            offline_grand_total=self.offline_grand_total,
        )


class PartyLedgerSchema(_ApiModel):
    party_id: int
    party_name: str | None = None
    total_official_amount: Decimal = ZERO
    total_offline_amount: Decimal = ZERO
    total_received_amount: Decimal = ZERO
    total_remaining_amount: Decimal = ZERO
    orders: list[LedgerOrderSchema] = []

    @field_validator(
        "total_official_amount",
        "total_offline_amount",
        "total_received_amount",
        "total_remaining_amount",
        mode="before",
    )
    @classmethod
    def _amounts(cls, value):
        return _zero_when_missing(value)

    @field_validator("orders", mode="before")
    @classmethod
    def _orders(cls, value):
        return value or []

    def to_domain(self, start_date: date, end_date: date) -> PartyLedger:
        """Convert to a ledger scoped to the requested window."""
        return PartyLedger(
            party_id=self.party_id,
            party_name=self.party_name or "",
            total_official_amount=self.total_official_amount,
            total_offline_amount=self.total_offline_amount,
            total_received_amount=self.total_received_amount,
            total_remaining_amount=self.total_remaining_amount,
            orders=tuple(order.to_domain() for order in self.orders),
            start_date=start_date,
            end_date=end_date,
        )


class PaymentSchema(_ApiModel):
    id: int
    order_id: int | None = None
    mode: str | None = None
    total_amount: Decimal = ZERO
    received_amount: Decimal = ZERO
    last_received_date: date | None = None
    customer_name: str | None = None
    due_date: date | None = None
    payment_status: str | None = None
    floor: str | None = None
    last_reminder: date | None = None

    @field_validator("total_amount", "received_amount", mode="before")
    @classmethod
    def _amounts(cls, value):
        return _zero_when_missing(value)

    @field_validator(
        "last_received_date",
        "due_date",
        "last_reminder",
        mode="before",
    )
    @classmethod
    def _days(cls, value):
        return _calendar_day(value)

    def to_domain(self) -> Payment:
        return Payment(
            payment_id=self.id,
            order_id=self.order_id,
            mode=self.mode,
            total_amount=self.total_amount,
            received_amount=self.received_amount,
            last_received_date=self.last_received_date,
            customer_name=self.customer_name,
            due_date=self.due_date,
            payment_status=self.payment_status,
            floor=self.floor,
            last_reminder=self.last_reminder,
        )


class PaymentPageSchema(_ApiModel):
    data: list[PaymentSchema] = []
    total_pages: int | None = None
    total_elements: int | None = None

    @field_validator("data", mode="before")
    @classmethod
    def _data(cls, value):
        return value or []


class PartySchema(_ApiModel):
    id: int | None = None
    party_id: int | None = None
    name: str | None = None

    @model_validator(mode="after")
    def _has_identifier(self):
        if self.id is None and self.party_id is None:
            raise ValueError("party payload has neither id nor partyId")
        return self

    def to_domain(self) -> Party:
        party_id = self.party_id if self.party_id is not None else self.id
        return Party(party_id=party_id, name=(self.name or "").strip())


__all__ = [
    "LedgerProductSchema",
    "BillSummarySchema",
    "ModeSummarySchema",
    "PaymentSummarySchema",
    "LedgerOrderSchema",
    "PartyLedgerSchema",
    "PaymentSchema",
    "PaymentPageSchema",
    "PartySchema",
]
