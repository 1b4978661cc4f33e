from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.domain.catalog.models import Product

ADDRESS_FIELDS = ("name", "street", "city", "state", "zip_code")


class PaymentMethod(str, Enum):
    CREDIT_CARD = "Credit Card"
    DEBIT_CARD = "Debit Card"
    PAYPAL = "PayPal"
    APPLE_PAY = "Apple Pay"


DEFAULT_PAYMENT_METHOD = PaymentMethod.CREDIT_CARD


class OrderStatus(str, Enum):
    PLACED = "placed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class ShippingAddress(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""

    def missing_fields(self) -> list[str]:
        return [name for name in ADDRESS_FIELDS if not getattr(self, name)]

    def is_complete(self) -> bool:
        return not self.missing_fields()


class OrderLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    line_id: str
    product: Product
    quantity: int = Field(gt=0)

    @property
    def line_total(self) -> int:
        return self.product.price * self.quantity


class Order(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: str
    lines: tuple[OrderLine, ...]
    shipping_address: ShippingAddress
    payment_method: PaymentMethod
    subtotal: int = Field(ge=0, description="int cents")
    shipping_fee: int = Field(ge=0, description="int cents")
    total: int = Field(ge=0, description="int cents")
    placed_at: datetime
    status: OrderStatus = OrderStatus.PLACED
    delivery_days: int = Field(default=3, ge=0)

    @field_validator("placed_at")
    @classmethod
    def _require_tz(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            raise ValueError("placed_at must be timezone-aware")
        return value

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def estimated_delivery(self) -> datetime:
        return self.placed_at + timedelta(days=self.delivery_days)
