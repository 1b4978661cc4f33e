from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from pydantic import BaseModel

from storefront.domain.cart.aggregates import Cart
from storefront.domain.cart.store import CartStore
from storefront.domain.errors import (
    EmptyCartError,
    NoPreviousStepError,
    OrderInProgressError,
    StepInvalidError,
)
from storefront.domain.orders.models import (
    ADDRESS_FIELDS,
    DEFAULT_PAYMENT_METHOD,
    Order,
    OrderLine,
    PaymentMethod,
    ShippingAddress,
)
from storefront.domain.orders.numbers import OrderNumberGenerator
from storefront.domain.pricing.engine import PricingEngine

logger = logging.getLogger(__name__)


class CheckoutStep(str, Enum):
    ADDRESS = "address"
    PAYMENT = "payment"
    SUMMARY = "summary"
    PLACED = "placed"

    @property
    def number(self) -> int:
        return _STEP_NUMBERS[self]


_STEP_NUMBERS = {
    CheckoutStep.ADDRESS: 1,
    CheckoutStep.PAYMENT: 2,
    CheckoutStep.SUMMARY: 3,
    CheckoutStep.PLACED: 4,
}

_NEXT = {CheckoutStep.ADDRESS: CheckoutStep.PAYMENT, CheckoutStep.PAYMENT: CheckoutStep.SUMMARY}
_PREVIOUS = {CheckoutStep.PAYMENT: CheckoutStep.ADDRESS, CheckoutStep.SUMMARY: CheckoutStep.PAYMENT}

ADDRESS_PRESETS: dict[str, ShippingAddress] = {
    "home": ShippingAddress(name="John Doe", street="123 Main St", city="Anytown", state="CA", zip_code="12345"),
    "work": ShippingAddress(
        name="Jane Smith", street="456 Business Blvd", city="Corporate City", state="NY", zip_code="67890"
    ),
    "demo": ShippingAddress(name="Demo User", street="789 Test Avenue", city="Sample City", state="TX", zip_code="54321"),
}


class CheckoutSnapshot(BaseModel):
    step: CheckoutStep
    step_number: int
    address: ShippingAddress
    payment_method: PaymentMethod
    placing: bool
    can_advance: bool
    missing_fields: list[str]
    order: Order | None = None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CheckoutStateMachine:
    def __init__(
        self,
        cart: CartStore,
        pricing: PricingEngine,
        order_numbers: OrderNumberGenerator,
        clock: Callable[[], datetime] = _utc_now,
        delivery_days: int = 3,
    ):
        self.cart = cart
        self.pricing = pricing
        self.order_numbers = order_numbers
        self.clock = clock
        self.delivery_days = delivery_days
        self._guard = threading.Lock()
        self._placing = False
        self._step = CheckoutStep.ADDRESS
        self._address = ShippingAddress()
        self._payment_method = DEFAULT_PAYMENT_METHOD
        self._order: Order | None = None

    @property
    def step(self) -> CheckoutStep:
        return self._step

    @property
    def address(self) -> ShippingAddress:
        return self._address

    @property
    def payment_method(self) -> PaymentMethod:
        return self._payment_method

    @property
    def placing(self) -> bool:
        return self._placing

    @property
    def order(self) -> Order | None:
        return self._order

    def _ensure_editable(self, action: str) -> None:
        # Callers hold self._guard.
        if self._placing:
            raise OrderInProgressError()
        if self._step == CheckoutStep.PLACED:
            raise StepInvalidError(self._step.value, f"cannot {action} after the order was placed")

    def can_advance(self) -> bool:
        if self._step == CheckoutStep.ADDRESS:
            return self._address.is_complete()
        return self._step == CheckoutStep.PAYMENT

    def set_address(self, address: ShippingAddress) -> ShippingAddress:
        with self._guard:
            self._ensure_editable("edit the address")
            self._address = address
            return self._address

    def update_address(self, **fields: str) -> ShippingAddress:
        unknown = sorted(set(fields) - set(ADDRESS_FIELDS))
        if unknown:
            raise ValueError(f"unknown address fields: {unknown}")
        with self._guard:
            self._ensure_editable("edit the address")
            self._address = self._address.model_copy(update=fields)
            return self._address

    def fill_address_preset(self, name: str) -> ShippingAddress:
        preset = ADDRESS_PRESETS.get(name)
        if preset is None:
            raise ValueError(f"unknown address preset: {name}")
        return self.set_address(preset)

    def select_payment(self, method: PaymentMethod | str) -> PaymentMethod:
        method = PaymentMethod(method)
        with self._guard:
            self._ensure_editable("change the payment method")
            self._payment_method = method
            return self._payment_method

    def advance(self) -> CheckoutStep:
        with self._guard:
            self._ensure_editable("advance")
            if self._step == CheckoutStep.ADDRESS:
                missing = self._address.missing_fields()
                if missing:
                    raise StepInvalidError(self._step.value, "shipping address is incomplete", missing)
            elif self._step == CheckoutStep.SUMMARY:
                raise StepInvalidError(self._step.value, "use place_order to finish checkout")
            self._step = _NEXT[self._step]
            return self._step

    def retreat(self) -> CheckoutStep:
        with self._guard:
            self._ensure_editable("go back")
            if self._step == CheckoutStep.ADDRESS:
                raise NoPreviousStepError(self._step.value)
            self._step = _PREVIOUS[self._step]
            return self._step

    def place_order(self) -> Order:
        with self._guard:
            if self._placing:
                raise OrderInProgressError()
            if self._step == CheckoutStep.PLACED and self._order is not None:
                return self._order
            if self._step != CheckoutStep.SUMMARY:
                raise StepInvalidError(self._step.value, "orders can only be placed from the summary step")
            self._placing = True
            address = self._address
            payment_method = self._payment_method

        try:
            order = self.cart.commit(lambda cart: self._build_order(cart, address, payment_method))
            with self._guard:
                self._order = order
                self._step = CheckoutStep.PLACED
        finally:
            with self._guard:
                self._placing = False

        logger.info(
            "order placed: order_id=%s items=%s total=%s payment=%s",
            order.order_id,
            order.item_count,
            order.total,
            order.payment_method.value,
        )
        return order

    def _build_order(self, cart: Cart, address: ShippingAddress, payment_method: PaymentMethod) -> Order:
        if cart.is_empty:
            raise EmptyCartError(CheckoutStep.SUMMARY.value)
        pricing = self.pricing.breakdown(cart)
        order_id = self.order_numbers.generate()
        return Order(
            order_id=order_id,
            lines=tuple(
                OrderLine(line_id=line.line_id, product=line.product, quantity=line.quantity) for line in cart.lines
            ),
            shipping_address=address,
            payment_method=payment_method,
            subtotal=pricing.subtotal,
            shipping_fee=pricing.shipping_fee,
            total=pricing.total,
            placed_at=self.clock(),
            delivery_days=self.delivery_days,
        )

    def reset(self) -> None:
        with self._guard:
            if self._placing:
                raise OrderInProgressError()
            self._step = CheckoutStep.ADDRESS
            self._address = ShippingAddress()
            self._payment_method = DEFAULT_PAYMENT_METHOD
            self._order = None

    def snapshot(self) -> CheckoutSnapshot:
        return CheckoutSnapshot(
            step=self._step,
            step_number=self._step.number,
            address=self._address,
            payment_method=self._payment_method,
            placing=self._placing,
            can_advance=self.can_advance(),
            missing_fields=self._address.missing_fields(),
            order=self._order,
        )
