from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from storefront.core.config import Settings, get_settings
from storefront.domain.cart.aggregates import Cart, CartLine
from storefront.faults import PriceSurchargePolicy


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: int
    shipping_fee: int
    total: int
    free_shipping_threshold: int

    @property
    def surcharge(self) -> int:
        return self.total - self.subtotal - self.shipping_fee

    @property
    def free_shipping(self) -> bool:
        return self.shipping_fee == 0

    @property
    def amount_to_free_shipping(self) -> int:
        if self.subtotal > self.free_shipping_threshold:
            return 0
        return self.free_shipping_threshold - self.subtotal

    def to_dict(self) -> dict[str, int | bool]:
        return {
            "subtotal": self.subtotal,
            "shipping_fee": self.shipping_fee,
            "total": self.total,
            "free_shipping": self.free_shipping,
            "amount_to_free_shipping": self.amount_to_free_shipping,
        }


def _lines(source: Cart | Iterable[CartLine]) -> list[CartLine]:
    if isinstance(source, Cart):
        return list(source.lines)
    return list(source)


class PricingEngine:
    def __init__(
        self,
        free_shipping_threshold: int = 5000,
        flat_shipping_fee: int = 999,
        surcharge_policy: PriceSurchargePolicy | None = None,
    ):
        if free_shipping_threshold < 0 or flat_shipping_fee < 0:
            raise ValueError("shipping threshold and fee must be non-negative cents")
        self.free_shipping_threshold = free_shipping_threshold
        self.flat_shipping_fee = flat_shipping_fee
        self.surcharge_policy = surcharge_policy or PriceSurchargePolicy()

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        surcharge_policy: PriceSurchargePolicy | None = None,
    ) -> "PricingEngine":
        settings = settings or get_settings()
        return cls(
            free_shipping_threshold=settings.free_shipping_threshold_cents,
            flat_shipping_fee=settings.flat_shipping_fee_cents,
            surcharge_policy=surcharge_policy,
        )

    @staticmethod
    def subtotal(source: Cart | Iterable[CartLine]) -> int:
        return sum(line.line_total for line in _lines(source))

    def shipping_fee(self, subtotal: int) -> int:
        return 0 if subtotal > self.free_shipping_threshold else self.flat_shipping_fee

    def breakdown(self, source: Cart | Iterable[CartLine]) -> PriceBreakdown:
        subtotal = self.subtotal(source)
        shipping = self.shipping_fee(subtotal)
        total = self.surcharge_policy.apply(subtotal + shipping)
        return PriceBreakdown(
            subtotal=subtotal,
            shipping_fee=shipping,
            total=total,
            free_shipping_threshold=self.free_shipping_threshold,
        )

    def total(self, source: Cart | Iterable[CartLine]) -> int:
        return self.breakdown(source).total
