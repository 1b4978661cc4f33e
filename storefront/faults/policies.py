from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Sequence, TypeVar

from storefront.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FaultPolicy:
    name = "fault"

    def __init__(self, probability: float = 0.0, rng: random.Random | None = None):
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"{self.name}: probability must be within [0, 1], got {probability}")
        self.probability = probability
        self.rng = rng or random.Random()

    @property
    def enabled(self) -> bool:
        return self.probability > 0.0

    def fires(self) -> bool:
        if self.probability <= 0.0:
            return False
        if self.probability >= 1.0:
            hit = True
        else:
            hit = self.rng.random() < self.probability
        if hit:
            logger.warning("fault injected: policy=%s probability=%s", self.name, self.probability)
        return hit

    def __repr__(self) -> str:
        return f"{type(self).__name__}(probability={self.probability})"


class PriceSurchargePolicy(FaultPolicy):
    name = "price_surcharge"

    def __init__(
        self,
        probability: float = 0.0,
        min_cents: int = 500,
        max_cents: int = 2500,
        rng: random.Random | None = None,
    ):
        super().__init__(probability, rng)
        if min_cents < 0 or max_cents < min_cents:
            raise ValueError(f"invalid surcharge range: {min_cents}..{max_cents}")
        self.min_cents = min_cents
        self.max_cents = max_cents

    def apply(self, total: int) -> int:
        if not self.fires():
            return total
        return total + self.rng.randint(self.min_cents, self.max_cents)


class OrderIdCollisionPolicy(FaultPolicy):
    name = "order_id_collision"

    def __init__(self, probability: float = 0.0, collision_value: str = "WB12345", rng: random.Random | None = None):
        super().__init__(probability, rng)
        self.collision_value = collision_value

    def apply(self, order_id: str) -> str:
        return self.collision_value if self.fires() else order_id


class NewestSortPolicy(FaultPolicy):
    name = "newest_sort_reversal"

    def apply(self, products: Sequence[T]) -> list[T]:
        if self.fires():
            return list(reversed(products))
        return list(products)


class SearchDropoutPolicy(FaultPolicy):
    name = "search_dropout"

    def __init__(self, probability: float = 0.0, min_query_length: int = 4, rng: random.Random | None = None):
        super().__init__(probability, rng)
        self.min_query_length = min_query_length

    def apply(self, text: str, results: Sequence[T]) -> list[T]:
        if len(text) < self.min_query_length or not self.fires():
            return list(results)
        return []


@dataclass(frozen=True)
class FaultPolicies:
    price_surcharge: PriceSurchargePolicy
    order_id_collision: OrderIdCollisionPolicy
    newest_sort: NewestSortPolicy
    search_dropout: SearchDropoutPolicy

    @classmethod
    def disabled(cls) -> "FaultPolicies":
        return cls(
            price_surcharge=PriceSurchargePolicy(),
            order_id_collision=OrderIdCollisionPolicy(),
            newest_sort=NewestSortPolicy(),
            search_dropout=SearchDropoutPolicy(),
        )

    def describe(self) -> dict[str, float]:
        return {
            policy.name: policy.probability
            for policy in (self.price_surcharge, self.order_id_collision, self.newest_sort, self.search_dropout)
        }


def build_fault_policies(settings: Settings | None = None, seed: int | None = None) -> FaultPolicies:
    settings = settings or get_settings()
    if seed is None:
        seed = settings.fault_seed
    rng = random.Random(seed)
    return FaultPolicies(
        price_surcharge=PriceSurchargePolicy(
            probability=settings.fault_price_surcharge_probability,
            min_cents=settings.fault_surcharge_min_cents,
            max_cents=settings.fault_surcharge_max_cents,
            rng=rng,
        ),
        order_id_collision=OrderIdCollisionPolicy(
            probability=settings.fault_order_id_collision_probability,
            collision_value=settings.order_collision_value,
            rng=rng,
        ),
        newest_sort=NewestSortPolicy(probability=settings.fault_newest_sort_probability, rng=rng),
        search_dropout=SearchDropoutPolicy(
            probability=settings.fault_search_dropout_probability,
            min_query_length=settings.fault_search_dropout_min_length,
            rng=rng,
        ),
    )
