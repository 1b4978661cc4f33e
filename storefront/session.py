from __future__ import annotations

from dataclasses import dataclass

from storefront.core.config import Settings, get_settings
from storefront.domain.cart.store import CartStore
from storefront.domain.catalog.store import CatalogStore
from storefront.domain.checkout.machine import CheckoutStateMachine
from storefront.domain.orders.numbers import OrderNumberGenerator
from storefront.domain.pricing.engine import PricingEngine
from storefront.faults import FaultPolicies, build_fault_policies
from storefront.persistence.slots import SlotStore, SqlSlotStore


@dataclass
class StorefrontSession:
    catalog: CatalogStore
    cart: CartStore
    pricing: PricingEngine
    order_numbers: OrderNumberGenerator
    checkout: CheckoutStateMachine
    faults: FaultPolicies


def build_session(
    settings: Settings | None = None,
    slots: SlotStore | None = None,
    catalog: CatalogStore | None = None,
    faults: FaultPolicies | None = None,
) -> StorefrontSession:
    settings = settings or get_settings()
    faults = faults or build_fault_policies(settings)
    if catalog is None:
        catalog = CatalogStore.load(
            settings.catalog_path,
            newest_sort=faults.newest_sort,
            search_dropout=faults.search_dropout,
        )
    cart = CartStore(slots if slots is not None else SqlSlotStore(), key=settings.cart_storage_key)
    pricing = PricingEngine.from_settings(settings, surcharge_policy=faults.price_surcharge)
    order_numbers = OrderNumberGenerator.from_settings(settings, collision_policy=faults.order_id_collision)
    checkout = CheckoutStateMachine(
        cart=cart,
        pricing=pricing,
        order_numbers=order_numbers,
        delivery_days=settings.estimated_delivery_days,
    )
    return StorefrontSession(
        catalog=catalog,
        cart=cart,
        pricing=pricing,
        order_numbers=order_numbers,
        checkout=checkout,
        faults=faults,
    )
