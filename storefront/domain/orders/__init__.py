from storefront.domain.orders.models import (
    DEFAULT_PAYMENT_METHOD,
    Order,
    OrderLine,
    OrderStatus,
    PaymentMethod,
    ShippingAddress,
)
from storefront.domain.orders.numbers import OrderNumberGenerator

__all__ = [
    "DEFAULT_PAYMENT_METHOD",
    "Order",
    "OrderLine",
    "OrderNumberGenerator",
    "OrderStatus",
    "PaymentMethod",
    "ShippingAddress",
]
