from storefront.domain.cart.aggregates import Cart, CartLine
from storefront.domain.cart.codec import decode_cart, encode_cart
from storefront.domain.cart.store import CartStore

__all__ = ["Cart", "CartLine", "CartStore", "decode_cart", "encode_cart"]
