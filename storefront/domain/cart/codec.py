from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from storefront.domain.cart.aggregates import Cart, CartLine
from storefront.domain.catalog.models import Product
from storefront.domain.errors import PersistenceLoadError

CART_SCHEMA_VERSION = 1


class CartLineDocument(BaseModel):
    line_id: str = Field(min_length=1)
    quantity: int = Field(gt=0)
    product: Product


class CartDocument(BaseModel):
    schema_version: Literal[1] = CART_SCHEMA_VERSION
    lines: list[CartLineDocument] = Field(default_factory=list)


def encode_cart(cart: Cart) -> str:
    document = CartDocument(
        lines=[
            CartLineDocument(line_id=line.line_id, quantity=line.quantity, product=line.product)
            for line in cart.lines
        ]
    )
    return document.model_dump_json()


def decode_cart(raw: str | bytes | None, key: str = "cart") -> Cart:
    if raw is None:
        raise PersistenceLoadError(key, "slot is absent")
    if not raw.strip():
        raise PersistenceLoadError(key, "slot is empty")
    try:
        document = CartDocument.model_validate_json(raw)
    except ValidationError as exc:
        raise PersistenceLoadError(key, f"malformed cart document: {exc.error_count()} error(s)") from exc

    cart = Cart(
        lines=[CartLine(line_id=item.line_id, product=item.product, quantity=item.quantity) for item in document.lines]
    )
    problems = cart.violations()
    if problems:
        raise PersistenceLoadError(key, "; ".join(problems))
    return cart
