from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request

from storefront.domain.cart.aggregates import CartLine
from storefront.session import StorefrontSession


def get_storefront(request: Request) -> StorefrontSession:
    storefront = getattr(request.app.state, "storefront", None)
    if storefront is None:
        raise HTTPException(status_code=503, detail="storefront session not initialized")
    return storefront


def line_view(line: CartLine) -> dict[str, Any]:
    return {
        "line_id": line.line_id,
        "product": line.product.model_dump(mode="json"),
        "quantity": line.quantity,
        "line_total": line.line_total,
    }


def cart_view(storefront: StorefrontSession) -> dict[str, Any]:
    lines = storefront.cart.lines()
    return {
        "lines": [line_view(line) for line in lines],
        "item_count": storefront.cart.subtotal_quantity(),
        "pricing": storefront.pricing.breakdown(lines).to_dict(),
    }
