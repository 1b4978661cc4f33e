from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from storefront.api.utils import cart_view, get_storefront
from storefront.domain.errors import ProductNotFoundError
from storefront.session import StorefrontSession

router = APIRouter(tags=["cart"])


class AddItemRequest(BaseModel):
    product_id: str
    quantity: int = 1


class SetQuantityRequest(BaseModel):
    quantity: int


@router.get("/cart")
def get_cart(storefront: StorefrontSession = Depends(get_storefront)):
    return cart_view(storefront)


@router.post("/cart/items")
def add_item(req: AddItemRequest, storefront: StorefrontSession = Depends(get_storefront)):
    product = storefront.catalog.get(req.product_id)
    if product is None:
        raise ProductNotFoundError(req.product_id)
    storefront.cart.add(product, req.quantity)
    return cart_view(storefront)


@router.put("/cart/items/{line_id}")
def set_item_quantity(line_id: str, req: SetQuantityRequest, storefront: StorefrontSession = Depends(get_storefront)):
    storefront.cart.set_quantity(line_id, req.quantity)
    return cart_view(storefront)


@router.delete("/cart/items/{line_id}")
def remove_item(line_id: str, storefront: StorefrontSession = Depends(get_storefront)):
    storefront.cart.remove(line_id)
    return cart_view(storefront)


@router.delete("/cart")
def clear_cart(storefront: StorefrontSession = Depends(get_storefront)):
    storefront.cart.clear()
    return cart_view(storefront)
