from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from storefront.api.utils import get_storefront
from storefront.domain.orders.models import PaymentMethod
from storefront.session import StorefrontSession

router = APIRouter(tags=["checkout"])


class AddressUpdateRequest(BaseModel):
    name: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None


class PaymentRequest(BaseModel):
    method: PaymentMethod


def _checkout_view(storefront: StorefrontSession) -> dict:
    return storefront.checkout.snapshot().model_dump(mode="json")


@router.get("/checkout")
def get_checkout(storefront: StorefrontSession = Depends(get_storefront)):
    return _checkout_view(storefront)


@router.put("/checkout/address")
def update_address(req: AddressUpdateRequest, storefront: StorefrontSession = Depends(get_storefront)):
    storefront.checkout.update_address(**req.model_dump(exclude_none=True))
    return _checkout_view(storefront)


@router.post("/checkout/address/preset/{name}")
def fill_address_preset(name: str, storefront: StorefrontSession = Depends(get_storefront)):
    try:
        storefront.checkout.fill_address_preset(name)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _checkout_view(storefront)


@router.put("/checkout/payment")
def select_payment(req: PaymentRequest, storefront: StorefrontSession = Depends(get_storefront)):
    storefront.checkout.select_payment(req.method)
    return _checkout_view(storefront)


@router.post("/checkout/advance")
def advance(storefront: StorefrontSession = Depends(get_storefront)):
    storefront.checkout.advance()
    return _checkout_view(storefront)


@router.post("/checkout/retreat")
def retreat(storefront: StorefrontSession = Depends(get_storefront)):
    storefront.checkout.retreat()
    return _checkout_view(storefront)


@router.post("/checkout/place")
def place_order(storefront: StorefrontSession = Depends(get_storefront)):
    order = storefront.checkout.place_order()
    return {
        "order": order.model_dump(mode="json"),
        "estimated_delivery": order.estimated_delivery.isoformat().replace("+00:00", "Z"),
    }


@router.post("/checkout/reset")
def reset(storefront: StorefrontSession = Depends(get_storefront)):
    storefront.checkout.reset()
    return _checkout_view(storefront)
