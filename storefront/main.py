from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.api.routes_cart import router as cart_router
from storefront.api.routes_catalog import router as catalog_router
from storefront.api.routes_checkout import router as checkout_router
from storefront.core.config import get_settings
from storefront.core.logging import configure_logging
from storefront.domain.errors import (
    CartBusyError,
    InvalidQuantityError,
    NoPreviousStepError,
    OrderInProgressError,
    ProductNotFoundError,
    StepInvalidError,
)
from storefront.persistence.db import init_db
from storefront.session import build_session

configure_logging()
logger = logging.getLogger(__name__)
settings = get_settings()

app = FastAPI(title=settings.app_name)


@app.on_event("startup")
def on_startup() -> None:
    if getattr(app.state, "storefront", None) is not None:
        return
    init_db()
    app.state.storefront = build_session(settings)
    logger.info(
        "storefront session ready: products=%s cart_lines=%s faults=%s",
        len(app.state.storefront.catalog),
        len(app.state.storefront.cart.lines()),
        app.state.storefront.faults.describe(),
    )


@app.exception_handler(InvalidQuantityError)
async def invalid_quantity_handler(_: Request, exc: InvalidQuantityError):
    return JSONResponse(status_code=422, content={"detail": str(exc), "error": "invalid_quantity"})


@app.exception_handler(ProductNotFoundError)
async def product_not_found_handler(_: Request, exc: ProductNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc), "error": "product_not_found"})


@app.exception_handler(StepInvalidError)
async def step_invalid_handler(_: Request, exc: StepInvalidError):
    return JSONResponse(
        status_code=409,
        content={
            "detail": str(exc),
            "error": "step_invalid",
            "step": exc.step,
            "missing_fields": exc.missing_fields,
        },
    )


@app.exception_handler(NoPreviousStepError)
async def no_previous_step_handler(_: Request, exc: NoPreviousStepError):
    return JSONResponse(status_code=409, content={"detail": str(exc), "error": "no_previous_step"})


@app.exception_handler(OrderInProgressError)
async def order_in_progress_handler(_: Request, exc: OrderInProgressError):
    return JSONResponse(status_code=409, content={"detail": str(exc), "error": "order_in_progress"})


@app.exception_handler(CartBusyError)
async def cart_busy_handler(_: Request, exc: CartBusyError):
    return JSONResponse(status_code=409, content={"detail": str(exc), "error": "cart_busy"})


@app.get("/healthz")
def healthz() -> dict:
    return {"status": "ok"}


app.include_router(catalog_router)
app.include_router(cart_router)
app.include_router(checkout_router)
