from __future__ import annotations


class StorefrontError(Exception):
    pass


class InvalidQuantityError(StorefrontError, ValueError):
    def __init__(self, quantity: int, product_id: str | None = None):
        self.quantity = quantity
        self.product_id = product_id
        target = f" for product={product_id}" if product_id else ""
        super().__init__(f"quantity must stay positive{target}, got {quantity}")


class ProductNotFoundError(StorefrontError, LookupError):
    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"product not found: {product_id}")


class CartBusyError(StorefrontError):
    def __init__(self) -> None:
        super().__init__("cart is being modified by another operation")


class StepInvalidError(StorefrontError):
    def __init__(self, step: str, reason: str, missing_fields: list[str] | None = None):
        self.step = step
        self.reason = reason
        self.missing_fields = list(missing_fields or [])
        super().__init__(f"step={step}: {reason}")


class EmptyCartError(StepInvalidError):
    def __init__(self, step: str):
        super().__init__(step, "cannot place an order for an empty cart")


class NoPreviousStepError(StorefrontError):
    def __init__(self, step: str):
        self.step = step
        super().__init__(f"step={step} has no previous step")


class OrderInProgressError(StorefrontError):
    def __init__(self) -> None:
        super().__init__("an order is already being placed")


class PersistenceLoadError(StorefrontError):
    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"failed to load slot={key}: {reason}")


class PersistenceWriteError(StorefrontError):
    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"failed to write slot={key}: {reason}")
