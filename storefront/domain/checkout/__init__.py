from storefront.domain.checkout.machine import (
    ADDRESS_PRESETS,
    CheckoutSnapshot,
    CheckoutStateMachine,
    CheckoutStep,
)

__all__ = ["ADDRESS_PRESETS", "CheckoutSnapshot", "CheckoutStateMachine", "CheckoutStep"]
