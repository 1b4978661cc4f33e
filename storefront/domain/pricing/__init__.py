from storefront.domain.pricing.engine import PriceBreakdown, PricingEngine

__all__ = ["PriceBreakdown", "PricingEngine"]
