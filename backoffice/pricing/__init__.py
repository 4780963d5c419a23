from .engine import (
    AppliedDiscount,
    LineItemRequest,
    PricedLineItem,
    PricingResult,
    PromotionTerms,
    apply_promotions,
    price_lines,
    price_order,
    subtotal_of,
)

__all__ = [
    "AppliedDiscount",
    "LineItemRequest",
    "PricedLineItem",
    "PricingResult",
    "PromotionTerms",
    "apply_promotions",
    "price_lines",
    "price_order",
    "subtotal_of",
]
