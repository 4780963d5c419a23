from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, FrozenSet, Iterable, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from backoffice.core.contracts import ProductCatalog

D = Decimal

ZERO = D("0")
HUNDRED = D("100")

SCOPE_PRODUCT = "PRODUCT"
SCOPE_GLOBAL = "GLOBAL"


def _dec(x: Any) -> D:
    # via str() so floats coming from a driver don't drag binary noise along
    return x if isinstance(x, D) else D(str(x))


@dataclass(frozen=True)
class LineItemRequest:
    product_id: int
    quantity: int


@dataclass(frozen=True)
class PricedLineItem:
    """A requested line with the catalog price frozen at pricing time."""

    product_id: int
    quantity: int
    unit_price: D

    @property
    def line_total(self) -> D:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class PromotionTerms:
    """
    Discount terms of one active promotion.
    Empty product_ids means the promotion is global (whole running total).
    """

    discount_pct: D
    product_ids: FrozenSet[int] = frozenset()
    promotion_id: Optional[int] = None

    @property
    def is_global(self) -> bool:
        return not self.product_ids

    @staticmethod
    def of(
        discount_pct: Any,
        product_ids: Optional[Iterable[int]] = None,
        promotion_id: Optional[int] = None,
    ) -> "PromotionTerms":
        return PromotionTerms(
            discount_pct=_dec(discount_pct),
            product_ids=frozenset(int(p) for p in (product_ids or ())),
            promotion_id=promotion_id,
        )


@dataclass(frozen=True)
class AppliedDiscount:
    promotion_id: Optional[int]
    scope: str  # PRODUCT | GLOBAL
    pct: D
    amount: D
    total_after: D


@dataclass(frozen=True)
class PricingResult:
    items: List[PricedLineItem]
    subtotal: D
    total: D
    applied: List[AppliedDiscount] = field(default_factory=list)

    @property
    def discount(self) -> D:
        return self.subtotal - self.total


def price_lines(lines: Iterable[LineItemRequest], catalog: "ProductCatalog") -> List[PricedLineItem]:
    """
    Resolve the current unit price of every requested line.
    The first unknown product aborts the whole computation (NotFoundError from the catalog).
    """
    return [
        PricedLineItem(
            product_id=line.product_id,
            quantity=line.quantity,
            unit_price=_dec(catalog.get_unit_price(line.product_id)),
        )
        for line in lines
    ]


def subtotal_of(items: Iterable[PricedLineItem]) -> D:
    return sum((it.line_total for it in items), ZERO)


def apply_promotions(
    items: Sequence[PricedLineItem],
    subtotal: D,
    promotions: Iterable[PromotionTerms],
) -> Tuple[D, List[AppliedDiscount]]:
    """
    Fold the promotions over the running total, in the order given.

    - targeted promotion: subtract unit_price * pct/100 * qty for each matching line
    - global promotion: subtract pct/100 of the *current* running total,
      so globals compound on whatever earlier promotions left over

    The result is clamped at zero.
    """
    total = _dec(subtotal)
    applied: List[AppliedDiscount] = []

    for promo in promotions:
        rate = promo.discount_pct / HUNDRED

        if promo.is_global:
            amount = total * rate
            scope = SCOPE_GLOBAL
        else:
            matching = [it for it in items if it.product_id in promo.product_ids]
            if not matching:
                continue
            amount = sum((it.unit_price * rate * it.quantity for it in matching), ZERO)
            scope = SCOPE_PRODUCT

        total -= amount
        applied.append(
            AppliedDiscount(
                promotion_id=promo.promotion_id,
                scope=scope,
                pct=promo.discount_pct,
                amount=amount,
                total_after=total,
            )
        )

    return max(total, ZERO), applied


def price_order(
    lines: Iterable[LineItemRequest],
    catalog: "ProductCatalog",
    promotions: Iterable[PromotionTerms],
) -> PricingResult:
    items = price_lines(lines, catalog)
    subtotal = subtotal_of(items)
    total, applied = apply_promotions(items, subtotal, promotions)
    return PricingResult(items=items, subtotal=subtotal, total=total, applied=applied)
