# backoffice/models/promotion.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.db import Base, UTCDateTime

if TYPE_CHECKING:
    from backoffice.models.product import Product
    from backoffice.pricing.engine import PromotionTerms


promotion_products = Table(
    "promotion_products",
    Base.metadata,
    Column("promotion_id", ForeignKey("promotions.id", ondelete="CASCADE"), primary_key=True),
    Column("product_id", ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
)


class Promotion(Base):
    __tablename__ = "promotions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    # 0..100
    discount_pct: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)

    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    starts_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    ends_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    # empty -> global promotion
    products: Mapped[List["Product"]] = relationship(
        "Product",
        secondary=promotion_products,
        order_by="Product.id",
    )

    def to_terms(self) -> "PromotionTerms":
        from backoffice.pricing.engine import PromotionTerms

        return PromotionTerms.of(
            self.discount_pct,
            product_ids=[p.id for p in self.products],
            promotion_id=self.id,
        )

    def __repr__(self) -> str:
        scope = "global" if not self.products else f"{len(self.products)} products"
        return f"<Promotion id={self.id} {self.discount_pct}% ({scope}) active={self.active}>"
