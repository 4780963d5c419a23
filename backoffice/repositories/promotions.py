from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from backoffice.db import to_utc
from backoffice.models.promotion import Promotion
from backoffice.pricing.engine import PromotionTerms


def list_active_promotions(db: Session, now: Optional[datetime] = None) -> List[Promotion]:
    """
    Promotions flagged active whose validity window contains `now`.
    Missing bounds are open. Returned in creation (id) order, which is
    the order the pricing engine applies them in.
    """
    now = to_utc(now) if now is not None else datetime.now(timezone.utc)
    return (
        db.query(Promotion)
        .options(selectinload(Promotion.products))
        .filter(Promotion.active.is_(True))
        .filter(or_(Promotion.starts_at.is_(None), Promotion.starts_at <= now))
        .filter(or_(Promotion.ends_at.is_(None), Promotion.ends_at >= now))
        .order_by(Promotion.id)
        .all()
    )


class SqlPromotionSource:
    def __init__(self, db: Session, now: Optional[datetime] = None):
        self.db = db
        # pinned clock for tests; None -> wall clock per lookup
        self.now = now

    def find_active(self) -> List[PromotionTerms]:
        return [p.to_terms() for p in list_active_promotions(self.db, now=self.now)]
