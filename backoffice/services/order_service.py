# backoffice/services/order_service.py
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from backoffice.core.contracts import ClientDirectory, ProductCatalog, PromotionSource
from backoffice.core.errors import NotFoundError
from backoffice.core.logging_config import logger
from backoffice.models.order import Order, OrderItem
from backoffice.pricing.engine import LineItemRequest, price_order
from backoffice.repositories import orders as order_repo
from backoffice.repositories.client_profiles import SqlClientDirectory
from backoffice.repositories.products import SqlProductCatalog
from backoffice.repositories.promotions import SqlPromotionSource
from backoffice.schemas.order import OrderCreate, OrderUpdate

D = Decimal
CENT = D("0.01")

NON_NULLABLE_UPDATE_FIELDS = ("delivery_address", "total")


def to_cents(x: D) -> D:
    return x.quantize(CENT, rounding=ROUND_HALF_UP)


class OrderService:
    """
    Order placement and order management.

    Collaborators (catalog, promotions, client directory) default to the
    SQL-backed implementations on the same session; tests swap in fakes.
    """

    def __init__(
        self,
        db: Session,
        catalog: Optional[ProductCatalog] = None,
        promotions: Optional[PromotionSource] = None,
        clients: Optional[ClientDirectory] = None,
    ):
        self.db = db
        self.catalog = catalog or SqlProductCatalog(db)
        self.promotions = promotions or SqlPromotionSource(db)
        self.clients = clients or SqlClientDirectory(db)

    def _resolve_client_id(self, payload: OrderCreate, user_id: str) -> int:
        # explicit client (privileged caller) wins over the requester's own profile
        if payload.client_id is not None:
            return self.clients.get(payload.client_id).id
        return self.clients.find_by_user_id(user_id).id

    def create(self, payload: OrderCreate, user_id: str) -> Order:
        client_id = self._resolve_client_id(payload, user_id)

        lines = [LineItemRequest(product_id=it.product_id, quantity=it.quantity) for it in payload.items]
        pricing = price_order(lines, self.catalog, self.promotions.find_active())

        order = Order(
            client_id=client_id,
            total=to_cents(pricing.total),
            delivery_address=payload.delivery_address,
            delivery_notes=payload.delivery_notes,
            items=[
                OrderItem(
                    product_id=it.product_id,
                    quantity=it.quantity,
                    unit_price=to_cents(it.unit_price),
                )
                for it in pricing.items
            ],
        )
        order = order_repo.add_order(self.db, order)

        logger.bind(
            order_id=order.id,
            client_id=client_id,
            user_id=user_id,
            line_count=len(pricing.items),
            subtotal=str(pricing.subtotal),
            discount=str(pricing.discount),
            promotions_applied=[a.promotion_id for a in pricing.applied],
            total=str(order.total),
        ).info("order_created")
        return order

    def find_all(self) -> List[Order]:
        return order_repo.list_orders(self.db)

    def find_one(self, order_id: int) -> Order:
        order = order_repo.get_order_by_id(self.db, order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        return order

    def find_by_client(self, client_id: int) -> List[Order]:
        return order_repo.list_orders_for_client(self.db, client_id)

    def find_my_orders(self, user_id: str) -> List[Order]:
        profile = self.clients.find_by_user_id(user_id)
        return self.find_by_client(profile.id)

    def update(self, order_id: int, payload: OrderUpdate) -> Order:
        order = self.find_one(order_id)

        changes = payload.model_dump(exclude_unset=True)
        # notes may be cleared; address and total are required columns
        for key in NON_NULLABLE_UPDATE_FIELDS:
            if key in changes and changes[key] is None:
                del changes[key]
        if "total" in changes:
            changes["total"] = to_cents(D(str(changes["total"])))
        for key, value in changes.items():
            setattr(order, key, value)

        order = order_repo.save_order(self.db, order)
        logger.bind(order_id=order.id, fields=sorted(changes)).info("order_updated")
        return order

    def remove(self, order_id: int) -> None:
        order = self.find_one(order_id)
        order_repo.delete_order(self.db, order)
        logger.bind(order_id=order_id).info("order_deleted")
