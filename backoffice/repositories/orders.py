from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from backoffice.models.order import Order, OrderItem


def _commit(db: Session) -> None:
    # a failed flush leaves the session unusable until rolled back
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def add_order(db: Session, order: Order) -> Order:
    db.add(order)
    _commit(db)
    db.refresh(order)
    return order


def list_orders(db: Session) -> List[Order]:
    return db.query(Order).order_by(Order.id).all()


def get_order_by_id(db: Session, order_id: int) -> Order | None:
    return (
        db.query(Order)
        .options(
            selectinload(Order.client),
            selectinload(Order.items).selectinload(OrderItem.product),
        )
        .filter(Order.id == order_id)
        .first()
    )


def list_orders_for_client(db: Session, client_id: int) -> List[Order]:
    # newest first; id breaks ties between orders stamped in the same instant
    return (
        db.query(Order)
        .options(selectinload(Order.items).selectinload(OrderItem.product))
        .filter(Order.client_id == client_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def save_order(db: Session, order: Order) -> Order:
    _commit(db)
    db.refresh(order)
    return order


def delete_order(db: Session, order: Order) -> None:
    db.delete(order)
    _commit(db)
