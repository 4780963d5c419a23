from .order import (
    ClientSummary,
    OrderCreate,
    OrderItemCreate,
    OrderItemRead,
    OrderRead,
    OrderUpdate,
    ProductSummary,
)

__all__ = [
    "ClientSummary",
    "OrderCreate",
    "OrderItemCreate",
    "OrderItemRead",
    "OrderRead",
    "OrderUpdate",
    "ProductSummary",
]
