# SQLAlchemy models for the back-office

from .client_profile import ClientProfile
from .order import Order, OrderItem
from .product import Product
from .promotion import Promotion, promotion_products

__all__ = [
    "ClientProfile",
    "Order",
    "OrderItem",
    "Product",
    "Promotion",
    "promotion_products",
]
