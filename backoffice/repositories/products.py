from decimal import Decimal

from sqlalchemy.orm import Session

from backoffice.core.errors import NotFoundError
from backoffice.models.product import Product


def get_product_by_id(db: Session, product_id: int) -> Product | None:
    return db.query(Product).filter(Product.id == product_id).first()


class SqlProductCatalog:
    """Product price lookup backed by the products table."""

    def __init__(self, db: Session):
        self.db = db

    def get_unit_price(self, product_id: int) -> Decimal:
        product = get_product_by_id(self.db, product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product.price
