# backoffice/schemas/order.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OrderItemCreate(BaseModel):
    product_id: int = Field(..., description="Product identifier")
    quantity: int = Field(..., gt=0, description="Requested quantity")


class OrderCreate(BaseModel):
    """Payload for placing an order"""
    client_id: Optional[int] = Field(
        None, description="Client profile id; only privileged callers set this"
    )
    items: List[OrderItemCreate] = Field(..., min_length=1, description="Requested line items")
    delivery_address: str = Field(..., min_length=1, max_length=300, description="Delivery address")
    delivery_notes: Optional[str] = Field(None, description="Notes for the courier")


class OrderUpdate(BaseModel):
    """Partial update; the total only changes when it is passed explicitly"""
    delivery_address: Optional[str] = Field(None, min_length=1, max_length=300)
    delivery_notes: Optional[str] = None
    total: Optional[Decimal] = Field(None, ge=0)


class ClientSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: Optional[str] = None


class ProductSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: Decimal
    image: Optional[str] = None


class OrderItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: int
    quantity: int
    unit_price: Decimal
    product: Optional[ProductSummary] = None


class OrderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: int
    client: Optional[ClientSummary] = None
    items: List[OrderItemRead]
    total: Decimal
    delivery_address: str
    delivery_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @property
    def calculated_subtotal(self) -> Decimal:
        """Sum of the snapshotted line prices, before promotions"""
        return sum((it.unit_price * it.quantity for it in self.items), Decimal("0"))
