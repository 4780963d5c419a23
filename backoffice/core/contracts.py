from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, List, Protocol

if TYPE_CHECKING:
    from backoffice.models.client_profile import ClientProfile
    from backoffice.pricing.engine import PromotionTerms


class ProductCatalog(Protocol):
    def get_unit_price(self, product_id: int) -> Decimal:
        """Current catalog price; raises NotFoundError for unknown products."""
        ...


class PromotionSource(Protocol):
    def find_active(self) -> List["PromotionTerms"]: ...


class ClientDirectory(Protocol):
    def get(self, client_id: int) -> "ClientProfile": ...

    def find_by_user_id(self, user_id: str) -> "ClientProfile": ...
