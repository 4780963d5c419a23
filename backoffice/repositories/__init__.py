from .client_profiles import SqlClientDirectory
from .products import SqlProductCatalog
from .promotions import SqlPromotionSource

__all__ = ["SqlClientDirectory", "SqlProductCatalog", "SqlPromotionSource"]
