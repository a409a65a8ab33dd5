from stockledger.models.product import Product
from stockledger.models.transaction import MovementType, StockTransaction
from stockledger.models.user import User

__all__ = [
    "MovementType",
    "Product",
    "StockTransaction",
    "User",
]
