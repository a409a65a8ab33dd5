from stockledger.schemas.product import ProductCreate, ProductRead, ProductSummary, ProductUpdate
from stockledger.schemas.transaction import (
    MessageResponse,
    TransactionCreate,
    TransactionFilter,
    TransactionHistory,
    TransactionPage,
    TransactionRead,
    TransactionUpdate,
)
from stockledger.schemas.user import UserCreate, UserRead, UserSummary

__all__ = [
    "MessageResponse",
    "ProductCreate",
    "ProductRead",
    "ProductSummary",
    "ProductUpdate",
    "TransactionCreate",
    "TransactionFilter",
    "TransactionHistory",
    "TransactionPage",
    "TransactionRead",
    "TransactionUpdate",
    "UserCreate",
    "UserRead",
    "UserSummary",
]
