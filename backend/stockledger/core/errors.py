"""
Typed errors raised by the stock ledger.

Every error carries a machine-readable ``code``, the HTTP status the API
layer answers with, and the structured values that produced it, so callers
can branch on the type instead of parsing messages.

    StockLedgerError
    +-- ProductNotFoundError
    +-- TransactionNotFoundError
    +-- UserNotFoundError
    +-- InsufficientStockError
    +-- NegativeStockViolationError
    +-- DuplicateSkuError
    +-- ProductInUseError
    +-- ConcurrentUpdateError
    +-- StoreUnavailableError
"""

from typing import Any


class StockLedgerError(Exception):
    code: str = "STOCK_LEDGER_ERROR"
    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "code": self.code}


class ProductNotFoundError(StockLedgerError):
    code = "PRODUCT_NOT_FOUND"
    status_code = 404

    def __init__(self, product_id: int, message: str = "Product not found") -> None:
        super().__init__(message)
        self.product_id = product_id

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "product_id": self.product_id}


class TransactionNotFoundError(StockLedgerError):
    code = "TRANSACTION_NOT_FOUND"
    status_code = 404

    def __init__(self, transaction_id: int) -> None:
        super().__init__("Transaction not found")
        self.transaction_id = transaction_id

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "transaction_id": self.transaction_id}


class UserNotFoundError(StockLedgerError):
    code = "USER_NOT_FOUND"
    status_code = 404

    def __init__(self, user_id: int) -> None:
        super().__init__("User not found")
        self.user_id = user_id


class InsufficientStockError(StockLedgerError):
    """An output movement asks for more units than the product holds."""

    code = "INSUFFICIENT_STOCK"

    def __init__(self, available: int, requested: int, after_update: bool = False) -> None:
        prefix = "Insufficient stock after update" if after_update else "Insufficient stock"
        super().__init__(f"{prefix}. Available: {available}, Requested: {requested}")
        self.available = available
        self.requested = requested

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "available": self.available, "requested": self.requested}


class NegativeStockViolationError(StockLedgerError):
    """Undoing a movement would leave the product with negative stock."""

    code = "NEGATIVE_STOCK_VIOLATION"

    def __init__(self, resulting_quantity: int, action: str = "delete transaction") -> None:
        super().__init__(f"Cannot {action}: would result in negative stock ({resulting_quantity})")
        self.resulting_quantity = resulting_quantity

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "resulting_quantity": self.resulting_quantity}


class DuplicateSkuError(StockLedgerError):
    code = "DUPLICATE_SKU"
    status_code = 409

    def __init__(self, sku: str) -> None:
        super().__init__(f"SKU {sku} already exists")
        self.sku = sku


class ProductInUseError(StockLedgerError):
    code = "PRODUCT_IN_USE"
    status_code = 409

    def __init__(self, product_id: int, transaction_count: int) -> None:
        super().__init__(
            f"Cannot delete product: {transaction_count} transaction(s) still reference it"
        )
        self.product_id = product_id
        self.transaction_count = transaction_count

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "transaction_count": self.transaction_count}


class ConcurrentUpdateError(StockLedgerError):
    """Another writer changed the same record first; the caller may retry."""

    code = "CONCURRENT_UPDATE"
    status_code = 409

    def __init__(self, message: str = "Stock changed concurrently, retry the operation") -> None:
        super().__init__(message)


class StoreUnavailableError(StockLedgerError):
    code = "STORE_UNAVAILABLE"
    status_code = 503

    def __init__(self, message: str = "Stock ledger store unavailable") -> None:
        super().__init__(message)
