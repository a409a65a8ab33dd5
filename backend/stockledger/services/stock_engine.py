from sqlalchemy.orm import Session

from stockledger.core.errors import (
    InsufficientStockError,
    NegativeStockViolationError,
    ProductNotFoundError,
    StockLedgerError,
    TransactionNotFoundError,
    UserNotFoundError,
)
from stockledger.core.logging_config import get_logger
from stockledger.models.product import Product
from stockledger.models.transaction import MovementType, StockTransaction
from stockledger.schemas.transaction import TransactionCreate, TransactionUpdate
from stockledger.services.ledger_store import LedgerStore


logger = get_logger(__name__)


def apply_movement(quantity: int, movement_type: str, amount: int) -> int:
    if movement_type == MovementType.INPUT.value:
        return quantity + amount
    return quantity - amount


def revert_movement(quantity: int, movement_type: str, amount: int) -> int:
    if movement_type == MovementType.INPUT.value:
        return quantity - amount
    return quantity + amount


class StockMovementEngine:
    """
    The only writer of ``Product.quantity`` after a product is created.

    Each operation runs in one atomic scope: the transaction row and the
    product balance are committed together or not at all, and every stock
    check happens before the first write.
    """

    def __init__(self, db: Session):
        self.store = LedgerStore(db)

    def create_transaction(self, payload: TransactionCreate, user_id: int) -> StockTransaction:
        movement_type = payload.type.value
        try:
            with self.store.atomic_scope() as scope:
                product = scope.find_product(payload.product_id, lock=True)
                if not product:
                    raise ProductNotFoundError(payload.product_id)
                user = scope.find_user(user_id)
                if not user:
                    raise UserNotFoundError(user_id)

                if movement_type == MovementType.OUTPUT.value and product.quantity < payload.quantity:
                    raise InsufficientStockError(available=product.quantity, requested=payload.quantity)

                new_quantity = apply_movement(product.quantity, movement_type, payload.quantity)
                record = StockTransaction(
                    type=movement_type,
                    product=product,
                    quantity=payload.quantity,
                    user=user,
                    notes=payload.notes,
                )
                if payload.date:
                    record.date = payload.date
                scope.insert_transaction(record)
                scope.update_product_quantity(product, new_quantity)
        except StockLedgerError as exc:
            self._log_rejected("create", exc, product_id=payload.product_id)
            raise

        logger.info(
            "Stock transaction created",
            extra={
                "extra_fields": {
                    "transaction_id": record.id,
                    "product_id": product.id,
                    "type": movement_type,
                    "quantity": record.quantity,
                    "new_quantity": product.quantity,
                }
            },
        )
        return record

    def update_transaction(self, transaction_id: int, payload: TransactionUpdate) -> StockTransaction:
        try:
            with self.store.atomic_scope() as scope:
                record = scope.find_transaction(transaction_id, lock=True)
                if not record:
                    raise TransactionNotFoundError(transaction_id)

                target_id = payload.product_id if payload.product_id is not None else record.product_id
                effective_type = payload.type.value if payload.type else record.type
                effective_quantity = payload.quantity if payload.quantity is not None else record.quantity

                if target_id == record.product_id:
                    product = scope.find_product(target_id, lock=True)
                    if not product:
                        raise ProductNotFoundError(target_id)
                    self._rebalance_same_product(scope, record, product, effective_type, effective_quantity)
                else:
                    product = self._move_between_products(
                        scope, record, target_id, effective_type, effective_quantity
                    )

                patch = {"type": effective_type, "product": product, "quantity": effective_quantity}
                if payload.notes is not None:
                    patch["notes"] = payload.notes
                scope.update_transaction(record, patch)
        except StockLedgerError as exc:
            self._log_rejected("update", exc, transaction_id=transaction_id)
            raise

        logger.info(
            "Stock transaction updated",
            extra={
                "extra_fields": {
                    "transaction_id": record.id,
                    "product_id": record.product_id,
                    "type": record.type,
                    "quantity": record.quantity,
                }
            },
        )
        return record

    def delete_transaction(self, transaction_id: int) -> None:
        try:
            with self.store.atomic_scope() as scope:
                record = scope.find_transaction(transaction_id, lock=True)
                if not record:
                    raise TransactionNotFoundError(transaction_id)

                product = scope.find_product(record.product_id, lock=True)
                if not product:
                    raise ProductNotFoundError(record.product_id, "Associated product not found")

                reverted = revert_movement(product.quantity, record.type, record.quantity)
                if reverted < 0:
                    raise NegativeStockViolationError(reverted)

                scope.delete_transaction(record)
                scope.update_product_quantity(product, reverted)
        except StockLedgerError as exc:
            self._log_rejected("delete", exc, transaction_id=transaction_id)
            raise

        logger.info(
            "Stock transaction deleted",
            extra={
                "extra_fields": {
                    "transaction_id": transaction_id,
                    "product_id": product.id,
                    "new_quantity": reverted,
                }
            },
        )

    @staticmethod
    def _rebalance_same_product(
        scope: LedgerStore,
        record: StockTransaction,
        product: Product,
        effective_type: str,
        effective_quantity: int,
    ) -> None:
        reverted = revert_movement(product.quantity, record.type, record.quantity)
        new_quantity = apply_movement(reverted, effective_type, effective_quantity)
        if new_quantity < 0:
            raise InsufficientStockError(available=reverted, requested=effective_quantity, after_update=True)
        scope.update_product_quantity(product, new_quantity)

    @staticmethod
    def _move_between_products(
        scope: LedgerStore,
        record: StockTransaction,
        target_id: int,
        effective_type: str,
        effective_quantity: int,
    ) -> Product:
        # The original effect is undone on the original product and the new
        # effect applied to the target: two separate balance adjustments.
        products = scope.find_products_locked([record.product_id, target_id])
        target = products.get(target_id)
        if not target:
            raise ProductNotFoundError(target_id)
        original = products.get(record.product_id)
        if not original:
            raise ProductNotFoundError(record.product_id, "Associated product not found")

        reverted = revert_movement(original.quantity, record.type, record.quantity)
        if reverted < 0:
            raise NegativeStockViolationError(reverted, action="move transaction")
        new_quantity = apply_movement(target.quantity, effective_type, effective_quantity)
        if new_quantity < 0:
            raise InsufficientStockError(
                available=target.quantity, requested=effective_quantity, after_update=True
            )

        scope.update_product_quantity(original, reverted)
        scope.update_product_quantity(target, new_quantity)
        return target

    @staticmethod
    def _log_rejected(operation: str, exc: StockLedgerError, **fields) -> None:
        logger.warning(
            f"Stock transaction {operation} rejected: {exc.message}",
            extra={"extra_fields": {"operation": operation, "code": exc.code, **fields}},
        )
