"""
Session-backed storage for products and stock transactions.

Every mutating path runs inside :meth:`LedgerStore.atomic_scope`: writes are
flushed as they happen but only become visible to other sessions on commit,
and any exception raised inside the scope rolls all of them back.

Same-product writers are serialized two ways. ``lock=True`` lookups issue
``SELECT ... FOR UPDATE`` (a no-op on SQLite), and both tables carry a
SQLAlchemy version counter, so a writer holding a stale balance fails its
``UPDATE ... WHERE version = ?`` instead of overwriting a newer one.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.orm.exc import StaleDataError

from stockledger.core.errors import ConcurrentUpdateError, StoreUnavailableError
from stockledger.core.logging_config import get_logger
from stockledger.models.product import Product, utcnow
from stockledger.models.transaction import StockTransaction
from stockledger.models.user import User
from stockledger.schemas.transaction import TransactionFilter


logger = get_logger(__name__)


class LedgerStore:
    def __init__(self, db: Session):
        self.db = db
        self._in_scope = False

    @contextmanager
    def atomic_scope(self) -> Iterator["LedgerStore"]:
        if self._in_scope:
            raise RuntimeError("Atomic scopes do not nest")
        self._in_scope = True
        try:
            yield self
            self.db.commit()
        except StaleDataError as exc:
            self.db.rollback()
            logger.warning("Concurrent stock update detected, scope rolled back")
            raise ConcurrentUpdateError() from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Store failure, scope rolled back", exc_info=True)
            raise StoreUnavailableError() from exc
        except BaseException:
            self.db.rollback()
            raise
        finally:
            self._in_scope = False

    def find_product(self, product_id: int, lock: bool = False) -> Product | None:
        stmt = select(Product).where(Product.id == product_id)
        if lock:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.scalar(stmt)

    def find_products_locked(self, product_ids: list[int]) -> dict[int, Product]:
        # Ascending id order keeps two multi-row lockers from deadlocking.
        stmt = (
            select(Product)
            .where(Product.id.in_(product_ids))
            .order_by(Product.id.asc())
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return {product.id: product for product in self.db.scalars(stmt).all()}

    def find_transaction(self, transaction_id: int, lock: bool = False) -> StockTransaction | None:
        stmt = select(StockTransaction).where(StockTransaction.id == transaction_id)
        if lock:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.scalar(stmt)

    def find_user(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def insert_transaction(self, record: StockTransaction) -> StockTransaction:
        self.db.add(record)
        self.db.flush()
        return record

    def update_product_quantity(self, product: Product, new_quantity: int) -> Product:
        product.quantity = new_quantity
        self.db.flush()
        return product

    def update_transaction(self, record: StockTransaction, patch: dict) -> StockTransaction:
        for field, value in patch.items():
            setattr(record, field, value)
        # Always bumped, even when the patch repeats the stored values.
        record.updated_at = utcnow()
        self.db.flush()
        return record

    def delete_transaction(self, record: StockTransaction) -> None:
        self.db.delete(record)
        self.db.flush()

    def count_product_transactions(self, product_id: int) -> int:
        stmt = select(func.count(StockTransaction.id)).where(StockTransaction.product_id == product_id)
        return self.db.scalar(stmt) or 0

    def get_transaction_details(self, transaction_id: int) -> StockTransaction | None:
        stmt = self._with_details(select(StockTransaction)).where(StockTransaction.id == transaction_id)
        return self.db.scalar(stmt)

    def query_transactions(self, filters: TransactionFilter, offset: int, limit: int) -> list[StockTransaction]:
        stmt = self._with_details(self._apply_filters(select(StockTransaction), filters))
        stmt = self._newest_first(stmt).offset(offset).limit(limit)
        return list(self.db.scalars(stmt).all())

    def count_transactions(self, filters: TransactionFilter) -> int:
        stmt = self._apply_filters(select(func.count(StockTransaction.id)), filters)
        return self.db.scalar(stmt) or 0

    def all_transactions(self) -> list[StockTransaction]:
        stmt = self._newest_first(self._with_details(select(StockTransaction)))
        return list(self.db.scalars(stmt).all())

    @staticmethod
    def _apply_filters(stmt: Select, filters: TransactionFilter) -> Select:
        if filters.type is not None:
            stmt = stmt.where(StockTransaction.type == filters.type.value)
        if filters.product_id is not None:
            stmt = stmt.where(StockTransaction.product_id == filters.product_id)
        if filters.user_id is not None:
            stmt = stmt.where(StockTransaction.user_id == filters.user_id)
        if filters.start_date is not None:
            stmt = stmt.where(StockTransaction.date >= filters.start_date)
        if filters.end_date is not None:
            stmt = stmt.where(StockTransaction.date <= filters.end_date)
        return stmt

    @staticmethod
    def _with_details(stmt: Select) -> Select:
        return stmt.options(joinedload(StockTransaction.product), joinedload(StockTransaction.user))

    @staticmethod
    def _newest_first(stmt: Select) -> Select:
        return stmt.order_by(StockTransaction.date.desc(), StockTransaction.id.desc())
