import math

from sqlalchemy.orm import Session

from stockledger.core.errors import TransactionNotFoundError
from stockledger.models.transaction import StockTransaction
from stockledger.schemas.transaction import TransactionFilter, TransactionPage, TransactionRead
from stockledger.services.ledger_store import LedgerStore


class TransactionQueryService:
    """Read side of the ledger: newest movements first, ties broken by id."""

    def __init__(self, db: Session):
        self.store = LedgerStore(db)

    def list_transactions(self, filters: TransactionFilter) -> TransactionPage:
        rows = self.store.query_transactions(filters, offset=filters.offset, limit=filters.limit)
        total_count = self.store.count_transactions(filters)
        return TransactionPage(
            items=[TransactionRead.model_validate(row) for row in rows],
            count=len(rows),
            total_count=total_count,
            current_page=filters.page,
            total_pages=math.ceil(total_count / filters.limit),
        )

    def get_transaction(self, transaction_id: int) -> StockTransaction:
        record = self.store.get_transaction_details(transaction_id)
        if not record:
            raise TransactionNotFoundError(transaction_id)
        return record

    def get_transaction_history(self) -> list[StockTransaction]:
        return self.store.all_transactions()
