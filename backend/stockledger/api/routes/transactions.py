from fastapi import APIRouter, Depends, Query, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from stockledger.api.deps import get_current_user
from stockledger.core.config import get_settings
from stockledger.db.session import get_db
from stockledger.models.transaction import MovementType
from stockledger.models.user import User
from stockledger.schemas.transaction import (
    MessageResponse,
    TransactionCreate,
    TransactionFilter,
    TransactionHistory,
    TransactionPage,
    TransactionRead,
    TransactionUpdate,
)
from stockledger.services.stock_engine import StockMovementEngine
from stockledger.services.transaction_query import TransactionQueryService


router = APIRouter()
settings = get_settings()


@router.get("", response_model=TransactionPage)
def list_transactions(
    type: MovementType | None = Query(None),
    product: int | None = Query(None),
    user: int | None = Query(None),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> TransactionPage:
    try:
        filters = TransactionFilter(
            type=type,
            product_id=product,
            user_id=user,
            start_date=start_date,
            end_date=end_date,
            page=page,
            limit=limit,
        )
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False, include_context=False)) from exc
    return TransactionQueryService(db).list_transactions(filters)


@router.get("/history", response_model=TransactionHistory)
def transaction_history(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> TransactionHistory:
    rows = TransactionQueryService(db).get_transaction_history()
    return TransactionHistory(items=[TransactionRead.model_validate(row) for row in rows], count=len(rows))


@router.get("/{transaction_id}", response_model=TransactionRead)
def get_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> TransactionRead:
    return TransactionRead.model_validate(TransactionQueryService(db).get_transaction(transaction_id))


@router.post("", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
def create_transaction(
    payload: TransactionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> TransactionRead:
    record = StockMovementEngine(db).create_transaction(payload, user_id=current_user.id)
    return TransactionRead.model_validate(record)


@router.put("/{transaction_id}", response_model=TransactionRead)
def update_transaction(
    transaction_id: int,
    payload: TransactionUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> TransactionRead:
    record = StockMovementEngine(db).update_transaction(transaction_id, payload)
    return TransactionRead.model_validate(record)


@router.delete("/{transaction_id}", response_model=MessageResponse)
def delete_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> MessageResponse:
    StockMovementEngine(db).delete_transaction(transaction_id)
    return MessageResponse(message="Transaction deleted successfully")
