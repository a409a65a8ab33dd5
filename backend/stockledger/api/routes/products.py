from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from stockledger.api.deps import get_current_user
from stockledger.db.session import get_db
from stockledger.models.user import User
from stockledger.schemas.product import ProductCreate, ProductRead, ProductUpdate
from stockledger.schemas.transaction import MessageResponse
from stockledger.services.products import ProductService


router = APIRouter()


@router.get("", response_model=list[ProductRead])
def list_products(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> list[ProductRead]:
    return [ProductRead.model_validate(row) for row in ProductService(db).list_all()]


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> ProductRead:
    return ProductRead.model_validate(ProductService(db).get(product_id))


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> ProductRead:
    try:
        product = ProductService(db).create(payload)
    except ValueError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return ProductRead.model_validate(product)


@router.put("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> ProductRead:
    return ProductRead.model_validate(ProductService(db).update(product_id, payload))


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> MessageResponse:
    ProductService(db).delete(product_id)
    return MessageResponse(message="Product deleted successfully")
