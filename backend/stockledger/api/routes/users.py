from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from stockledger.db.session import get_db
from stockledger.models.user import User
from stockledger.schemas.user import UserCreate, UserRead


router = APIRouter()


@router.get("", response_model=list[UserRead])
def list_users(db: Session = Depends(get_db)) -> list[UserRead]:
    rows = db.scalars(select(User).order_by(User.id.asc())).all()
    return [UserRead.model_validate(row) for row in rows]


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db)) -> UserRead:
    email = payload.email.strip().lower()
    if db.scalar(select(User).where(User.email == email)):
        raise HTTPException(status_code=409, detail="Email already registered")

    user = User(email=email, full_name=payload.full_name.strip())
    db.add(user)
    db.commit()
    db.refresh(user)
    return UserRead.model_validate(user)
