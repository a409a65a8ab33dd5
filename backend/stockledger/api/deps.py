from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from stockledger.core.logging_config import set_request_context
from stockledger.db.session import get_db
from stockledger.models.user import User


def get_current_user(
    db: Session = Depends(get_db),
    x_user_id: int | None = Header(default=None),
) -> User:
    # Identity is asserted by the upstream gateway; this layer only resolves it.
    if x_user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="X-User-Id header required")

    user = db.get(User, x_user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown or inactive user")

    set_request_context(user_id=str(user.id))
    return user
