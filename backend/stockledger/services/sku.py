from __future__ import annotations

import secrets

from sqlalchemy import select
from sqlalchemy.orm import Session

from stockledger.models.product import Product


def normalize_sku(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip().upper()
    return cleaned or None


def sku_exists(db: Session, sku: str, exclude_product_id: int | None = None) -> bool:
    stmt = select(Product.id).where(Product.sku == sku)
    if exclude_product_id is not None:
        stmt = stmt.where(Product.id != exclude_product_id)
    return db.scalar(stmt) is not None


def next_sku(db: Session) -> str:
    # Eight upper-case hex characters; collisions are retried a few times.
    for _ in range(5):
        candidate = secrets.token_hex(4).upper()
        if not sku_exists(db, candidate):
            return candidate

    raise ValueError("Could not generate a unique SKU")
