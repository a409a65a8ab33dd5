from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stockledger.db.base import Base
from stockledger.models.product import Product, utcnow
from stockledger.models.user import User


class MovementType(str, Enum):
    INPUT = "input"
    OUTPUT = "output"


class StockTransaction(Base):
    __tablename__ = "stock_transactions"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_stock_transactions_quantity_positive"),
        CheckConstraint("type IN ('input', 'output')", name="ck_stock_transactions_type"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    type: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    notes: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Loaded explicitly by the store; never eagerly by default.
    product: Mapped[Product] = relationship(Product, lazy="select")
    user: Mapped[User] = relationship(User, lazy="select")

    __mapper_args__ = {"version_id_col": version}

    def signed_quantity(self) -> int:
        return self.quantity if self.type == MovementType.INPUT.value else -self.quantity
