from sqlalchemy import func, select
from sqlalchemy.orm import Session

from stockledger.models.product import Product
from stockledger.models.user import User


def seed_initial_data(db: Session, demo_products: bool = False) -> None:
    user_count = db.scalar(select(func.count(User.id))) or 0
    if user_count == 0:
        db.add(User(email="system@stockledger.local", full_name="Stock Ledger System"))
        db.commit()

    if not demo_products:
        return

    product_count = db.scalar(select(func.count(Product.id))) or 0
    if product_count == 0:
        db.add_all(
            [
                Product(
                    sku="WM-001",
                    name="Wireless Mouse",
                    description="2.4 GHz wireless mouse with USB receiver.",
                    price=24.99,
                    quantity=200,
                    category="Electronics",
                    vendor="Peripheral Supply Co.",
                ),
                Product(
                    sku="KB-001",
                    name="Mechanical Keyboard",
                    description="Full size keyboard with tactile switches.",
                    price=79.0,
                    quantity=40,
                    category="Electronics",
                    vendor="Peripheral Supply Co.",
                ),
            ]
        )
        db.commit()
