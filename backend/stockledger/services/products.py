from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stockledger.core.errors import DuplicateSkuError, ProductInUseError, ProductNotFoundError
from stockledger.core.logging_config import get_logger
from stockledger.models.product import Product
from stockledger.schemas.product import ProductCreate, ProductUpdate
from stockledger.services.ledger_store import LedgerStore
from stockledger.services.sku import next_sku, normalize_sku, sku_exists


logger = get_logger(__name__)


class ProductService:
    """Product catalog. Stock quantity is set once here and afterwards only by movements."""

    def __init__(self, db: Session):
        self.db = db
        self.store = LedgerStore(db)

    def list_all(self) -> list[Product]:
        return list(self.db.scalars(select(Product).order_by(Product.name.asc(), Product.id.asc())).all())

    def get(self, product_id: int) -> Product:
        product = self.store.find_product(product_id)
        if not product:
            raise ProductNotFoundError(product_id)
        return product

    def create(self, payload: ProductCreate) -> Product:
        sku = normalize_sku(payload.sku)
        with self.store.atomic_scope():
            if sku is None:
                sku = next_sku(self.db)
            elif sku_exists(self.db, sku):
                raise DuplicateSkuError(sku)

            product = Product(
                sku=sku,
                name=payload.name.strip(),
                description=payload.description.strip(),
                price=payload.price,
                quantity=payload.quantity,
                category=payload.category.strip(),
                vendor=payload.vendor.strip(),
            )
            self.db.add(product)
            self._flush_unique(sku)

        logger.info("Product created", extra={"extra_fields": {"product_id": product.id, "sku": sku}})
        return product

    def update(self, product_id: int, payload: ProductUpdate) -> Product:
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        with self.store.atomic_scope():
            product = self.store.find_product(product_id, lock=True)
            if not product:
                raise ProductNotFoundError(product_id)

            if "sku" in changes:
                sku = normalize_sku(changes.pop("sku"))
                if sku and sku != product.sku:
                    if sku_exists(self.db, sku, exclude_product_id=product.id):
                        raise DuplicateSkuError(sku)
                    product.sku = sku
            for field, value in changes.items():
                setattr(product, field, value.strip() if isinstance(value, str) else value)
            self._flush_unique(product.sku)

        return product

    def delete(self, product_id: int) -> None:
        with self.store.atomic_scope():
            product = self.store.find_product(product_id, lock=True)
            if not product:
                raise ProductNotFoundError(product_id)

            referencing = self.store.count_product_transactions(product_id)
            if referencing:
                raise ProductInUseError(product_id, referencing)
            self.db.delete(product)
            self.db.flush()

        logger.info("Product deleted", extra={"extra_fields": {"product_id": product_id}})

    def _flush_unique(self, sku: str) -> None:
        try:
            self.db.flush()
        except IntegrityError as exc:
            raise DuplicateSkuError(sku) from exc
