from sqlalchemy import func
from sqlmodel import Session, select

from src.splicer.entities.core._base import utc_now
from src.splicer.entities.service.deal.table import GroupDealTable
from src.splicer.entities.service.product.entity import Product
from src.splicer.entities.service.product.table import ProductTable


class ProductRepository:
    """Data-access layer for products."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, product_id: str) -> Product | None:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None
        return Product.model_validate(row, from_attributes=True)

    def get_active(self, product_id: str) -> Product | None:
        product = self.get(product_id)
        if product is None or not product.is_active:
            return None
        return product

    def get_many(self, product_ids: list[str]) -> dict[str, Product]:
        if not product_ids:
            return {}
        statement = select(ProductTable).where(ProductTable.id.in_(product_ids))  # type: ignore[union-attr]
        return {
            row.id: Product.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        }

    def list_all(
        self, active_only: bool = False, category_id: str | None = None
    ) -> list[Product]:
        statement = select(ProductTable).order_by(ProductTable.name)
        if active_only:
            statement = statement.where(ProductTable.is_active == True)  # noqa: E712
        if category_id:
            statement = statement.where(ProductTable.category_id == category_id)
        return [
            Product.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def create(self, product: Product) -> Product:
        row = ProductTable(**product.model_dump())
        self._session.add(row)
        self._session.flush()
        return Product.model_validate(row, from_attributes=True)

    def update(self, product: Product) -> Product:
        row = self._session.get(ProductTable, product.id)
        if row is None:
            raise ValueError(f"Product {product.id} not found")
        for field in (
            "name",
            "description",
            "category_id",
            "base_price",
            "minimum_quantity",
            "max_participants",
            "image_urls",
            "specifications",
            "is_active",
        ):
            setattr(row, field, getattr(product, field))
        row.updated_at = utc_now()
        self._session.add(row)
        self._session.flush()
        return Product.model_validate(row, from_attributes=True)

    def delete(self, product_id: str) -> bool:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def count_deals(self, product_id: str) -> int:
        statement = select(func.count()).select_from(GroupDealTable).where(
            GroupDealTable.product_id == product_id
        )
        return int(self._session.exec(statement).one())
