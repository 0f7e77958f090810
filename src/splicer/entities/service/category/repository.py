from sqlalchemy import func
from sqlmodel import Session, select

from src.splicer.entities.core._base import utc_now
from src.splicer.entities.service.category.entity import Category
from src.splicer.entities.service.category.table import CategoryTable
from src.splicer.entities.service.product.table import ProductTable


class CategoryRepository:
    """Data-access layer for categories."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, category_id: str) -> Category | None:
        row = self._session.get(CategoryTable, category_id)
        if row is None:
            return None
        return Category.model_validate(row, from_attributes=True)

    def get_by_name(self, name: str) -> Category | None:
        row = self._session.exec(
            select(CategoryTable).where(CategoryTable.name == name)
        ).first()
        if row is None:
            return None
        return Category.model_validate(row, from_attributes=True)

    def list_all(self, active_only: bool = False) -> list[Category]:
        statement = select(CategoryTable).order_by(CategoryTable.name)
        if active_only:
            statement = statement.where(CategoryTable.is_active == True)  # noqa: E712
        return [
            Category.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def create(self, category: Category) -> Category:
        row = CategoryTable(**category.model_dump())
        self._session.add(row)
        self._session.flush()
        return Category.model_validate(row, from_attributes=True)

    def update(self, category: Category) -> Category:
        row = self._session.get(CategoryTable, category.id)
        if row is None:
            raise ValueError(f"Category {category.id} not found")
        row.name = category.name
        row.description = category.description
        row.image_url = category.image_url
        row.is_active = category.is_active
        row.updated_at = utc_now()
        self._session.add(row)
        self._session.flush()
        return Category.model_validate(row, from_attributes=True)

    def delete(self, category_id: str) -> bool:
        row = self._session.get(CategoryTable, category_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def count_products(self, category_id: str) -> int:
        statement = select(func.count()).select_from(ProductTable).where(
            ProductTable.category_id == category_id
        )
        return int(self._session.exec(statement).one())
