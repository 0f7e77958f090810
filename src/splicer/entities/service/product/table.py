"""Product database table model."""

from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from src.splicer.entities.core._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products."""

    __tablename__ = "products"
    __table_args__ = (
        sa.CheckConstraint("base_price > 0", name="ck_products_base_price"),
        sa.CheckConstraint("minimum_quantity > 0", name="ck_products_minimum_quantity"),
        sa.CheckConstraint(
            "max_participants IS NULL OR max_participants > 0",
            name="ck_products_max_participants",
        ),
    )

    name: str = Field(max_length=255)
    description: str
    category_id: str = Field(foreign_key="categories.id", index=True)
    base_price: Decimal = Field(max_digits=10, decimal_places=2)
    minimum_quantity: int = Field(default=1)
    max_participants: int | None = None
    image_urls: list[str] = Field(
        default_factory=list, sa_column=sa.Column(sa.JSON, nullable=False)
    )
    specifications: dict[str, str] = Field(
        default_factory=dict, sa_column=sa.Column(sa.JSON, nullable=False)
    )
    is_active: bool = Field(default=True, index=True)
    created_by: str = Field(foreign_key="users.id")
