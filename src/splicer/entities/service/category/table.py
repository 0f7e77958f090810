"""Category database table model."""

from sqlmodel import Field

from src.splicer.entities.core._base import EntityTable


class CategoryTable(EntityTable, table=True):
    """Database persistence model for categories."""

    __tablename__ = "categories"

    name: str = Field(unique=True, max_length=255)
    description: str | None = None
    image_url: str | None = None
    is_active: bool = Field(default=True)
