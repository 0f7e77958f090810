"""Entity: Category."""

from pydantic import Field

from src.splicer.entities.core._base import Entity


class Category(Entity):
    """Catalog grouping that products belong to."""

    name: str = Field(description="Unique category name")
    description: str | None = Field(default=None)
    image_url: str | None = Field(default=None)
    is_active: bool = Field(default=True)
