"""Entity: Product."""

from decimal import Decimal

from pydantic import Field

from src.splicer.entities.core._base import Entity


class Product(Entity):
    """Catalog item that group deals are opened on.

    ``max_participants`` caps how many users may join any single deal on this
    product; ``None`` means uncapped.
    """

    name: str
    description: str
    category_id: str
    base_price: Decimal = Field(description="List price before any deal discount")
    minimum_quantity: int = Field(default=1)
    max_participants: int | None = Field(default=None)
    image_urls: list[str] = Field(default_factory=list)
    specifications: dict[str, str] = Field(default_factory=dict)
    is_active: bool = Field(default=True)
    created_by: str
