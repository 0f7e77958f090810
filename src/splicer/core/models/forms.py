"""Input forms for catalog and deal operations.

Bounds come from the ``deals`` section of the configuration so that
deployments can tighten them without code changes. Messages are the ones shown
to end users, keyed per field by :func:`field_errors`.
"""

import uuid
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.splicer.core.deals.pricing import to_money
from src.splicer.runtime.context import get_config

_SOURCES = {"body", "query", "path"}


def _require_uuid(value: str, message: str) -> str:
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        raise ValueError(message) from None


def field_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, list[str]]:
    """Flatten pydantic error dicts into ``{field: [messages]}``.

    Accepts ``ValidationError.errors()`` as well as FastAPI request errors,
    whose locations start with where the value came from (body, query, path).
    """
    result: dict[str, list[str]] = {}
    for error in errors:
        loc = list(error["loc"])
        if loc and loc[0] in _SOURCES:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or "__root__"
        ctx_error = (error.get("ctx") or {}).get("error")
        if error["type"] == "value_error" and ctx_error is not None:
            message = str(ctx_error)
        else:
            message = error["msg"]
        result.setdefault(field, []).append(message)
    return result


class _Form(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class CreateDealForm(_Form):
    product_id: str
    title: str
    description: str | None = None
    target_participants: int
    target_quantity: int | None = None
    discount_percentage: Decimal
    duration_hours: int

    @field_validator("product_id")
    @classmethod
    def _product_id(cls, value: str) -> str:
        return _require_uuid(value, "Please select a valid product.")

    @field_validator("title")
    @classmethod
    def _title(cls, value: str) -> str:
        if not value:
            raise ValueError("Title is required.")
        limit = get_config().deals.max_title_length
        if len(value) > limit:
            raise ValueError(f"Title must be {limit} characters or less.")
        return value

    @field_validator("target_participants")
    @classmethod
    def _target_participants(cls, value: int) -> int:
        rules = get_config().deals
        if value < rules.min_target_participants:
            raise ValueError(f"Minimum {rules.min_target_participants} participants required.")
        if value > rules.max_target_participants:
            raise ValueError(f"Maximum {rules.max_target_participants} participants allowed.")
        return value

    @field_validator("target_quantity")
    @classmethod
    def _target_quantity(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("Target quantity must be at least 1.")
        return value

    @field_validator("discount_percentage")
    @classmethod
    def _discount(cls, value: Decimal) -> Decimal:
        rules = get_config().deals
        if value < rules.min_discount_percentage:
            raise ValueError(f"Discount must be at least {rules.min_discount_percentage}%.")
        if value > rules.max_discount_percentage:
            raise ValueError(f"Discount cannot exceed {rules.max_discount_percentage}%.")
        return value

    @field_validator("duration_hours")
    @classmethod
    def _duration(cls, value: int) -> int:
        rules = get_config().deals
        if value < rules.min_duration_hours:
            raise ValueError("Duration must be at least 1 hour.")
        if value > rules.max_duration_hours:
            raise ValueError(f"Duration cannot exceed {rules.max_duration_hours // 24} days.")
        return value


class JoinDealForm(_Form):
    deal_id: str
    quantity: int = 1
    notes: str | None = None

    @field_validator("deal_id")
    @classmethod
    def _deal_id(cls, value: str) -> str:
        return _require_uuid(value, "Invalid deal ID.")

    @field_validator("quantity")
    @classmethod
    def _quantity(cls, value: int) -> int:
        rules = get_config().deals
        if value < rules.min_quantity:
            raise ValueError(f"Quantity must be at least {rules.min_quantity}.")
        if value > rules.max_quantity:
            raise ValueError(f"Maximum {rules.max_quantity} items per person.")
        return value

    @field_validator("notes")
    @classmethod
    def _notes(cls, value: str | None) -> str | None:
        if not value:
            return None
        limit = get_config().deals.max_notes_length
        if len(value) > limit:
            raise ValueError(f"Notes must be {limit} characters or less.")
        return value


class CategoryForm(_Form):
    name: str
    description: str | None = None
    image_url: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        if not value:
            raise ValueError("Category name is required.")
        if len(value) > 255:
            raise ValueError("Category name is too long.")
        return value


class ProductForm(_Form):
    name: str
    description: str
    category_id: str
    base_price: Decimal
    minimum_quantity: int = 1
    max_participants: int | None = None
    image_urls: list[str] = Field(default_factory=list)
    specifications: dict[str, str] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        if not value:
            raise ValueError("Product name is required.")
        if len(value) > 255:
            raise ValueError("Product name is too long.")
        return value

    @field_validator("description")
    @classmethod
    def _description(cls, value: str) -> str:
        if len(value) < 10:
            raise ValueError("Description must be at least 10 characters.")
        return value

    @field_validator("category_id")
    @classmethod
    def _category_id(cls, value: str) -> str:
        return _require_uuid(value, "Please select a valid category.")

    @field_validator("base_price")
    @classmethod
    def _base_price(cls, value: Decimal) -> Decimal:
        if value <= 0:
            raise ValueError("Please enter a price greater than $0.")
        price = to_money(value)
        if price <= 0:
            raise ValueError("Please enter a price greater than $0.")
        return price

    @field_validator("minimum_quantity")
    @classmethod
    def _minimum_quantity(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Minimum quantity must be at least 1.")
        return value

    @field_validator("max_participants")
    @classmethod
    def _max_participants(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("Max participants must be at least 1.")
        return value

    @field_validator("image_urls")
    @classmethod
    def _image_urls(cls, value: list[str]) -> list[str]:
        return [url.strip() for url in value if url and url.strip()]
