"""Group deal database table model."""

from datetime import datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from src.splicer.entities.core._base import EntityTable


class GroupDealTable(EntityTable, table=True):
    """Database persistence model for group deals.

    Rows are never deleted; deals only move between statuses.
    """

    __tablename__ = "group_deals"
    __table_args__ = (
        sa.CheckConstraint("target_participants > 0", name="ck_deals_target_participants"),
        sa.CheckConstraint(
            "target_quantity IS NULL OR target_quantity > 0",
            name="ck_deals_target_quantity",
        ),
        sa.CheckConstraint("current_participants >= 0", name="ck_deals_current_participants"),
        sa.CheckConstraint("current_quantity >= 0", name="ck_deals_current_quantity"),
        sa.CheckConstraint("deal_price > 0", name="ck_deals_deal_price"),
        sa.CheckConstraint("original_price > 0", name="ck_deals_original_price"),
        sa.CheckConstraint("deal_price < original_price", name="ck_deals_discounted"),
        sa.CheckConstraint(
            "discount_percentage > 0 AND discount_percentage < 100",
            name="ck_deals_discount_percentage",
        ),
        sa.CheckConstraint("end_date > start_date", name="ck_deals_dates"),
        sa.CheckConstraint(
            "status IN ('pending', 'active', 'completed', 'cancelled', 'expired')",
            name="ck_deals_status",
        ),
    )

    product_id: str = Field(foreign_key="products.id", index=True)
    title: str = Field(max_length=255)
    description: str = Field(default="")
    target_participants: int
    target_quantity: int
    current_participants: int = Field(default=0)
    current_quantity: int = Field(default=0)
    deal_price: Decimal = Field(max_digits=10, decimal_places=2)
    original_price: Decimal = Field(max_digits=10, decimal_places=2)
    discount_percentage: Decimal = Field(max_digits=5, decimal_places=2)
    start_date: datetime = Field(sa_type=sa.DateTime(timezone=True))
    end_date: datetime = Field(sa_type=sa.DateTime(timezone=True), index=True)
    status: str = Field(default="pending", index=True)
    created_by: str = Field(foreign_key="users.id", index=True)
    version: int = Field(default=1, nullable=False)
