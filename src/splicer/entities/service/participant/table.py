"""Deal participant database table model."""

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from src.splicer.entities.core._base import EntityTable, utc_now


class DealParticipantTable(EntityTable, table=True):
    """Database persistence model for deal participation."""

    __tablename__ = "deal_participants"
    __table_args__ = (
        sa.UniqueConstraint("deal_id", "user_id", name="uq_deal_participants_deal_user"),
        sa.CheckConstraint("quantity > 0", name="ck_deal_participants_quantity"),
        sa.CheckConstraint(
            "status IN ('active', 'cancelled', 'completed')",
            name="ck_deal_participants_status",
        ),
    )

    deal_id: str = Field(foreign_key="group_deals.id", index=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    quantity: int
    joined_at: datetime = Field(
        default_factory=utc_now, sa_type=sa.DateTime(timezone=True)
    )
    status: str = Field(default="active", index=True)
    notes: str | None = None
