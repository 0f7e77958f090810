"""Entity: GroupDeal."""

from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from pydantic import Field

from src.splicer.entities.core._base import Entity


class DealStatus(StrEnum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class GroupDeal(Entity):
    """A discounted offer on one product that unlocks once enough users join.

    ``current_participants`` and ``current_quantity`` always mirror the count
    and quantity sum of the deal's active participant rows. ``version`` is
    bumped on every counter or status write.
    """

    product_id: str
    title: str
    description: str = ""
    target_participants: int
    target_quantity: int
    current_participants: int = 0
    current_quantity: int = 0
    deal_price: Decimal
    original_price: Decimal
    discount_percentage: Decimal
    start_date: datetime
    end_date: datetime
    status: DealStatus = DealStatus.PENDING
    created_by: str
    version: int = Field(default=1, description="Optimistic concurrency token")

    @property
    def is_threshold_met(self) -> bool:
        return self.current_participants >= self.target_participants
