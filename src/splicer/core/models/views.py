"""Read models returned by the deal query service."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from src.splicer.entities.service.deal.entity import DealStatus, GroupDeal
from src.splicer.entities.service.participant.entity import ParticipantStatus


class DealView(BaseModel):
    """A deal together with the status readers should see right now."""

    deal: GroupDeal
    effective_status: DealStatus
    product_name: str | None = None
    creator_name: str | None = None

    @property
    def is_expired(self) -> bool:
        return self.effective_status == DealStatus.EXPIRED


class DealStats(BaseModel):
    deal_id: str
    total_participants: int
    total_quantity: int
    completion_percentage: Decimal = Field(description="Participants vs. target, 0-100+")
    hours_remaining: int
    is_threshold_met: bool
    projected_savings: Decimal = Field(
        description="Total saved by all active participants at the deal price"
    )


class ParticipantView(BaseModel):
    id: str
    user_id: str
    user_name: str
    quantity: int
    joined_at: datetime
    status: ParticipantStatus
    notes: str | None = None


class UserParticipationView(BaseModel):
    """One of a user's participations with enough of the deal to render it."""

    participation_id: str
    deal_id: str
    deal_title: str
    deal_status: DealStatus
    quantity: int
    status: ParticipantStatus
    joined_at: datetime
    deal_price: Decimal
    original_price: Decimal
    savings: Decimal
    end_date: datetime


class UserDealStats(BaseModel):
    total_participations: int = 0
    active_participations: int = 0
    completed_participations: int = 0
    cancelled_participations: int = 0
    total_savings: Decimal = Field(
        default=Decimal("0.00"), description="Savings on completed participations"
    )
    total_active_quantity: int = 0
