"""Entity: DealParticipant."""

from datetime import datetime
from enum import StrEnum

from pydantic import Field

from src.splicer.entities.core._base import Entity, utc_now


class ParticipantStatus(StrEnum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class DealParticipant(Entity):
    """Join record between a user and a deal, unique per (deal, user).

    Leaving flips the row to ``cancelled``; joining again reactivates the same
    row instead of inserting a second one.
    """

    deal_id: str
    user_id: str
    quantity: int
    joined_at: datetime = Field(default_factory=utc_now)
    status: ParticipantStatus = ParticipantStatus.ACTIVE
    notes: str | None = None
