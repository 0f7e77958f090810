"""Entity package: DealParticipant."""

from .entity import DealParticipant, ParticipantStatus
from .repository import DealParticipantRepository
from .table import DealParticipantTable

__all__ = [
    "DealParticipant",
    "DealParticipantRepository",
    "DealParticipantTable",
    "ParticipantStatus",
]
