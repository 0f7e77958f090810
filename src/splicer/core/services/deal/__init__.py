from .deal_queries import DealQueryService
from .deal_service import DealParticipationService, ParticipationResult

__all__ = ["DealParticipationService", "DealQueryService", "ParticipationResult"]
