"""Core services exports."""

# Database Service
from .database.db_session import DbSessionService

# JWT Services
from .jwt.jwt_gen import JwtGeneratorService
from .jwt.jwt_verify import JwtVerificationService

# User Services
from .user.user_provisioning import UserProvisioningService

# Domain Services
from .catalog.catalog_service import CatalogService
from .deal.deal_queries import DealQueryService
from .deal.deal_service import DealParticipationService, ParticipationResult

__all__ = [
    # Database Service
    "DbSessionService",
    # JWT Services
    "JwtGeneratorService",
    "JwtVerificationService",
    # User Services
    "UserProvisioningService",
    # Domain Services
    "CatalogService",
    "DealParticipationService",
    "DealQueryService",
    "ParticipationResult",
]
