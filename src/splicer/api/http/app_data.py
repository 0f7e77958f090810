from dataclasses import dataclass

from src.splicer.core.services import (
    CatalogService,
    DbSessionService,
    DealParticipationService,
    DealQueryService,
    JwtGeneratorService,
    JwtVerificationService,
)


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    jwt_verify_service: JwtVerificationService
    jwt_generation_service: JwtGeneratorService
    deal_service: DealParticipationService
    deal_queries: DealQueryService
    catalog_service: CatalogService

    @classmethod
    def build(cls, database_service: DbSessionService) -> "ApplicationDependencies":
        """Wire every service onto one database service."""
        return cls(
            database_service=database_service,
            jwt_verify_service=JwtVerificationService(),
            jwt_generation_service=JwtGeneratorService(),
            deal_service=DealParticipationService(database_service),
            deal_queries=DealQueryService(database_service),
            catalog_service=CatalogService(database_service),
        )
