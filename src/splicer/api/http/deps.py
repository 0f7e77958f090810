"""FastAPI dependency implementations."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, Response

from src.splicer.api.http.app_data import ApplicationDependencies
from src.splicer.api.http.middleware.limiter import rate_limit
from src.splicer.core.services import (
    CatalogService,
    DbSessionService,
    DealParticipationService,
    DealQueryService,
    JwtVerificationService,
    UserProvisioningService,
)
from src.splicer.core.services.database.db_utils import run_in_transaction
from src.splicer.entities.core.user import User


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_database_service(request: Request) -> DbSessionService:
    """Get the database service instance."""
    return get_app_dependencies(request).database_service


def get_jwt_verify_service(request: Request) -> JwtVerificationService:
    """Get the JWT verification service instance."""
    return get_app_dependencies(request).jwt_verify_service


def get_deal_service(request: Request) -> DealParticipationService:
    return get_app_dependencies(request).deal_service


def get_deal_queries(request: Request) -> DealQueryService:
    return get_app_dependencies(request).deal_queries


def get_catalog_service(request: Request) -> CatalogService:
    return get_app_dependencies(request).catalog_service


async def get_current_user(
    request: Request,
    db: DbSessionService = Depends(get_database_service),
    jwt_verify: JwtVerificationService = Depends(get_jwt_verify_service),
) -> User:
    """Authenticate the request using a Bearer token, with JIT user provisioning.

    Missing or invalid tokens are rejected before the database is touched.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing Bearer token")

    token = auth_header.split(" ", 1)[1]
    claims = await jwt_verify.verify_jwt(token)

    user = run_in_transaction(
        db,
        lambda session: UserProvisioningService(session).provision_user_from_claims(
            claims
        ),
        action="load user",
    )

    request.state.claims = claims
    request.state.roles = claims.roles
    request.state.uid = user.id
    request.state.user = user
    return user


def require_role(required_role: str):
    """Create a dependency that requires a specific role for the authenticated user."""

    async def dep(user: User = Depends(get_current_user)) -> User:
        if user.role != required_role:
            raise HTTPException(
                status_code=403, detail=f"Missing required role: {required_role}"
            )
        return user

    return dep


def rate_limited_user(requests: int | None = None, window_ms: int | None = None):
    """Authenticate the caller, then count the request against their own quota."""
    limiter = rate_limit(requests, window_ms)

    async def dep(
        request: Request, response: Response, user: User = Depends(get_current_user)
    ) -> User:
        await limiter(request, response)
        return user

    return dep
