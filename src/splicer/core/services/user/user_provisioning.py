from loguru import logger
from sqlmodel import Session

from src.splicer.core.models.claims import TokenClaims
from src.splicer.entities.core.user.entity import User, UserRole
from src.splicer.entities.core.user.repository import UserRepository


def _fallback_name(claims: TokenClaims) -> str:
    if claims.email and "@" in claims.email:
        name_part = claims.email.split("@")[0]
        return name_part.replace(".", " ").replace("_", " ").title()
    return f"User {claims.subject[-8:]}"


class UserProvisioningService:
    """Just-in-time user provisioning from verified bearer token claims.

    The first request carrying a new (issuer, subject) pair creates the user.
    Later requests refresh the profile. A token that carries a roles claim is
    authoritative for the role; a token without one leaves the stored role
    alone. The caller owns the transaction.
    """

    def __init__(self, db_session: Session):
        self._user_repo = UserRepository(db_session)

    def provision_user_from_claims(self, claims: TokenClaims) -> User:
        if not claims.issuer or not claims.subject:
            raise ValueError("Missing required iss or sub claims")

        role = UserRole.ADMIN if claims.is_admin else UserRole.USER
        user = self._user_repo.get_by_issuer_subject(claims.issuer, claims.subject)

        if user is None:
            user = self._user_repo.create(
                User(
                    name=claims.name or _fallback_name(claims),
                    email=claims.email,
                    role=role,
                    issuer=claims.issuer,
                    subject=claims.subject,
                )
            )
            logger.info("Provisioned user {} for subject {}", user.id, claims.subject)
            return user

        changes: dict = {}
        if claims.email and claims.email != user.email:
            changes["email"] = claims.email
        if claims.name and claims.name != user.name:
            changes["name"] = claims.name
        if claims.roles and role != user.role:
            changes["role"] = role

        if changes:
            logger.debug("Refreshing user {} fields {}", user.id, sorted(changes))
            user = self._user_repo.update(user.model_copy(update=changes))
        return user
