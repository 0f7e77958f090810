"""User domain entity."""

from enum import StrEnum

from pydantic import Field

from src.splicer.entities.core._base import Entity


class UserRole(StrEnum):
    USER = "user"
    ADMIN = "admin"


class User(Entity):
    """A person acting on the platform.

    Identity comes from the bearer token (issuer + subject); the role decides
    whether the user may manage the catalog and other users' participations.
    """

    name: str = Field(description="Display name")
    email: str | None = Field(default=None, description="User's email address")
    role: UserRole = Field(default=UserRole.USER, description="Authorization role")
    issuer: str = Field(description="Token issuer that vouched for this user")
    subject: str = Field(description="Subject claim identifying the user at the issuer")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __eq__(self, other: object) -> bool:
        """Compare users by identity, ignoring timestamps."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
