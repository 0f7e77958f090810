"""Bearer token claim models."""

from typing import Any

from pydantic import BaseModel, Field


class TokenClaims(BaseModel):
    """Structured representation of verified JWT claims."""

    raw_token: str = Field(default="", description="Original JWT token")

    issuer: str = Field(description="Issuer")
    subject: str = Field(description="Subject (user ID at the issuer)")
    audience: str | list[str] = Field(default_factory=list, description="Audience")
    expires_at: int = Field(description="Expiration time")
    issued_at: int = Field(description="Issued at")
    not_before: int | None = Field(default=None, description="Not before")
    jti: str | None = Field(default=None, description="JWT ID (unique token identifier)")

    email: str | None = Field(default=None, description="Email address")
    name: str | None = Field(default=None, description="Full name")

    roles: list[str] = Field(default_factory=list, description="User roles")

    custom_claims: dict[str, Any] = Field(
        default_factory=dict, description="Custom or additional claims"
    )

    @property
    def is_admin(self) -> bool:
        return "admin" in self.roles
