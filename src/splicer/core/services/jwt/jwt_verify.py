"""JWT verification service."""

from typing import Any

from authlib.jose import JoseError, JsonWebToken
from fastapi import HTTPException
from loguru import logger

from src.splicer.core.models.claims import TokenClaims
from src.splicer.runtime.context import get_config


def _as_list(v: Any) -> list[str]:
    return [v] if isinstance(v, str) else list(v or ())


def extract_roles(claims: dict[str, Any], claim_name: str) -> list[str]:
    """Roles may arrive as a list or a space separated string."""
    value = claims.get(claim_name)
    if not value:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, list):
        return [str(v) for v in value]
    return [str(value)]


class JwtVerificationService:
    """Verify bearer tokens signed with the configured shared secret."""

    async def verify_jwt(self, token: str, *, key: str | None = None) -> TokenClaims:
        cfg = get_config()
        verification_key = key or cfg.app.session_signing_secret
        if not verification_key:
            raise HTTPException(status_code=500, detail="JWT signing secret not configured")

        claims_options = {
            "iss": {"essential": True, "values": [cfg.jwt.gen_issuer]},
            "aud": {"essential": True, "values": _as_list(cfg.jwt.audiences)},
            "sub": {"essential": True},
            "exp": {"essential": True},
        }

        try:
            claims = JsonWebToken(cfg.jwt.allowed_algorithms).decode(
                token, verification_key, claims_options=claims_options
            )
            claims.validate(leeway=cfg.jwt.clock_skew)
        except (JoseError, ValueError) as exc:
            logger.debug("Rejected bearer token: {}", exc)
            raise HTTPException(status_code=401, detail=f"JWT error: {exc}") from exc

        if not claims.get("sub"):
            raise HTTPException(status_code=401, detail="Missing sub claim")

        return create_token_claims(token, dict(claims))


def create_token_claims(token: str, claims: dict[str, Any]) -> TokenClaims:
    """Map verified claims onto :class:`TokenClaims` using the configured names."""
    mapping = get_config().jwt.claims
    remaining = claims.copy()
    for registered in ("iss", "sub", "aud", "exp", "iat", "nbf", "jti"):
        remaining.pop(registered, None)
    for mapped in (mapping.email, mapping.name, mapping.roles):
        remaining.pop(mapped, None)

    return TokenClaims(
        raw_token=token,
        issuer=claims["iss"],
        subject=str(claims.get(mapping.user_id) or claims["sub"]),
        audience=claims.get("aud", []),
        expires_at=int(claims["exp"]),
        issued_at=int(claims.get("iat", claims["exp"])),
        not_before=claims.get("nbf"),
        jti=claims.get("jti"),
        email=claims.get(mapping.email),
        name=claims.get(mapping.name),
        roles=extract_roles(claims, mapping.roles),
        custom_claims=remaining,
    )
