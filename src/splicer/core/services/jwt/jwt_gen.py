import time
from typing import Any

from authlib.common.security import generate_token
from authlib.jose import JoseError, JsonWebToken
from fastapi import HTTPException
from loguru import logger

from src.splicer.runtime.config.config_data import ConfigData
from src.splicer.runtime.context import get_config

_REGISTERED_CLAIMS = {"iss", "sub", "aud", "exp", "iat", "nbf", "jti"}


class JwtGeneratorService:
    """Service for generating JWT tokens for API authentication."""

    def generate_jwt(
        self,
        subject: str,
        claims: dict[str, Any] | None = None,
        expires_in_seconds: int = 3600,
        issuer: str | None = None,
        audience: str | list[str] | None = None,
        algorithm: str = "HS256",
        secret: str | None = None,
    ) -> str:
        """Generate a signed JWT token using authlib.

        Args:
            subject: Subject (sub) claim, the caller's identifier at the issuer
            claims: Additional claims to include in the token
            expires_in_seconds: Token lifetime in seconds (default: 1 hour)
            issuer: Issuer (iss) claim (defaults to config issuer)
            audience: Audience (aud) claim (defaults to config audiences)
            algorithm: Signing algorithm (default: HS256)
            secret: Signing secret (defaults to the configured secret)

        Returns:
            Signed JWT token string

        Raises:
            HTTPException: If configuration is missing or invalid
        """
        config: ConfigData = get_config()

        issuer = issuer or config.jwt.gen_issuer
        secret = secret or config.app.session_signing_secret
        if not secret:
            raise HTTPException(
                status_code=500, detail="JWT signing secret not configured"
            )

        if algorithm not in config.jwt.allowed_algorithms:
            logger.debug(
                "Attempted to use disallowed algorithm: {}, only {} are allowed",
                algorithm,
                config.jwt.allowed_algorithms,
            )
            raise HTTPException(
                status_code=500, detail=f"Algorithm {algorithm} not allowed"
            )

        now = int(time.time())
        payload: dict[str, Any] = {
            "iss": issuer,
            "sub": subject,
            "aud": audience or config.jwt.audiences,
            "exp": now + expires_in_seconds,
            "iat": now,
            "nbf": now,
            "jti": generate_token(16),
        }
        if claims:
            payload.update(
                {k: v for k, v in claims.items() if k not in _REGISTERED_CLAIMS}
            )

        try:
            token = JsonWebToken([algorithm]).encode(
                {"alg": algorithm, "typ": "JWT"}, payload, secret
            )
        except JoseError as e:
            raise HTTPException(
                status_code=500, detail=f"JWT encoding failed: {e}"
            ) from e

        return token.decode() if isinstance(token, bytes) else token

    def generate_access_token(
        self,
        subject: str,
        roles: list[str] | None = None,
        email: str | None = None,
        name: str | None = None,
        expires_in_seconds: int = 3600,
        **extra_claims: Any,
    ) -> str:
        """Generate an access token carrying the profile and role claims we read.

        Example:
            token = generate_access_token(
                subject="user123",
                roles=["admin"],
                email="user@example.com",
                name="Ada Lovelace",
            )
        """
        cfg = get_config().jwt.claims
        claims: dict[str, Any] = dict(extra_claims)
        if roles:
            claims[cfg.roles] = roles
        if email:
            claims[cfg.email] = email
        if name:
            claims[cfg.name] = name

        return self.generate_jwt(
            subject=subject, claims=claims, expires_in_seconds=expires_in_seconds
        )
