"""
Cognito JWT authentication for FastAPI.

Reads "Authorization: Bearer <token>", verifies it against the user pool's
JWKS and exposes the caller as an AuthUser dependency. When no user pool
is configured (local development) the token is decoded without signature
verification and only needs a "sub" claim.
"""

import logging
from functools import lru_cache
from typing import Optional

import jwt
from fastapi import Depends, Header, HTTPException, status
from jwt import PyJWKClient
from jwt.exceptions import InvalidTokenError, PyJWKClientError
from pydantic import BaseModel

from .config import Settings, get_settings

logger = logging.getLogger(__name__)

ALGORITHMS = ["RS256"]
JWKS_CACHE_SECONDS = 600


class AuthUser(BaseModel):
    """Caller extracted from a verified token"""
    sub: str
    email: str = ""
    name: str = ""
    picture: str = ""


@lru_cache()
def get_jwks_client(jwks_uri: str) -> PyJWKClient:
    return PyJWKClient(jwks_uri, cache_keys=True, lifespan=JWKS_CACHE_SECONDS)


def _user_from_claims(claims: dict) -> AuthUser:
    return AuthUser(
        sub=claims["sub"],
        email=claims.get("email") or claims.get("cognito:username") or "",
        name=claims.get("name") or claims.get("given_name") or "",
        picture=claims.get("picture") or "",
    )


def verify_token(token: str, settings: Settings) -> AuthUser:
    """
    Verify a Cognito token and return its user.

    Raises:
        InvalidTokenError: If the token is malformed, expired, not signed by
            the pool, or carries no subject
    """
    if settings.dev_mode:
        claims = jwt.decode(token, options={"verify_signature": False})
    else:
        try:
            signing_key = get_jwks_client(settings.jwks_uri).get_signing_key_from_jwt(token)
        except PyJWKClientError as e:
            raise InvalidTokenError(str(e)) from e
        claims = jwt.decode(
            token,
            signing_key.key,
            algorithms=ALGORITHMS,
            issuer=settings.issuer,
            options={"verify_aud": False},
        )

    if not claims.get("sub"):
        raise InvalidTokenError("Token has no subject")
    return _user_from_claims(claims)


def get_token_from_header(authorization: Optional[str] = Header(default=None)) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No authorization token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return authorization[len("Bearer "):]


def require_auth(
    token: str = Depends(get_token_from_header),
    settings: Settings = Depends(get_settings),
) -> AuthUser:
    """Dependency for protected routes; 401 on missing or invalid token"""
    try:
        return verify_token(token, settings)
    except InvalidTokenError as e:
        logger.info("[AUTH] Rejected token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
