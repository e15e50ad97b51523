"""
Supabase JWT Authentication Module.

Every Binder endpoint acts on behalf of exactly one actor, identified by the
bearer token issued by Supabase Auth. Tokens are verified locally with the
project's JWT secret; a missing or invalid token fails closed with 401 before
any deck, stats or decision logic runs.

Usage:
    from core.auth import require_auth, Actor

    @router.post("/decisions")
    def record(actor: Actor = Depends(require_auth)):
        actor_id = actor.id
"""

from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config.settings import get_settings
from core.logging import bind_context


security = HTTPBearer(
    scheme_name="Supabase JWT",
    description="JWT token from Supabase Auth. Get it after login via Supabase client.",
    auto_error=False,
)


@dataclass
class Actor:
    """
    The authenticated investor making requests.

    Attributes:
        id: User's UUID (from 'sub' claim)
        email: User's email address
        role: Postgres role (usually 'authenticated')
        session_id: Current session UUID
        is_anonymous: True if anonymous auth
    """
    id: str
    email: Optional[str] = None
    role: str = "authenticated"
    session_id: Optional[str] = None
    is_anonymous: bool = False


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_jwt(token: str) -> dict:
    """
    Verify and decode a Supabase JWT token.

    Raises:
        HTTPException: 401 if the token is invalid, expired, or malformed
    """
    settings = get_settings()
    if not settings.supabase_jwt_secret:
        raise _unauthorized("Token verification is not configured")

    try:
        return jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=["HS256"],
            audience="authenticated",
            options={
                "verify_exp": True,
                "verify_aud": True,
                "require": ["sub", "exp", "aud", "role"],
            }
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidAudienceError:
        raise _unauthorized("Invalid token audience")
    except jwt.InvalidTokenError as e:
        raise _unauthorized(f"Invalid token: {str(e)}")


def extract_actor(payload: dict) -> Actor:
    """Build an Actor from a verified JWT payload."""
    return Actor(
        id=payload["sub"],
        email=payload.get("email"),
        role=payload.get("role", "authenticated"),
        session_id=payload.get("session_id"),
        is_anonymous=payload.get("is_anonymous", False),
    )


async def require_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Actor:
    """
    FastAPI dependency that requires authentication.

    Raises 401 if no valid token is provided.
    """
    if not credentials:
        raise _unauthorized("Authorization header required")

    if not credentials.credentials:
        raise _unauthorized("Token required")

    actor = extract_actor(verify_jwt(credentials.credentials))
    bind_context(actor_id=actor.id)
    return actor


def ensure_same_actor(actor: Actor, claimed_id: Optional[str]) -> str:
    """
    Reconcile an actor id sent by the client with the token subject.

    The id is optional on the wire; when present it must name the caller.

    Raises:
        HTTPException: 403 if the claimed id belongs to someone else
    """
    if claimed_id and claimed_id != actor.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Actor does not match the authenticated user",
        )
    return actor.id
