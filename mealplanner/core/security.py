import logging
from typing import Any, Dict, Optional
from jose import jwt, JWTError
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from mealplanner.core.config import get_settings
from mealplanner.core.errors import AuthError, StoreError
from mealplanner.core.session import SessionContext, sessions
from mealplanner.db.database import client_for, new_client
from mealplanner.db.repositories import UserRoleRepository
from mealplanner.schemas.user import Role

logger = logging.getLogger(__name__)

# OAuth2 scheme for FastAPI dependency; the token is a Supabase access token
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify a Supabase-issued JWT and return its claims."""
    settings = get_settings()
    if not settings.SUPABASE_JWT_SECRET:
        raise AuthError("Token verification is not configured")
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
        )
    except JWTError as e:
        raise AuthError("Could not validate credentials") from e


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_token_claims(token: Optional[str] = Depends(oauth2_scheme)) -> Dict[str, Any]:
    """Claims of a verified, still-open bearer token; 401 otherwise."""
    if not token or sessions.is_closed(token):
        raise _credentials_exception()
    try:
        payload = decode_access_token(token)
    except AuthError:
        raise _credentials_exception()
    if payload.get("sub") is None:
        raise _credentials_exception()
    return payload


def get_db(token: Optional[str] = Depends(oauth2_scheme), claims: Dict[str, Any] = Depends(get_token_claims)):
    # only reached with a verified token
    return client_for(token)


def resolve_role(roles: UserRoleRepository, user_id: str) -> Role:
    try:
        return roles.role_for(user_id)
    except StoreError as e:
        # same as an absent row: the session continues read-only
        logger.warning("Falling back to viewer for %s: %s", user_id, e.message)
        return Role.viewer


def get_session_context(
    token: Optional[str] = Depends(oauth2_scheme),
    claims: Dict[str, Any] = Depends(get_token_claims),
    db=Depends(get_db),
) -> SessionContext:
    user_id = claims["sub"]
    role = resolve_role(UserRoleRepository(db), user_id)
    return SessionContext(user_id=user_id, role=role, access_token=token, email=claims.get("email"))


def get_auth_client():
    """Per-request client for sign-in/sign-out; each login gets its own auth session."""
    return new_client()
