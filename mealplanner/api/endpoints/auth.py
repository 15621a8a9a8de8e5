import logging
from fastapi import APIRouter, Depends, HTTPException, status
from supabase import AuthApiError

from mealplanner.core.errors import AuthError
from mealplanner.core.security import (
    decode_access_token,
    get_auth_client,
    get_session_context,
    oauth2_scheme,
    resolve_role,
)
from mealplanner.core.session import SessionContext, sessions
from mealplanner.db.repositories import UserRoleRepository
from mealplanner.schemas.user import LoginResponse, UserLogin, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(payload: UserLogin, auth_client=Depends(get_auth_client)):
    """Password sign-in against Supabase Auth; returns the access token to send as Bearer."""
    try:
        res = auth_client.auth.sign_in_with_password({"email": payload.email, "password": payload.password})
    except AuthApiError as e:
        logger.info("Login failed for %s: %s", payload.email, e)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    if not res or not res.session or not res.user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    # the auth client now carries the user's token, so the lookup runs under their policies
    role = resolve_role(UserRoleRepository(auth_client), res.user.id)
    session = sessions.open(SessionContext(
        user_id=res.user.id,
        role=role,
        access_token=res.session.access_token,
        email=res.user.email,
    ))
    return LoginResponse(
        access_token=session.access_token,
        user=UserResponse(id=session.user_id, email=session.email, role=session.role),
        message="Login successful",
    )


@router.get("/session", response_model=UserResponse)
def current_session(session: SessionContext = Depends(get_session_context)):
    return UserResponse(id=session.user_id, email=session.email, role=session.role)


@router.post("/logout")
def logout(
    token: str = Depends(oauth2_scheme),
    session: SessionContext = Depends(get_session_context),
    auth_client=Depends(get_auth_client),
):
    """Revoke the Supabase session and stop accepting the token here.

    A failed remote sign-out is logged; the token is still closed locally so the
    client can clear its state.
    """
    try:
        auth_client.auth.admin.sign_out(token)
    except AuthApiError as e:
        logger.warning("Remote sign-out failed for %s: %s", session.user_id, e)
    try:
        expires_at = decode_access_token(token).get("exp")
    except AuthError:
        expires_at = None
    sessions.close(session, expires_at=expires_at)
    return {"message": "Logout successful"}
