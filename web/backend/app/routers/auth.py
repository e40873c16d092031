"""Auth router -- password policy, signup, login and the current profile."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status

from gospelera.auth.models import Profile
from gospelera.auth.password import validate_password
from gospelera.auth.store import ProfileStore
from gospelera.errors import DuplicateAccountError, WeakPasswordError
from web.backend.app.middleware.auth import get_current_user, get_store
from web.backend.app.models.api import (
    LoginRequest,
    LoginResponse,
    PasswordCheckRequest,
    PasswordValidationResponse,
    ProfileResponse,
    SignupRequest,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _profile_response(p: Profile) -> ProfileResponse:
    """Convert a domain Profile to a Pydantic ProfileResponse."""
    return ProfileResponse(
        id=p.id,
        email=p.email,
        display_name=p.display_name,
        role=p.role.value,
        created_at=p.created_at,
    )


# ---------------------------------------------------------------------------
# Password policy
# ---------------------------------------------------------------------------


@router.post("/password/validate", response_model=PasswordValidationResponse)
async def check_password(body: PasswordCheckRequest):
    """Check a candidate password before submitting the signup form.

    Always 200; failures are reported in the body with one generic message.
    """
    result = validate_password(body.password)
    return PasswordValidationResponse(valid=result.valid, error=result.error)


# ---------------------------------------------------------------------------
# Accounts and sessions
# ---------------------------------------------------------------------------


@router.post("/signup", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
async def signup(body: SignupRequest, store: ProfileStore = Depends(get_store)):
    """Create an account and start a session."""
    try:
        profile = store.sign_up(body.email, body.password, display_name=body.display_name)
    except WeakPasswordError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except DuplicateAccountError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    session = store.create_session(profile.id)
    return LoginResponse(token=session.token, user=_profile_response(profile))


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, store: ProfileStore = Depends(get_store)):
    profile = store.authenticate(body.email, body.password)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    session = store.create_session(profile.id)
    return LoginResponse(token=session.token, user=_profile_response(profile))


@router.post("/logout")
async def logout(
    authorization: Optional[str] = Header(None),
    store: ProfileStore = Depends(get_store),
):
    """Invalidate the current session token."""
    if authorization:
        _, _, token = authorization.partition(" ")
        if token:
            store.delete_session(token)
    return {"status": "logged_out"}


@router.get("/me", response_model=ProfileResponse)
async def me(user: Profile = Depends(get_current_user)):
    return _profile_response(user)
