"""Auth middleware -- FastAPI dependencies for the current profile and shared stores.

Clients authenticate with an ``Authorization: Bearer <session_token>``
header obtained from ``POST /api/auth/login``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from gospelera import config
from gospelera.auth.models import Profile, Role
from gospelera.auth.store import ProfileStore
from gospelera.prayer.policy import configured_policy
from gospelera.prayer.service import PrayerService, build_service
from gospelera.prayer.store import CommitmentStore

# Shared instances
_store: Optional[ProfileStore] = None
_service: Optional[PrayerService] = None


def get_store() -> ProfileStore:
    """Return the singleton ProfileStore instance."""
    global _store
    if _store is None:
        _store = ProfileStore(config.data_dir() / "auth")
    return _store


def get_prayer_service(store: ProfileStore = Depends(get_store)) -> PrayerService:
    """Return the singleton PrayerService, built over the shared stores."""
    global _service
    if _service is None:
        _service = build_service(
            store,
            CommitmentStore(config.data_dir() / "prayer"),
            policy=configured_policy(),
        )
    return _service


async def get_current_user(
    authorization: Optional[str] = Header(None),
    store: ProfileStore = Depends(get_store),
) -> Profile:
    """FastAPI dependency that extracts and validates the current profile.

    Raises ``401 Unauthorized`` if no valid session token is provided.
    """
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token:
            profile = store.validate_session(token)
            if profile is not None:
                return profile

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication required",
        headers={"WWW-Authenticate": "Bearer"},
    )


def require_role(profile: Profile, role: Role) -> None:
    """Raise ``HTTPException(403)`` unless *profile* has at least *role*."""
    if profile.role.level < role.level:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Requires role '{role.value}' or higher",
        )
