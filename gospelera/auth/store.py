"""File-based JSON storage for profiles and sessions.

Provides a DB-ready interface backed by simple JSON files under
``<data_dir>/auth/``.  The profile's ``created_at`` is what the prayer spam
detector uses to tell new accounts apart.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from gospelera import config
from gospelera.auth.models import Profile, Role, Session
from gospelera.auth.password import validate_password
from gospelera.errors import DuplicateAccountError, WeakPasswordError
from gospelera.prayer.models import parse_timestamp

_PBKDF2_ITERATIONS = 240_000


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """Return ``salt$hexdigest`` for *password*."""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), _PBKDF2_ITERATIONS)
    return f"{salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    salt, _, _ = stored.partition("$")
    if not salt:
        return False
    return hmac.compare_digest(hash_password(password, salt), stored)


class ProfileStore:
    """File-based storage for profiles and sessions.

    Storage path: ``<data_dir>/auth/`` with:
    - ``profiles.json`` -- list of profile dicts
    - ``sessions.json`` -- list of session dicts
    """

    def __init__(self, base_dir: str | Path | None = None) -> None:
        self._base = Path(base_dir) if base_dir else config.data_dir() / "auth"
        self._base.mkdir(parents=True, exist_ok=True)
        self._profiles_path = self._base / "profiles.json"
        self._sessions_path = self._base / "sessions.json"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_json(self, path: Path) -> list[dict]:
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text())
            return data if isinstance(data, list) else []
        except (json.JSONDecodeError, OSError):
            return []

    def _write_json(self, path: Path, data: list[dict]) -> None:
        path.write_text(json.dumps(data, indent=2, default=str))

    @staticmethod
    def _profile_from_dict(d: dict) -> Profile:
        role_val = d.get("role", "member")
        try:
            role_val = Role(role_val)
        except ValueError:
            role_val = Role.member
        return Profile(
            id=d["id"],
            email=d["email"],
            display_name=d.get("display_name", ""),
            role=role_val,
            password_hash=d.get("password_hash", ""),
            created_at=d.get("created_at", ""),
        )

    @staticmethod
    def _profile_to_dict(p: Profile) -> dict:
        return {
            "id": p.id,
            "email": p.email,
            "display_name": p.display_name,
            "role": p.role.value,
            "password_hash": p.password_hash,
            "created_at": p.created_at,
        }

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def create_profile(self, profile: Profile) -> Profile:
        """Persist a new profile. Returns the profile."""
        if self.get_profile_by_email(profile.email) is not None:
            raise DuplicateAccountError(f"An account already exists for {profile.email}")
        profiles = self._read_json(self._profiles_path)
        profiles.append(self._profile_to_dict(profile))
        self._write_json(self._profiles_path, profiles)
        return profile

    def sign_up(
        self,
        email: str,
        password: str,
        display_name: str = "",
        role: Role = Role.member,
    ) -> Profile:
        """Create an account after checking *password* against the policy."""
        result = validate_password(password)
        if not result.valid:
            raise WeakPasswordError(result.error)
        profile = Profile(
            id=str(uuid.uuid4()),
            email=email.strip(),
            display_name=display_name or email.split("@")[0],
            role=role,
            password_hash=hash_password(password),
        )
        return self.create_profile(profile)

    def authenticate(self, email: str, password: str) -> Optional[Profile]:
        profile = self.get_profile_by_email(email)
        if profile is None or not verify_password(password, profile.password_hash):
            return None
        return profile

    def get_profile(self, user_id: str) -> Optional[Profile]:
        for d in self._read_json(self._profiles_path):
            if d["id"] == user_id:
                return self._profile_from_dict(d)
        return None

    def get_profile_by_email(self, email: str) -> Optional[Profile]:
        for d in self._read_json(self._profiles_path):
            if d.get("email", "").lower() == email.strip().lower():
                return self._profile_from_dict(d)
        return None

    def list_profiles(self) -> list[Profile]:
        return [self._profile_from_dict(d) for d in self._read_json(self._profiles_path)]

    def get_account_created_at(self, user_id: str) -> Optional[datetime]:
        """Creation time for *user_id*, or None if unknown."""
        profile = self.get_profile(user_id)
        if profile is None or not profile.created_at:
            return None
        return parse_timestamp(profile.created_at)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def create_session(self, user_id: str, expires_in_hours: int = 24) -> Session:
        """Create a new session for a user."""
        now = datetime.now(timezone.utc)
        session = Session(
            id=str(uuid.uuid4()),
            user_id=user_id,
            token=secrets.token_urlsafe(48),
            created_at=now.isoformat(),
            expires_at=(now + timedelta(hours=expires_in_hours)).isoformat(),
        )

        sessions = self._read_json(self._sessions_path)
        sessions.append({
            "id": session.id,
            "user_id": session.user_id,
            "token": session.token,
            "created_at": session.created_at,
            "expires_at": session.expires_at,
        })
        self._write_json(self._sessions_path, sessions)
        return session

    def validate_session(self, token: str) -> Optional[Profile]:
        """Validate a session token and return the associated profile, or None."""
        now = datetime.now(timezone.utc).isoformat()
        for d in self._read_json(self._sessions_path):
            if d["token"] == token:
                if d.get("expires_at") and d["expires_at"] < now:
                    # Expired -- clean it up
                    self.delete_session(token)
                    return None
                return self.get_profile(d["user_id"])
        return None

    def delete_session(self, token: str) -> bool:
        sessions = self._read_json(self._sessions_path)
        original_len = len(sessions)
        sessions = [d for d in sessions if d["token"] != token]
        if len(sessions) < original_len:
            self._write_json(self._sessions_path, sessions)
            return True
        return False
