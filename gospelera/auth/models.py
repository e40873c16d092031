"""Auth domain models for profiles, sessions and password checks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Role hierarchy: admin > moderator > member."""

    admin = "admin"
    moderator = "moderator"
    member = "member"

    @property
    def level(self) -> int:
        """Return numeric level for comparison (higher = more privileges)."""
        return {
            Role.admin: 30,
            Role.moderator: 20,
            Role.member: 10,
        }[self]


@dataclass
class PasswordValidationResult:
    """Outcome of a password policy check."""

    valid: bool
    error: Optional[str] = None


@dataclass
class Profile:
    """A community member's account."""

    id: str
    email: str
    display_name: str = ""
    role: Role = Role.member
    password_hash: str = ""
    created_at: str = ""

    def __post_init__(self) -> None:
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc).isoformat()
        if isinstance(self.role, str):
            self.role = Role(self.role)


@dataclass
class Session:
    """Represents an active login session."""

    id: str
    user_id: str
    token: str
    created_at: str = ""
    expires_at: str = ""

    def __post_init__(self) -> None:
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc).isoformat()
