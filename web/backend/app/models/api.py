"""Pydantic models for API request/response serialization.

These models mirror the gospelera dataclasses and provide proper JSON
serialization for the FastAPI endpoints.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Auth models
# ---------------------------------------------------------------------------


class PasswordCheckRequest(BaseModel):
    password: str


class PasswordValidationResponse(BaseModel):
    """Mirrors gospelera.auth.models.PasswordValidationResult."""

    valid: bool
    error: Optional[str] = None


class SignupRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str
    display_name: str = ""


class LoginRequest(BaseModel):
    email: str
    password: str


class ProfileResponse(BaseModel):
    """Mirrors gospelera.auth.models.Profile (without the password hash)."""

    id: str
    email: str
    display_name: str = ""
    role: str = "member"
    created_at: str = ""


class LoginResponse(BaseModel):
    token: str
    user: ProfileResponse


# ---------------------------------------------------------------------------
# Prayer models
# ---------------------------------------------------------------------------


class SpamCheckResponse(BaseModel):
    """Mirrors gospelera.prayer.models.SpamCheckResult."""

    allowed: bool
    score: int
    reason: Optional[str] = None
    warning_level: str = "none"
    risk_factors: list[str] = Field(default_factory=list)


class CommitmentResponse(BaseModel):
    """Mirrors gospelera.prayer.models.PrayerCommitment."""

    request_id: int
    warrior_id: str
    committed_at: str
    status: str
    prayed_at: Optional[str] = None
    note: Optional[str] = None


class CommitResponse(BaseModel):
    commitment: CommitmentResponse
    spam_warning: Optional[str] = None


class ConfirmPrayedRequest(BaseModel):
    note: Optional[str] = Field(None, max_length=500)


class SuspiciousUserResponse(BaseModel):
    user_id: str
    total: int
    prayed: int
    ratio: float


class SpamStatisticsResponse(BaseModel):
    """Mirrors gospelera.prayer.models.SpamStatistics."""

    total_users: int = 0
    suspicious_users: int = 0
    details: list[SuspiciousUserResponse] = Field(default_factory=list)
