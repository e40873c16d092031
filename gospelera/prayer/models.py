"""Data models for prayer commitments and the commitment spam detector."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class CommitmentStatus(str, Enum):
    """Lifecycle of a commitment: a warrior commits, then confirms."""

    committed = "committed"
    prayed = "prayed"


class WarningLevel(str, Enum):
    none = "none"
    low = "low"
    high = "high"


class RiskFactor(Enum):
    """A behavioural signal that contributed points to a spam score."""

    NEW_ACCOUNT = "new account"
    TOO_MANY_RECENT = "too many recent commitments"
    RAPID_FIRE = "rapid-fire commitments"
    LOW_CONFIRMATION = "low prayer confirmation rate"


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values as UTC."""
    dt = value if isinstance(value, datetime) else datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass
class PrayerCommitment:
    """A warrior's pledge to pray for one prayer request."""

    request_id: int
    warrior_id: str
    committed_at: datetime
    status: CommitmentStatus = CommitmentStatus.committed
    prayed_at: Optional[datetime] = None
    note: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.status, str):
            self.status = CommitmentStatus(self.status)
        self.committed_at = parse_timestamp(self.committed_at)
        if self.prayed_at is not None:
            self.prayed_at = parse_timestamp(self.prayed_at)

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "warrior_id": self.warrior_id,
            "committed_at": self.committed_at.isoformat(),
            "status": self.status.value,
            "prayed_at": self.prayed_at.isoformat() if self.prayed_at else None,
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, d: dict) -> PrayerCommitment:
        return cls(
            request_id=int(d["request_id"]),
            warrior_id=d["warrior_id"],
            committed_at=d["committed_at"],
            status=d.get("status", "committed"),
            prayed_at=d.get("prayed_at"),
            note=d.get("note"),
        )


@dataclass
class PrayerHistory:
    """Everything the spam detector needs to know about one user.

    ``account_created_at`` is ``None`` when the profile could not be found.
    """

    account_created_at: Optional[datetime] = None
    commitments: list[PrayerCommitment] = field(default_factory=list)


@dataclass
class UserPrayerStats:
    """Aggregates derived from a ``PrayerHistory``; computed per check."""

    account_age_days: float
    recent_commitments_5min: int = 0
    rapid_fire_commitments_10s: int = 0
    total_commitments: int = 0
    prayed_confirmations: int = 0
    confirmation_ratio_pct: float = 100.0


@dataclass
class SpamCheckResult:
    """Verdict returned before a "commit to pray" action."""

    allowed: bool
    score: int
    reason: Optional[str] = None
    warning_level: WarningLevel = WarningLevel.none
    risk_factors: list[RiskFactor] = field(default_factory=list)

    @classmethod
    def fail_open(cls) -> SpamCheckResult:
        return cls(allowed=True, score=0, reason=None, warning_level=WarningLevel.none)


@dataclass
class SuspiciousUser:
    user_id: str
    total: int
    prayed: int
    ratio: float


@dataclass
class SpamStatistics:
    """Admin dashboard summary of confirmation behaviour across all users."""

    total_users: int = 0
    suspicious_users: int = 0
    details: list[SuspiciousUser] = field(default_factory=list)
