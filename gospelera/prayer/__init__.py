"""Prayer commitments and the commitment spam detector."""

from gospelera.prayer.models import (
    CommitmentStatus,
    PrayerCommitment,
    PrayerHistory,
    RiskFactor,
    SpamCheckResult,
    UserPrayerStats,
    WarningLevel,
)
from gospelera.prayer.spam_detection import SpamDetector, check_prayer_commitment_spam

__all__ = [
    "CommitmentStatus",
    "PrayerCommitment",
    "PrayerHistory",
    "RiskFactor",
    "SpamCheckResult",
    "SpamDetector",
    "UserPrayerStats",
    "WarningLevel",
    "check_prayer_commitment_spam",
]
