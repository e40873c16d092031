"""Prayer commitment spam detection.

Scores a user's recent commitment behaviour to keep bots and spam away from
the "commit to pray" action.  Four independent signals add points:

====================================  ======  ==================
Signal                                Points  Factor
====================================  ======  ==================
account younger than one day            30    NEW_ACCOUNT
5+ commitments in the last 5 minutes    40    TOO_MANY_RECENT
3+ commitments in the last 10 seconds   60    RAPID_FIRE
5+ commitments, under 20% confirmed     50    LOW_CONFIRMATION
====================================  ======  ==================

A score of 80 or more blocks the action, 50 or more warns, anything lower
passes silently.  When the data source fails the detector fails open.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Protocol

from gospelera.prayer.models import (
    CommitmentStatus,
    PrayerCommitment,
    PrayerHistory,
    RiskFactor,
    SpamCheckResult,
    SpamStatistics,
    SuspiciousUser,
    UserPrayerStats,
    WarningLevel,
)
from gospelera.prayer.policy import SpamPolicy

logger = logging.getLogger(__name__)


class PrayerDataSource(Protocol):
    """Reads the detector needs from the persistence layer."""

    def get_account_created_at(self, user_id: str) -> Optional[datetime]: ...

    def list_commitments(self, user_id: str) -> list[PrayerCommitment]: ...

    def all_commitments(self) -> list[PrayerCommitment]: ...


# ---------------------------------------------------------------------------
# Messages, in priority order
# ---------------------------------------------------------------------------

_BLOCK_PREFIX = "We've detected unusual activity on your account. "

BLOCK_MESSAGES: list[tuple[RiskFactor, str]] = [
    (
        RiskFactor.RAPID_FIRE,
        _BLOCK_PREFIX + "Please slow down and take time to genuinely commit to pray for each request.",
    ),
    (
        RiskFactor.TOO_MANY_RECENT,
        _BLOCK_PREFIX
        + "You've made many prayer commitments recently. "
        "Please take a moment to pray for the requests you've already committed to.",
    ),
    (
        RiskFactor.LOW_CONFIRMATION,
        _BLOCK_PREFIX
        + "We noticed you haven't been confirming your prayers. "
        "Please remember to click 'I Prayed' after you've prayed for a request.",
    ),
    (
        RiskFactor.NEW_ACCOUNT,
        "New accounts are limited to 3 prayer commitments per day. "
        "Keep engaging with the community to unlock full access!",
    ),
]
BLOCK_FALLBACK = _BLOCK_PREFIX + "Please contact support if you believe this is an error."

WARNING_MESSAGES: list[tuple[RiskFactor, str]] = [
    (
        RiskFactor.RAPID_FIRE,
        "Please slow down a little! Take a moment to genuinely pray for each request you commit to.",
    ),
    (
        RiskFactor.TOO_MANY_RECENT,
        "You're committing to pray for many requests! Remember to take time to actually pray for each one.",
    ),
    (
        RiskFactor.LOW_CONFIRMATION,
        "Reminder: Don't forget to confirm when you've prayed for a request by clicking 'I Prayed'!",
    ),
    (
        RiskFactor.NEW_ACCOUNT,
        "Welcome! As a new member, please take your time and genuinely commit to pray for each request.",
    ),
]
WARNING_FALLBACK = "Thank you for your prayer commitments! Remember to confirm when you've prayed."


def _pick_message(
    table: list[tuple[RiskFactor, str]], factors: list[RiskFactor], fallback: str
) -> str:
    for factor, message in table:
        if factor in factors:
            return message
    return fallback


def block_message(factors: list[RiskFactor]) -> str:
    return _pick_message(BLOCK_MESSAGES, factors, BLOCK_FALLBACK)


def warning_message(factors: list[RiskFactor]) -> str:
    return _pick_message(WARNING_MESSAGES, factors, WARNING_FALLBACK)


# ---------------------------------------------------------------------------
# Pure scoring
# ---------------------------------------------------------------------------


def derive_stats(
    history: PrayerHistory, now: datetime, policy: Optional[SpamPolicy] = None
) -> UserPrayerStats:
    """Aggregate a user's history into the signals the score is built from."""
    policy = policy or SpamPolicy()

    if history.account_created_at is None:
        account_age_days = policy.missing_account_age_days
    else:
        account_age_days = (now - history.account_created_at) / timedelta(days=1)

    recent_cutoff = now - timedelta(seconds=policy.recent.window_seconds)
    rapid_cutoff = now - timedelta(seconds=policy.rapid_fire.window_seconds)

    commitments = history.commitments
    total = len(commitments)
    prayed = sum(1 for c in commitments if c.status == CommitmentStatus.prayed)

    return UserPrayerStats(
        account_age_days=account_age_days,
        recent_commitments_5min=sum(1 for c in commitments if c.committed_at > recent_cutoff),
        rapid_fire_commitments_10s=sum(1 for c in commitments if c.committed_at > rapid_cutoff),
        total_commitments=total,
        prayed_confirmations=prayed,
        # 100% when there is no history yet
        confirmation_ratio_pct=(prayed / total) * 100 if total > 0 else 100.0,
    )


def score_stats(stats: UserPrayerStats, policy: Optional[SpamPolicy] = None) -> SpamCheckResult:
    """Turn derived stats into an allow / warn / block verdict."""
    policy = policy or SpamPolicy()
    score = 0
    factors: list[RiskFactor] = []

    if stats.account_age_days < policy.new_account_days:
        score += policy.new_account_points
        factors.append(RiskFactor.NEW_ACCOUNT)

    if stats.recent_commitments_5min >= policy.recent.min_count:
        score += policy.recent.points
        factors.append(RiskFactor.TOO_MANY_RECENT)

    if stats.rapid_fire_commitments_10s >= policy.rapid_fire.min_count:
        score += policy.rapid_fire.points
        factors.append(RiskFactor.RAPID_FIRE)

    if (
        stats.total_commitments >= policy.low_confirmation_min_commitments
        and stats.confirmation_ratio_pct < policy.low_confirmation_ratio_pct
    ):
        score += policy.low_confirmation_points
        factors.append(RiskFactor.LOW_CONFIRMATION)

    if score >= policy.block_score:
        return SpamCheckResult(
            allowed=False,
            score=score,
            reason=block_message(factors),
            warning_level=WarningLevel.high,
            risk_factors=factors,
        )
    if score >= policy.warn_score:
        return SpamCheckResult(
            allowed=True,
            score=score,
            reason=warning_message(factors),
            warning_level=WarningLevel.low,
            risk_factors=factors,
        )
    return SpamCheckResult(
        allowed=True,
        score=score,
        reason=None,
        warning_level=WarningLevel.none,
        risk_factors=factors,
    )


# ---------------------------------------------------------------------------
# Detector
# ---------------------------------------------------------------------------


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SpamDetector:
    """Reads a user's history from a data source and scores it.

    The detector holds no per-user state; it only reads.  Enforcing a
    block is up to the caller.
    """

    def __init__(
        self,
        source: PrayerDataSource,
        policy: Optional[SpamPolicy] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._source = source
        self._policy = policy or SpamPolicy()
        self._clock = clock

    @property
    def policy(self) -> SpamPolicy:
        return self._policy

    def fetch_history(self, user_id: str) -> PrayerHistory:
        # Unbounded: every commitment the user ever made is read.
        created_at = self._source.get_account_created_at(user_id)
        commitments = self._source.list_commitments(user_id)
        return PrayerHistory(account_created_at=created_at, commitments=list(commitments))

    def check_prayer_commitment_spam(self, user_id: str) -> SpamCheckResult:
        """Score *user_id*'s next commitment.  Never raises."""
        try:
            history = self.fetch_history(user_id)
            stats = derive_stats(history, self._clock(), self._policy)
            result = score_stats(stats, self._policy)
        except Exception:
            # Fail open
            logger.exception("Spam check failed for user %s; allowing commitment", user_id)
            return SpamCheckResult.fail_open()

        if result.warning_level != WarningLevel.none:
            logger.info(
                "Spam check for user %s: score=%d level=%s factors=%s",
                user_id,
                result.score,
                result.warning_level.value,
                [f.value for f in result.risk_factors],
            )
        return result

    def get_spam_statistics(self) -> SpamStatistics:
        """Summarise confirmation ratios across every warrior."""
        try:
            commitments = self._source.all_commitments()
        except Exception:
            logger.exception("Failed to get spam statistics")
            return SpamStatistics()

        totals: dict[str, list[int]] = {}
        for c in commitments:
            counts = totals.setdefault(c.warrior_id, [0, 0])
            counts[0] += 1
            if c.status == CommitmentStatus.prayed:
                counts[1] += 1

        details = []
        for user_id, (total, prayed) in totals.items():
            ratio = (prayed / total) * 100
            if (
                total >= self._policy.low_confirmation_min_commitments
                and ratio < self._policy.low_confirmation_ratio_pct
            ):
                details.append(SuspiciousUser(user_id=user_id, total=total, prayed=prayed, ratio=ratio))

        return SpamStatistics(
            total_users=len(totals),
            suspicious_users=len(details),
            details=details,
        )


def check_prayer_commitment_spam(
    user_id: str,
    source: PrayerDataSource,
    policy: Optional[SpamPolicy] = None,
    clock: Callable[[], datetime] = _utcnow,
) -> SpamCheckResult:
    """One-shot form of ``SpamDetector.check_prayer_commitment_spam``."""
    return SpamDetector(source, policy=policy, clock=clock).check_prayer_commitment_spam(user_id)
