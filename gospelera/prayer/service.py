"""Prayer commitment actions, gated by the spam detector."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from gospelera.auth.store import ProfileStore
from gospelera.errors import CommitmentRejected
from gospelera.prayer.models import CommitmentStatus, PrayerCommitment, SpamCheckResult, WarningLevel
from gospelera.prayer.policy import SpamPolicy
from gospelera.prayer.spam_detection import SpamDetector
from gospelera.prayer.store import CommitmentStore

logger = logging.getLogger(__name__)

DEFAULT_REJECTION = "Unable to commit at this time"


class StoreDataSource:
    """Joins the profile and commitment stores into one detector data source."""

    def __init__(self, profiles: ProfileStore, commitments: CommitmentStore) -> None:
        self.profiles = profiles
        self.commitments = commitments

    def get_account_created_at(self, user_id: str) -> Optional[datetime]:
        return self.profiles.get_account_created_at(user_id)

    def list_commitments(self, user_id: str) -> list[PrayerCommitment]:
        return self.commitments.list_commitments(user_id)

    def all_commitments(self) -> list[PrayerCommitment]:
        return self.commitments.all_commitments()


@dataclass
class CommitmentOutcome:
    commitment: PrayerCommitment
    spam_warning: Optional[str] = None


class PrayerService:
    def __init__(self, commitments: CommitmentStore, detector: SpamDetector) -> None:
        self._commitments = commitments
        self._detector = detector

    @property
    def detector(self) -> SpamDetector:
        return self._detector

    def check(self, user_id: str) -> SpamCheckResult:
        return self._detector.check_prayer_commitment_spam(user_id)

    def commit_to_pray(self, user_id: str, request_id: int) -> CommitmentOutcome:
        """Record a commitment unless the spam detector blocks it.

        Raises ``CommitmentRejected`` carrying the user-facing reason when
        blocked.  A warning verdict still commits and is returned as
        ``spam_warning``.
        """
        verdict = self.check(user_id)
        if not verdict.allowed:
            logger.warning("Blocked prayer commitment by %s on request %s", user_id, request_id)
            raise CommitmentRejected(verdict.reason or DEFAULT_REJECTION, score=verdict.score)

        commitment = self._commitments.commit(request_id, user_id)
        warning = verdict.reason if verdict.warning_level != WarningLevel.none else None
        return CommitmentOutcome(commitment=commitment, spam_warning=warning)

    def uncommit(self, user_id: str, request_id: int) -> bool:
        return self._commitments.uncommit(request_id, user_id)

    def confirm_prayed(self, user_id: str, request_id: int, note: Optional[str] = None) -> PrayerCommitment:
        return self._commitments.confirm_prayed(request_id, user_id, note=note)

    def my_commitments(
        self,
        user_id: str,
        status: Optional[CommitmentStatus] = None,
        limit: int = 20,
        cursor: Optional[str] = None,
    ) -> list[PrayerCommitment]:
        return self._commitments.list_for_warrior(user_id, status=status, limit=limit, cursor=cursor)


def build_service(
    profiles: ProfileStore,
    commitments: CommitmentStore,
    policy: Optional[SpamPolicy] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> PrayerService:
    """Wire a ``PrayerService`` over the file stores."""
    source = StoreDataSource(profiles, commitments)
    if clock is None:
        detector = SpamDetector(source, policy=policy)
    else:
        detector = SpamDetector(source, policy=policy, clock=clock)
    return PrayerService(commitments, detector)
