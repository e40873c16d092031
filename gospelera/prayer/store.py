"""File-based JSON storage for prayer commitments.

Commitments live in ``<data_dir>/prayer/commitments.json``; one per
(request, warrior) pair.  Every change is also appended to
``activity.jsonl`` so a request's history can be shown to its owner.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from gospelera import config
from gospelera.errors import CommitmentNotFound
from gospelera.prayer.models import CommitmentStatus, PrayerCommitment, parse_timestamp

MAX_PAGE_SIZE = 50


@dataclass
class PrayerActivity:
    """One entry in the prayer activity log."""

    request_id: int
    actor: str
    kind: str  # "commitment" | "uncommitment" | "prayer_completed"
    message: str
    timestamp: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CommitmentStore:
    """JSON-backed store for prayer commitments and their activity log."""

    def __init__(
        self,
        base_dir: str | Path | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._base = Path(base_dir) if base_dir else config.data_dir() / "prayer"
        self._base.mkdir(parents=True, exist_ok=True)
        self._commitments_path = self._base / "commitments.json"
        self._activity_path = self._base / "activity.jsonl"
        self._clock = clock

    # -- persistence ---------------------------------------------------------

    def _load_all(self) -> list[dict]:
        if not self._commitments_path.exists():
            return []
        # Read errors propagate: the spam detector decides how to degrade.
        data = json.loads(self._commitments_path.read_text())
        return data if isinstance(data, list) else []

    def _save_all(self, data: list[dict]) -> None:
        self._commitments_path.write_text(json.dumps(data, indent=2))

    def _log_activity(self, request_id: int, actor: str, kind: str, message: str) -> None:
        entry = PrayerActivity(
            request_id=request_id,
            actor=actor,
            kind=kind,
            message=message,
            timestamp=self._clock().isoformat(),
        )
        with self._activity_path.open("a") as fh:
            fh.write(json.dumps(asdict(entry)) + "\n")

    @staticmethod
    def _newest_first(commitments: list[PrayerCommitment]) -> list[PrayerCommitment]:
        return sorted(commitments, key=lambda c: c.committed_at, reverse=True)

    # -- reads ---------------------------------------------------------------

    def list_commitments(self, user_id: str) -> list[PrayerCommitment]:
        """Every commitment *user_id* has made, newest first."""
        return self._newest_first(
            [PrayerCommitment.from_dict(d) for d in self._load_all() if d["warrior_id"] == user_id]
        )

    def all_commitments(self) -> list[PrayerCommitment]:
        return self._newest_first([PrayerCommitment.from_dict(d) for d in self._load_all()])

    def get(self, request_id: int, warrior_id: str) -> Optional[PrayerCommitment]:
        for d in self._load_all():
            if d["request_id"] == request_id and d["warrior_id"] == warrior_id:
                return PrayerCommitment.from_dict(d)
        return None

    def list_for_warrior(
        self,
        warrior_id: str,
        status: Optional[CommitmentStatus] = None,
        limit: int = 20,
        cursor: Optional[str | datetime] = None,
    ) -> list[PrayerCommitment]:
        """Page through a warrior's commitments, newest first.

        *cursor* is the ``committed_at`` of the last item on the previous
        page; only strictly older commitments are returned.
        """
        items = self.list_commitments(warrior_id)
        if status is not None:
            items = [c for c in items if c.status == CommitmentStatus(status)]
        if cursor is not None:
            before = parse_timestamp(cursor)
            items = [c for c in items if c.committed_at < before]
        return items[: max(0, min(limit, MAX_PAGE_SIZE))]

    def get_activity(self, request_id: int) -> list[PrayerActivity]:
        if not self._activity_path.exists():
            return []
        entries: list[PrayerActivity] = []
        for line in self._activity_path.read_text().splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                entry = PrayerActivity(**json.loads(line))
            except (json.JSONDecodeError, TypeError):
                continue
            if entry.request_id == request_id:
                entries.append(entry)
        return entries

    # -- writes --------------------------------------------------------------

    def commit(self, request_id: int, warrior_id: str) -> PrayerCommitment:
        """Commit *warrior_id* to pray for *request_id* (upsert).

        Re-committing only resets the status; ``committed_at``, ``prayed_at``
        and the note keep their stored values.
        """
        data = self._load_all()
        for d in data:
            if d["request_id"] == request_id and d["warrior_id"] == warrior_id:
                d["status"] = CommitmentStatus.committed.value
                commitment = PrayerCommitment.from_dict(d)
                break
        else:
            commitment = PrayerCommitment(
                request_id=request_id,
                warrior_id=warrior_id,
                committed_at=self._clock(),
                status=CommitmentStatus.committed,
            )
            data.append(commitment.to_dict())
        self._save_all(data)
        self._log_activity(request_id, warrior_id, "commitment", "committed to pray")
        return commitment

    def uncommit(self, request_id: int, warrior_id: str) -> bool:
        data = self._load_all()
        remaining = [
            d for d in data
            if not (d["request_id"] == request_id and d["warrior_id"] == warrior_id)
        ]
        if len(remaining) == len(data):
            return False
        self._save_all(remaining)
        self._log_activity(request_id, warrior_id, "uncommitment", "removed prayer commitment")
        return True

    def confirm_prayed(
        self, request_id: int, warrior_id: str, note: Optional[str] = None
    ) -> PrayerCommitment:
        """Mark a commitment as prayed, with an optional note."""
        note = (note or "").strip() or None
        data = self._load_all()
        for d in data:
            if d["request_id"] == request_id and d["warrior_id"] == warrior_id:
                d["status"] = CommitmentStatus.prayed.value
                d["prayed_at"] = self._clock().isoformat()
                d["note"] = note
                self._save_all(data)
                message = f"prayed with note: {note}" if note else "completed prayer"
                self._log_activity(request_id, warrior_id, "prayer_completed", message)
                return PrayerCommitment.from_dict(d)
        raise CommitmentNotFound(request_id, warrior_id)
