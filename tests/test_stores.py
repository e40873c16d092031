"""Tests for the profile and commitment stores."""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from gospelera.auth.models import Role
from gospelera.auth.store import ProfileStore, hash_password, verify_password
from gospelera.errors import CommitmentNotFound, DuplicateAccountError, WeakPasswordError
from gospelera.prayer.models import CommitmentStatus
from gospelera.prayer.store import MAX_PAGE_SIZE, CommitmentStore

START = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class StepClock:
    """Returns START, START+1s, START+2s, ... on successive calls."""

    def __init__(self, start=START, step=timedelta(seconds=1)):
        self.current = start
        self.step = step

    def __call__(self):
        value = self.current
        self.current += self.step
        return value


# --- Profiles ---


def test_sign_up_and_authenticate():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = ProfileStore(tmpdir)
        profile = store.sign_up("ruth@example.com", "BlueSky!Prayer2026", display_name="Ruth")
        assert profile.role == Role.member
        assert profile.password_hash != "BlueSky!Prayer2026"

        assert store.authenticate("RUTH@example.com", "BlueSky!Prayer2026").id == profile.id
        assert store.authenticate("ruth@example.com", "wrong") is None
        assert store.authenticate("nobody@example.com", "BlueSky!Prayer2026") is None


def test_sign_up_rejects_weak_password():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = ProfileStore(tmpdir)
        with pytest.raises(WeakPasswordError):
            store.sign_up("ruth@example.com", "Password1!")
        assert store.list_profiles() == []


def test_sign_up_rejects_duplicate_email():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = ProfileStore(tmpdir)
        store.sign_up("ruth@example.com", "BlueSky!Prayer2026")
        with pytest.raises(DuplicateAccountError):
            store.sign_up("Ruth@Example.com", "Another#Pass99")


def test_account_created_at():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = ProfileStore(tmpdir)
        profile = store.sign_up("naomi@example.com", "BlueSky!Prayer2026")
        created = store.get_account_created_at(profile.id)
        assert created is not None
        assert created.tzinfo is not None
        assert datetime.now(timezone.utc) - created < timedelta(minutes=1)
        assert store.get_account_created_at("missing") is None


def test_sessions():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = ProfileStore(tmpdir)
        profile = store.sign_up("boaz@example.com", "BlueSky!Prayer2026")
        session = store.create_session(profile.id)
        assert store.validate_session(session.token).id == profile.id
        assert store.delete_session(session.token)
        assert store.validate_session(session.token) is None

        expired = store.create_session(profile.id, expires_in_hours=-1)
        assert store.validate_session(expired.token) is None


def test_password_hash_round_trip():
    stored = hash_password("BlueSky!Prayer2026")
    assert verify_password("BlueSky!Prayer2026", stored)
    assert not verify_password("BlueSky!Prayer2027", stored)
    assert not verify_password("anything", "")


# --- Commitments ---


def test_commit_is_upsert():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = CommitmentStore(tmpdir, clock=StepClock(step=timedelta(days=1)))
        first = store.commit(1, "u1")
        prayed = store.confirm_prayed(1, "u1", note="amen")
        again = store.commit(1, "u1")
        assert again.status == CommitmentStatus.committed
        assert again.committed_at == first.committed_at == START
        assert again.prayed_at == prayed.prayed_at
        assert again.note == "amen"
        assert store.get(1, "u1") == again
        assert len(store.list_commitments("u1")) == 1


def test_list_commitments_newest_first():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = CommitmentStore(tmpdir, clock=StepClock())
        for request_id in (1, 2, 3):
            store.commit(request_id, "u1")
        store.commit(9, "u2")
        assert [c.request_id for c in store.list_commitments("u1")] == [3, 2, 1]
        assert len(store.all_commitments()) == 4


def test_confirm_prayed_with_note():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = CommitmentStore(tmpdir, clock=StepClock())
        store.commit(5, "u1")
        prayed = store.confirm_prayed(5, "u1", note="  Praying for healing  ")
        assert prayed.status == CommitmentStatus.prayed
        assert prayed.note == "Praying for healing"
        assert prayed.prayed_at == START + timedelta(seconds=1)

        blank = store.confirm_prayed(5, "u1", note="   ")
        assert blank.note is None

        with pytest.raises(CommitmentNotFound):
            store.confirm_prayed(6, "u1")


def test_uncommit():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = CommitmentStore(tmpdir, clock=StepClock())
        store.commit(1, "u1")
        assert store.uncommit(1, "u1")
        assert not store.uncommit(1, "u1")
        assert store.get(1, "u1") is None


def test_activity_log():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = CommitmentStore(tmpdir, clock=StepClock())
        store.commit(1, "u1")
        store.confirm_prayed(1, "u1", note="amen")
        store.uncommit(1, "u1")
        kinds = [a.kind for a in store.get_activity(1)]
        assert kinds == ["commitment", "prayer_completed", "uncommitment"]
        assert store.get_activity(1)[1].message == "prayed with note: amen"
        assert store.get_activity(2) == []


def test_list_for_warrior_filters_and_pages():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = CommitmentStore(tmpdir, clock=StepClock())
        for request_id in range(1, 61):
            store.commit(request_id, "u1")
        store.confirm_prayed(10, "u1")

        assert len(store.list_for_warrior("u1", limit=100)) == MAX_PAGE_SIZE

        first_page = store.list_for_warrior("u1", limit=5)
        assert [c.request_id for c in first_page] == [60, 59, 58, 57, 56]
        second_page = store.list_for_warrior("u1", limit=5, cursor=first_page[-1].committed_at.isoformat())
        assert [c.request_id for c in second_page] == [55, 54, 53, 52, 51]

        prayed = store.list_for_warrior("u1", status=CommitmentStatus.prayed)
        assert [c.request_id for c in prayed] == [10]


def test_corrupt_commitment_file_raises():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = CommitmentStore(tmpdir)
        (Path(tmpdir) / "commitments.json").write_text("{not json")
        with pytest.raises(ValueError):
            store.list_commitments("u1")
