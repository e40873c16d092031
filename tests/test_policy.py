"""Tests for loading spam policies from YAML."""

import tempfile
from pathlib import Path

import pytest
import yaml

from gospelera.prayer.models import UserPrayerStats
from gospelera.prayer.policy import SpamPolicy, configured_policy, load_spam_policy
from gospelera.prayer.spam_detection import score_stats


def _write_yaml(data) -> str:
    f = tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False)
    yaml.dump(data, f)
    f.close()
    return f.name


def test_defaults_match_production_values():
    policy = SpamPolicy()
    assert policy.new_account_points == 30
    assert (policy.recent.window_seconds, policy.recent.min_count, policy.recent.points) == (300, 5, 40)
    assert (policy.rapid_fire.window_seconds, policy.rapid_fire.min_count, policy.rapid_fire.points) == (10, 3, 60)
    assert policy.low_confirmation_points == 50
    assert policy.warn_score == 50
    assert policy.block_score == 80


def test_partial_override():
    path = _write_yaml({
        "name": "stricter",
        "new_account_days": 2,
        "rapid_fire": {"min_count": 2},
        "block_score": 70,
    })
    policy = load_spam_policy(path)
    assert policy.name == "stricter"
    assert policy.new_account_days == 2
    assert policy.rapid_fire.min_count == 2
    assert policy.rapid_fire.window_seconds == 10
    assert policy.rapid_fire.points == 60
    assert policy.recent.min_count == 5
    assert policy.block_score == 70


def test_empty_file_gives_defaults():
    f = tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False)
    f.close()
    assert load_spam_policy(f.name) == SpamPolicy()


def test_unknown_key_rejected():
    path = _write_yaml({"block_scor": 70})
    with pytest.raises(ValueError, match="block_scor"):
        load_spam_policy(path)


def test_warn_above_block_rejected():
    path = _write_yaml({"warn_score": 90})
    with pytest.raises(ValueError):
        load_spam_policy(path)


def test_configured_policy_reads_environment(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "policy.yaml"
        path.write_text(yaml.dump({"name": "from-env", "warn_score": 40}))
        monkeypatch.setenv("GOSPELERA_SPAM_POLICY", str(path))
        assert configured_policy().name == "from-env"

    monkeypatch.delenv("GOSPELERA_SPAM_POLICY")
    assert configured_policy() == SpamPolicy()


def test_quoted_numbers_are_coerced():
    path = _write_yaml({"warn_score": "50", "block_score": "80", "new_account_days": "2"})
    policy = load_spam_policy(path)
    assert policy.warn_score == 50
    assert policy.block_score == 80
    assert policy.new_account_days == 2.0

    stats = UserPrayerStats(
        account_age_days=0.5,
        recent_commitments_5min=3,
        rapid_fire_commitments_10s=3,
        total_commitments=3,
        prayed_confirmations=0,
        confirmation_ratio_pct=0.0,
    )
    result = score_stats(stats, policy)
    assert not result.allowed
    assert result.score == 90


def test_non_numeric_value_rejected():
    path = _write_yaml({"block_score": "high"})
    with pytest.raises(ValueError, match="block_score"):
        load_spam_policy(path)

    path = _write_yaml({"rapid_fire": {"points": "lots"}})
    with pytest.raises(ValueError, match="rapid_fire.points"):
        load_spam_policy(path)
