"""Spam policy -- the thresholds and point values the detector applies.

Defaults are the production values.  A YAML file can override any of them,
which lets moderators tune the detector without touching the scorer::

    name: stricter
    new_account_days: 2
    rapid_fire:
      window_seconds: 10
      min_count: 3
      points: 60
    block_score: 70
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from gospelera import config


@dataclass
class WindowRule:
    """Fires when at least ``min_count`` commitments fall inside the window."""

    window_seconds: int
    min_count: int
    points: int


@dataclass
class SpamPolicy:
    """Thresholds for the commitment spam score."""

    name: str = "default"
    new_account_days: float = 1.0
    new_account_points: int = 30
    recent: WindowRule = field(default_factory=lambda: WindowRule(window_seconds=300, min_count=5, points=40))
    rapid_fire: WindowRule = field(default_factory=lambda: WindowRule(window_seconds=10, min_count=3, points=60))
    low_confirmation_min_commitments: int = 5
    low_confirmation_ratio_pct: float = 20.0
    low_confirmation_points: int = 50
    warn_score: int = 50
    block_score: int = 80
    missing_account_age_days: float = 999.0


_WINDOW_KEYS = {"recent", "rapid_fire"}
_CONVERTERS = {"int": int, "float": float, "str": str}
# Annotations are strings under postponed evaluation.
_SCALAR_TYPES = {f.name: f.type for f in fields(SpamPolicy) if f.name not in _WINDOW_KEYS}


def _convert(key: str, value, type_name: str, path: str | Path):
    try:
        return _CONVERTERS[type_name](value)
    except (TypeError, ValueError):
        raise ValueError(f"'{key}' must be {type_name} in {path}, got {value!r}") from None


def load_spam_policy(path: str | Path) -> SpamPolicy:
    """Load a spam policy from a YAML file; missing keys keep their defaults."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Spam policy must be a mapping: {path}")

    policy = SpamPolicy()
    known = {f.name for f in fields(SpamPolicy)}
    for key, value in data.items():
        if key not in known:
            raise ValueError(f"Unknown spam policy key '{key}' in {path}")
        if key in _WINDOW_KEYS:
            if not isinstance(value, dict):
                raise ValueError(f"'{key}' must be a mapping in {path}")
            current: WindowRule = getattr(policy, key)
            setattr(
                policy,
                key,
                WindowRule(
                    window_seconds=_convert(
                        f"{key}.window_seconds", value.get("window_seconds", current.window_seconds), "int", path
                    ),
                    min_count=_convert(
                        f"{key}.min_count", value.get("min_count", current.min_count), "int", path
                    ),
                    points=_convert(f"{key}.points", value.get("points", current.points), "int", path),
                ),
            )
        else:
            setattr(policy, key, _convert(key, value, _SCALAR_TYPES[key], path))

    if policy.warn_score > policy.block_score:
        raise ValueError("warn_score must not exceed block_score")
    return policy


def configured_policy() -> SpamPolicy:
    """Policy named by ``GOSPELERA_SPAM_POLICY``, or the defaults."""
    path = config.spam_policy_path()
    return load_spam_policy(path) if path else SpamPolicy()
