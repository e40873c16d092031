"""Runtime configuration read from the environment.

- ``GOSPELERA_DATA_DIR``     -- root for the JSON stores (default ``~/.gospelera``)
- ``GOSPELERA_SPAM_POLICY``  -- optional YAML file overriding spam thresholds
- ``GOSPELERA_LOG_LEVEL``    -- logging level name (default ``INFO``)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

DEFAULT_DATA_DIR = Path.home() / ".gospelera"


def data_dir() -> Path:
    """Return the configured data directory."""
    value = os.environ.get("GOSPELERA_DATA_DIR", "")
    return Path(value).expanduser() if value else DEFAULT_DATA_DIR


def spam_policy_path() -> Optional[Path]:
    value = os.environ.get("GOSPELERA_SPAM_POLICY", "")
    return Path(value).expanduser() if value else None


def log_level() -> str:
    return os.environ.get("GOSPELERA_LOG_LEVEL", "INFO").upper()
