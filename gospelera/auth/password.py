"""Password policy for account creation.

Rules, checked in order (the first failure wins):

1. No leading or trailing whitespace
2. Length between 8 and 64 characters
3. At least one uppercase letter (A-Z)
4. At least one lowercase letter (a-z)
5. At least one digit (0-9)
6. At least one special character
7. No character repeated 4 or more times in a row
8. None of the common patterns: password, 123456, qwerty, admin, gospelera

Every failing rule reports the same message so a caller cannot learn which
rule tripped.  Long passphrases such as ``BlueSky!Prayer2026`` are fine.
"""

from __future__ import annotations

import re

from gospelera.auth.models import PasswordValidationResult

MIN_LENGTH = 8
MAX_LENGTH = 64
MAX_REPEAT = 3

BANNED_PATTERNS: tuple[str, ...] = (
    "password",
    "123456",
    "qwerty",
    "admin",
    "gospelera",
)

PASSWORD_REQUIREMENTS_MESSAGE = (
    "Password must be 8\u201364 characters and include uppercase, lowercase, a number, "
    "and a special character. Avoid common words and repeated characters."
)

_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")
_SPECIAL = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?`~]")

# Characters JavaScript's String.prototype.trim() removes.  Differs from
# str.strip(): U+FEFF is included, \x1c-\x1f and U+0085 are not.
TRIM_CHARS = (
    "\t\n\v\f\r \u00a0\u1680"
    + "".join(chr(c) for c in range(0x2000, 0x200B))
    + "\u2028\u2029\u202f\u205f\u3000\ufeff"
)


def has_excessive_repetition(password: str) -> bool:
    """True if any character appears more than ``MAX_REPEAT`` times in a row.

    ``"aaaa"`` and ``"x1111"`` fail; ``"aaa1bbb"`` passes.
    """
    window = MAX_REPEAT + 1
    for i in range(len(password) - MAX_REPEAT):
        if len(set(password[i:i + window])) == 1:
            return True
    return False


def contains_banned_pattern(password: str) -> bool:
    lowered = password.lower()
    return any(pattern in lowered for pattern in BANNED_PATTERNS)


def _failure() -> PasswordValidationResult:
    return PasswordValidationResult(valid=False, error=PASSWORD_REQUIREMENTS_MESSAGE)


def validate_password(password: str) -> PasswordValidationResult:
    """Validate *password* for account creation."""
    if password != password.strip(TRIM_CHARS):
        return _failure()

    if not MIN_LENGTH <= len(password) <= MAX_LENGTH:
        return _failure()

    if not _UPPER.search(password):
        return _failure()

    if not _LOWER.search(password):
        return _failure()

    if not _DIGIT.search(password):
        return _failure()

    if not _SPECIAL.search(password):
        return _failure()

    if has_excessive_repetition(password):
        return _failure()

    if contains_banned_pattern(password):
        return _failure()

    return PasswordValidationResult(valid=True, error=None)
