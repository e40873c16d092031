"""Tests for the account creation password policy."""

from gospelera.auth.password import (
    PASSWORD_REQUIREMENTS_MESSAGE,
    contains_banned_pattern,
    has_excessive_repetition,
    validate_password,
)


def _invalid(password: str) -> bool:
    result = validate_password(password)
    return not result.valid and result.error == PASSWORD_REQUIREMENTS_MESSAGE


def test_passphrase_is_valid():
    result = validate_password("BlueSky!Prayer2026")
    assert result.valid
    assert result.error is None


def test_length_bounds():
    assert validate_password("Ab1!cd2@").valid
    assert _invalid("Ab1!cd2")
    assert validate_password("Ab1!" * 16).valid
    assert _invalid("Ab1!" * 16 + "x")
    assert _invalid("")


def test_leading_and_trailing_whitespace():
    assert _invalid(" Abcdef1!")
    assert _invalid("Abcdef1! ")
    assert _invalid("\tBlueSky!Prayer2026")
    assert _invalid("\ufeffBlueSky!Prayer2026")
    assert _invalid("BlueSky!Prayer2026\u3000")
    # Separators outside the trim set are not edge whitespace
    assert validate_password("\x1cBlueSky!Prayer2026").valid
    # Inner spaces are fine
    assert validate_password("Blue Sky!Prayer2026").valid


def test_requires_uppercase():
    assert _invalid("bluesky!prayer2026")
    # Only ASCII uppercase counts
    assert _invalid("\u00dcnicode!prayer2026")


def test_requires_lowercase():
    assert _invalid("BLUESKY!PRAYER2026")


def test_requires_digit():
    assert _invalid("BlueSky!Prayer")


def test_requires_special_character():
    assert _invalid("BlueSkyPrayer2026")
    for ch in "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?`~":
        assert validate_password(f"BlueSky{ch}Prayer2026").valid, ch


def test_rejects_four_repeated_characters():
    assert _invalid("aaaa1A!aaaa")
    assert _invalid("Grace!!!!7x")
    assert _invalid("Faith#11117")
    assert validate_password("Baaa1!bbb").valid


def test_rejects_banned_patterns_case_insensitive():
    assert _invalid("Password1!")
    assert _invalid("MyAdmin#2024")
    assert _invalid("Qwerty#Faith9")
    assert _invalid("Go123456!abc")
    assert _invalid("GospelEra#7x")


def test_same_message_for_every_rule():
    failures = [" Abcdef1!", "Ab1!", "bluesky!prayer2026", "BLUESKY!PRAYER2026",
                "BlueSky!Prayer", "BlueSkyPrayer2026", "aaaa1A!aaaa", "Password1!"]
    errors = {validate_password(p).error for p in failures}
    assert errors == {PASSWORD_REQUIREMENTS_MESSAGE}


def test_repetition_helper():
    assert not has_excessive_repetition("")
    assert not has_excessive_repetition("aaa")
    assert has_excessive_repetition("aaaa")
    assert has_excessive_repetition("xy@@@@")
    assert not has_excessive_repetition("aaa1bbb")


def test_banned_pattern_helper():
    assert contains_banned_pattern("iLoveQWERTY")
    assert not contains_banned_pattern("BlueSky!Prayer2026")
