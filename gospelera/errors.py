"""Exception hierarchy for the Gospel Era service layer.

The scorers themselves never raise: a weak password is a negative
``PasswordValidationResult`` and a degraded data source makes the spam
detector fail open.  These exceptions are raised by the stores and the
prayer service, and translated to HTTP errors by the web routers.
"""

from __future__ import annotations


class GospelEraError(Exception):
    """Base class for all Gospel Era errors."""


class CommitmentRejected(GospelEraError):
    """A prayer commitment was blocked by the spam detector."""

    def __init__(self, reason: str, score: int = 0) -> None:
        super().__init__(reason)
        self.reason = reason
        self.score = score


class CommitmentNotFound(GospelEraError):
    """No commitment exists for the given request and warrior."""

    def __init__(self, request_id: int, warrior_id: str) -> None:
        super().__init__(f"No prayer commitment for request {request_id} by {warrior_id}")
        self.request_id = request_id
        self.warrior_id = warrior_id


class WeakPasswordError(GospelEraError):
    """The candidate password failed the password policy."""


class DuplicateAccountError(GospelEraError):
    """An account with the same email already exists."""
