"""Prayer commitment router.

Prefix: ``/api/prayer``

Every commit goes through the spam detector first.  A blocked commit is
answered with ``403`` and the user-facing reason; a warning is returned
alongside the new commitment as ``spam_warning``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from gospelera.auth.models import Profile, Role
from gospelera.errors import CommitmentNotFound, CommitmentRejected
from gospelera.prayer.models import CommitmentStatus, PrayerCommitment
from gospelera.prayer.service import PrayerService
from web.backend.app.middleware.auth import get_current_user, get_prayer_service, require_role
from web.backend.app.models.api import (
    CommitmentResponse,
    CommitResponse,
    ConfirmPrayedRequest,
    SpamCheckResponse,
    SpamStatisticsResponse,
    SuspiciousUserResponse,
)

router = APIRouter(prefix="/api/prayer", tags=["prayer"])


def _commitment_response(c: PrayerCommitment) -> CommitmentResponse:
    return CommitmentResponse(**c.to_dict())


@router.get("/spam-check", response_model=SpamCheckResponse)
async def spam_check(
    user: Profile = Depends(get_current_user),
    service: PrayerService = Depends(get_prayer_service),
):
    """Score the current user's next commitment without committing."""
    result = service.check(user.id)
    return SpamCheckResponse(
        allowed=result.allowed,
        score=result.score,
        reason=result.reason,
        warning_level=result.warning_level.value,
        risk_factors=[f.value for f in result.risk_factors],
    )


@router.post("/requests/{request_id}/commit", response_model=CommitResponse)
async def commit_to_pray(
    request_id: int,
    user: Profile = Depends(get_current_user),
    service: PrayerService = Depends(get_prayer_service),
):
    try:
        outcome = service.commit_to_pray(user.id, request_id)
    except CommitmentRejected as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.reason)
    return CommitResponse(
        commitment=_commitment_response(outcome.commitment),
        spam_warning=outcome.spam_warning,
    )


@router.delete("/requests/{request_id}/commit")
async def uncommit(
    request_id: int,
    user: Profile = Depends(get_current_user),
    service: PrayerService = Depends(get_prayer_service),
):
    if not service.uncommit(user.id, request_id):
        raise HTTPException(status_code=404, detail="No prayer commitment to remove")
    return {"status": "removed", "request_id": request_id}


@router.post("/requests/{request_id}/prayed", response_model=CommitmentResponse)
async def confirm_prayed(
    request_id: int,
    body: Optional[ConfirmPrayedRequest] = None,
    user: Profile = Depends(get_current_user),
    service: PrayerService = Depends(get_prayer_service),
):
    """Confirm that the current user has prayed for a request."""
    note = body.note if body else None
    try:
        commitment = service.confirm_prayed(user.id, request_id, note=note)
    except CommitmentNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _commitment_response(commitment)


@router.get("/commitments", response_model=list[CommitmentResponse])
async def my_commitments(
    status_filter: Optional[CommitmentStatus] = Query(None, alias="status"),
    limit: int = Query(20, ge=1, le=50),
    cursor: Optional[str] = Query(None),
    user: Profile = Depends(get_current_user),
    service: PrayerService = Depends(get_prayer_service),
):
    """The current user's commitments, newest first."""
    try:
        items = service.my_commitments(user.id, status=status_filter, limit=limit, cursor=cursor)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid cursor: {cursor}")
    return [_commitment_response(c) for c in items]


@router.get("/admin/spam-statistics", response_model=SpamStatisticsResponse)
async def spam_statistics(
    user: Profile = Depends(get_current_user),
    service: PrayerService = Depends(get_prayer_service),
):
    """Warriors with five or more commitments and under 20% confirmed."""
    require_role(user, Role.moderator)
    stats = service.detector.get_spam_statistics()
    return SpamStatisticsResponse(
        total_users=stats.total_users,
        suspicious_users=stats.suspicious_users,
        details=[
            SuspiciousUserResponse(user_id=d.user_id, total=d.total, prayed=d.prayed, ratio=d.ratio)
            for d in stats.details
        ],
    )
