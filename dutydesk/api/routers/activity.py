from typing import Optional

from fastapi import APIRouter, Depends, Query

from dutydesk.api.deps import require_permission
from dutydesk.models.duty import ActivityRange, ActivitySummary, LeaderboardEntry
from dutydesk.services.container import activity_service


router = APIRouter(prefix="/activity", tags=["Activity"])


@router.get("/users/{user_id}", response_model=ActivitySummary)
def user_activity(
    user_id: str,
    period: ActivityRange = Query(default=ActivityRange.WEEK, alias="range"),
    current_account: dict = Depends(require_permission("activity:view")),
) -> ActivitySummary:
    _ = current_account
    return activity_service.user_activity(user_id, period)


@router.get("/top", response_model=list[LeaderboardEntry])
def top_activity(
    period: ActivityRange = Query(default=ActivityRange.WEEK, alias="range"),
    assignment: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    current_account: dict = Depends(require_permission("activity:view")),
) -> list[LeaderboardEntry]:
    _ = current_account
    return activity_service.leaderboard(period, assignment=assignment, limit=limit)
