from typing import Optional

from fastapi import APIRouter, Depends, Query

from dutydesk.api.deps import require_permission
from dutydesk.services.container import event_logger


router = APIRouter(prefix="/audit", tags=["Audit"])


@router.get("/events")
def get_recent_events(
    limit: int = Query(default=100, ge=1, le=1000),
    event_type: Optional[str] = None,
    current_account: dict = Depends(require_permission("audit:view")),
) -> list[dict]:
    _ = current_account
    return event_logger.recent_events(limit, event_type=event_type)
