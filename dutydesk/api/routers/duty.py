from fastapi import APIRouter, Depends, HTTPException

from dutydesk.api.deps import require_permission
from dutydesk.models.duty import AlreadyActive, ClockInRequest, DutySession
from dutydesk.services.container import duty_service


router = APIRouter(prefix="/duty", tags=["Duty Clock"])


@router.get("/board", response_model=list[DutySession])
def duty_board(
    current_account: dict = Depends(require_permission("duty:read")),
) -> list[DutySession]:
    _ = current_account
    return duty_service.all_open_sessions()


@router.get("/users/{user_id}", response_model=DutySession)
def duty_status(
    user_id: str,
    current_account: dict = Depends(require_permission("duty:read")),
) -> DutySession:
    _ = current_account
    session = duty_service.open_session_for(user_id)
    if session is None:
        raise HTTPException(status_code=404, detail="User is not clocked in")
    return session


@router.post("/users/{user_id}/clock-in", response_model=DutySession, status_code=201)
def clock_in(
    user_id: str,
    payload: ClockInRequest,
    current_account: dict = Depends(require_permission("duty:manage")),
) -> DutySession:
    _ = current_account
    result = duty_service.clock_in(user_id, payload.assignments)
    if isinstance(result, AlreadyActive):
        raise HTTPException(status_code=409, detail=f"Already on duty since {result.session.clock_in}")
    return result


@router.post("/users/{user_id}/clock-out", response_model=DutySession)
def clock_out(
    user_id: str,
    current_account: dict = Depends(require_permission("duty:manage")),
) -> DutySession:
    _ = current_account
    session = duty_service.clock_out(user_id)
    if session is None:
        raise HTTPException(status_code=404, detail="User is not clocked in")
    return session
