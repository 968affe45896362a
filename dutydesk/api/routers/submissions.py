from typing import Optional

from fastapi import APIRouter, Depends

from dutydesk.api.deps import require_permission
from dutydesk.models.submission import (
    Report,
    ReportCreate,
    ReportKind,
    RoleRequest,
    RoleRequestCreate,
    RosterRequest,
    RosterRequestCreate,
)
from dutydesk.services.container import submission_service


router = APIRouter(prefix="/submissions", tags=["Reports & Requests"])


@router.get("/reports", response_model=list[Report])
def list_reports(
    kind: Optional[ReportKind] = None,
    current_account: dict = Depends(require_permission("submissions:read")),
) -> list[Report]:
    _ = current_account
    return submission_service.list_reports(kind=kind)


@router.post("/reports/users/{user_id}", response_model=Report, status_code=201)
def file_report(
    user_id: str,
    payload: ReportCreate,
    current_account: dict = Depends(require_permission("submissions:write")),
) -> Report:
    _ = current_account
    return submission_service.add_report(user_id, payload)


@router.get("/role-requests", response_model=list[RoleRequest])
def list_role_requests(
    current_account: dict = Depends(require_permission("submissions:read")),
) -> list[RoleRequest]:
    _ = current_account
    return submission_service.list_role_requests()


@router.post("/role-requests/users/{user_id}", response_model=RoleRequest, status_code=201)
def request_roles(
    user_id: str,
    payload: RoleRequestCreate,
    current_account: dict = Depends(require_permission("submissions:write")),
) -> RoleRequest:
    _ = current_account
    return submission_service.add_role_request(user_id, payload)


@router.get("/roster-requests", response_model=list[RosterRequest])
def list_roster_requests(
    current_account: dict = Depends(require_permission("submissions:read")),
) -> list[RosterRequest]:
    _ = current_account
    return submission_service.list_roster_requests()


@router.post("/roster-requests/users/{user_id}", response_model=RosterRequest, status_code=201)
def request_roster_change(
    user_id: str,
    payload: RosterRequestCreate,
    current_account: dict = Depends(require_permission("submissions:write")),
) -> RosterRequest:
    _ = current_account
    return submission_service.add_roster_request(user_id, payload)
