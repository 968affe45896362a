from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from dutydesk.api.deps import require_permission
from dutydesk.models.application import (
    AlreadyDecided,
    Application,
    ApplicationCreate,
    ApplicationDecisionRequest,
    ApplicationStatus,
)
from dutydesk.services.container import application_service


router = APIRouter(prefix="/applications", tags=["Applications"])


@router.get("", response_model=list[Application])
def list_applications(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    status: Optional[ApplicationStatus] = None,
    current_account: dict = Depends(require_permission("applications:read")),
) -> list[Application]:
    _ = current_account
    return application_service.list_applications(user_id=user_id, status=status)


@router.post("/users/{user_id}", response_model=Application, status_code=201)
def submit_application(
    user_id: str,
    payload: ApplicationCreate,
    current_account: dict = Depends(require_permission("applications:submit")),
) -> Application:
    _ = current_account
    return application_service.submit(user_id, payload)


@router.get("/users/{user_id}/latest", response_model=Application)
def latest_application_for_user(
    user_id: str,
    current_account: dict = Depends(require_permission("applications:read")),
) -> Application:
    _ = current_account
    application = application_service.find_latest_for_user(user_id)
    if application is None:
        raise HTTPException(status_code=404, detail="No application for this user")
    return application


@router.get("/{application_id}", response_model=Application)
def get_application(
    application_id: str,
    current_account: dict = Depends(require_permission("applications:read")),
) -> Application:
    _ = current_account
    application = application_service.get(application_id)
    if application is None:
        raise HTTPException(status_code=404, detail="Application not found")
    return application


@router.post("/{application_id}/decision", response_model=Application)
def decide_application(
    application_id: str,
    payload: ApplicationDecisionRequest,
    current_account: dict = Depends(require_permission("applications:decide")),
) -> Application:
    result = application_service.decide(
        application_id,
        payload.outcome,
        decided_by=current_account["account_id"],
        extra=payload.extra,
        override=payload.override,
    )
    if result is None:
        raise HTTPException(status_code=404, detail="Application not found")
    if isinstance(result, AlreadyDecided):
        raise HTTPException(
            status_code=409,
            detail=f"Application already {result.application.status.value}",
        )
    return result
