from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from dutydesk.api.deps import get_current_account
from dutydesk.models.auth import DashboardAccount, Token
from dutydesk.services.container import auth_service


router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/token", response_model=Token)
def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends()) -> Token:
    account = auth_service.authenticate(form_data.username, form_data.password)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth_service.issue_token(account)


@router.get("/me", response_model=DashboardAccount)
def read_me(current_account: dict = Depends(get_current_account)) -> DashboardAccount:
    return auth_service.as_public(current_account)
