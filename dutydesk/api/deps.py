from collections.abc import Callable
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from dutydesk.core.rbac import Role, has_permission
from dutydesk.core.security import read_dashboard_token
from dutydesk.services.container import auth_service


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")


def get_current_account(token: str = Depends(oauth2_scheme)) -> dict[str, Any]:
    try:
        claims = read_dashboard_token(token)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    return auth_service.require_account(claims["sub"])


def require_permission(permission: str) -> Callable[[dict[str, Any]], dict[str, Any]]:
    def dependency(account: dict[str, Any] = Depends(get_current_account)) -> dict[str, Any]:
        if not has_permission(Role(account["role"]), permission):
            raise HTTPException(status_code=403, detail=f"Missing permission '{permission}'")
        return account

    return dependency
