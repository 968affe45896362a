from __future__ import annotations

from threading import RLock
from typing import Any, Optional

from fastapi import HTTPException, status

from dutydesk.core.rbac import Role
from dutydesk.core.security import hash_password, issue_dashboard_token, verify_password
from dutydesk.models.auth import DashboardAccount, Token
from dutydesk.services.audit_service import EventLogger


class AuthService:
    """Dashboard accounts. Kept in memory; the bootstrap admin comes from settings."""

    def __init__(self, event_logger: EventLogger) -> None:
        self.event_logger = event_logger
        self.lock = RLock()
        self.accounts: dict[str, dict[str, Any]] = {}

    def register(self, account_id: str, username: str, password: str, role: Role) -> DashboardAccount:
        with self.lock:
            if any(a["username"] == username for a in self.accounts.values()):
                raise HTTPException(status_code=409, detail="Username already registered")
            self.accounts[account_id] = {
                "account_id": account_id,
                "username": username,
                "role": role,
                "hashed_password": hash_password(password),
            }
            return self.as_public(self.accounts[account_id])

    def authenticate(self, username: str, password: str) -> Optional[dict[str, Any]]:
        with self.lock:
            accounts = list(self.accounts.values())
        account = next((a for a in accounts if a["username"] == username), None)
        if not account:
            return None
        if not verify_password(password, account["hashed_password"]):
            return None
        return account

    def issue_token(self, account: dict[str, Any]) -> Token:
        token, expires_at = issue_dashboard_token(
            account_id=account["account_id"],
            role=account["role"].value,
        )
        self.event_logger.log_event(
            event_type="dashboard_login",
            actor_id=account["account_id"],
            details={"username": account["username"]},
        )
        return Token(access_token=token, expires_at=expires_at)

    def require_account(self, account_id: str) -> dict[str, Any]:
        with self.lock:
            account = self.accounts.get(account_id)
        if not account:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Account not found",
            )
        return account

    @staticmethod
    def as_public(account: dict[str, Any]) -> DashboardAccount:
        return DashboardAccount(
            account_id=account["account_id"],
            username=account["username"],
            role=account["role"],
        )
