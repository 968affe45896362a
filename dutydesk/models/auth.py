from datetime import datetime

from pydantic import BaseModel

from dutydesk.core.rbac import Role


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class DashboardAccount(BaseModel):
    account_id: str
    username: str
    role: Role
