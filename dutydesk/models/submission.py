from enum import Enum

from pydantic import Field

from dutydesk.models.common import RecordModel


class ReportKind(str, Enum):
    CITATION = "citation"
    ARREST = "arrest"
    USE_OF_FORCE = "use_of_force"
    REAPER_AAR = "reaper_aar"
    CID_INCIDENT = "cid_incident"
    CID_CASE = "cid_case"
    TU_SHIFT = "tu_shift"


class ReportCreate(RecordModel):
    kind: ReportKind
    summary: str = Field(min_length=1, max_length=300)
    details: dict[str, str] = Field(default_factory=dict)


class Report(ReportCreate):
    id: str
    user_id: str
    created_at: int


class RoleRequestCreate(RecordModel):
    roles: list[str] = Field(min_length=1)
    reason: str = Field(default="", max_length=500)


class RoleRequest(RoleRequestCreate):
    id: str
    user_id: str
    created_at: int


class RosterRequestCreate(RecordModel):
    change: str = Field(min_length=1, max_length=100)
    details: str = Field(default="", max_length=1000)


class RosterRequest(RosterRequestCreate):
    id: str
    user_id: str
    created_at: int
