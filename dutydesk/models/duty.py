from datetime import timedelta
from enum import Enum
from typing import Optional, Union

from pydantic import Field

from dutydesk.models.common import RecordModel


class ActivityRange(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


class ClockInRequest(RecordModel):
    assignments: Union[str, list[str]]


class DutySession(RecordModel):
    id: str
    user_id: str
    assignments: list[str] = Field(default_factory=list)
    clock_in: int
    clock_out: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.clock_out is None


class AlreadyActive(RecordModel):
    """Clock-in rejection: the user already has an open session."""

    session: DutySession


class ActivitySummary(RecordModel):
    user_id: str
    range: ActivityRange
    total: timedelta
    completed_sessions: int
    total_display: str


class LeaderboardEntry(RecordModel):
    rank: int
    user_id: str
    total: timedelta
    session_count: int
    total_display: str
