from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from dutydesk.models.common import RecordModel


class Division(str, Enum):
    PATROL = "Patrol"
    CID = "CID"
    SRT = "SRT"
    TRAFFIC = "Traffic Unit"
    REAPER = "Reaper"
    IA = "IA"
    DISPATCH = "Dispatch"
    TRAINING = "Training Staff"
    # stored by the bot when a panel key had no division; never accepted as input
    UNKNOWN = "Unknown"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Division"]:
        # approval used to send the short label
        if value == "Training":
            return cls.TRAINING
        return None


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


ANSWER_LIMITS = {"name": 100, "age": 10, "experience": 1000, "availability": 500}


class ApplicationAnswers(RecordModel):
    name: str
    age: str
    experience: str
    availability: str


class ApplicationCreate(RecordModel):
    division: Division
    answers: ApplicationAnswers

    @field_validator("division")
    @classmethod
    def known_division(cls, value: Division) -> Division:
        if value == Division.UNKNOWN:
            raise ValueError("division must name a real division")
        return value

    @field_validator("answers")
    @classmethod
    def answers_within_limits(cls, value: ApplicationAnswers) -> ApplicationAnswers:
        for field, limit in ANSWER_LIMITS.items():
            text = getattr(value, field)
            if not text.strip():
                raise ValueError(f"{field} must not be blank")
            if len(text) > limit:
                raise ValueError(f"{field} must be at most {limit} characters")
        return value


class ApplicationDecisionRequest(RecordModel):
    outcome: ApplicationStatus
    extra: Optional[str] = Field(default=None, max_length=500)
    override: bool = False


class Application(RecordModel):
    id: str
    user_id: str
    division: Division
    answers: ApplicationAnswers
    status: ApplicationStatus = ApplicationStatus.PENDING
    created_at: int
    decided_at: Optional[int] = None
    decided_by: Optional[str] = None
    decision_reason: Optional[str] = None

    @property
    def is_decided(self) -> bool:
        return self.status != ApplicationStatus.PENDING


class AlreadyDecided(RecordModel):
    """Returned instead of overwriting a decision without an explicit override."""

    application: Application
