from enum import Enum
from typing import Optional

from pydantic import Field, model_validator

from dutydesk.models.common import RecordModel


class TicketType(str, Enum):
    GENERAL = "general"
    IA = "ia"
    TRAINING = "training"
    TECH = "tech"


class TicketCreate(RecordModel):
    channel_id: str = Field(min_length=1)
    type: TicketType = TicketType.GENERAL
    subject: str = Field(min_length=1, max_length=200)


class TicketDoneRequest(RecordModel):
    done: bool


class Ticket(RecordModel):
    id: str = ""
    channel_id: str
    user_id: str
    type: TicketType
    subject: str
    created_at: int
    closed_at: Optional[int] = None
    done: bool = False

    @model_validator(mode="after")
    def fill_missing_id(self) -> "Ticket":
        # the bot stored tickets keyed by channel only
        if not self.id:
            self.id = f"{self.channel_id}-{self.created_at}"
        return self

    @property
    def is_open(self) -> bool:
        return self.closed_at is None
