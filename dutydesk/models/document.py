from pydantic import ConfigDict, Field

from dutydesk.models.application import Application
from dutydesk.models.common import RecordModel
from dutydesk.models.duty import DutySession
from dutydesk.models.submission import Report, RoleRequest, RosterRequest
from dutydesk.models.ticket import Ticket


class Document(RecordModel):
    """The single persisted root. Sequence order is insertion order.

    Top-level keys owned by other components (the bot's per-guild ``settings``)
    are kept as extras and written back untouched.
    """

    model_config = ConfigDict(extra="allow")

    applications: list[Application] = Field(default_factory=list)
    tickets: list[Ticket] = Field(default_factory=list)
    sessions: list[DutySession] = Field(default_factory=list)
    reports: list[Report] = Field(default_factory=list)
    role_requests: list[RoleRequest] = Field(default_factory=list)
    roster_requests: list[RosterRequest] = Field(default_factory=list)


RECORD_TYPES = {
    "applications": Application,
    "tickets": Ticket,
    "sessions": DutySession,
    "reports": Report,
    "role_requests": RoleRequest,
    "roster_requests": RosterRequest,
}
