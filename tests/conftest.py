import os
import pathlib
import sys
import tempfile

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# settings are read at import time; keep the process-wide container out of the repo tree
os.environ.setdefault("DUTYDESK_DATA_DIR", tempfile.mkdtemp(prefix="dutydesk-tests-"))
os.environ.setdefault("DUTYDESK_ADMIN_USERNAME", "admin")
os.environ.setdefault("DUTYDESK_ADMIN_PASSWORD", "admin-test-pass")

from dutydesk.models.application import ApplicationAnswers, ApplicationCreate, Division
from dutydesk.repositories.document_store import DocumentRepository
from dutydesk.services.activity_service import ActivityService
from dutydesk.services.application_service import ApplicationService
from dutydesk.services.audit_service import EventLogger
from dutydesk.services.duty_service import DutyService
from dutydesk.services.submission_service import SubmissionService
from dutydesk.services.ticket_service import TicketService


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now

    def set(self, value: int) -> None:
        self.now = value


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repository(tmp_path) -> DocumentRepository:
    return DocumentRepository(tmp_path / "db.json")


@pytest.fixture
def event_logger(tmp_path) -> EventLogger:
    return EventLogger(tmp_path / "events.jsonl")


@pytest.fixture
def application_service(repository, event_logger, clock) -> ApplicationService:
    return ApplicationService(repository=repository, event_logger=event_logger, clock=clock)


@pytest.fixture
def ticket_service(repository, event_logger, clock) -> TicketService:
    return TicketService(repository=repository, event_logger=event_logger, clock=clock)


@pytest.fixture
def duty_service(repository, event_logger, clock) -> DutyService:
    return DutyService(repository=repository, event_logger=event_logger, clock=clock)


@pytest.fixture
def activity_service(duty_service, clock) -> ActivityService:
    return ActivityService(duty_service=duty_service, leaderboard_size=10, clock=clock)


@pytest.fixture
def submission_service(repository, event_logger, clock) -> SubmissionService:
    return SubmissionService(repository=repository, event_logger=event_logger, clock=clock)


def make_application_payload(division: Division = Division.PATROL) -> ApplicationCreate:
    return ApplicationCreate(
        division=division,
        answers=ApplicationAnswers(
            name="Jordan Reyes",
            age="24",
            experience="Two years on another community's patrol roster.",
            availability="Weeknights and Sunday afternoons",
        ),
    )
