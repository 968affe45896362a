from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Optional, Union

from dutydesk.core.errors import InvalidRecordError
from dutydesk.models.duty import AlreadyActive, DutySession
from dutydesk.repositories.document_store import DocumentRepository, now_ms
from dutydesk.services.audit_service import EventLogger


logger = logging.getLogger(__name__)


def normalize_assignments(assignments: Union[str, Iterable[str], None]) -> list[str]:
    """Strip, drop blanks and de-duplicate while keeping first-seen order."""
    if assignments is None:
        return []
    if isinstance(assignments, str):
        assignments = [assignments]

    seen: list[str] = []
    for raw in assignments:
        label = (raw or "").strip()
        if label and label not in seen:
            seen.append(label)
    return seen


class DutyService:
    """Clock-in / clock-out tracker; at most one open session per user."""

    def __init__(
        self,
        repository: DocumentRepository,
        event_logger: EventLogger,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.repository = repository
        self.event_logger = event_logger
        self.clock = clock

    def clock_in(
        self,
        user_id: str,
        assignments: Union[str, Iterable[str]],
    ) -> Union[DutySession, AlreadyActive]:
        if not user_id or not user_id.strip():
            raise InvalidRecordError("Clock-in requires a userId")
        labels = normalize_assignments(assignments)
        if not labels:
            raise InvalidRecordError("Clock-in requires at least one assignment")

        with self.repository.lock:
            document = self.repository.read()
            existing = self._find_open(document.sessions, user_id)
            if existing is not None:
                return AlreadyActive(session=existing)

            started = self.clock()
            session = DutySession(
                id=f"{user_id}-{started}",
                user_id=user_id,
                assignments=labels,
                clock_in=started,
            )
            document.sessions.append(session)
            self.repository.replace(document)

        logger.info("%s clocked in as %s", user_id, ", ".join(labels))
        self.event_logger.log_event(
            event_type="duty_clock_in",
            actor_id=user_id,
            details={"session_id": session.id, "assignments": labels},
        )
        return session

    def clock_out(self, user_id: str) -> Optional[DutySession]:
        with self.repository.lock:
            document = self.repository.read()
            session = self._find_open(document.sessions, user_id)
            if session is None:
                return None
            session.clock_out = self.clock()
            self.repository.replace(document)

        logger.info("%s clocked out after %d ms", user_id, session.clock_out - session.clock_in)
        self.event_logger.log_event(
            event_type="duty_clock_out",
            actor_id=user_id,
            details={"session_id": session.id, "duration_ms": session.clock_out - session.clock_in},
        )
        return session

    def open_session_for(self, user_id: str) -> Optional[DutySession]:
        return self._find_open(self.repository.read().sessions, user_id)

    def all_open_sessions(self) -> list[DutySession]:
        return [s for s in self.repository.read().sessions if s.is_open]

    def closed_sessions(self) -> list[DutySession]:
        return [s for s in self.repository.read().sessions if not s.is_open]

    @staticmethod
    def _find_open(sessions: list[DutySession], user_id: str) -> Optional[DutySession]:
        return next((s for s in sessions if s.user_id == user_id and s.is_open), None)
