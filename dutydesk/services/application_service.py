from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional, Union
from uuid import uuid4

from dutydesk.core.errors import InvalidRecordError
from dutydesk.models.application import (
    AlreadyDecided,
    Application,
    ApplicationCreate,
    ApplicationStatus,
    Division,
)
from dutydesk.repositories.document_store import DocumentRepository, now_ms
from dutydesk.services.audit_service import EventLogger


logger = logging.getLogger(__name__)

TERMINAL_STATUSES = {ApplicationStatus.APPROVED, ApplicationStatus.DENIED}


class ApplicationService:
    def __init__(
        self,
        repository: DocumentRepository,
        event_logger: EventLogger,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.repository = repository
        self.event_logger = event_logger
        self.clock = clock

    def submit(self, user_id: str, payload: ApplicationCreate) -> Application:
        if not user_id or not user_id.strip():
            raise InvalidRecordError("Application requires a userId")

        application = Application(
            id=f"app-{uuid4().hex[:10]}",
            user_id=user_id,
            division=payload.division,
            answers=payload.answers,
            status=ApplicationStatus.PENDING,
            created_at=self.clock(),
        )

        with self.repository.lock:
            document = self.repository.read()
            document.applications.append(application)
            self.repository.replace(document)

        logger.info("Application %s submitted by %s for %s", application.id, user_id, application.division.value)
        self.event_logger.log_event(
            event_type="application_submitted",
            actor_id=user_id,
            details={"application_id": application.id, "division": application.division.value},
        )
        return application

    def find_latest_for_user(self, user_id: str) -> Optional[Application]:
        latest: Optional[Application] = None
        for application in self.repository.read().applications:
            if application.user_id != user_id:
                continue
            # ">=" lets the later insertion win when timestamps coincide
            if latest is None or application.created_at >= latest.created_at:
                latest = application
        return latest

    def get(self, application_id: str) -> Optional[Application]:
        return next(
            (a for a in self.repository.read().applications if a.id == application_id),
            None,
        )

    def list_applications(
        self,
        user_id: Optional[str] = None,
        status: Optional[ApplicationStatus] = None,
    ) -> list[Application]:
        rows = self.repository.read().applications
        if user_id:
            rows = [a for a in rows if a.user_id == user_id]
        if status:
            rows = [a for a in rows if a.status == status]
        return rows

    def decide(
        self,
        application_id: str,
        outcome: ApplicationStatus,
        decided_by: str,
        extra: Optional[str] = None,
        override: bool = False,
    ) -> Union[Application, AlreadyDecided, None]:
        """Record an approval or denial.

        ``extra`` is the accepted division on approval and the reason on denial.
        An application that already carries a decision is left untouched and
        returned wrapped in ``AlreadyDecided`` unless ``override`` is set.
        Returns None when no application has ``application_id``.
        """
        if outcome not in TERMINAL_STATUSES:
            raise InvalidRecordError(f"Cannot decide an application as '{outcome.value}'")
        if not decided_by or not decided_by.strip():
            raise InvalidRecordError("A decision requires decidedBy")

        division: Optional[Division] = None
        if outcome == ApplicationStatus.APPROVED and extra:
            try:
                division = Division(extra)
            except ValueError as exc:
                raise InvalidRecordError(f"Unknown division '{extra}'") from exc
            if division == Division.UNKNOWN:
                raise InvalidRecordError("An approval must name a real division")

        with self.repository.lock:
            document = self.repository.read()
            application = next((a for a in document.applications if a.id == application_id), None)
            if application is None:
                return None

            if application.is_decided and not override:
                logger.info(
                    "Application %s already %s; refusing %s by %s",
                    application_id,
                    application.status.value,
                    outcome.value,
                    decided_by,
                )
                return AlreadyDecided(application=application)

            previous = application.status
            application.status = outcome
            application.decided_at = self.clock()
            application.decided_by = decided_by
            if outcome == ApplicationStatus.APPROVED:
                if division is not None:
                    application.division = division
                application.decision_reason = None
            else:
                application.decision_reason = extra
            self.repository.replace(document)

        if previous in TERMINAL_STATUSES:
            logger.warning(
                "Application %s decision overridden: %s -> %s by %s",
                application_id,
                previous.value,
                outcome.value,
                decided_by,
            )
        self.event_logger.log_event(
            event_type="application_decided",
            actor_id=decided_by,
            details={
                "application_id": application_id,
                "decision": outcome.value,
                "previous": previous.value,
                "extra": extra,
            },
        )
        return application
