from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional
from uuid import uuid4

from dutydesk.core.errors import InvalidRecordError
from dutydesk.models.submission import (
    Report,
    ReportCreate,
    ReportKind,
    RoleRequest,
    RoleRequestCreate,
    RosterRequest,
    RosterRequestCreate,
)
from dutydesk.repositories.document_store import DocumentRepository, now_ms
from dutydesk.services.audit_service import EventLogger


logger = logging.getLogger(__name__)


class SubmissionService:
    """Member-filed reports and role/roster requests. Append and list only."""

    def __init__(
        self,
        repository: DocumentRepository,
        event_logger: EventLogger,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.repository = repository
        self.event_logger = event_logger
        self.clock = clock

    def add_report(self, user_id: str, payload: ReportCreate) -> Report:
        self._require_user(user_id)
        report = Report(
            id=f"rep-{uuid4().hex[:10]}",
            user_id=user_id,
            created_at=self.clock(),
            **payload.model_dump(),
        )
        with self.repository.lock:
            document = self.repository.read()
            document.reports.append(report)
            self.repository.replace(document)

        self.event_logger.log_event(
            event_type="report_filed",
            actor_id=user_id,
            details={"report_id": report.id, "kind": report.kind.value},
        )
        return report

    def list_reports(self, kind: Optional[ReportKind] = None, user_id: Optional[str] = None) -> list[Report]:
        reports = self.repository.read().reports
        if kind:
            reports = [r for r in reports if r.kind == kind]
        if user_id:
            reports = [r for r in reports if r.user_id == user_id]
        return reports

    def add_role_request(self, user_id: str, payload: RoleRequestCreate) -> RoleRequest:
        self._require_user(user_id)
        roles = [r.strip() for r in payload.roles if r and r.strip()]
        if not roles:
            raise InvalidRecordError("Role request must name at least one role")

        request = RoleRequest(
            id=f"rr-{uuid4().hex[:10]}",
            user_id=user_id,
            roles=roles,
            reason=payload.reason,
            created_at=self.clock(),
        )
        with self.repository.lock:
            document = self.repository.read()
            document.role_requests.append(request)
            self.repository.replace(document)

        self.event_logger.log_event(
            event_type="role_requested",
            actor_id=user_id,
            details={"request_id": request.id, "roles": roles},
        )
        return request

    def list_role_requests(self) -> list[RoleRequest]:
        return self.repository.read().role_requests

    def add_roster_request(self, user_id: str, payload: RosterRequestCreate) -> RosterRequest:
        self._require_user(user_id)
        request = RosterRequest(
            id=f"ros-{uuid4().hex[:10]}",
            user_id=user_id,
            created_at=self.clock(),
            **payload.model_dump(),
        )
        with self.repository.lock:
            document = self.repository.read()
            document.roster_requests.append(request)
            self.repository.replace(document)

        logger.info("Roster request %s (%s) from %s", request.id, request.change, user_id)
        self.event_logger.log_event(
            event_type="roster_requested",
            actor_id=user_id,
            details={"request_id": request.id, "change": request.change},
        )
        return request

    def list_roster_requests(self) -> list[RosterRequest]:
        return self.repository.read().roster_requests

    @staticmethod
    def _require_user(user_id: str) -> None:
        if not user_id or not user_id.strip():
            raise InvalidRecordError("Submission requires a userId")
