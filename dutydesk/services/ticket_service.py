from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional

from dutydesk.core.errors import InvalidRecordError
from dutydesk.models.ticket import Ticket, TicketCreate
from dutydesk.repositories.document_store import DocumentRepository, now_ms
from dutydesk.services.audit_service import EventLogger


logger = logging.getLogger(__name__)


class TicketService:
    def __init__(
        self,
        repository: DocumentRepository,
        event_logger: EventLogger,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.repository = repository
        self.event_logger = event_logger
        self.clock = clock

    def open(self, user_id: str, payload: TicketCreate) -> Ticket:
        if not user_id or not user_id.strip():
            raise InvalidRecordError("Ticket requires a userId")
        if not payload.channel_id.strip():
            raise InvalidRecordError("Ticket requires a channelId")

        with self.repository.lock:
            document = self.repository.read()
            if any(t.channel_id == payload.channel_id and t.is_open for t in document.tickets):
                raise InvalidRecordError(f"Channel {payload.channel_id} already has an open ticket")

            created_at = self.clock()
            ticket = Ticket(
                id=f"{payload.channel_id}-{created_at}",
                channel_id=payload.channel_id,
                user_id=user_id,
                type=payload.type,
                subject=payload.subject,
                created_at=created_at,
            )
            document.tickets.append(ticket)
            self.repository.replace(document)

        logger.info("Ticket %s opened by %s (%s)", ticket.id, user_id, ticket.type.value)
        self.event_logger.log_event(
            event_type="ticket_opened",
            actor_id=user_id,
            details={"ticket_id": ticket.id, "channel_id": ticket.channel_id, "type": ticket.type.value},
        )
        return ticket

    def close(self, channel_id: str, closed_by: Optional[str] = None) -> Optional[Ticket]:
        with self.repository.lock:
            document = self.repository.read()
            ticket = next(
                (t for t in document.tickets if t.channel_id == channel_id and t.is_open),
                None,
            )
            if ticket is None:
                return None
            ticket.closed_at = self.clock()
            self.repository.replace(document)

        logger.info("Ticket %s closed", ticket.id)
        self.event_logger.log_event(
            event_type="ticket_closed",
            actor_id=closed_by or ticket.user_id,
            details={"ticket_id": ticket.id, "channel_id": channel_id},
        )
        return ticket

    def set_done(self, ticket_id: str, done: bool, actor_id: Optional[str] = None) -> Optional[Ticket]:
        with self.repository.lock:
            document = self.repository.read()
            ticket = next((t for t in document.tickets if t.id == ticket_id), None)
            if ticket is None:
                return None
            ticket.done = done
            self.repository.replace(document)

        self.event_logger.log_event(
            event_type="ticket_done",
            actor_id=actor_id or ticket.user_id,
            details={"ticket_id": ticket_id, "done": done},
        )
        return ticket

    def get(self, ticket_id: str) -> Optional[Ticket]:
        return next((t for t in self.repository.read().tickets if t.id == ticket_id), None)

    def list_tickets(self, open_only: bool = False) -> list[Ticket]:
        tickets = self.repository.read().tickets
        if open_only:
            return [t for t in tickets if t.is_open]
        return tickets
