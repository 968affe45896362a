from fastapi import APIRouter, Depends, HTTPException

from dutydesk.api.deps import require_permission
from dutydesk.models.ticket import Ticket, TicketCreate, TicketDoneRequest
from dutydesk.services.container import ticket_service


router = APIRouter(prefix="/tickets", tags=["Tickets"])


@router.get("", response_model=list[Ticket])
def list_tickets(
    open_only: bool = False,
    current_account: dict = Depends(require_permission("tickets:read")),
) -> list[Ticket]:
    _ = current_account
    return ticket_service.list_tickets(open_only=open_only)


@router.post("/users/{user_id}", response_model=Ticket, status_code=201)
def open_ticket(
    user_id: str,
    payload: TicketCreate,
    current_account: dict = Depends(require_permission("tickets:open")),
) -> Ticket:
    _ = current_account
    return ticket_service.open(user_id, payload)


@router.post("/channels/{channel_id}/close", response_model=Ticket)
def close_ticket(
    channel_id: str,
    current_account: dict = Depends(require_permission("tickets:close")),
) -> Ticket:
    ticket = ticket_service.close(channel_id, closed_by=current_account["account_id"])
    if ticket is None:
        raise HTTPException(status_code=404, detail="No open ticket in this channel")
    return ticket


@router.patch("/{ticket_id}/done", response_model=Ticket)
def set_ticket_done(
    ticket_id: str,
    payload: TicketDoneRequest,
    current_account: dict = Depends(require_permission("tickets:close")),
) -> Ticket:
    ticket = ticket_service.set_done(ticket_id, payload.done, actor_id=current_account["account_id"])
    if ticket is None:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return ticket
