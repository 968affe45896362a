from __future__ import annotations

import pytest

from dutydesk.core.errors import InvalidRecordError
from dutydesk.models.ticket import TicketCreate, TicketType


def _payload(channel_id: str = "chan-1", ticket_type: TicketType = TicketType.GENERAL) -> TicketCreate:
    return TicketCreate(channel_id=channel_id, type=ticket_type, subject="Cannot see patrol channels")


def test_open_creates_open_not_done_ticket(ticket_service, clock):
    ticket = ticket_service.open("u-1", _payload(ticket_type=TicketType.TECH))

    assert ticket.id == f"chan-1-{clock.now}"
    assert ticket.closed_at is None
    assert ticket.done is False
    assert ticket.type == TicketType.TECH
    assert ticket_service.get(ticket.id) == ticket


def test_open_rejects_missing_user_or_channel(ticket_service):
    with pytest.raises(InvalidRecordError):
        ticket_service.open("", _payload())
    with pytest.raises(InvalidRecordError):
        ticket_service.open("u-1", _payload(channel_id="  "))


def test_channel_holds_at_most_one_open_ticket(ticket_service, clock):
    ticket_service.open("u-1", _payload())

    with pytest.raises(InvalidRecordError):
        ticket_service.open("u-2", _payload())

    ticket_service.close("chan-1")
    clock.advance(10)
    reopened = ticket_service.open("u-2", _payload())
    assert reopened.is_open
    assert len(ticket_service.list_tickets(open_only=True)) == 1


def test_close_is_idempotent(ticket_service, clock):
    ticket_service.open("u-1", _payload())
    clock.advance(30_000)
    closed_at = clock.now

    first = ticket_service.close("chan-1")
    clock.advance(30_000)
    second = ticket_service.close("chan-1")

    assert first is not None
    assert first.closed_at == closed_at
    assert second is None
    assert ticket_service.get(first.id).closed_at == closed_at


def test_close_unknown_channel_returns_none(ticket_service):
    assert ticket_service.close("chan-404") is None


def test_set_done_is_independent_of_closed_state(ticket_service):
    ticket = ticket_service.open("u-1", _payload())

    flagged = ticket_service.set_done(ticket.id, True)
    assert flagged.done is True
    assert flagged.closed_at is None

    ticket_service.close("chan-1")
    unflagged = ticket_service.set_done(ticket.id, False)
    assert unflagged.done is False
    assert unflagged.closed_at is not None


def test_set_done_unknown_ticket_returns_none(ticket_service):
    assert ticket_service.set_done("missing", True) is None


def test_list_tickets_keeps_insertion_order(ticket_service, clock):
    first = ticket_service.open("u-1", _payload("chan-a"))
    clock.advance(1)
    second = ticket_service.open("u-2", _payload("chan-b"))
    ticket_service.close("chan-a")

    assert [t.id for t in ticket_service.list_tickets()] == [first.id, second.id]
    assert [t.id for t in ticket_service.list_tickets(open_only=True)] == [second.id]
