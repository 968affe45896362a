from __future__ import annotations

import json
import logging

import pytest

from dutydesk.core.errors import PersistenceError
from dutydesk.models.application import Division
from dutydesk.models.document import Document
from dutydesk.models.duty import DutySession
from dutydesk.models.ticket import Ticket, TicketType
from dutydesk.repositories.document_store import DocumentRepository
from dutydesk.services.duty_service import DutyService


def _populated_document() -> Document:
    return Document(
        tickets=[
            Ticket(
                id="chan-1-100",
                channel_id="chan-1",
                user_id="u-1",
                type=TicketType.IA,
                subject="Complaint about traffic stop",
                created_at=100,
            )
        ],
        sessions=[
            DutySession(id="u-1-200", user_id="u-1", assignments=["Patrol", "CID"], clock_in=200, clock_out=900),
            DutySession(id="u-2-300", user_id="u-2", assignments=["Reaper"], clock_in=300),
        ],
    )


def test_missing_file_starts_empty_and_creates_document(tmp_path):
    path = tmp_path / "db.json"
    repo = DocumentRepository(path)

    assert repo.read() == Document()
    assert path.exists()
    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert on_disk["applications"] == []
    assert on_disk["tickets"] == []
    assert on_disk["sessions"] == []


def test_round_trip_survives_restart(tmp_path):
    path = tmp_path / "db.json"
    original = _populated_document()
    DocumentRepository(path).replace(original)

    restarted = DocumentRepository(path)

    assert restarted.read() == original


def test_document_is_stored_with_camel_case_field_names(tmp_path):
    path = tmp_path / "db.json"
    DocumentRepository(path).replace(_populated_document())

    raw = json.loads(path.read_text(encoding="utf-8"))
    session = raw["sessions"][1]
    assert session["userId"] == "u-2"
    assert session["clockIn"] == 300
    assert session["clockOut"] is None
    assert raw["tickets"][0]["channelId"] == "chan-1"
    assert "roleRequests" in raw


@pytest.mark.parametrize(
    "content",
    [b"{not json", b'{"applications": "nope"}', b"   ", b"\xff", b'{"applications": [], "x": "\xff\xfe"}', b"[1, 2]"],
)
def test_malformed_content_is_logged_and_discarded(tmp_path, caplog, content):
    path = tmp_path / "db.json"
    path.write_bytes(content)

    with caplog.at_level(logging.WARNING, logger="dutydesk.repositories.document_store"):
        repo = DocumentRepository(path)

    assert repo.read() == Document()
    assert caplog.records


def test_older_layout_without_extra_collections_is_backfilled(tmp_path):
    path = tmp_path / "db.json"
    path.write_text(json.dumps({"applications": [], "tickets": [], "sessions": []}), encoding="utf-8")

    document = DocumentRepository(path).read()

    assert document.reports == []
    assert document.role_requests == []
    assert document.roster_requests == []


def test_read_returns_an_independent_snapshot(repository):
    repository.replace(_populated_document())

    snapshot = repository.read()
    snapshot.sessions.clear()

    assert len(repository.read().sessions) == 2


def test_failed_write_raises_and_keeps_last_durable_state(tmp_path, caplog):
    repo = DocumentRepository(tmp_path / "db.json")
    repo.replace(_populated_document())

    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    repo.path = blocker / "db.json"

    with caplog.at_level(logging.ERROR, logger="dutydesk.repositories.document_store"):
        with pytest.raises(PersistenceError):
            repo.replace(Document())

    assert repo.read() == _populated_document()
    assert any("Failed to persist" in r.getMessage() for r in caplog.records)


def test_reload_picks_up_external_edits(tmp_path):
    path = tmp_path / "db.json"
    repo = DocumentRepository(path)
    DocumentRepository(path).replace(_populated_document())

    assert repo.read() == Document()
    assert repo.reload() == _populated_document()


def _legacy_bot_document() -> dict:
    return {
        "applications": [
            {
                "id": "u9-1699990000000",
                "userId": "u9",
                "division": "Unknown",
                "answers": {"name": "Sam", "age": "31", "experience": "x" * 1500, "availability": "Fridays"},
                "status": "pending",
                "createdAt": 1699990000000,
                "decidedAt": None,
                "decidedBy": None,
                "decisionReason": None,
            }
        ],
        "tickets": [
            {
                "channelId": "chan-7",
                "userId": "u9",
                "type": "ia",
                "subject": "Complaint",
                "createdAt": 1699990001000,
                "closedAt": None,
            }
        ],
        "sessions": [
            {"id": "u9-1699990002000", "userId": "u9", "assignments": ["Patrol"], "clockIn": 1699990002000, "clockOut": 1699990900000}
        ],
        "reports": [],
        "roleRequests": [],
        "rosterRequests": [],
        "settings": {"adminRoleIds": ["r1"], "panels": {"appPanelChannelId": None}},
    }


def test_legacy_bot_document_loads_and_survives_a_write(tmp_path, event_logger, clock):
    path = tmp_path / "db.json"
    path.write_text(json.dumps(_legacy_bot_document()), encoding="utf-8")

    repo = DocumentRepository(path)
    document = repo.read()
    assert [s.user_id for s in document.sessions] == ["u9"]
    assert document.applications[0].division == Division.UNKNOWN
    ticket = document.tickets[0]
    assert ticket.id == "chan-7-1699990001000"
    assert ticket.done is False

    DutyService(repository=repo, event_logger=event_logger, clock=clock).clock_in("u2", "Patrol")

    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert [s["userId"] for s in on_disk["sessions"]] == ["u9", "u2"]
    assert on_disk["tickets"][0]["channelId"] == "chan-7"
    assert on_disk["applications"][0]["id"] == "u9-1699990000000"
    assert on_disk["settings"] == {"adminRoleIds": ["r1"], "panels": {"appPanelChannelId": None}}
    assert not (tmp_path / "db.json.bak").exists()


def test_unknown_top_level_keys_round_trip(tmp_path):
    path = tmp_path / "db.json"
    path.write_text(json.dumps({"sessions": [], "settings": {"adminRoleIds": ["r1"]}}), encoding="utf-8")

    repo = DocumentRepository(path)
    repo.replace(repo.read())

    assert json.loads(path.read_text(encoding="utf-8"))["settings"] == {"adminRoleIds": ["r1"]}
    assert DocumentRepository(path).read() == repo.read()


def test_invalid_record_is_skipped_and_file_backed_up(tmp_path, caplog):
    path = tmp_path / "db.json"
    stored = _legacy_bot_document()
    stored["sessions"].append({"userId": "u3", "clockIn": "yesterday"})
    original_bytes = json.dumps(stored).encode("utf-8")
    path.write_bytes(original_bytes)

    with caplog.at_level(logging.WARNING, logger="dutydesk.repositories.document_store"):
        repo = DocumentRepository(path)

    document = repo.read()
    assert [s.user_id for s in document.sessions] == ["u9"]
    assert len(document.applications) == 1
    assert len(document.tickets) == 1
    assert any("sessions[1]" in r.getMessage() for r in caplog.records)

    repo.replace(document)
    assert (tmp_path / "db.json.bak").read_bytes() == original_bytes


def test_undecodable_file_is_backed_up_before_overwrite(tmp_path):
    path = tmp_path / "db.json"
    path.write_bytes(b'{"sessions": [\xff')

    repo = DocumentRepository(path)
    repo.replace(repo.read())

    assert (tmp_path / "db.json.bak").read_bytes() == b'{"sessions": [\xff'


def test_failed_write_leaves_no_temp_file(tmp_path):
    repo = DocumentRepository(tmp_path / "db.json")
    target = tmp_path / "target"
    target.mkdir()
    repo.path = target

    with pytest.raises(PersistenceError):
        repo.replace(_populated_document())

    assert not (tmp_path / "target.tmp").exists()
    assert repo.read() == Document()
