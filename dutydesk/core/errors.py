from __future__ import annotations


class DutyDeskError(Exception):
    """Base class for faults raised by the record store."""

    http_status: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRecordError(DutyDeskError, ValueError):
    """A record was submitted without a field its lifecycle requires."""

    http_status = 400


class PersistenceError(DutyDeskError):
    """The document could not be written to durable storage."""

    http_status = 500

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path
