from __future__ import annotations

import json
import logging
import os
import shutil
import time
from pathlib import Path
from threading import RLock
from typing import Any

from pydantic import ValidationError

from dutydesk.core.errors import PersistenceError
from dutydesk.models.document import RECORD_TYPES, Document


logger = logging.getLogger(__name__)


def now_ms() -> int:
    return time.time_ns() // 1_000_000


class DocumentRepository:
    """Whole-document JSON store with an in-memory mirror.

    The mirror is hydrated once at construction and only ever replaced after a
    successful write, so it always equals the last durable state. Services hold
    ``lock`` across read, validate and replace to keep check-then-act sequences
    atomic.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.lock = RLock()
        self._document = self._hydrate()

    def read(self) -> Document:
        with self.lock:
            return self._document.model_copy(deep=True)

    def replace(self, document: Document) -> None:
        with self.lock:
            self._write(document)
            self._document = document.model_copy(deep=True)

    def flush(self) -> None:
        with self.lock:
            self._write(self._document)

    def reload(self) -> Document:
        with self.lock:
            self._document = self._hydrate()
            return self._document.model_copy(deep=True)

    def _hydrate(self) -> Document:
        if not self.path.exists():
            logger.info("No document at %s, starting empty", self.path)
            document = Document()
            try:
                self._write(document)
            except PersistenceError:
                logger.warning("Could not create %s; continuing in memory", self.path)
            return document

        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            logger.warning("Could not read %s (%s), starting empty", self.path, exc)
            return Document()

        if not raw.strip():
            logger.warning("Document at %s is empty, starting empty", self.path)
            return Document()

        try:
            payload = json.loads(raw)
        except ValueError as exc:
            # covers both invalid JSON and bytes that are not UTF-8
            logger.warning("Discarding undecodable document at %s: %s", self.path, exc)
            self._keep_backup()
            return Document()

        if not isinstance(payload, dict):
            logger.warning("Discarding document at %s: top level is %s", self.path, type(payload).__name__)
            self._keep_backup()
            return Document()

        document, skipped = self._load_records(payload)
        if skipped:
            logger.warning("Skipped %d unreadable records in %s", skipped, self.path)
            self._keep_backup()
        return document

    def _load_records(self, payload: dict[str, Any]) -> tuple[Document, int]:
        """Validate each stored record on its own so one bad row cannot sink the rest."""
        aliases = {Document.model_fields[name].alias: name for name in RECORD_TYPES}
        fields: dict[str, Any] = {}
        extras: dict[str, Any] = {}
        skipped = 0

        for key, value in payload.items():
            name = aliases.get(key, key if key in RECORD_TYPES else None)
            if name is None:
                extras[key] = value
                continue
            if not isinstance(value, list):
                logger.warning("Discarding %s in %s: expected a list, got %s", key, self.path, type(value).__name__)
                skipped += 1
                continue

            records = []
            for index, item in enumerate(value):
                try:
                    records.append(RECORD_TYPES[name].model_validate(item))
                except ValidationError as exc:
                    logger.warning(
                        "Skipping %s[%d] in %s (%d errors): %s",
                        key,
                        index,
                        self.path,
                        exc.error_count(),
                        str(item)[:200],
                    )
                    skipped += 1
            fields[name] = records

        return Document(**extras, **fields), skipped

    def _keep_backup(self) -> None:
        """Copy the stored file aside before a write can supersede what was discarded."""
        backup = self.path.with_suffix(self.path.suffix + ".bak")
        try:
            shutil.copy2(self.path, backup)
        except OSError as exc:
            logger.error("Could not back up %s to %s: %s", self.path, backup, exc)
            return
        logger.warning("Kept a copy of the unreadable document at %s", backup)

    def _write(self, document: Document) -> None:
        payload = document.model_dump_json(by_alias=True, indent=2)
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with temp_path.open("w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_path, self.path)
        except OSError as exc:
            logger.error("Failed to persist document to %s: %s", self.path, exc)
            self._discard_temp(temp_path)
            raise PersistenceError(f"Could not write document: {exc}", path=str(self.path)) from exc

    @staticmethod
    def _discard_temp(temp_path: Path) -> None:
        try:
            if temp_path.exists():
                temp_path.unlink()
        except OSError as exc:
            logger.error("Could not remove partial write %s: %s", temp_path, exc)
