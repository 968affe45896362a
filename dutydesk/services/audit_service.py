from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from threading import RLock
from typing import Any


logger = logging.getLogger(__name__)


class EventLogger:
    """Append-only JSON-lines trail of lifecycle events."""

    def __init__(self, event_path: Path) -> None:
        self.event_path = Path(event_path)
        self.event_path.parent.mkdir(parents=True, exist_ok=True)
        self.lock = RLock()

    def log_event(self, event_type: str, actor_id: str, details: dict[str, Any]) -> bool:
        """Append one event; returns False when the trail could not be written."""
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": event_type,
            "actor_id": actor_id,
            "details": details,
        }
        line = json.dumps(payload, default=str)
        with self.lock:
            try:
                with self.event_path.open("a", encoding="utf-8") as f:
                    f.write(line + "\n")
            except OSError as exc:
                # the mutation is already committed to the document
                logger.error("Could not append %s event to %s: %s", event_type, self.event_path, exc)
                return False
        return True

    def read_events(self, event_type: str | None = None) -> list[dict[str, Any]]:
        if not self.event_path.exists():
            return []

        with self.lock:
            lines = self.event_path.read_text(encoding="utf-8").splitlines()

        events: list[dict[str, Any]] = []
        for raw in lines:
            if not raw.strip():
                continue
            try:
                event = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("Skipping undecodable audit line: %s", raw[:120])
                continue
            if event_type and event.get("event_type") != event_type:
                continue
            events.append(event)
        return events

    def recent_events(self, limit: int = 100, event_type: str | None = None) -> list[dict[str, Any]]:
        return self.read_events(event_type)[-limit:]
