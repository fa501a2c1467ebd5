from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Dict, List


class AuditLogger:
    """
    Appends one JSON line per store event: mutations and their decisions,
    login/logout, and loads that had to recover from unreadable storage.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, event: str, ticket_id: str | None = None, store: str = "tickets", **fields: Any) -> Dict[str, Any]:
        record: Dict[str, Any] = {"ts": time.time(), "event": event, "store": store}
        if ticket_id is not None:
            record["ticket_id"] = ticket_id
        record.update(fields)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")
        return record

    def read_events(self, event: str | None = None) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        lines = self.path.read_text(encoding="utf-8").splitlines()
        events = [json.loads(line) for line in lines if line.strip()]
        if event is not None:
            events = [e for e in events if e.get("event") == event]
        return events
