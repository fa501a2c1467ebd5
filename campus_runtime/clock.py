from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def to_iso(moment: datetime) -> str:
    return moment.astimezone(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def utc_now_iso(clock: Clock = utc_now) -> str:
    return to_iso(clock())


def next_timestamp(previous: Optional[str], clock: Clock = utc_now) -> str:
    """
    Timestamp for a mutation that must sort strictly after `previous`.
    Falls back to previous + 1us when the clock has not moved on.
    """
    now = clock()
    if previous:
        floor = parse_iso(previous) + timedelta(microseconds=1)
        if now < floor:
            now = floor
    return to_iso(now)


def new_ticket_id() -> str:
    return str(uuid.uuid4())
