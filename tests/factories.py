from __future__ import annotations

from datetime import UTC, datetime, timedelta

from stores.models import TicketDraft


class FrozenClock:
    """Returns the same instant until advanced."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 3, 1, 9, 30, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


def make_draft(**overrides) -> TicketDraft:
    fields = {
        "userId": "21BCE1001",
        "userName": "Priya Nair",
        "userRole": "student",
        "blockType": "academic",
        "subBlock": "AB1",
        "workType": "electrical",
        "description": "fan not working",
        "floorNo": "2",
        "wing": "A",
    }
    fields.update(overrides)
    return TicketDraft.model_validate(fields)
