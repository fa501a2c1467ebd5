from __future__ import annotations

import pytest

from campus_runtime.metrics import MetricsCollector
from stores.storage import MemoryStorage
from stores.tickets import TicketStore
from factories import FrozenClock


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage, clock: FrozenClock) -> TicketStore:
    s = TicketStore(storage, clock=clock, metrics=MetricsCollector())
    s.load()
    return s
