from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from campus_runtime.metrics import MetricsCollector
from factories import make_draft
from stores.models import Ticket
from stores.schema import validate_collection_payload
from stores.storage import TICKETS_KEY, MemoryStorage
from stores.tickets import TicketStore


def test_schema_accepts_stored_collection(store: TicketStore) -> None:
    t = store.create(make_draft())
    store.assign_worker(t.id, "Rajesh Kumar")
    validate_collection_payload([x.to_record() for x in store.tickets])


def test_schema_rejects_missing_fields() -> None:
    record = {"id": "abc", "status": "new"}
    with pytest.raises(ValueError) as exc:
        validate_collection_payload([record])
    assert "userId" in str(exc.value)


def test_schema_rejects_unknown_work_type(store: TicketStore) -> None:
    record = store.create(make_draft()).to_record()
    record["workType"] = "painting"
    with pytest.raises(ValueError):
        validate_collection_payload([record])


def test_schema_rejects_hostel_record_with_sub_block(store: TicketStore) -> None:
    record = store.create(make_draft(blockType="hostel", subBlock=None)).to_record()
    record["subBlock"] = "AB2"
    with pytest.raises(ValueError):
        validate_collection_payload([record])


def test_schema_rejects_academic_record_without_sub_block(store: TicketStore) -> None:
    record = store.create(make_draft()).to_record()
    del record["subBlock"]
    with pytest.raises(ValueError):
        validate_collection_payload([record])


def test_stored_hostel_record_with_sub_block_is_treated_as_corrupt(store: TicketStore) -> None:
    record = store.create(make_draft(blockType="hostel", subBlock=None)).to_record()
    record["subBlock"] = "AB1"
    other = TicketStore(MemoryStorage({TICKETS_KEY: json.dumps([record])}), metrics=MetricsCollector())
    assert other.load().outcome == "corrupt_recovered"


def test_academic_draft_requires_sub_block() -> None:
    with pytest.raises(ValidationError):
        make_draft(subBlock=None)


def test_hostel_draft_drops_sub_block() -> None:
    assert make_draft(blockType="hostel", subBlock="AB1").sub_block is None


def test_ticket_model_enforces_sub_block_rule(store: TicketStore) -> None:
    record = store.create(make_draft()).to_record()
    record["blockType"] = "hostel"
    with pytest.raises(ValidationError):
        Ticket.model_validate(record)
