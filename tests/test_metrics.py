from __future__ import annotations

from campus_runtime.metrics import MetricsCollector
from factories import make_draft
from stores.storage import MemoryStorage
from stores.tickets import TicketStore


def test_metrics_render_prometheus() -> None:
    collector = MetricsCollector()
    collector.record_operation("assign_worker", "applied")
    collector.record_load("tickets", "corrupt_recovered")
    collector.observe_write("@campusfix_tickets", 0.4)

    text = collector.render_prometheus()
    assert 'campusfix_store_operations_total{operation="assign_worker",outcome="applied"} 1' in text
    assert 'store="tickets",outcome="corrupt_recovered"' in text
    assert 'le="1"' in text


def test_store_counts_outcomes() -> None:
    collector = MetricsCollector()
    store = TicketStore(MemoryStorage(), metrics=collector)
    store.load()
    t = store.create(make_draft())
    store.assign_worker(t.id, "Rajesh Kumar")
    store.assign_worker("missing", "Rajesh Kumar")

    assert collector.count("create", "applied") == 1
    assert collector.count("assign_worker", "applied") == 1
    assert collector.count("assign_worker", "not_found") == 1
