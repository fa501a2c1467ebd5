from __future__ import annotations

import threading
from collections import Counter
from typing import Tuple


class MetricsCollector:
    """Small in-memory Prometheus-style counters for store operations."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._operations: Counter[Tuple[str, str]] = Counter()
        self._loads: Counter[Tuple[str, str]] = Counter()
        self._write_buckets: Counter[Tuple[str, str]] = Counter()
        self._bucket_edges = (1, 5, 10, 25, 50, 100, 250, 500, 1000)

    def record_operation(self, operation: str, outcome: str, n: int = 1) -> None:
        with self._lock:
            self._operations[(operation, outcome)] += n

    def record_load(self, store: str, outcome: str) -> None:
        with self._lock:
            self._loads[(store, outcome)] += 1

    def observe_write(self, key: str, latency_ms: float) -> None:
        bucket = self._bucket_for(latency_ms)
        with self._lock:
            self._write_buckets[(key, bucket)] += 1

    def count(self, operation: str, outcome: str) -> int:
        with self._lock:
            return self._operations[(operation, outcome)]

    def _bucket_for(self, latency_ms: float) -> str:
        for edge in self._bucket_edges:
            if latency_ms <= edge:
                return str(edge)
        return "+Inf"

    def render_prometheus(self) -> str:
        lines = []
        lines.append("# TYPE campusfix_store_operations_total counter")
        for (operation, outcome), value in sorted(self._operations.items()):
            lines.append(
                f'campusfix_store_operations_total{{operation="{operation}",outcome="{outcome}"}} {value}'
            )

        lines.append("# TYPE campusfix_store_loads_total counter")
        for (store, outcome), value in sorted(self._loads.items()):
            lines.append(f'campusfix_store_loads_total{{store="{store}",outcome="{outcome}"}} {value}')

        lines.append("# TYPE campusfix_storage_write_ms_bucket counter")
        for (key, bucket), value in sorted(self._write_buckets.items()):
            lines.append(
                f'campusfix_storage_write_ms_bucket{{key="{key}",le="{bucket}"}} {value}'
            )

        return "\n".join(lines) + "\n"


metrics = MetricsCollector()
