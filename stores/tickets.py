from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from campus_runtime.audit import AuditLogger
from campus_runtime.clock import Clock, new_ticket_id, next_timestamp, utc_now, utc_now_iso
from campus_runtime.metrics import MetricsCollector, metrics as default_metrics
from lifecycle.transitions import TransitionPolicy
from stores.models import (
    TICKET_STATUSES,
    LoadResult,
    MutationResult,
    Ticket,
    TicketDraft,
    TicketStatus,
    tickets_to_records,
)
from stores.schema import validate_collection_payload
from stores.storage import TICKETS_KEY, KeyValueStorage, StorageReadError

logger = logging.getLogger(__name__)


class TicketStore:
    """
    Authoritative in-memory ticket collection, newest first.

    Every mutation writes the whole collection to storage before the
    in-memory list is replaced, so a failed write leaves memory untouched.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        policy: Optional[TransitionPolicy] = None,
        audit: Optional[AuditLogger] = None,
        clock: Clock = utc_now,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.storage = storage
        self.policy = policy or TransitionPolicy()
        self.audit = audit
        self.clock = clock
        self.metrics = metrics or default_metrics
        self._tickets: List[Ticket] = []
        self._loaded = False

    @property
    def tickets(self) -> List[Ticket]:
        return list(self._tickets)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self) -> LoadResult:
        try:
            return self._read(initial=True)
        finally:
            self._loaded = True

    def refresh(self) -> LoadResult:
        # last write wins when storage holds a readable collection;
        # a missing or unreadable entry leaves memory as it is
        return self._read(initial=False)

    def _read(self, initial: bool) -> LoadResult:
        try:
            raw = self.storage.get_item(TICKETS_KEY)
        except StorageReadError as exc:
            return self._recover(str(exc), initial)

        if raw is None:
            if initial:
                self._tickets = []
            self.metrics.record_load("tickets", "empty")
            return LoadResult.empty()

        try:
            payload = json.loads(raw)
            validate_collection_payload(payload)
            tickets = [Ticket.model_validate(rec) for rec in payload]
        except (ValueError, ValidationError, RecursionError) as exc:
            return self._recover(f"{type(exc).__name__}: {exc}"[:500], initial)

        self._tickets = tickets
        self.metrics.record_load("tickets", "loaded")
        return LoadResult.loaded(len(tickets))

    def _recover(self, error: str, initial: bool) -> LoadResult:
        if initial:
            logger.warning("Ticket collection unreadable, starting empty: %s", error)
            self._tickets = []
        else:
            logger.warning("Ticket collection unreadable, keeping %d tickets in memory: %s", len(self._tickets), error)
        self.metrics.record_load("tickets", "corrupt_recovered")
        self._audit("load_recovered", error=error, kept=len(self._tickets))
        return LoadResult.corrupt_recovered(error)

    def _persist(self, tickets: List[Ticket]) -> None:
        t0 = time.perf_counter()
        blob = json.dumps(tickets_to_records(tickets), ensure_ascii=False)
        self.storage.set_item(TICKETS_KEY, blob)
        self.metrics.observe_write(TICKETS_KEY, (time.perf_counter() - t0) * 1000.0)
        self._tickets = tickets

    def create(self, draft: TicketDraft) -> Ticket:
        existing = {t.id for t in self._tickets}
        ticket_id = new_ticket_id()
        while ticket_id in existing:
            ticket_id = new_ticket_id()

        now = utc_now_iso(self.clock)
        ticket = Ticket(id=ticket_id, status="new", created_at=now, updated_at=now, **draft.model_dump())

        self._persist([ticket] + self._tickets)
        logger.info("Created ticket %s for %s", ticket.id, ticket.user_id)
        self.metrics.record_operation("create", "applied")
        self._audit("create", ticket.id, status=ticket.status, user_id=ticket.user_id)
        return ticket

    def assign_worker(self, ticket_id: str, worker_name: str, override: bool = False) -> MutationResult:
        return self._transition(
            "assign_worker",
            ticket_id,
            "pending",
            {"assigned_worker": worker_name},
            override,
        )

    def close(self, ticket_id: str, photo_reference: str, review_text: str, override: bool = False) -> MutationResult:
        return self._transition(
            "close",
            ticket_id,
            "closed",
            {"resolved_photo": photo_reference, "review": review_text},
            override,
        )

    def set_status(self, ticket_id: str, new_status: TicketStatus, override: bool = False) -> MutationResult:
        if new_status not in TICKET_STATUSES:
            raise ValueError(f"unknown ticket status: {new_status}")
        return self._transition("set_status", ticket_id, new_status, {}, override)

    def _transition(
        self,
        action: str,
        ticket_id: str,
        target: str,
        changes: Dict[str, Any],
        override: bool,
    ) -> MutationResult:
        index = self._index_of(ticket_id)
        if index is None:
            logger.debug("%s ignored, no ticket %s", action, ticket_id)
            self.metrics.record_operation(action, "not_found")
            self._audit(action, ticket_id, decision="not_found")
            return MutationResult.not_found(ticket_id)

        current = self._tickets[index]
        decision = self.policy.decide(action, current.status, target, override=override)
        if not decision.allow:
            logger.info("%s on %s rejected: %s", action, ticket_id, decision.reason)
            self.metrics.record_operation(action, "rejected")
            self._audit(
                action,
                ticket_id,
                decision="rejected",
                reason=decision.reason,
                from_status=current.status,
                to_status=target,
            )
            return MutationResult.rejected(current, decision.reason)

        updated = current.model_copy(
            update={
                **changes,
                "status": target,
                "updated_at": next_timestamp(current.updated_at, self.clock),
            }
        )
        tickets = list(self._tickets)
        tickets[index] = updated
        self._persist(tickets)

        self.metrics.record_operation(action, "applied")
        self._audit(
            action,
            ticket_id,
            decision="applied",
            reason=decision.reason,
            override=override,
            from_status=current.status,
            to_status=target,
        )
        return MutationResult.ok(updated)

    def _index_of(self, ticket_id: str) -> Optional[int]:
        for i, t in enumerate(self._tickets):
            if t.id == ticket_id:
                return i
        return None

    def get(self, ticket_id: str) -> Optional[Ticket]:
        index = self._index_of(ticket_id)
        return None if index is None else self._tickets[index]

    def query_by_user(self, user_id: str) -> List[Ticket]:
        return [t for t in self._tickets if t.user_id == user_id]

    def query_by_status(self, status: TicketStatus) -> List[Ticket]:
        return [t for t in self._tickets if t.status == status]

    def active_for_user(self, user_id: str) -> List[Ticket]:
        return [t for t in self._tickets if t.user_id == user_id and t.status != "closed"]

    def count_by_status(self) -> Dict[str, int]:
        counts = {status: 0 for status in TICKET_STATUSES}
        for t in self._tickets:
            counts[t.status] += 1
        return counts

    def _audit(self, event: str, ticket_id: Optional[str] = None, **fields: Any) -> None:
        if self.audit is not None:
            self.audit.emit(event, ticket_id=ticket_id, store="tickets", **fields)
