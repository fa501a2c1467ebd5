from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Set, Tuple

from stores.models import TICKET_STATUSES

LIFECYCLE_MODES = ("permissive", "forward_only", "strict")

_RANK = {status: i for i, status in enumerate(TICKET_STATUSES)}

# (action, current status) -> statuses reachable in strict mode
STRICT_TRANSITIONS: Dict[Tuple[str, str], Set[str]] = {
    ("assign_worker", "new"): {"pending"},
    ("assign_worker", "pending"): {"pending"},
    ("close", "pending"): {"closed"},
    ("set_status", "new"): {"pending"},
    ("set_status", "pending"): {"closed"},
}


@dataclass(frozen=True)
class TransitionDecision:
    allow: bool
    reason: str


class TransitionPolicy:
    """
    Decides whether a ticket may move from one status to another.

    permissive    every move allowed (unconditional overwrite)
    forward_only  no move back along new -> pending -> closed; skips allowed
    strict        only the moves listed in STRICT_TRANSITIONS
    """

    def __init__(self, mode: str = "forward_only"):
        if mode not in LIFECYCLE_MODES:
            raise ValueError(f"unknown lifecycle mode: {mode}")
        self.mode = mode

    def decide(self, action: str, current: str, target: str, override: bool = False) -> TransitionDecision:
        if override:
            return TransitionDecision(allow=True, reason="override")

        if self.mode == "permissive":
            return TransitionDecision(allow=True, reason="permissive")

        if self.mode == "forward_only":
            if _RANK[target] < _RANK[current]:
                return TransitionDecision(allow=False, reason=f"backward_transition:{current}->{target}")
            if current == "closed":
                return TransitionDecision(allow=False, reason="ticket_already_closed")
            return TransitionDecision(allow=True, reason="forward")

        allowed = STRICT_TRANSITIONS.get((action, current), set())
        if target in allowed:
            return TransitionDecision(allow=True, reason="strict_transition")
        return TransitionDecision(allow=False, reason=f"transition_not_allowed:{action}:{current}->{target}")
