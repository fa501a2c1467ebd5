from __future__ import annotations

import json
import logging
from typing import Optional

from pydantic import ValidationError

from campus_runtime.audit import AuditLogger
from campus_runtime.metrics import MetricsCollector, metrics as default_metrics
from stores.models import LoadResult, SessionUser
from stores.storage import SESSION_KEY, KeyValueStorage, StorageReadError

logger = logging.getLogger(__name__)


class SessionStore:
    """
    At most one signed-in identity, persisted so a restart restores it.
    No credentials are checked: login is role selection plus free text.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        audit: Optional[AuditLogger] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.storage = storage
        self.audit = audit
        self.metrics = metrics or default_metrics
        self._user: Optional[SessionUser] = None
        self._loaded = False

    @property
    def user(self) -> Optional[SessionUser]:
        return self._user

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def is_admin(self) -> bool:
        return self._user is not None and self._user.role == "admin"

    def restore(self) -> LoadResult:
        try:
            result = self._read()
        finally:
            self._loaded = True
        self.metrics.record_load("session", result.outcome)
        return result

    def _read(self) -> LoadResult:
        try:
            raw = self.storage.get_item(SESSION_KEY)
        except StorageReadError as exc:
            return self._recover(str(exc))
        if raw is None:
            self._user = None
            return LoadResult.empty()
        try:
            self._user = SessionUser.model_validate(json.loads(raw))
        except (ValueError, ValidationError, RecursionError) as exc:
            return self._recover(f"{type(exc).__name__}: {exc}"[:500])
        return LoadResult.loaded(1)

    def _recover(self, error: str) -> LoadResult:
        logger.warning("Stored session unreadable, continuing signed out: %s", error)
        self._user = None
        if self.audit is not None:
            self.audit.emit("load_recovered", store="session", error=error)
        return LoadResult.corrupt_recovered(error)

    def login(self, user: SessionUser) -> SessionUser:
        self.storage.set_item(SESSION_KEY, user.model_dump_json())
        self._user = user
        logger.info("Signed in %s as %s", user.id, user.role)
        self.metrics.record_operation("login", "applied")
        if self.audit is not None:
            self.audit.emit("login", store="session", user_id=user.id, role=user.role)
        return user

    def logout(self) -> None:
        previous = self._user
        self.storage.remove_item(SESSION_KEY)
        self._user = None
        self.metrics.record_operation("logout", "applied")
        if self.audit is not None:
            self.audit.emit("logout", store="session", user_id=previous.id if previous else None)
