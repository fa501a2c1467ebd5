from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from campus_runtime.audit import AuditLogger
from campus_runtime.config import Settings, settings as default_settings
from campus_runtime.metrics import MetricsCollector
from lifecycle.transitions import TransitionPolicy
from stores.models import LoadResult
from stores.session import SessionStore
from stores.storage import FileStorage, KeyValueStorage
from stores.tickets import TicketStore
from stores.workers import load_worker_roster

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@dataclass
class CampusApp:
    settings: Settings
    storage: KeyValueStorage
    session: SessionStore
    tickets: TicketStore
    workers: List[str]
    metrics: MetricsCollector
    audit: Optional[AuditLogger] = None
    startup: dict[str, LoadResult] = field(default_factory=dict)

    @property
    def is_ready(self) -> bool:
        return self.session.is_loaded and self.tickets.is_loaded


def build_app(
    cfg: Optional[Settings] = None,
    storage: Optional[KeyValueStorage] = None,
) -> CampusApp:
    """Build both stores once and run their startup loads."""
    cfg = cfg or default_settings
    configure_logging(cfg.log_level)
    storage = storage if storage is not None else FileStorage(cfg.storage_dir)
    audit = AuditLogger(cfg.audit_log_path) if cfg.audit_enabled else None
    collector = MetricsCollector()

    session = SessionStore(storage, audit=audit, metrics=collector)
    tickets = TicketStore(
        storage,
        policy=TransitionPolicy(cfg.lifecycle_mode),
        audit=audit,
        metrics=collector,
    )

    app = CampusApp(
        settings=cfg,
        storage=storage,
        session=session,
        tickets=tickets,
        workers=load_worker_roster(cfg.workers_file or None),
        metrics=collector,
        audit=audit,
    )
    app.startup["session"] = session.restore()
    app.startup["tickets"] = tickets.load()
    logger.info(
        "Stores ready: session=%s tickets=%s (%d)",
        app.startup["session"].outcome,
        app.startup["tickets"].outcome,
        app.startup["tickets"].count,
    )
    return app
