from __future__ import annotations

import json
from pathlib import Path

import pytest

from campus_runtime.audit import AuditLogger
from campus_runtime.metrics import MetricsCollector
from stores.models import SessionUser
from stores.session import SessionStore
from stores.storage import SESSION_KEY, FileStorage, MemoryStorage, StorageWriteError


def make_session(storage, audit: AuditLogger | None = None) -> SessionStore:
    return SessionStore(storage, audit=audit, metrics=MetricsCollector())


def test_restore_without_saved_session() -> None:
    s = make_session(MemoryStorage())
    assert s.is_loaded is False
    result = s.restore()
    assert result.outcome == "empty"
    assert s.user is None
    assert s.is_loaded is True


def test_login_survives_restart(tmp_path: Path) -> None:
    user = SessionUser(id="STF-042", name="Meera Iyer", role="staff")
    first = make_session(FileStorage(tmp_path))
    first.restore()
    first.login(user)
    assert first.user == user

    second = make_session(FileStorage(tmp_path))
    assert second.restore().outcome == "loaded"
    assert second.user == user
    assert second.is_admin is False


def test_logout_clears_memory_and_storage(tmp_path: Path) -> None:
    storage = MemoryStorage()
    audit = AuditLogger(str(tmp_path / "audit.jsonl"))
    s = make_session(storage, audit=audit)
    s.restore()
    s.login(SessionUser(id="Head", name="Head", role="admin"))
    assert s.is_admin
    s.logout()

    assert s.user is None
    assert storage.get_item(SESSION_KEY) is None
    assert make_session(storage).restore().outcome == "empty"
    assert [e["event"] for e in audit.read_events()] == ["login", "logout"]


def test_saved_session_format() -> None:
    storage = MemoryStorage()
    s = make_session(storage)
    s.login(SessionUser(id="21BCE1001", name="Priya Nair", role="student"))
    assert json.loads(storage.get_item(SESSION_KEY)) == {
        "id": "21BCE1001",
        "name": "Priya Nair",
        "role": "student",
    }


@pytest.mark.parametrize(
    "blob",
    ["not json", json.dumps(["a"]), json.dumps({"id": "x", "name": "y", "role": "janitor"})],
)
def test_corrupt_session_restores_signed_out(blob: str) -> None:
    s = make_session(MemoryStorage({SESSION_KEY: blob}))
    result = s.restore()
    assert result.outcome == "corrupt_recovered"
    assert s.user is None
    assert s.is_loaded is True


def test_failed_login_write_leaves_session_empty() -> None:
    storage = MemoryStorage()
    storage.fail_writes = True
    s = make_session(storage)
    with pytest.raises(StorageWriteError):
        s.login(SessionUser(id="u", name="u", role="student"))
    assert s.user is None


def test_deeply_nested_session_blob_restores_signed_out() -> None:
    s = make_session(MemoryStorage({SESSION_KEY: "[" * 200000}))
    result = s.restore()
    assert result.outcome == "corrupt_recovered"
    assert result.error.startswith("RecursionError")
    assert s.user is None
    assert s.is_loaded is True
