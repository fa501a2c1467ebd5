from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol


class CampusFixError(Exception):
    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code


class StorageError(CampusFixError):
    pass


class StorageReadError(StorageError):
    pass


class StorageWriteError(StorageError):
    pass


SESSION_KEY = "@campusfix_user"
TICKETS_KEY = "@campusfix_tickets"


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class MemoryStorage:
    """
    Dict-backed storage. Never touches the disk.
    Set `fail_writes` to make every set/remove raise StorageWriteError.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})
        self.fail_writes = False

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageWriteError("WRITE_FAILED", f"write to {key} refused")
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        if self.fail_writes:
            raise StorageWriteError("WRITE_FAILED", f"remove of {key} refused")
        self._items.pop(key, None)


class FileStorage:
    """One UTF-8 file per key under `directory`, replaced atomically on write."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        name = re.sub(r"[^A-Za-z0-9_.-]", "_", key.lstrip("@")) or "_"
        return self.directory / f"{name}.json"

    def get_item(self, key: str) -> Optional[str]:
        p = self.path_for(key)
        if not p.exists():
            return None
        try:
            return p.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageReadError("READ_FAILED", f"cannot read {p}: {exc}") from exc

    def set_item(self, key: str, value: str) -> None:
        p = self.path_for(key)
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=p.name, suffix=".tmp", dir=p.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp, p)
            except BaseException:
                if os.path.exists(tmp):
                    os.remove(tmp)
                raise
        except OSError as exc:
            raise StorageWriteError("WRITE_FAILED", f"cannot write {p}: {exc}") from exc

    def remove_item(self, key: str) -> None:
        p = self.path_for(key)
        try:
            p.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageWriteError("WRITE_FAILED", f"cannot remove {p}: {exc}") from exc
