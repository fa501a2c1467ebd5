from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

DEFAULT_ROSTER_PATH = Path(__file__).resolve().parent / "data" / "workers.yaml"


def load_yaml(path: str | Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_worker_roster(path: str | Path | None = None) -> List[str]:
    doc = load_yaml(path or DEFAULT_ROSTER_PATH)
    workers = doc.get("workers") or []
    if not isinstance(workers, list):
        raise ValueError("workers must be a list of names")
    names = [str(w).strip() for w in workers]
    return [n for n in names if n]


def resolve_worker(selected: Optional[str], custom: str = "") -> Optional[str]:
    """A picked preset wins over the typed name; blank input resolves to None."""
    if selected:
        return selected
    custom = (custom or "").strip()
    return custom or None
