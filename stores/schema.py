from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from jsonschema import Draft202012Validator


_SCHEMA_PATH = Path(__file__).resolve().parent / "ticket_collection.schema.json"


def load_collection_schema() -> Dict[str, Any]:
    return json.loads(_SCHEMA_PATH.read_text(encoding="utf-8"))


def validate_collection_payload(payload: Any) -> None:
    validator = Draft202012Validator(load_collection_schema())
    errors = sorted(validator.iter_errors(payload), key=lambda e: list(e.path))
    if errors:
        joined = "; ".join(e.message for e in errors)
        raise ValueError(f"ticket collection schema validation failed: {joined}")
