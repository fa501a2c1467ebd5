from __future__ import annotations

from pydantic import BaseModel
from dotenv import load_dotenv
import os

load_dotenv()


class Settings(BaseModel):
    storage_dir: str = os.getenv("STORAGE_DIR", ".campusfix")
    audit_log_path: str = os.getenv("AUDIT_LOG_PATH", "results/audit.jsonl")
    audit_enabled: bool = os.getenv("AUDIT_ENABLED", "true").lower() == "true"
    lifecycle_mode: str = os.getenv("LIFECYCLE_MODE", "forward_only")
    workers_file: str = os.getenv("WORKERS_FILE", "")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
