from __future__ import annotations

import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    # Orchestrator
    namespace: str = os.getenv("LRPB_NAMESPACE", "default")
    # Unset means in-cluster config.
    kubeconfig: str | None = os.getenv("LRPB_KUBECONFIG")
    # Passed to every kubernetes call; None waits forever.
    request_timeout_s: float | None = _env_float("LRPB_REQUEST_TIMEOUT_S", 30.0)

    # Event log
    events_db_path: str = os.getenv("LRPB_EVENTS_DB_PATH", "lrpbridge.db")
    events_limit: int = _env_int("LRPB_EVENTS_LIMIT", 100)

    # CLI
    api_url: str = os.getenv("LRPB_API_URL", "http://localhost:8000")


settings = Settings()
