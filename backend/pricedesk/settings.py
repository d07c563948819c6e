from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


DEFAULT_QUERY_TIMEOUT_SEC = 10.0
DEFAULT_SUPPLIER_SAMPLE_LIMIT = 1000


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    database_url: str | None = None
    query_timeout_sec: float = DEFAULT_QUERY_TIMEOUT_SEC
    # bounded scan for the distinct supplier count (undercounts past this)
    supplier_sample_limit: int = DEFAULT_SUPPLIER_SAMPLE_LIMIT


def _env_str(name: str) -> str | None:
    v = os.getenv(name)
    if v and v.strip():
        return v.strip()
    return None


def _env_float(name: str, default: float) -> float:
    raw = _env_str(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be > 0")
    return value


def _env_int(name: str, default: int) -> int:
    raw = _env_str(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value < 1:
        raise ValueError(f"{name} must be >= 1")
    return value


def get_settings() -> Settings:
    # 1) env var
    env = _env_str("PRICEDESK_DATA_DIR")
    if env is not None:
        p = Path(env).expanduser()
    else:
        # 2) default: backend/data
        # pricedesk/settings.py -> pricedesk/ -> backend/
        p = Path(__file__).resolve().parents[1] / "data"

    p.mkdir(parents=True, exist_ok=True)
    return Settings(
        data_dir=p,
        database_url=_env_str("PRICEDESK_DATABASE_URL"),
        query_timeout_sec=_env_float("PRICEDESK_QUERY_TIMEOUT_SEC", DEFAULT_QUERY_TIMEOUT_SEC),
        supplier_sample_limit=_env_int("PRICEDESK_SUPPLIER_SAMPLE_LIMIT", DEFAULT_SUPPLIER_SAMPLE_LIMIT),
    )
