# bookshop/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=ROOT_DIR / ".env")


def _get_env(*keys: str, default: Optional[str] = None) -> Optional[str]:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_float(*keys: str, default: float) -> float:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    value = float(v)
    if value <= 0:
        raise ValueError(f"{keys[0]} must be positive, got {v!r}")
    return value


def _get_urls(*keys: str, default: str) -> Tuple[str, ...]:
    raw = _get_env(*keys, default=default) or default
    urls = tuple(u.strip().rstrip("/") for u in raw.split(",") if u.strip())
    if not urls:
        raise ValueError(f"{keys[0]} does not contain any URL")
    return urls


@dataclass(frozen=True)
class Settings:
    catalog_path: Path
    api_urls: Tuple[str, ...]
    refresh_interval: float
    request_timeout: float
    log_level: str


def load_settings() -> Settings:
    return Settings(
        catalog_path=Path(
            _get_env(
                "BOOKSHOP_CATALOG_PATH",
                "CATALOG_PATH",
                default=str(ROOT_DIR / "data" / "books.json"),
            )
        ),
        api_urls=_get_urls("BOOKSHOP_API_URLS", "API_URLS", default="http://localhost:8000"),
        refresh_interval=_get_float("BOOKSHOP_REFRESH_INTERVAL", default=5.0),
        request_timeout=_get_float("BOOKSHOP_REQUEST_TIMEOUT", default=10.0),
        log_level=(_get_env("BOOKSHOP_LOG_LEVEL", "LOG_LEVEL", default="INFO") or "INFO").upper(),
    )

