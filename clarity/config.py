"""Runtime settings for Clarity, read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .insights import DEFAULT_WINDOW_DAYS
from .pagination import DEFAULT_CATEGORY_PAGE_SIZE, DEFAULT_TRANSACTION_PAGE_SIZE

DEFAULT_DATA_PATH = "data/transactions.csv"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    """Configuration handed to sources and views at construction time."""

    demo_mode: bool = False
    data_path: Path = Path(DEFAULT_DATA_PATH)
    page_size: int = DEFAULT_TRANSACTION_PAGE_SIZE
    category_page_size: int = DEFAULT_CATEGORY_PAGE_SIZE
    activity_window_days: int = DEFAULT_WINDOW_DAYS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            demo_mode=_env_bool(env, "CLARITY_DEMO_MODE", False),
            data_path=Path(env.get("CLARITY_DATA_PATH") or DEFAULT_DATA_PATH),
            page_size=_env_int(env, "CLARITY_PAGE_SIZE", DEFAULT_TRANSACTION_PAGE_SIZE),
            category_page_size=_env_int(env, "CLARITY_CATEGORY_PAGE_SIZE", DEFAULT_CATEGORY_PAGE_SIZE),
            activity_window_days=_env_int(env, "CLARITY_ACTIVITY_WINDOW_DAYS", DEFAULT_WINDOW_DAYS),
            log_level=(env.get("CLARITY_LOG_LEVEL") or "INFO").strip().upper(),
        )
