from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


load_dotenv()

APP_VERSION = "0.1.0"
DEFAULT_USAGE_LIMIT = 99
DEFAULT_RETENTION_DAYS = 30
DEFAULT_STORE_PATH = ".ca_review_store.json"


@dataclass(frozen=True)
class ReviewSettings:
    reference_table_path: Path | None
    store_path: Path
    usage_limit: int
    retention_days: int


def get_settings() -> ReviewSettings:
    """
    Load shell configuration from environment variables (a local .env is honoured).

    Reads:
      CA_REVIEW_REFERENCE_TABLE, CA_REVIEW_STORE_PATH,
      CA_REVIEW_USAGE_LIMIT, CA_REVIEW_RETENTION_DAYS
    """
    reference = os.getenv("CA_REVIEW_REFERENCE_TABLE", "").strip()
    return ReviewSettings(
        reference_table_path=Path(reference) if reference else None,
        store_path=Path(os.getenv("CA_REVIEW_STORE_PATH", DEFAULT_STORE_PATH).strip() or DEFAULT_STORE_PATH),
        usage_limit=_int_env("CA_REVIEW_USAGE_LIMIT", DEFAULT_USAGE_LIMIT),
        retention_days=_int_env("CA_REVIEW_RETENTION_DAYS", DEFAULT_RETENTION_DAYS),
    )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc
    if value < 0:
        raise ValueError(f"{name} must not be negative.")
    return value
