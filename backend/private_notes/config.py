from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# backend/private_notes/config.py -> repository root
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"


def _getenv_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return default if value is None or value == "" else value


def _getenv_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _getenv_opt_path(name: str) -> Optional[Path]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    jwt_secret: str
    jwt_algorithm: str
    jwt_exp_minutes: int
    request_token_secret: str
    request_token_ttl_seconds: int
    note_max_length: int
    enrollment_file: Optional[Path]
    log_level: str
    log_file: Optional[Path]


def get_settings() -> Settings:
    """Read the service settings from the environment.

    Called at import time by the API modules, so tests change the
    environment and reload those modules.
    """
    jwt_secret = os.getenv("JWT_SECRET", "")
    return Settings(
        data_dir=Path(_getenv_str("APP_DATA_DIR", str(DEFAULT_DATA_DIR))),
        jwt_secret=jwt_secret,
        jwt_algorithm=_getenv_str("JWT_ALGORITHM", "HS256"),
        jwt_exp_minutes=_getenv_int("JWT_EXP_MINUTES", 60),
        request_token_secret=_getenv_str("REQUEST_TOKEN_SECRET", jwt_secret),
        request_token_ttl_seconds=_getenv_int("REQUEST_TOKEN_TTL_SECONDS", 12 * 60 * 60),
        note_max_length=_getenv_int("NOTE_MAX_LENGTH", 10_000),
        enrollment_file=_getenv_opt_path("ENROLLMENT_FILE"),
        log_level=_getenv_str("LOG_LEVEL", "INFO").upper(),
        log_file=_getenv_opt_path("LOG_FILE"),
    )
