# config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def _load_env() -> None:
    cwd_env = Path.cwd() / ".env"
    pkg_env = Path(__file__).resolve().parents[2] / ".env"

    if pkg_env.exists():
        load_dotenv(pkg_env, override=False)
    if cwd_env.exists():
        load_dotenv(cwd_env, override=False)


_load_env()

DEFAULT_FOLDER_HREF = "/app/folder/{id}"


@dataclass(frozen=True)
class Settings:
    base_url: str
    token: Optional[str] = None
    timeout: int = 30

    # storage for the session token (optional)
    storage_backend: str = "fs"
    storage_dir: Optional[str] = None

    # browse behaviour
    upload_workers: int = 4
    folder_href: str = DEFAULT_FOLDER_HREF

    log_level: str = "INFO"


def _int_env(name: str, default: int, *, minimum: int = 1) -> int:
    raw = os.getenv(name, str(default)).strip()
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= minimum else default


def get_settings() -> Settings:
    base_url = os.getenv("DRIVE_BASE_URL", "").strip()
    if not base_url:
        raise RuntimeError("DRIVE_BASE_URL is missing. Put it in .env or environment variables.")

    token = os.getenv("DRIVE_TOKEN")

    folder_href = os.getenv("DRIVE_FOLDER_HREF", "").strip() or DEFAULT_FOLDER_HREF
    if "{id}" not in folder_href:
        raise RuntimeError("DRIVE_FOLDER_HREF must contain an {id} placeholder.")

    return Settings(
        base_url=base_url,
        token=(token.strip() if token else None),
        timeout=_int_env("DRIVE_TIMEOUT", 30),

        storage_backend=os.getenv("DRIVE_STORAGE_BACKEND", "fs").strip() or "fs",
        storage_dir=os.getenv("DRIVE_STORAGE_DIR", "").strip() or None,

        upload_workers=_int_env("DRIVE_UPLOAD_WORKERS", 4),
        folder_href=folder_href,

        log_level=(os.getenv("DRIVE_LOG_LEVEL", "INFO").strip() or "INFO").upper(),
    )
