# infra/path.py
from __future__ import annotations
import os
import sys
from pathlib import Path

APP_NAME = "CostFlow"
COMPANY_NAME = "CostFlow"


def user_data_dir() -> Path:
    """
    Returns a per-user data directory, e.g.:

    Windows:
        C:\\Users\\<User>\\AppData\\Roaming\\CostFlow\\CostFlow

    macOS:
        ~/Library/Application Support/CostFlow/CostFlow

    Linux:
        ~/.local/share/CostFlow/CostFlow

    ``CF_DATA_DIR`` overrides the location outright.
    """
    override = (os.getenv("CF_DATA_DIR") or "").strip()
    if override:
        path = Path(override).expanduser()
        path.mkdir(parents=True, exist_ok=True)
        return path
    try:
        if sys.platform.startswith("win"):
            base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
        elif sys.platform == "darwin":
            base = Path.home() / "Library" / "Application Support"
        else:
            base = Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share"))

        path = base / COMPANY_NAME / APP_NAME
        path.mkdir(parents=True, exist_ok=True)
        return path
    except OSError:
        # Last-resort fallback: use home directory
        fallback = Path.home() / f".{APP_NAME.lower()}"
        fallback.mkdir(parents=True, exist_ok=True)
        return fallback


def default_db_path() -> Path:
    """The full path to the SQLite ledger database under the user data dir."""
    return user_data_dir() / "costflow.db"


def receipts_dir() -> Path:
    path = user_data_dir() / "receipts"
    path.mkdir(parents=True, exist_ok=True)
    return path
