# infra/path.py
from __future__ import annotations
import os
import sys
from pathlib import Path

APP_NAME = "TaskFleet"
COMPANY_NAME = "TaskFleet"


def user_data_dir() -> Path:
    """
    Returns a per-user data directory, e.g.:

    Windows:
        C:\\Users\\<User>\\AppData\\Roaming\\TaskFleet\\TaskFleet

    macOS:
        ~/Library/Application Support/TaskFleet/TaskFleet

    Linux:
        ~/.local/share/TaskFleet/TaskFleet
    """
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
        fallback = Path.home() / f".{APP_NAME.lower()}"
        fallback.mkdir(parents=True, exist_ok=True)
        return fallback


def default_db_path() -> Path:
    """SQLite file location; ``TF_DB_PATH`` overrides the per-user default."""
    override = (os.getenv("TF_DB_PATH") or "").strip()
    if override:
        return Path(override).expanduser()
    return user_data_dir() / "taskfleet.db"
