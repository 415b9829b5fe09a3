from __future__ import annotations

import os
import sys
from pathlib import Path


def is_frozen() -> bool:
    return bool(getattr(sys, "frozen", False))


def base_path() -> Path:
    """Return the base path for bundled resources (assets) depending on runtime.

    - In PyInstaller onefile, resources are extracted to sys._MEIPASS.
    - In dev, use the project root.
    """
    if is_frozen():
        meipass = getattr(sys, "_MEIPASS", None)
        if meipass:
            return Path(meipass)
    return Path(__file__).resolve().parents[2]


def resource_path(rel: str | Path) -> Path:
    """Resolve a resource path (e.g., 'assets/logo.png') for current runtime."""
    rel = Path(rel)
    if rel.is_absolute():
        return rel
    return base_path() / rel


def user_writable_dir() -> Path:
    """Directory for user-writable files (settings.json, the SQLite database).

    BILLING_HOME overrides the default, which is the executable's directory when
    frozen and the project root otherwise.
    """
    override = os.environ.get("BILLING_HOME")
    if override:
        return Path(override)
    if is_frozen():
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[2]


def settings_path() -> Path:
    return user_writable_dir() / "settings.json"


def database_path() -> Path:
    return user_writable_dir() / "billing.db"
