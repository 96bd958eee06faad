#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants for the Samla application folders.

All application data lives under a single home directory:
    HOME/
    ├── Data/          # SQLite store (samla.db)
    ├── Images/        # Asset root: every set photo lives here
    ├── logs/          # Application logs
    └── config.yaml    # Optional configuration overrides

HOME is ``$SAMLA_HOME`` when set, otherwise ``Samla`` inside the user's
configuration directory. Paths are resolved at import time; nothing is
created until ``config.ensure_dirs()`` runs.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
import sys
from pathlib import Path

APP_NAME = "Samla"


def _user_config_dir() -> Path:
    """
    Return the per-user configuration directory for this platform.

    Returns:
        %APPDATA% on Windows, ~/Library/Application Support on macOS,
        $XDG_CONFIG_HOME or ~/.config elsewhere
    """
    if sys.platform.startswith("win"):
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata)
        return Path.home() / "AppData" / "Roaming"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg = os.environ.get("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else Path.home() / ".config"


def get_app_home() -> Path:
    """Resolve the application home, honouring ``$SAMLA_HOME``."""
    override = os.environ.get("SAMLA_HOME")
    if override:
        return Path(override).expanduser().resolve()
    return _user_config_dir() / APP_NAME


# ----- Application home -----
HOME: Path = get_app_home()

# --- Store ---
DATA_DIR = HOME / "Data"
DB_FILENAME = "samla.db"
DB_PATH = DATA_DIR / DB_FILENAME

# --- Assets ---
IMAGES_SUBDIR = "Images"
IMAGES_DIR = HOME / IMAGES_SUBDIR

# ---- Logs & config ----
LOG_DIR = HOME / "logs"
CONFIG_PATH = HOME / "config.yaml"
