#!/usr/bin/env python3
"""
config.py
-------------------
Runtime configuration for Samla.

Defaults come from ``samla.core.paths``; an optional YAML file can
override them. CLI options override both.

Example config.yaml:
    home: ~/Samla
    db_path: ~/Samla/Data/samla.db
    download_timeout: 10
    log_max_bytes: 1048576

Usage:
    from samla.core.config import load_config

    config = load_config()           # $SAMLA_HOME/config.yaml if present
    config.ensure_dirs()
    db = SamlaDB(config.db_path)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

# --- Third party imports ---
import yaml

# --- Local imports ---
from .exceptions import ValidationError
from . import paths

DEFAULT_DOWNLOAD_TIMEOUT = 15.0
"""Seconds before a remote photo download is abandoned."""


@dataclass
class SamlaConfig:
    """
    Resolved application settings.

    Attributes:
        home: Application home (base directory for relative photo paths)
        db_path: SQLite store file
        log_dir: Directory for log files
        images_subdir: Name of the asset root below ``home``
        download_timeout: Timeout for URL photo downloads, in seconds
        log_max_bytes: Log size before rotation
        log_backup_count: Number of rotated log files kept
    """

    home: Path = field(default_factory=lambda: paths.HOME)
    db_path: Optional[Path] = None
    log_dir: Optional[Path] = None
    images_subdir: str = paths.IMAGES_SUBDIR
    download_timeout: float = DEFAULT_DOWNLOAD_TIMEOUT
    log_max_bytes: int = 5 * 1024 * 1024
    log_backup_count: int = 3

    def __post_init__(self) -> None:
        self.home = Path(self.home).expanduser()
        self.db_path = (
            Path(self.db_path).expanduser()
            if self.db_path
            else self.home / "Data" / paths.DB_FILENAME
        )
        self.log_dir = (
            Path(self.log_dir).expanduser() if self.log_dir else self.home / "logs"
        )

    @property
    def images_dir(self) -> Path:
        """The asset root."""
        return self.home / self.images_subdir

    def ensure_dirs(self) -> None:
        """Create the home, data, images and log directories."""
        for directory in (self.home, self.db_path.parent, self.images_dir, self.log_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def with_overrides(self, **overrides: Any) -> "SamlaConfig":
        """
        Return a copy with the given non-None values replaced.

        A new ``home`` re-derives ``db_path`` and ``log_dir`` unless they
        are overridden as well.
        """
        values = {k: v for k, v in overrides.items() if v is not None}
        if "home" in values:
            # None makes __post_init__ derive them from the new home
            values.setdefault("db_path", None)
            values.setdefault("log_dir", None)
        return replace(self, **values)


_PATH_KEYS = {"home", "db_path", "log_dir"}
_NUMBER_KEYS = {"download_timeout": float, "log_max_bytes": int, "log_backup_count": int}


def _coerce(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate and convert raw YAML values to SamlaConfig field types."""
    known = {f.name for f in fields(SamlaConfig)}
    values: Dict[str, Any] = {}

    for key, raw in data.items():
        if key not in known or raw is None:
            continue
        if key in _PATH_KEYS:
            if not isinstance(raw, str):
                raise ValidationError(f"Config key '{key}' must be a path string")
            values[key] = Path(raw)
        elif key in _NUMBER_KEYS:
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                raise ValidationError(f"Config key '{key}' must be a number")
            if raw <= 0:
                raise ValidationError(f"Config key '{key}' must be positive")
            values[key] = _NUMBER_KEYS[key](raw)
        elif key == "images_subdir":
            if not isinstance(raw, str) or not raw.strip() or Path(raw).is_absolute():
                raise ValidationError("Config key 'images_subdir' must be a relative folder name")
            values[key] = raw.strip()

    return values


def load_config(path: Optional[Union[str, Path]] = None) -> SamlaConfig:
    """
    Load configuration from a YAML file.

    Args:
        path: Config file (default: ``paths.CONFIG_PATH``)

    Returns:
        SamlaConfig with file values applied over the defaults

    Raises:
        ValidationError: If the file is not valid YAML, is not a mapping,
            or holds a value of the wrong type
    """
    config_path = Path(path).expanduser() if path else paths.CONFIG_PATH
    if not config_path.is_file():
        return SamlaConfig()

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValidationError(f"Config file {config_path} must contain a mapping")

    return SamlaConfig(**_coerce(data))
