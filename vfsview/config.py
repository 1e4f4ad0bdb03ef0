"""Config-directory resolution, JSON settings, and log-file setup.

The config directory holds ``config.json``, ``vfsview.log``, and the host
directory backing the root mount. Settings are read defensively: a missing or
malformed file, or a value of the wrong type, falls back to the default.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "vfsview"
CONFIG_FILENAME = "config.json"
LOG_FILENAME = "vfsview.log"
ROOT_DIRNAME = "root"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class AppConfig:
    """Tunable runtime settings."""

    show_preview: bool = True
    double_click_seconds: float = 0.5
    terminal_lines_per_entry: int = 3
    text_control_ratio: float = 0.05
    pygments_style: str = "monokai"
    log_level: str = "INFO"


def default_config_directory() -> Path:
    return Path(user_config_dir(APP_NAME, appauthor=False))


def resolve_config_directory(override: str | Path | None = None) -> Path:
    """Return the config directory, creating it (mode 0700) when missing."""
    path = Path(override).expanduser() if override else default_config_directory()
    path.mkdir(mode=0o700, parents=True, exist_ok=True)
    return path


def load_config_data(config_dir: Path) -> dict[str, object]:
    """Load ``config.json`` as a dict; anything unusable yields ``{}``."""
    try:
        data = json.loads((config_dir / CONFIG_FILENAME).read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _bool(data: dict[str, object], key: str, default: bool) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _positive_float(data: dict[str, object], key: str, default: float) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return default
    return float(value)


def _positive_int(data: dict[str, object], key: str, default: int) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _string(data: dict[str, object], key: str, default: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        return default
    return value.strip()


def load_app_config(config_dir: Path) -> AppConfig:
    data = load_config_data(config_dir)
    defaults = AppConfig()
    ratio = _positive_float(data, "text_control_ratio", defaults.text_control_ratio)
    return AppConfig(
        show_preview=_bool(data, "show_preview", defaults.show_preview),
        double_click_seconds=_positive_float(data, "double_click_seconds", defaults.double_click_seconds),
        terminal_lines_per_entry=_positive_int(data, "terminal_lines_per_entry", defaults.terminal_lines_per_entry),
        text_control_ratio=ratio if ratio <= 1.0 else defaults.text_control_ratio,
        pygments_style=_string(data, "pygments_style", defaults.pygments_style),
        log_level=_string(data, "log_level", defaults.log_level).upper(),
    )


def configure_logging(config_dir: Path, level: str = "INFO") -> Path:
    """Route the package logger into ``vfsview.log`` inside ``config_dir``.

    The terminal belongs to the UI, so nothing is logged to stderr.
    """
    log_path = config_dir / LOG_FILENAME
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger(APP_NAME)
    package_logger.handlers = [handler]
    package_logger.setLevel(getattr(logging, level, logging.INFO))
    package_logger.propagate = False
    return log_path


def root_store_directory(config_dir: Path) -> Path:
    return config_dir / ROOT_DIRNAME


__all__ = [
    "APP_NAME",
    "AppConfig",
    "configure_logging",
    "default_config_directory",
    "load_app_config",
    "load_config_data",
    "resolve_config_directory",
    "root_store_directory",
]
